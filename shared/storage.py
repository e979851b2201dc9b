"""
Storage utilities.

Google Cloud Storage operations. Objects are addressed by gs:// URIs, which the
pipeline treats as opaque strings.
"""

import asyncio
import base64
import mimetypes
from datetime import timedelta
from typing import Any, Callable, Optional, Tuple, Union

from google.cloud import storage as gcs

from shared.config import settings
from shared.errors import ConfigError, StorageError, ValidationError
from shared.logging import get_logger
from shared.retry import retry_with_backoff

logger = get_logger("storage")

GCS_HTTP_PREFIX = "https://storage.googleapis.com/"


def parse_uri(uri: str) -> Tuple[str, str]:
    """
    Split a storage URI into (bucket, path).

    Accepts gs://bucket/path and https://storage.googleapis.com/bucket/path
    (query strings of signed URLs are dropped).
    """
    if uri.startswith("gs://"):
        remainder = uri[len("gs://"):]
    elif uri.startswith(GCS_HTTP_PREFIX):
        remainder = uri[len(GCS_HTTP_PREFIX):]
    else:
        raise ValidationError(f"Not a storage URI: {uri}")

    remainder = remainder.split("?")[0]
    bucket, _, path = remainder.partition("/")
    if not bucket or not path:
        raise ValidationError(f"Storage URI must include bucket and object path: {uri}")
    return bucket, path


class StorageClient:
    """Google Cloud Storage client for pipeline assets."""

    def __init__(self, bucket_name: Optional[str] = None, client: Optional[Any] = None):
        """
        Initialize storage client.

        Args:
            bucket_name: Bucket for uploads (defaults to settings.gcs_bucket)
            client: Pre-built google.cloud.storage.Client (for tests)
        """
        try:
            self.client = client or gcs.Client(project=settings.gcp_project_id)
            self.bucket_name = bucket_name or settings.gcs_bucket
        except Exception as e:
            raise ConfigError(f"Failed to initialize storage client: {str(e)}") from e

    async def _execute_sync(self, func: Callable[[], Any]) -> Any:
        """Run a blocking google-cloud-storage call in the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func)

    def _detect_content_type(self, path: str, default: Optional[str] = None) -> str:
        content_type, _ = mimetypes.guess_type(path)
        if content_type:
            return content_type
        return default or "application/octet-stream"

    def _blob(self, uri: str):
        bucket, path = parse_uri(uri)
        return self.client.bucket(bucket).blob(path)

    @retry_with_backoff(max_retries=3, base_delay=2, retryable_exceptions=(StorageError,))
    async def upload(
        self,
        data: Union[bytes, str],
        key: str,
        content_type: Optional[str] = None
    ) -> str:
        """
        Upload bytes (or a base64 string) to the pipeline bucket.

        Args:
            data: Raw bytes or base64-encoded string
            key: Object path inside the bucket, e.g. "images/foo.png"
            content_type: Content type (auto-detected from key if not provided)

        Returns:
            gs:// URI of the uploaded object

        Raises:
            StorageError: If upload fails after retries
        """
        if isinstance(data, str):
            try:
                data = base64.b64decode(data)
            except ValueError as e:
                raise ValidationError(f"Upload data is not valid base64: {str(e)}") from e

        content_type = content_type or self._detect_content_type(key)

        def _upload():
            blob = self.client.bucket(self.bucket_name).blob(key)
            blob.upload_from_string(data, content_type=content_type)

        try:
            await self._execute_sync(_upload)
        except Exception as e:
            logger.error(
                f"Failed to upload file to {self.bucket_name}/{key}: {str(e)}",
                extra={"bucket": self.bucket_name, "path": key, "error": str(e)}
            )
            raise StorageError(f"Failed to upload file: {str(e)}") from e

        logger.info(
            f"Uploaded file to {self.bucket_name}/{key}",
            extra={"bucket": self.bucket_name, "path": key, "size": len(data)}
        )
        return f"gs://{self.bucket_name}/{key}"

    @retry_with_backoff(max_retries=3, base_delay=2, retryable_exceptions=(StorageError,))
    async def download(self, uri: str) -> bytes:
        """Download an object's bytes."""
        blob = self._blob(uri)
        try:
            data = await self._execute_sync(blob.download_as_bytes)
        except Exception as e:
            logger.error(
                f"Failed to download {uri}: {str(e)}",
                extra={"uri": uri, "error": str(e), "error_type": type(e).__name__}
            )
            raise StorageError(f"Failed to download file: {str(e)}") from e

        logger.info(f"Downloaded {uri}", extra={"uri": uri, "size": len(data)})
        return data

    async def get_signed_url(self, uri: str, download: bool = False) -> str:
        """
        Generate a V4 signed GET URL for an object.

        Args:
            uri: gs:// URI
            download: Force a browser download (Content-Disposition: attachment)

        Returns:
            Signed HTTPS URL
        """
        blob = self._blob(uri)
        disposition = None
        if download:
            disposition = f'attachment; filename="{blob.name.rsplit("/", 1)[-1]}"'

        def _sign():
            return blob.generate_signed_url(
                version="v4",
                expiration=timedelta(seconds=settings.signed_url_expiration_seconds),
                method="GET",
                response_disposition=disposition
            )

        try:
            url = await self._execute_sync(_sign)
        except Exception as e:
            logger.error(
                f"Failed to generate signed URL for {uri}: {str(e)}",
                extra={"uri": uri, "error": str(e)}
            )
            raise StorageError(f"Failed to generate signed URL: {str(e)}") from e

        logger.debug(f"Generated signed URL for {uri}", extra={"uri": uri, "download": download})
        return url

    async def get_mime_type(self, uri: str) -> str:
        """Stored content type of an object, falling back to its extension."""
        blob = self._blob(uri)
        try:
            await self._execute_sync(blob.reload)
            if blob.content_type:
                return blob.content_type
        except Exception as e:
            logger.warning(
                f"Could not read metadata for {uri}, guessing from extension",
                extra={"uri": uri, "error": str(e)}
            )
        return self._detect_content_type(uri, default="image/png")
