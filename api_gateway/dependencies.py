"""
FastAPI dependencies.

The generation services are built once per process and injected into routes;
tests replace them through ``app.dependency_overrides``.
"""

from functools import lru_cache

from shared.logging import get_logger
from shared.services import Services, build_services

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def _services() -> Services:
    logger.info("Building generation services")
    return build_services()


def get_services() -> Services:
    """Shared Services container for request handlers."""
    return _services()
