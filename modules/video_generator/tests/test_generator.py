"""
Tests for single-scene video generation and polling.
"""

import time

import pytest

from modules.video_generator import generate_scene_video, wait_for_operation
from modules.video_generator.generator import coerce_aspect_ratio, scene_video_prompt
from shared.errors import ContentSafetyError, GenerationError, GenerationTimeoutError, RetryableError
from shared.services import VideoOperationStatus

RUNNING = VideoOperationStatus(done=False)
DONE = VideoOperationStatus(done=True, videos=["gs://test-bucket/videos/video-1.mp4"])


@pytest.mark.parametrize("requested,expected", [("9:16", "9:16"), ("16:9", "16:9"), ("1:1", "16:9"), (None, "16:9")])
def test_coerce_aspect_ratio(requested, expected):
    assert coerce_aspect_ratio(requested) == expected


def test_scene_video_prompt_disables_subtitles(make_video_scene):
    prompt = scene_video_prompt(make_video_scene())

    assert prompt.startswith("Action: Action 0\n")
    assert prompt.endswith("\nSubtitles: off")


@pytest.mark.asyncio
async def test_wait_returns_video_after_polling(mock_services):
    mock_services.video.poll.side_effect = [RUNNING, RUNNING, DONE]

    uri = await wait_for_operation(mock_services, "op-1", "google/veo-3", poll_interval=0.001, timeout=5)

    assert uri == "gs://test-bucket/videos/video-1.mp4"
    assert mock_services.video.poll.await_count == 3


@pytest.mark.asyncio
async def test_wait_times_out(mock_services):
    mock_services.video.poll.return_value = RUNNING

    with pytest.raises(GenerationTimeoutError, match="timed out"):
        await wait_for_operation(mock_services, "op-1", "google/veo-3", poll_interval=0.01, timeout=0.05)

    assert mock_services.video.poll.await_count >= 1


@pytest.mark.asyncio
async def test_wait_uses_the_full_timeout(mock_services):
    mock_services.video.poll.return_value = RUNNING
    started = time.monotonic()

    with pytest.raises(GenerationTimeoutError):
        await wait_for_operation(mock_services, "op-1", "google/veo-3", poll_interval=0.2, timeout=0.25)

    assert time.monotonic() - started >= 0.24
    assert mock_services.video.poll.await_count == 2


@pytest.mark.asyncio
async def test_wait_keeps_polling_after_transient_error(mock_services):
    mock_services.video.poll.side_effect = [RetryableError("503"), DONE]

    uri = await wait_for_operation(mock_services, "op-1", "google/veo-3", poll_interval=0.001, timeout=5)

    assert uri == DONE.videos[0]


@pytest.mark.asyncio
async def test_filtered_output_raises_translated_message(mock_services):
    mock_services.video.poll.return_value = VideoOperationStatus(
        done=True, rai_media_filtered_reasons=["Support codes: 64151117"]
    )

    with pytest.raises(ContentSafetyError) as exc_info:
        await wait_for_operation(mock_services, "op-1", "google/veo-3", poll_interval=0.001, timeout=5)

    assert exc_info.value.reason == "Support codes: 64151117"
    assert "video safety filter" in exc_info.value.message


@pytest.mark.asyncio
async def test_failed_job_raises_generation_error(mock_services):
    mock_services.video.poll.return_value = VideoOperationStatus(done=True, error="CUDA out of memory")

    with pytest.raises(GenerationError, match="Video generation failed: CUDA out of memory"):
        await wait_for_operation(mock_services, "op-1", "google/veo-3", poll_interval=0.001, timeout=5)


@pytest.mark.asyncio
async def test_done_without_video(mock_services):
    mock_services.video.poll.return_value = VideoOperationStatus(done=True)

    with pytest.raises(GenerationError, match="without a video"):
        await wait_for_operation(mock_services, "op-1", "google/veo-3", poll_interval=0.001, timeout=5)


@pytest.mark.asyncio
async def test_generate_scene_video_submits_image_and_prompt(mock_services, make_video_scene):
    mock_services.video.submit.return_value = "op-7"
    mock_services.video.poll.return_value = DONE

    uri = await generate_scene_video(
        make_video_scene(), mock_services, aspect_ratio="4:3", model="google/veo-3",
        generate_audio=False, duration_seconds=6, poll_interval=0.001, timeout=5
    )

    assert uri == DONE.videos[0]
    prompt, image_uri, aspect_ratio, model, generate_audio, duration = mock_services.video.submit.await_args.args
    assert prompt.endswith("Subtitles: off")
    assert image_uri == "gs://test-bucket/images/scene.png"
    assert (aspect_ratio, model, generate_audio, duration) == ("16:9", "google/veo-3", False, 6)
    mock_services.video.poll.assert_awaited_with("op-7", "google/veo-3")


@pytest.mark.asyncio
async def test_scene_without_image_is_rejected(mock_services, make_video_scene):
    with pytest.raises(GenerationError, match="no image"):
        await generate_scene_video(make_video_scene(image_gcs_uri=None), mock_services)

    mock_services.video.submit.assert_not_awaited()
