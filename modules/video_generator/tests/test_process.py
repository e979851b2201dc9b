"""
Tests for the scene video fan-out.
"""

import asyncio

import pytest

from modules.video_generator import generate_videos
from modules.video_generator.process import NO_IMAGE_MESSAGE
from shared.errors import GenerationError
from shared.services import VideoOperationStatus


def _done(uri):
    return VideoOperationStatus(done=True, videos=[uri])


@pytest.mark.asyncio
async def test_results_follow_input_order(mock_services, scenario, language, make_video_scene):
    scenes = [make_video_scene(i, f"gs://test-bucket/images/{i}.png") for i in range(3)]
    mock_services.video.submit.side_effect = lambda prompt, image_uri, *args: image_uri.rsplit("/", 1)[-1]

    async def _poll(operation, model):
        # Later scenes finish first
        await asyncio.sleep(0.01 * (3 - int(operation[0])))
        return _done(f"gs://test-bucket/videos/{operation[0]}.mp4")

    mock_services.video.poll.side_effect = _poll

    results = await generate_videos(scenes, scenario, language, "16:9", mock_services, poll_interval=0.001, timeout=5)

    assert [r.value for r in results] == [
        "gs://test-bucket/videos/0.mp4",
        "gs://test-bucket/videos/1.mp4",
        "gs://test-bucket/videos/2.mp4",
    ]


@pytest.mark.asyncio
async def test_scene_without_image_is_skipped(mock_services, scenario, language, make_video_scene):
    scenes = [make_video_scene(0), make_video_scene(1, image_gcs_uri=None)]
    mock_services.video.submit.return_value = "op"
    mock_services.video.poll.return_value = _done("gs://test-bucket/videos/a.mp4")

    results = await generate_videos(scenes, scenario, language, "16:9", mock_services, poll_interval=0.001, timeout=5)

    assert len(results) == 2
    assert results[0].success
    assert results[1].error_message == NO_IMAGE_MESSAGE
    assert mock_services.video.submit.await_count == 1


@pytest.mark.asyncio
async def test_failures_are_isolated(mock_services, scenario, language, make_video_scene):
    scenes = [make_video_scene(i) for i in range(3)]
    mock_services.video.submit.side_effect = ["op-0", GenerationError("Replicate error: invalid input"), "op-2"]
    mock_services.video.poll.side_effect = lambda operation, model: _done(f"gs://test-bucket/videos/{operation}.mp4")

    results = await generate_videos(scenes, scenario, language, "16:9", mock_services, poll_interval=0.001, timeout=5)

    assert results[0].value == "gs://test-bucket/videos/op-0.mp4"
    assert results[1].error_message == "Replicate error: invalid input"
    assert results[2].value == "gs://test-bucket/videos/op-2.mp4"


@pytest.mark.asyncio
async def test_timeout_and_filter_reported_per_scene(mock_services, scenario, language, make_video_scene):
    scenes = [make_video_scene(i) for i in range(2)]
    mock_services.video.submit.side_effect = ["slow", "filtered"]

    def _poll(operation, model):
        if operation == "slow":
            return VideoOperationStatus(done=False)
        return VideoOperationStatus(done=True, rai_media_filtered_reasons=["Support codes: 56562880"])

    mock_services.video.poll.side_effect = _poll

    results = await generate_videos(scenes, scenario, language, "16:9", mock_services, poll_interval=0.01, timeout=0.05)

    assert "timed out" in results[0].error_message
    assert results[1].error_message == "The request was blocked because it may contain violent content."


@pytest.mark.asyncio
async def test_audio_flag_and_aspect_ratio(mock_services, scenario, language, make_video_scene):
    mock_services.video.submit.return_value = "op"
    mock_services.video.poll.return_value = _done("gs://test-bucket/videos/a.mp4")

    await generate_videos([make_video_scene()], scenario, language, "9:16", mock_services,
                          generate_audio=None, poll_interval=0.001, timeout=5)

    args = mock_services.video.submit.await_args.args
    assert args[2] == "9:16"
    assert args[4] is True


@pytest.mark.asyncio
async def test_empty_scene_list(mock_services, scenario, language):
    assert await generate_videos([], scenario, language, "16:9", mock_services) == []


@pytest.mark.asyncio
async def test_every_job_submitted_before_any_completes(mock_services, scenario, language, make_video_scene):
    scenes = [make_video_scene(i) for i in range(10)]
    submitted = []
    seen_at_completion = []
    all_submitted = asyncio.Event()

    async def _submit(prompt, image_uri, *args):
        submitted.append(prompt)
        if len(submitted) == len(scenes):
            all_submitted.set()
        return f"op-{len(submitted)}"

    async def _poll(operation, model):
        try:
            await asyncio.wait_for(all_submitted.wait(), timeout=0.5)
        except asyncio.TimeoutError:
            pass
        seen_at_completion.append(len(submitted))
        return _done(f"gs://test-bucket/videos/{operation}.mp4")

    mock_services.video.submit.side_effect = _submit
    mock_services.video.poll.side_effect = _poll

    results = await generate_videos(scenes, scenario, language, "16:9", mock_services, poll_interval=0.001, timeout=5)

    assert all(result.success for result in results)
    assert min(seen_at_completion) == 10
