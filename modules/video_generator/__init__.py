"""
Scene Video Generator module.

generator: one scene (submit + poll until done)
process: concurrent fan-out over a storyboard
"""

from modules.video_generator.process import generate_videos
from modules.video_generator.generator import generate_scene_video, wait_for_operation

__all__ = ["generate_videos", "generate_scene_video", "wait_for_operation"]
