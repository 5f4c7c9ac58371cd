"""Seekable video sources for the extraction engine.

Quick start::

    from keyframer.sources import VideoFileSource

    async with VideoFileSource() as src:
        await src.load("demo.mp4")
        await src.seek(4.0)
"""

from keyframer.sources.media import MediaResource, acquire_media
from keyframer.sources.base import VideoSource
from keyframer.sources.video_file import VideoFileSource
from keyframer.sources.array_source import FrameArraySource

__all__ = [
    "MediaResource",
    "acquire_media",
    "VideoSource",
    "VideoFileSource",
    "FrameArraySource",
]
