"""Pytest configuration and shared fixtures for keyframer tests."""

from typing import List

import numpy as np
import pytest

from keyframer.capture import RasterSurface
from keyframer.core import Frame
from keyframer.sources import FrameArraySource
from keyframer.store import FrameStore

# Configure pytest-asyncio
pytest_plugins = ['pytest_asyncio']


def make_frames(count: int, width: int = 32, height: int = 24) -> List[np.ndarray]:
    """Solid-colour BGR frames whose blue channel encodes the frame index."""
    frames = []
    for i in range(count):
        image = np.zeros((height, width, 3), dtype=np.uint8)
        image[:, :, 0] = (i * 7) % 256
        image[:, :, 1] = 128
        image[:, :, 2] = 255 - (i * 3) % 256
        frames.append(image)
    return frames


def make_frame(timestamp: float = 0.0, raster: bytes = b"\xff\xd8raster", **kwargs) -> Frame:
    return Frame(raster=raster, timestamp=timestamp, **kwargs)


@pytest.fixture
def frames_16s() -> List[np.ndarray]:
    """Sixteen seconds of video at 4 fps."""
    return make_frames(64)


@pytest.fixture
def source(frames_16s) -> FrameArraySource:
    return FrameArraySource(frames_16s, fps=4.0)


@pytest.fixture
def surface() -> RasterSurface:
    return RasterSurface()


@pytest.fixture
def store() -> FrameStore:
    return FrameStore()


@pytest.fixture
def image_factory():
    """Build lists of synthetic BGR frames: ``image_factory(count, width, height)``."""
    return make_frames


@pytest.fixture
def frame_factory():
    """Build annotated :class:`Frame` objects with a dummy raster."""
    return make_frame
