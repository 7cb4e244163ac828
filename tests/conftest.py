"""Shared pytest fixtures for patternforge tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Generator

import numpy as np
import pytest

import patternforge.patterns  # noqa: F401
from patternforge.core.buffer import PixelBuffer
from patternforge.core.config import PatternforgeConfig


class ConstantRandom:
    """Random source that returns the same value for every draw.

    Pins every drawn parameter to ``low + value * spread`` so generator
    output can be checked against hand-computed pixels. Every call is
    counted and the ``size`` of each call is recorded.
    """

    def __init__(self, value: float = 0.0):
        self.value = value
        self.calls = 0
        self.sizes = []

    def random(self, size=None):
        self.calls += 1
        self.sizes.append(size)
        if size is None:
            return self.value
        return np.full(size, self.value)


class ScriptedRandom:
    """Random source that replays a script of scalar draws.

    Scalar draws come from ``values`` in order and then ``fallback``. Array
    draws are filled with ``field``, or return ``field`` itself when it is
    an array of the requested shape.
    """

    def __init__(self, values=(), fallback: float = 0.0, field=0.5):
        self.values = list(values)
        self.fallback = fallback
        self.field = field

    def random(self, size=None):
        if size is None:
            return self.values.pop(0) if self.values else self.fallback
        if isinstance(self.field, np.ndarray):
            assert self.field.shape == tuple(size)
            return self.field.copy()
        return np.full(size, self.field)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> PatternforgeConfig:
    """Create a test configuration writing into a temporary directory.

    Args:
        temp_dir: Temporary directory from fixture

    Returns:
        PatternforgeConfig instance for testing
    """
    return PatternforgeConfig(
        _env_file=None,
        outputs_dir=str(temp_dir / "outputs"),
        default_pattern="noise",
        default_width=64,
        default_height=48,
        default_resolution=None,
        color_mode=False,
        max_pixels=100_000,
    )


@pytest.fixture
def constant_rng() -> ConstantRandom:
    """Random source pinned to the minimum of every drawn range."""
    return ConstantRandom(0.0)


@pytest.fixture
def make_constant_rng():
    """Factory for random sources pinned to a chosen value in [0, 1)."""
    return ConstantRandom


@pytest.fixture
def small_buffer() -> PixelBuffer:
    """A 48x32 zero-filled buffer."""
    return PixelBuffer.allocate(48, 32)


@pytest.fixture
def noisy_buffer() -> PixelBuffer:
    """A 40x30 buffer filled with seeded random RGB values and opaque alpha."""
    rng = np.random.default_rng(1234)
    pixels = rng.integers(0, 256, size=(30, 40, 4), dtype=np.uint8)
    pixels[..., 3] = 255
    return PixelBuffer(40, 30, pixels)


@pytest.fixture
def make_scripted_rng():
    """Factory for random sources replaying scripted scalar draws."""
    return ScriptedRandom
