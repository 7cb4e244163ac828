"""RGBA pixel buffer shared by every pattern generator.

The buffer is a row-major, top-left-origin store of interleaved 8-bit RGBA
samples. Pixel ``(x, y)`` starts at flat index ``(y * width + x) * 4``.

Two views of the same memory are exposed:

- ``pixels``: numpy array of shape ``(height, width, 4)``, used by the
  generators for vectorized per-pixel math
- ``data``: flat interleaved view of length ``width * height * 4``, the
  layout consumers hand to a canvas or image codec

Generators mutate the buffer in place and never resize or reallocate it.

Usage Example
-------------
    >>> from patternforge.core.buffer import PixelBuffer
    >>> buffer = PixelBuffer.allocate(64, 32)
    >>> buffer.set(3, 2, 255, 0, 0, 255)
    >>> buffer.get(3, 2)
    (255, 0, 0, 255)
    >>> buffer.to_image().size
    (64, 32)
"""

from __future__ import annotations

import numpy as np
from PIL import Image

from .validation import ValidationError, validate_dimensions


class PixelBuffer:
    """Mutable RGBA byte buffer with explicit width and height.

    Attributes
    ----------
    width : int
        Buffer width in pixels
    height : int
        Buffer height in pixels
    pixels : np.ndarray
        ``uint8`` array of shape ``(height, width, 4)``
    """

    channels = 4

    def __init__(self, width: int, height: int, pixels: np.ndarray | None = None) -> None:
        """Wrap (or allocate) the backing array.

        Args:
            width: Buffer width in pixels (must be positive)
            height: Buffer height in pixels (must be positive)
            pixels: Optional existing ``uint8`` array of shape ``(height, width, 4)``.
                If None, a zero-filled array is allocated.

        Raises:
            ValidationError: If the dimensions are invalid or ``pixels`` has the wrong shape
        """
        validate_dimensions(width, height)

        if pixels is None:
            pixels = np.zeros((height, width, self.channels), dtype=np.uint8)
        elif pixels.dtype != np.uint8 or pixels.shape != (height, width, self.channels):
            raise ValidationError(
                f"Pixel array must be uint8 with shape {(height, width, self.channels)}, "
                f"got {pixels.dtype} with shape {pixels.shape}"
            )
        elif not pixels.flags.c_contiguous:
            raise ValidationError("Pixel array must be C-contiguous (row-major)")

        self.width = width
        self.height = height
        self.pixels = pixels

    @classmethod
    def allocate(cls, width: int, height: int) -> PixelBuffer:
        """Allocate a fresh zero-filled buffer."""
        return cls(width, height)

    @classmethod
    def from_bytes(cls, data: bytes | bytearray, width: int, height: int) -> PixelBuffer:
        """Build a buffer from interleaved RGBA bytes.

        Args:
            data: Interleaved RGBA bytes, ``width * height * 4`` long
            width: Buffer width in pixels
            height: Buffer height in pixels

        Returns
        -------
        PixelBuffer
            Buffer holding a private copy of ``data``

        Raises
        ------
        ValidationError
            If ``len(data)`` does not equal ``width * height * 4``
        """
        validate_dimensions(width, height)
        expected = width * height * cls.channels
        if len(data) != expected:
            raise ValidationError(
                f"Buffer length must be width * height * 4 = {expected}, got {len(data)}"
            )
        array = np.frombuffer(bytes(data), dtype=np.uint8).reshape(height, width, cls.channels)
        return cls(width, height, array.copy())

    @property
    def data(self) -> np.ndarray:
        """Flat interleaved RGBA view sharing memory with ``pixels``."""
        return self.pixels.reshape(-1)

    def __len__(self) -> int:
        return self.pixels.size

    def index(self, x: int, y: int) -> int:
        """Return the flat index of the red sample of pixel ``(x, y)``."""
        self._check_bounds(x, y)
        return (y * self.width + x) * self.channels

    def get(self, x: int, y: int) -> tuple[int, int, int, int]:
        """Read one pixel as an ``(r, g, b, a)`` tuple.

        Raises:
            IndexError: If ``(x, y)`` lies outside the buffer
        """
        self._check_bounds(x, y)
        r, g, b, a = self.pixels[y, x]
        return int(r), int(g), int(b), int(a)

    def set(self, x: int, y: int, r: int, g: int, b: int, a: int = 255) -> None:
        """Write one pixel.

        Raises:
            IndexError: If ``(x, y)`` lies outside the buffer
            ValueError: If a component is outside ``[0, 255]``
        """
        self._check_bounds(x, y)
        for component in (r, g, b, a):
            if not 0 <= component <= 255:
                raise ValueError(f"Channel values must be in [0, 255], got {component}")
        self.pixels[y, x] = (r, g, b, a)

    def copy(self) -> PixelBuffer:
        """Return an independent copy of this buffer."""
        return PixelBuffer(self.width, self.height, self.pixels.copy())

    def tobytes(self) -> bytes:
        """Return the interleaved RGBA bytes."""
        return self.pixels.tobytes()

    def to_image(self) -> Image.Image:
        """Convert the buffer to a PIL ``RGBA`` image (copies the data)."""
        # A (h, w, 4) uint8 array maps to RGBA
        return Image.fromarray(self.pixels.copy())

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"Pixel ({x}, {y}) is outside the {self.width}x{self.height} buffer"
            )

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height})"
