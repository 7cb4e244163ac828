"""Precondition checks for generator entry points and engine inputs."""

import logging
import numbers

logger = logging.getLogger(__name__)


class ValidationError(ValueError):
    """User-friendly validation error.

    Raised when a generator or the engine is called with inputs that would
    otherwise cause out-of-bounds writes (non-positive dimensions, a buffer
    whose size does not match the requested dimensions, and so on). The
    message is intended to be displayed directly to the user.
    """

    pass


def validate_dimensions(width: int, height: int) -> None:
    """Validate that width and height are positive integers.

    Args:
        width: Buffer width in pixels
        height: Buffer height in pixels

    Raises:
        ValidationError: If either dimension is not a positive integer
    """
    for label, value in (("Width", width), ("Height", height)):
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise ValidationError(f"{label} must be an integer, got {value!r}")
        if value <= 0:
            raise ValidationError(f"{label} must be positive, got {value}")


def validate_buffer(buffer, width: int, height: int) -> None:
    """Validate that a pixel buffer matches the requested dimensions.

    Args:
        buffer: PixelBuffer about to be written
        width: Width the caller claims the buffer has
        height: Height the caller claims the buffer has

    Raises:
        ValidationError: If the dimensions are invalid or disagree with the buffer
    """
    validate_dimensions(width, height)

    if buffer.width != width or buffer.height != height:
        raise ValidationError(
            f"Buffer is {buffer.width}x{buffer.height} but generator was asked "
            f"to fill {width}x{height}"
        )

    expected = width * height * 4
    if buffer.data.size != expected:
        raise ValidationError(
            f"Buffer length must be width * height * 4 = {expected}, got {buffer.data.size}"
        )


def validate_pixel_budget(width: int, height: int, max_pixels: int) -> None:
    """Validate that a requested image stays within the configured pixel cap.

    Generation has no mid-sweep escape hatch, so callers bound latency by
    capping the image area up front.

    Args:
        width: Requested width
        height: Requested height
        max_pixels: Maximum allowed ``width * height``

    Raises:
        ValidationError: If the image area exceeds ``max_pixels``
    """
    validate_dimensions(width, height)

    total = width * height
    if total > max_pixels:
        logger.warning(f"Rejected oversized request: {width}x{height} > {max_pixels} pixels")
        raise ValidationError(
            f"Image area {width}x{height} ({total} pixels) exceeds maximum of "
            f"{max_pixels} pixels. Reduce width or height."
        )
