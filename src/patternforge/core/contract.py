"""The entry-point contract every pattern generator implements.

A generator is a plain function::

    generate(buffer, width, height, rng=None) -> None

It rewrites every pixel of ``buffer`` (alpha included), returns nothing,
and keeps no reference to the buffer once it returns. ``rng`` is the
injected random source; when omitted a fresh, unseeded generator is used.

The ``pattern_generator`` decorator applies the shared preconditions once
so individual generators only contain their own math.
"""

import functools
import logging
from typing import Protocol

from .buffer import PixelBuffer
from .random_source import RandomSource, resolve_rng
from .validation import validate_buffer

logger = logging.getLogger(__name__)


class PatternFunction(Protocol):
    """Callable signature shared by all generators."""

    def __call__(
        self,
        buffer: PixelBuffer,
        width: int,
        height: int,
        rng: RandomSource | None = None,
    ) -> None:  # pragma: no cover - protocol
        ...


def pattern_generator(func):
    """Wrap a generator body with buffer validation and random-source resolution.

    The wrapped function receives a validated buffer and a non-None ``rng``.

    Raises:
        ValidationError: Before any write, if the buffer does not match
            ``width`` x ``height`` or the dimensions are not positive
    """

    @functools.wraps(func)
    def wrapper(
        buffer: PixelBuffer, width: int, height: int, rng: RandomSource | None = None
    ) -> None:
        validate_buffer(buffer, width, height)
        logger.debug(f"Running {func.__name__} on {width}x{height} buffer")
        func(buffer, width, height, resolve_rng(rng))

    return wrapper
