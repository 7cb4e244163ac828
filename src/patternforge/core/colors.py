"""Color mode: map a grayscale pattern onto an artistic palette.

Every generator writes grayscale (R = G = B) output. When color mode is on,
the R channel is read as an intensity in ``[0, 1]`` and replaced by color:

- Patterns registered as multicolor candidates are interpolated through a
  multi-stop scheme chosen by category (cosmic, geometric, natural,
  abstract), falling back to a rainbow scheme for any other category.
- All other patterns get one randomly chosen three-band palette: dark
  tones below 0.3, mid tones below 0.7, light tones above.

Alpha is never touched.
"""

import logging

import numpy as np

from .buffer import PixelBuffer
from .random_source import RandomSource, resolve_rng
from .raster import to_bytes
from .registry import PatternRegistry, pattern_registry

logger = logging.getLogger(__name__)

RAINBOW_SCHEME = (
    (255, 0, 0),
    (255, 127, 0),
    (255, 255, 0),
    (0, 255, 0),
    (0, 0, 255),
    (75, 0, 130),
    (148, 0, 211),
)

CATEGORY_SCHEMES: dict[str, tuple[tuple[int, int, int], ...]] = {
    "cosmic": (
        (138, 43, 226),
        (75, 0, 130),
        (0, 0, 255),
        (0, 255, 255),
        (255, 255, 0),
        (255, 165, 0),
    ),
    "geometric": RAINBOW_SCHEME,
    "natural": (
        (139, 69, 19),
        (34, 139, 34),
        (50, 205, 50),
        (0, 191, 255),
        (135, 206, 235),
        (255, 255, 224),
    ),
    "abstract": (
        (220, 20, 60),
        (255, 140, 0),
        (255, 215, 0),
        (50, 205, 50),
        (0, 191, 255),
        (138, 43, 226),
    ),
}

# name -> (dark, mid, light)
ARTISTIC_PALETTES: dict[str, tuple[tuple[int, int, int], ...]] = {
    "sunset": ((20, 5, 60), (180, 60, 20), (255, 180, 80)),
    "ocean": ((5, 20, 60), (20, 100, 180), (80, 200, 255)),
    "forest": ((10, 40, 5), (40, 120, 20), (120, 200, 80)),
    "purple": ((40, 5, 60), (120, 40, 180), (200, 120, 255)),
    "fire": ((60, 5, 5), (180, 40, 20), (255, 120, 60)),
    "electric": ((5, 40, 40), (40, 180, 120), (120, 255, 200)),
}


def scheme_for_category(category: str) -> np.ndarray:
    """Return the multi-stop scheme for ``category`` as a ``(stops, 3)`` float array."""
    return np.asarray(CATEGORY_SCHEMES.get(category, RAINBOW_SCHEME), dtype=np.float64)


def apply_scheme(buffer: PixelBuffer, scheme: np.ndarray) -> None:
    """Linearly interpolate each pixel's intensity through the stops of ``scheme``."""
    stops = len(scheme) - 1
    position = buffer.pixels[..., 0].astype(np.float64) / 255.0 * stops
    index = np.floor(position).astype(np.intp)
    upper = np.minimum(index + 1, stops)
    t = (position - index)[..., np.newaxis]

    color = scheme[index] + (scheme[upper] - scheme[index]) * t
    buffer.pixels[..., :3] = to_bytes(color)


def apply_palette(buffer: PixelBuffer, dark, mid, light) -> None:
    """Map intensities through a dark / mid / light three-band palette."""
    dark, mid, light = (np.asarray(c, dtype=np.float64) for c in (dark, mid, light))
    intensity = (buffer.pixels[..., 0].astype(np.float64) / 255.0)[..., np.newaxis]

    shadows = dark * (intensity / 0.3)
    midtones = dark + (mid - dark) * ((intensity - 0.3) / 0.4)
    highlights = mid + (light - mid) * ((intensity - 0.7) / 0.3)

    color = np.where(intensity < 0.3, shadows, np.where(intensity < 0.7, midtones, highlights))
    buffer.pixels[..., :3] = to_bytes(color)


def colorize(
    buffer: PixelBuffer,
    pattern: str,
    registry: PatternRegistry = pattern_registry,
    rng: RandomSource | None = None,
) -> str:
    """Convert a grayscale buffer produced by ``pattern`` to color in place.

    Args:
        buffer: Buffer holding grayscale pattern output
        pattern: Pattern id that produced the buffer
        registry: Registry providing category and multicolor metadata
        rng: Random source used to pick a single palette

    Returns:
        Name of the scheme or palette that was applied

    Raises:
        KeyError: If ``pattern`` is not registered
    """
    info = registry.get_pattern_info(pattern)

    if info.multicolor:
        scheme_name = info.category if info.category in CATEGORY_SCHEMES else "rainbow"
        apply_scheme(buffer, scheme_for_category(info.category))
        logger.debug(f"Applied {scheme_name} scheme to {pattern}")
        return scheme_name

    names = list(ARTISTIC_PALETTES)
    choice = names[int(float(resolve_rng(rng).random()) * len(names))]
    apply_palette(buffer, *ARTISTIC_PALETTES[choice])
    logger.debug(f"Applied {choice} palette to {pattern}")
    return choice
