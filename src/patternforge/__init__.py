"""patternforge - Procedural pattern image generation."""

__version__ = "0.1.0"

from patternforge.core.buffer import PixelBuffer
from patternforge.core.config import PatternforgeConfig, config
from patternforge.core.generator import PatternGenerator
from patternforge.core.registry import pattern_registry

# Import pattern families to ensure they're registered
import patternforge.patterns  # noqa: F401, E402

__all__ = [
    "PatternGenerator",
    "PatternforgeConfig",
    "PixelBuffer",
    "config",
    "pattern_registry",
]
