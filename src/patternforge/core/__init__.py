"""Core functionality for pattern generation.

This module provides the core components of patternforge:

- **PixelBuffer**: RGBA byte buffer every generator writes into
- **pattern_registry**: Registry mapping pattern ids to generator functions
- **PatternGenerator**: Facade that renders a pattern to an image or file
- **PatternforgeConfig**: Configuration management using Pydantic Settings
- **config**: Global configuration instance (loads from environment variables)

Architecture Overview
---------------------
1. **Configuration Layer** (config.py):
   - Environment-based configuration using Pydantic Settings
   - All settings prefixed with PATTERNFORGE_ in .env files

2. **Raster Layer** (buffer.py, raster.py, random_source.py):
   - The pixel buffer and its bounded-write and clamp-to-byte helpers
   - The injected random source used for every parameter draw

3. **Generator Layer** (contract.py, registry.py, ../patterns/):
   - One plain function per pattern, wrapped by ``pattern_generator``
   - Families register themselves with the registry at import time

4. **Support Utilities**:
   - catalog.py: Implementation status catalog for tooling
   - colors.py: Color mode palettes
   - generator.py: Rendering and saving

Usage Example
-------------
    from patternforge.core import PatternGenerator

    generator = PatternGenerator()
    image, path = generator.generate_and_save(pattern="nebula", seed=42)
"""

from patternforge.core.buffer import PixelBuffer
from patternforge.core.config import PatternforgeConfig, config
from patternforge.core.generator import PatternGenerator
from patternforge.core.random_source import make_rng
from patternforge.core.registry import PatternRegistry, pattern_registry
from patternforge.core.validation import ValidationError

__all__ = [
    "PatternGenerator",
    "PatternRegistry",
    "PatternforgeConfig",
    "PixelBuffer",
    "ValidationError",
    "config",
    "make_rng",
    "pattern_registry",
]
