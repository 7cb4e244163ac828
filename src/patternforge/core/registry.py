"""Registry mapping pattern identifiers to generator functions.

Each pattern family module registers its generators at import time. The
registry is the only dispatch path used at generation time: it looks up
the function by id and calls it. Implementation status bookkeeping lives
separately in ``patternforge.core.catalog`` and is never consulted here.

Usage Example
-------------
    >>> from patternforge.core.buffer import PixelBuffer
    >>> from patternforge.core.random_source import make_rng
    >>> from patternforge.core.registry import pattern_registry
    >>> import patternforge.patterns  # registers every family
    >>>
    >>> pattern_registry.list_available()[:4]
    ['noise', 'perlin', 'wave', 'static']
    >>> buffer = PixelBuffer.allocate(256, 256)
    >>> pattern_registry.generate("galaxy", buffer, rng=make_rng(7))

Pattern Metadata
----------------
Each registration records:

- **category**: the family the pattern is listed under (basic, geometric,
  natural, abstract, cosmic, architectural, texture, structural, glitch)
- **multicolor**: whether color mode maps the grayscale output through a
  multi-stop category scheme instead of a single palette
- **description**: one line for listings

See Also
--------
- patternforge.core.contract: generator entry-point contract
- patternforge.core.catalog: implementation status catalog
"""

import logging
from dataclasses import dataclass
from typing import Any

from .buffer import PixelBuffer
from .contract import PatternFunction
from .random_source import RandomSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PatternInfo:
    """Registered generator plus the metadata used for listings and color mode."""

    name: str
    generator: PatternFunction
    category: str
    multicolor: bool = False
    description: str = ""


class PatternRegistry:
    """Registry for managing available pattern generators.

    The registry maintains an ordered mapping from pattern id to
    ``PatternInfo``. Registration order is preserved so listings follow the
    order in which the family modules declare their patterns.

    Usage
    -----
    Registering a generator:

        >>> pattern_registry.register("ink", ink_blot, category="abstract")

    Dispatching by name:

        >>> pattern_registry.generate("ink", buffer, rng=make_rng(1))

    Notes
    -----
    - Patterns must be registered before they can be generated
    - Re-registering an id overwrites the previous entry with a warning
    - The registry is global and shared across the application
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._patterns: dict[str, PatternInfo] = {}

    def register(
        self,
        name: str,
        generator: PatternFunction,
        category: str,
        multicolor: bool = False,
        description: str = "",
    ) -> None:
        """Register a generator function under a pattern id.

        Args:
            name: Pattern identifier (e.g. "blackhole")
            generator: Function implementing the generator contract
            category: Family the pattern belongs to
            multicolor: Whether color mode uses a multi-stop category scheme
            description: Short human-readable description
        """
        if name in self._patterns:
            logger.warning(f"Pattern '{name}' is already registered, overwriting")

        self._patterns[name] = PatternInfo(
            name=name,
            generator=generator,
            category=category,
            multicolor=multicolor,
            description=description,
        )
        logger.debug(f"Registered pattern: {name} ({category})")

    def get_pattern_info(self, name: str) -> PatternInfo:
        """Get the registration for a pattern id.

        Args:
            name: Pattern identifier

        Returns
        -------
        PatternInfo
            Registered generator and metadata

        Raises
        ------
        KeyError
            If ``name`` is not registered
        """
        if name not in self._patterns:
            available = ", ".join(self.list_available())
            raise KeyError(f"Pattern '{name}' not found. Available patterns: {available}")
        return self._patterns[name]

    def generate(
        self, name: str, buffer: PixelBuffer, rng: RandomSource | None = None
    ) -> None:
        """Fill ``buffer`` using the generator registered under ``name``.

        Args:
            name: Pattern identifier
            buffer: Buffer to fill in place
            rng: Random source (None for a fresh unseeded generator)

        Raises
        ------
        KeyError
            If ``name`` is not registered
        ValidationError
            If the buffer fails the generator preconditions
        """
        info = self.get_pattern_info(name)
        info.generator(buffer, buffer.width, buffer.height, rng)

    def __contains__(self, name: object) -> bool:
        return name in self._patterns

    def __len__(self) -> int:
        return len(self._patterns)

    def list_available(self) -> list[str]:
        """List all registered pattern ids in registration order."""
        return list(self._patterns.keys())

    def categories(self) -> list[str]:
        """List categories in first-registration order."""
        return list(dict.fromkeys(info.category for info in self._patterns.values()))

    def get_patterns_by_category(self, category: str) -> list[str]:
        """List pattern ids registered under ``category``."""
        return [name for name, info in self._patterns.items() if info.category == category]

    def get_pattern_category(self, name: str) -> str:
        """Return the category of a registered pattern."""
        return self.get_pattern_info(name).category

    def is_multicolor_candidate(self, name: str) -> bool:
        """Return whether color mode should use a multi-stop scheme for ``name``."""
        return self.get_pattern_info(name).multicolor

    def describe(self, name: str) -> dict[str, Any]:
        """Get listing metadata for a registered pattern.

        Returns
        -------
        dict[str, Any]
            Name, category, multicolor flag, description and generator function name
        """
        info = self.get_pattern_info(name)
        return {
            "name": info.name,
            "category": info.category,
            "multicolor": info.multicolor,
            "description": info.description,
            "entry_point": info.generator.__name__,
        }


# Global pattern registry instance
pattern_registry = PatternRegistry()
