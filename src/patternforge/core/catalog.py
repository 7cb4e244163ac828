"""Static catalog of pattern families and their implementation status.

The catalog is documentation-as-data: it lists every pattern the project
plans to offer, grouped by category, and marks each one ``done`` or
``pending``. It is read by tooling (the ``patternforge catalog`` command,
coverage reports) and never by the generation path, which dispatches
through ``patternforge.core.registry`` alone.

Entries are kept in sync with the registry by hand. ``catalog_drift()``
reports disagreements for tooling and tests; nothing enforces it at
runtime.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal

logger = logging.getLogger(__name__)

Status = Literal["done", "pending"]


@dataclass(frozen=True)
class CatalogEntry:
    """One catalogued pattern.

    Attributes:
        name: Display name
        entry_point: Pattern id used by the registry
        group: Module that owns (or will own) the implementation
        status: "done" when an implementation exists, otherwise "pending"
    """

    name: str
    entry_point: str
    group: str
    status: Status = "pending"


@dataclass(frozen=True)
class PendingPattern:
    """A pending catalog entry together with its category."""

    category: str
    entry: CatalogEntry


@dataclass(frozen=True)
class CatalogDrift:
    """Disagreements between the catalog and a registry."""

    missing: tuple[str, ...]
    unlisted: tuple[str, ...]

    @property
    def in_sync(self) -> bool:
        return not self.missing and not self.unlisted


def _entries(group: str, status: Status, *pairs: tuple[str, str]) -> tuple[CatalogEntry, ...]:
    return tuple(CatalogEntry(name, entry_point, group, status) for name, entry_point in pairs)


PATTERN_CATALOG: Mapping[str, tuple[CatalogEntry, ...]] = {
    "basic": _entries(
        "patternforge.patterns.basic",
        "done",
        ("Noise", "noise"),
        ("PerlinNoise", "perlin"),
        ("Wave", "wave"),
        ("Static", "static"),
    ),
    "geometric": _entries(
        "patternforge.patterns.geometric",
        "done",
        ("Cellular", "cellular"),
        ("Fractal", "fractal"),
        ("Voronoi", "voronoi"),
        ("Spiral", "spiral"),
        ("Honeycomb", "honeycomb"),
        ("Crystal", "crystals"),
        ("Mandala", "mandala"),
    ),
    "natural": _entries(
        "patternforge.patterns.natural",
        "done",
        ("Lightning", "lightning"),
        ("Cloud", "cloud"),
        ("Terrain", "terrain"),
        ("Organic", "organic"),
        ("Faces", "faces"),
        ("Bodies", "bodies"),
    ),
    "abstract": _entries(
        "patternforge.patterns.abstract",
        "done",
        ("InkBlot", "ink"),
        ("PaintSplash", "splash"),
        ("FlowField", "flow"),
        ("AbstractArt", "abstract"),
        ("Kaleidoscope", "kaleidoscope"),
        ("Morphing", "morphing"),
    ),
    "cosmic": _entries(
        "patternforge.patterns.cosmic",
        "done",
        ("Galaxy", "galaxy"),
        ("Nebula", "nebula"),
        ("Starfield", "stars"),
        ("BlackHole", "blackhole"),
        ("Planets", "planets"),
        ("Wormhole", "wormhole"),
    ),
    "architectural": _entries(
        "patternforge.patterns.architectural",
        "done",
        ("Gothic", "gothic"),
        ("Modern", "modern"),
        ("Blueprint", "blueprint"),
        ("Columns", "columns"),
        ("Bridges", "bridges"),
        ("Cityscape", "cityscape"),
    ),
    "texture": _entries(
        "patternforge.patterns.texture",
        "done",
        ("Marble", "marble"),
        ("Wood", "wood"),
        ("Lace", "lace"),
    ),
    "structural": _entries(
        "patternforge.patterns.structural",
        "done",
        ("Maze", "maze"),
        ("Circuit", "circuit"),
        ("Neural", "neural"),
    ),
    "glitch": _entries(
        "patternforge.patterns.glitch",
        "done",
        ("Datamosh", "datamosh"),
        ("ScanLines", "scan"),
        ("CorruptData", "corrupt"),
        ("DigitalRain", "digital"),
        ("PixelSort", "pixel"),
        ("StaticInterference", "static_interference"),
    ),
}


def total_pattern_count(catalog: Mapping[str, tuple[CatalogEntry, ...]] = PATTERN_CATALOG) -> int:
    """Return the number of entries across all categories."""
    return sum(len(entries) for entries in catalog.values())


def pending_patterns(
    catalog: Mapping[str, tuple[CatalogEntry, ...]] = PATTERN_CATALOG,
) -> list[PendingPattern]:
    """Return every pending entry with its category, in declaration order."""
    return [
        PendingPattern(category, entry)
        for category, entries in catalog.items()
        for entry in entries
        if entry.status == "pending"
    ]


def catalog_drift(
    registered: list[str],
    catalog: Mapping[str, tuple[CatalogEntry, ...]] = PATTERN_CATALOG,
) -> CatalogDrift:
    """Compare catalog status against a list of registered pattern ids.

    Args:
        registered: Pattern ids currently registered (``pattern_registry.list_available()``)
        catalog: Catalog to check

    Returns:
        CatalogDrift with ``missing`` ("done" entries that are not registered) and
        ``unlisted`` (registered ids with no "done" entry)
    """
    done = [
        entry.entry_point
        for entries in catalog.values()
        for entry in entries
        if entry.status == "done"
    ]
    registered_set = set(registered)
    done_set = set(done)

    drift = CatalogDrift(
        missing=tuple(name for name in done if name not in registered_set),
        unlisted=tuple(name for name in registered if name not in done_set),
    )
    if not drift.in_sync:
        logger.warning(
            f"Catalog out of sync: missing={list(drift.missing)} unlisted={list(drift.unlisted)}"
        )
    return drift
