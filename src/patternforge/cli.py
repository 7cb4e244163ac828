"""Command-line interface for patternforge.

Usage:
    patternforge list [--category cosmic]
    patternforge catalog [--pending]
    patternforge render galaxy --resolution 4MP --seed 42 --color
"""

import argparse
import logging
import sys
from pathlib import Path

from patternforge import __version__
from patternforge.core.catalog import (
    PATTERN_CATALOG,
    catalog_drift,
    pending_patterns,
    total_pattern_count,
)
from patternforge.core.config import RESOLUTIONS, config
from patternforge.core.generator import PatternGenerator
from patternforge.core.registry import pattern_registry
from patternforge.core.validation import ValidationError

logger = logging.getLogger(__name__)


def cmd_list(args: argparse.Namespace) -> int:
    """List registered patterns, grouped by category."""
    categories = [args.category] if args.category else pattern_registry.categories()

    for category in categories:
        names = pattern_registry.get_patterns_by_category(category)
        if not names:
            print(f"ERROR: No patterns registered in category '{category}'")
            return 1
        print(f"{category}:")
        for name in names:
            info = pattern_registry.get_pattern_info(name)
            marker = " *" if info.multicolor else ""
            print(f"  {name:<20} {info.description}{marker}")

    print()
    print("* multicolor in color mode")
    return 0


def cmd_catalog(args: argparse.Namespace) -> int:
    """Print the implementation status catalog."""
    if args.pending:
        pending = pending_patterns()
        for item in pending:
            print(f"{item.category:<14} {item.entry.name:<20} {item.entry.group}")
        print()
        print(f"{len(pending)} pending of {total_pattern_count()}")
        return 0

    for category, entries in PATTERN_CATALOG.items():
        done = sum(1 for entry in entries if entry.status == "done")
        print(f"{category} ({done}/{len(entries)})")
        for entry in entries:
            print(f"  [{'x' if entry.status == 'done' else ' '}] {entry.name:<20} {entry.entry_point}")

    drift = catalog_drift(pattern_registry.list_available())
    print()
    print(f"Total: {total_pattern_count()} patterns")
    if not drift.in_sync:
        print(f"Out of sync: missing={list(drift.missing)} unlisted={list(drift.unlisted)}")
        return 1
    return 0


def cmd_render(args: argparse.Namespace) -> int:
    """Render one pattern to a PNG file."""
    generator = PatternGenerator()
    try:
        _, path = generator.generate_and_save(
            pattern=args.pattern,
            width=args.width,
            height=args.height,
            seed=args.seed,
            color_mode=True if args.color else None,
            resolution=args.resolution,
            output_path=Path(args.output) if args.output else None,
        )
    except (KeyError, ValidationError) as e:
        # KeyError wraps its message in quotes
        message = e.args[0] if isinstance(e, KeyError) else str(e)
        print(f"ERROR: {message}")
        return 1

    print(path)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="patternforge",
        description="Procedural pattern image generator",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help=f"Logging level (default: {config.log_level})",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List available patterns")
    list_parser.add_argument("--category", help="Only list one category")
    list_parser.set_defaults(func=cmd_list)

    catalog_parser = subparsers.add_parser("catalog", help="Show implementation status")
    catalog_parser.add_argument("--pending", action="store_true", help="Only show pending entries")
    catalog_parser.set_defaults(func=cmd_catalog)

    render_parser = subparsers.add_parser("render", help="Render a pattern to PNG")
    render_parser.add_argument(
        "pattern",
        nargs="?",
        default=None,
        help=f"Pattern id (default: {config.default_pattern})",
    )
    render_parser.add_argument("--width", type=int, help="Image width in pixels")
    render_parser.add_argument("--height", type=int, help="Image height in pixels")
    render_parser.add_argument(
        "--resolution", choices=list(RESOLUTIONS), help="Named resolution preset"
    )
    render_parser.add_argument("--seed", type=int, help="Random seed for reproducible output")
    render_parser.add_argument("--color", action="store_true", help="Apply color mode")
    render_parser.add_argument("--output", "-o", help="Output file (default: auto-named in outputs_dir)")
    render_parser.set_defaults(func=cmd_render)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``patternforge`` command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level or config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
