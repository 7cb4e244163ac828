"""Glitch family: corruption, reordering and interference effects.

Each generator paints a simple base image and then damages it in several
passes. Passes run in sequence, so a later pass sees the output of the
earlier ones. Every additive change is clamped to ``[0, 255]``.
"""

import logging
import math

import numpy as np

from ..core.buffer import PixelBuffer
from ..core.contract import pattern_generator
from ..core.random_source import (
    RandomSource,
    draw_chance,
    draw_count,
    draw_field,
    draw_uniform,
)
from ..core.raster import (
    add_clamped,
    coordinate_grid,
    fill,
    luma,
    to_bytes,
    write_gray,
    write_rgb,
)
from ..core.registry import pattern_registry

logger = logging.getLogger(__name__)


def _random_pixels(rng: RandomSource, count: int, width: int, height: int) -> tuple[np.ndarray, np.ndarray]:
    xs = np.floor(draw_field(rng, (count,)) * width).astype(np.intp)
    ys = np.floor(draw_field(rng, (count,)) * height).astype(np.intp)
    return xs, ys


def _last_occurrence(xs: np.ndarray, ys: np.ndarray, width: int) -> np.ndarray:
    """Indices of the final draw for each distinct pixel, so later writes win."""
    flat = (ys * width + xs)[::-1]
    _, first = np.unique(flat, return_index=True)
    return len(flat) - 1 - first


def _sort_samples(samples: np.ndarray) -> None:
    order = np.argsort(luma(samples), kind="stable")
    samples[...] = samples[order]


def sort_row_segment(buffer: PixelBuffer, y: int, start_x: int, end_x: int) -> None:
    """Sort pixels ``start_x..end_x`` (inclusive) of row ``y`` by ascending luma."""
    _sort_samples(buffer.pixels[y, start_x : end_x + 1, :3])


def sort_column_segment(buffer: PixelBuffer, x: int, start_y: int, end_y: int) -> None:
    """Sort pixels ``start_y..end_y`` (inclusive) of column ``x`` by ascending luma."""
    _sort_samples(buffer.pixels[start_y : end_y + 1, x, :3])


def sort_block(buffer: PixelBuffer, x: int, y: int, block_width: int, block_height: int) -> None:
    """Sort a clipped block by luma and write it back in raster order.

    The darkest pixel lands at the block's top-left corner and brightness
    increases left to right, then top to bottom.
    """
    region = buffer.pixels[y : min(buffer.height, y + block_height), x : min(buffer.width, x + block_width), :3]
    if region.size == 0:
        return
    samples = region.reshape(-1, 3).copy()
    _sort_samples(samples)
    region[...] = samples.reshape(region.shape)


@pattern_generator
def pixel_sort(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Noisy RGB gradient with sorted row runs, column runs and blocks.

    Sorting is stable and only reorders existing pixels, so every sorted
    run holds the same colors as before, in non-decreasing luma order.
    """
    xs, ys = coordinate_grid(width, height)
    gradient_x = xs / width * 255
    gradient_y = ys / height * 255
    # One noise sample per pixel, shared by all three channels
    noise = (draw_field(rng, (height, width)) - 0.5) * 50
    write_rgb(buffer, gradient_x + noise, gradient_y + noise, (gradient_x + gradient_y) / 2 + noise)

    for _ in range(math.floor(height * 0.3)):
        y = math.floor(draw_uniform(rng, 0.0, height))
        start = math.floor(draw_uniform(rng, 0.0, width * 0.3))
        end = start + math.floor(draw_uniform(rng, 0.0, width * 0.4)) + width * 0.3
        sort_row_segment(buffer, y, start, math.floor(min(end, width - 1)))

    for _ in range(math.floor(width * 0.2)):
        x = math.floor(draw_uniform(rng, 0.0, width))
        start = math.floor(draw_uniform(rng, 0.0, height * 0.3))
        end = start + math.floor(draw_uniform(rng, 0.0, height * 0.4)) + height * 0.3
        sort_column_segment(buffer, x, start, math.floor(min(end, height - 1)))

    for _ in range(draw_count(rng, 5, 10)):
        x = math.floor(draw_uniform(rng, 0.0, width))
        y = math.floor(draw_uniform(rng, 0.0, height))
        block_width = draw_count(rng, 10, 50)
        block_height = draw_count(rng, 5, 20)
        sort_block(buffer, x, y, block_width, block_height)


@pattern_generator
def corrupt_data(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Diagonal stripes damaged by random blocks, bit flips and noise lines.

    - 15-39 blocks replace 80% of their pixels with random colors
    - ``width * height * 0.02`` single-channel inversions (``255 - v``);
      a channel drawn twice is restored
    - 3-10 rows get additive noise on 40% of their pixels
    """
    xs, ys = coordinate_grid(width, height)
    write_gray(buffer, np.floor((xs + ys * 0.7) / 20) % 2 * 100 + 50)
    pixels = buffer.pixels

    for _ in range(draw_count(rng, 15, 25)):
        x = math.floor(draw_uniform(rng, 0.0, width))
        y = math.floor(draw_uniform(rng, 0.0, height))
        block_width = draw_count(rng, 5, 30)
        block_height = draw_count(rng, 5, 20)
        block = pixels[y : min(height, y + block_height), x : min(width, x + block_width), :3]
        corrupted = draw_field(rng, block.shape[:2]) < 0.8
        colors = np.floor(draw_field(rng, block.shape) * 256)
        block[corrupted] = to_bytes(colors[corrupted])

    flips = math.ceil(width * height * 0.02)
    flip_x, flip_y = _random_pixels(rng, flips, width, height)
    channel = np.floor(draw_field(rng, (flips,)) * 3).astype(np.intp)
    np.bitwise_xor.at(pixels, (flip_y, flip_x, channel), np.uint8(255))

    for _ in range(draw_count(rng, 3, 8)):
        y = math.floor(draw_uniform(rng, 0.0, height))
        intensity = draw_uniform(rng, 0.0, 1.0)
        hit = draw_field(rng, (width,)) < 0.4
        noise = (draw_field(rng, (width,)) - 0.5) * 255 * intensity
        row = pixels[y, :, :3]
        add_clamped(row, np.where(hit, noise, 0.0)[:, np.newaxis])


@pattern_generator
def scan_lines(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """CRT-style scan lines over a soft sine base, plus a few glitched rows."""
    xs, _ = coordinate_grid(width, height)
    write_gray(buffer, 120 + np.sin(xs * 0.05) * 30)
    pixels = buffer.pixels

    spacing = draw_count(rng, 3, 5)
    intensity = draw_uniform(rng, 0.3, 0.4)
    darkened = pixels[::spacing, :, :3]
    darkened[...] = np.floor(darkened * (1 - intensity)).astype(np.uint8)

    for _ in range(draw_count(rng, 5, 15)):
        y = math.floor(draw_uniform(rng, 0.0, height))
        strength = draw_uniform(rng, 0.0, 1.0)
        hit = (draw_field(rng, (width,)) < 0.3)[:, np.newaxis]
        offsets = (draw_field(rng, (width, 3)) - 0.5) * np.array([200, 100, 150]) * strength
        add_clamped(pixels[y, :, :3], np.where(hit, offsets, 0.0))


@pattern_generator
def static_interference(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Analog TV static with bright bands, channel bleed, dropouts and roll bars."""
    write_gray(buffer, np.floor(draw_field(rng, (height, width)) * 256))
    pixels = buffer.pixels
    xs, ys = coordinate_grid(width, height)

    for _ in range(draw_count(rng, 3, 8)):
        y = math.floor(draw_uniform(rng, 0.0, height))
        band_height = draw_count(rng, 3, 15)
        band_intensity = draw_uniform(rng, 0.5, 0.5)
        rows = slice(y, min(height, y + band_height))
        wave = np.sin(xs[rows] * 0.1 + ys[rows] * 0.05) * 0.5 + 0.5
        add_clamped(pixels[rows, :, :3], np.floor(wave * 255 * band_intensity)[..., np.newaxis])

    for _ in range(draw_count(rng, 2, 5)):
        x = math.floor(draw_uniform(rng, 0.0, width))
        y = math.floor(draw_uniform(rng, 0.0, height))
        glitch_width = draw_count(rng, 20, 100)
        glitch_height = draw_count(rng, 10, 50)
        channel = draw_count(rng, 0, 3)
        block = pixels[y : min(height, y + glitch_height), x : min(width, x + glitch_width), channel]
        add_clamped(block, np.floor(draw_field(rng, block.shape) * 150))

    dropouts = math.ceil(width * height * 0.05)
    drop_x, drop_y = _random_pixels(rng, dropouts, width, height)
    black = draw_field(rng, (dropouts,)) < 0.7
    keep = _last_occurrence(drop_x, drop_y, width)
    pixels[drop_y[keep], drop_x[keep], :3] = np.where(black[keep], 0, 255)[:, np.newaxis]

    for _ in range(draw_count(rng, 1, 3)):
        y = math.floor(draw_uniform(rng, 0.0, height))
        roll_intensity = draw_uniform(rng, 0.3, 0.4)
        roll = np.floor(np.sin(np.arange(width) * 0.2) * roll_intensity * 255)
        add_clamped(pixels[y, :, :3], roll[:, np.newaxis])


@pattern_generator
def datamosh(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Sine texture with horizontally displaced blocks and red-channel noise.

    Each glitch copies pixels from ``floor(x + displacement)`` in the same
    row, working left to right in place, and perturbs the red channel by up
    to +/-50 on every copy.
    """
    xs, ys = coordinate_grid(width, height)
    write_gray(buffer, 100 + np.sin(xs * 0.1) * np.cos(ys * 0.08) * 50)
    pixels = buffer.pixels

    glitch_count = math.ceil(draw_uniform(rng, 20.0, 30.0))
    for _ in range(glitch_count):
        x = math.floor(draw_uniform(rng, 0.0, width))
        y = math.floor(draw_uniform(rng, 0.0, height))
        glitch_width = draw_uniform(rng, 10.0, 100.0)
        glitch_height = draw_uniform(rng, 5.0, 20.0)
        displacement = draw_uniform(rng, -0.5, 1.0) * 50

        rows = slice(y, math.ceil(min(height, y + glitch_height)))
        targets = np.arange(x, math.ceil(min(width, x + glitch_width)))
        sources = np.floor(targets + displacement).astype(np.intp)
        valid = (sources >= 0) & (sources < width)
        targets, sources = targets[valid], sources[valid]
        if targets.size == 0:
            continue

        red_noise = (draw_field(rng, (rows.stop - rows.start, targets.size)) - 0.5) * 100
        # Copies run left to right in place, so a source already overwritten
        # by this glitch is copied again and negative displacements smear
        for column, (target, source) in enumerate(zip(targets, sources)):
            moved = pixels[rows, source, :3].copy()
            moved[:, 0] = to_bytes(moved[:, 0] + red_noise[:, column])
            pixels[rows, target, :3] = moved


@pattern_generator
def digital_rain(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Falling green glyph columns with bright heads and stray artifacts.

    Column width is 8-19 pixels and each glyph is a square two pixels
    narrower than its column. A trail fades linearly from its start and
    wraps around the bottom edge; glyphs below the bottom are clipped.
    """
    fill(buffer, 0, 20, 0)
    pixels = buffer.pixels

    column_width = draw_count(rng, 8, 12)
    column_count = width // column_width
    glyph = column_width - 2
    logger.debug(f"digital_rain: {column_count} columns of {column_width}px")

    for column in range(column_count):
        x0 = column * column_width + 1
        cols = slice(x0, min(width, x0 + glyph))
        length = 20 + math.floor(draw_uniform(rng, 0.0, height * 0.4))
        start = math.floor(draw_uniform(rng, 0.0, height))
        for i in range(length):
            y = (start + i) % height
            rows = slice(y, min(height, y + glyph))
            cell = pixels[rows, cols, :3]
            if cell.size == 0:
                continue
            brightness = math.floor(max(0.0, 1 - i / length) * 255)
            drawn = draw_field(rng, cell.shape[:2]) < 0.7
            cell[drawn] = (math.floor(brightness * 0.2), brightness, math.floor(brightness * 0.3))

    for column in range(column_count):
        if not draw_chance(rng, 0.8):
            continue
        x0 = column * column_width + 1
        y = math.floor(draw_uniform(rng, 0.0, height))
        pixels[y : y + glyph, x0 : x0 + glyph, :3] = 255

    for _ in range(draw_count(rng, 10, 20)):
        x = math.floor(draw_uniform(rng, 0.0, width))
        y = math.floor(draw_uniform(rng, 0.0, height))
        size = draw_count(rng, 2, 6)
        cell = pixels[y : y + size, x : x + size, :3]
        drawn = draw_field(rng, cell.shape[:2]) < 0.6
        shape = (int(drawn.sum()),)
        cell[drawn, 0] = np.floor(draw_field(rng, shape) * 100).astype(np.uint8)
        cell[drawn, 1] = (100 + np.floor(draw_field(rng, shape) * 155)).astype(np.uint8)
        cell[drawn, 2] = np.floor(draw_field(rng, shape) * 80).astype(np.uint8)


pattern_registry.register(
    "datamosh", datamosh, category="glitch", description="Displaced blocks with channel noise"
)
pattern_registry.register(
    "scan", scan_lines, category="glitch", description="CRT scan lines and glitched rows"
)
pattern_registry.register(
    "corrupt", corrupt_data, category="glitch", description="Corrupted blocks and bit flips"
)
pattern_registry.register(
    "digital", digital_rain, category="glitch", description="Falling green glyph columns"
)
pattern_registry.register(
    "pixel", pixel_sort, category="glitch", description="Brightness-sorted pixel runs"
)
pattern_registry.register(
    "static_interference",
    static_interference,
    category="glitch",
    description="TV static with bands and dropouts",
)
