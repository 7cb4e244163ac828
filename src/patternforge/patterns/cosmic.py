"""Cosmic family: radial physical fields and scattered bodies.

Radial generators (black hole, galaxy, wormhole) compute distance and
angle from a center for every pixel and combine them into an intensity.
Body generators (nebula, planets, starfield) place a random number of
features over a dark background.
"""

import logging
import math

import numpy as np

from ..core.buffer import PixelBuffer
from ..core.contract import pattern_generator
from ..core.features import FeatureCenter
from ..core.random_source import (
    RandomSource,
    draw_chance,
    draw_count,
    draw_field,
    draw_uniform,
)
from ..core.raster import (
    angular_distance,
    coordinate_grid,
    fill,
    polar,
    to_bytes,
    write_gray,
)
from ..core.registry import pattern_registry

logger = logging.getLogger(__name__)

TWO_PI = 2 * math.pi

GALAXY_ARMS = 3


@pattern_generator
def black_hole(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Black disc with a spiral accretion disk and faint lensed background.

    The event horizon radius is 15% of the shorter side and the accretion
    disk extends to three times that. Inside the disk the spiral
    brightness fades linearly outward and is boosted by a lensing term
    ``exp(-d/30) * 0.5``. Beyond it a little random noise plus
    ``exp(-d/100) * 0.2`` glow remains.
    """
    event_horizon = min(width, height) * 0.15
    accretion_disk = event_horizon * 3

    xs, ys = coordinate_grid(width, height)
    distance, angle = polar(xs, ys, width / 2, height / 2)
    background_noise = draw_field(rng, (height, width)) * 0.05

    disk_position = (distance - event_horizon) / (accretion_disk - event_horizon)
    disk = np.sin((angle + distance * 0.02) * 8) * 0.3 + 0.7
    lensing = np.exp(-distance / 30) * 0.5
    disk_intensity = disk * (1 - disk_position) * (1 + lensing)
    outer_intensity = background_noise + np.exp(-distance / 100) * 0.2

    intensity = np.select(
        [distance < event_horizon, distance < accretion_disk],
        [0.0, disk_intensity],
        default=outer_intensity,
    )
    write_gray(buffer, 255 * np.clip(intensity, 0.0, 1.0))


@pattern_generator
def galaxy(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Three-armed spiral galaxy drawn dark on a light field.

    For arm ``k`` the centerline angle at distance ``d`` is
    ``rotation + k * 2pi/3 + d * winding``. The wrapped angular distance to
    it, divided by pi, gives ``a`` in ``[0, 1]``; the arm adds
    ``exp(-d/200) * (1 - a)`` where ``1 - a > 0.8``. A core glow, a
    low-frequency dust term and random star pixels complete the image,
    which is stored inverted (``255 * (1 - intensity)``).
    """
    rotation = draw_uniform(rng, 0.0, TWO_PI)
    winding = draw_uniform(rng, 0.01, 0.02)
    dust_phase = draw_uniform(rng, 0.0, TWO_PI)
    logger.debug(f"galaxy: rotation={rotation:.3f} winding={winding:.4f}")

    xs, ys = coordinate_grid(width, height)
    distance, angle = polar(xs, ys, width / 2, height / 2)

    intensity = np.exp(-distance / 50) * 0.8
    falloff = np.exp(-distance / 200)
    for arm in range(GALAXY_ARMS):
        centerline = rotation + arm * TWO_PI / GALAXY_ARMS + distance * winding
        closeness = 1 - angular_distance(angle, centerline) / math.pi
        intensity += np.where(closeness > 0.8, falloff * closeness, 0.0)

    intensity += np.sin(xs * 0.01 + dust_phase) * np.cos(ys * 0.013 + dust_phase) * 0.1

    stars = draw_field(rng, (height, width)) < 0.001
    intensity = np.where(stars, 1.0, intensity)

    write_gray(buffer, 255 * (1 - np.clip(intensity, 0.0, 1.0)))


@pattern_generator
def wormhole(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Spiral tunnel with a jittered center, drawn black on white."""
    center_x = width / 2 + draw_uniform(rng, -0.5, 1.0) * 0.2 * width
    center_y = height / 2 + draw_uniform(rng, -0.5, 1.0) * 0.2 * height
    arms = draw_count(rng, 6, 8)
    tunnel_size = draw_uniform(rng, 150.0, 150.0)
    distortion_strength = draw_uniform(rng, 10.0, 30.0)
    tightness = draw_uniform(rng, 0.02, 0.08)
    depth = draw_uniform(rng, 200.0, 200.0)

    xs, ys = coordinate_grid(width, height)
    distance, angle = polar(xs, ys, center_x, center_y)

    tunnel_depth = np.maximum(0.0, 1 - distance / tunnel_size)
    spiral = np.sin(angle * arms + distance * tightness) * 0.3 + 0.7
    effective = distance + np.sin(distance * 0.02 + angle * 4) * distortion_strength
    intensity = tunnel_depth * spiral * (1 - effective / depth)

    write_gray(buffer, np.where(intensity > 0.4, 0, 255))


@pattern_generator
def nebula(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Soft-cored gas clouds with sharp edges and sparse stars.

    Each center distorts its distance with three seeded noise terms. Where
    the falloff ``1 - d/size`` exceeds 0.3 it adds ``sqrt(falloff)``
    scaled by the center's density; contributions from all centers sum.
    Pixels outside every cloud are black.
    """
    count = draw_count(rng, 2, 4)
    centers = []
    for _ in range(count):
        x = draw_uniform(rng, 0.0, width)
        y = draw_uniform(rng, 0.0, height)
        size = draw_uniform(rng, 120.0, 180.0)
        density = draw_uniform(rng, 0.5, 0.5)
        seed = draw_uniform(rng, 0.0, 1000.0)
        centers.append(FeatureCenter(x, y, size, density, seed))

    xs, ys = coordinate_grid(width, height)
    intensity = np.zeros((height, width))
    for center in centers:
        sx = xs + center.seed
        sy = ys + center.seed
        noise1 = np.sin(sx * 0.015) * np.cos(sy * 0.012)
        noise2 = np.sin(sx * 0.006 + sy * 0.008) * 0.5
        noise3 = np.cos(sx * 0.009 - sy * 0.014) * 0.3
        effective = center.distance(xs, ys) + (noise1 + noise2 + noise3) * 25

        falloff = 1 - effective / center.size
        inside = (effective < center.size) & (falloff > 0.3)
        intensity += np.where(inside, np.sqrt(np.where(inside, falloff, 0.0)), 0.0) * center.intensity

    stars = draw_field(rng, (height, width)) < 0.0008
    intensity = np.minimum(1.0, np.where(stars, 1.0, intensity))

    write_gray(buffer, np.floor(255 * intensity))


@pattern_generator
def planets(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Shaded spheres with banded surfaces; later planets cover earlier ones."""
    fill(buffer, 20, 20, 20)
    count = draw_count(rng, 2, 4)
    xs, ys = coordinate_grid(width, height)

    for _ in range(count):
        x = draw_uniform(rng, 0.0, width)
        y = draw_uniform(rng, 0.0, height)
        radius = draw_uniform(rng, 30.0, 80.0)
        brightness = draw_uniform(rng, 100.0, 100.0)

        distance = np.hypot(xs - x, ys - y)
        inside = distance < radius
        surface = np.sin(xs * 0.1) * np.cos(ys * 0.08) * np.sin(distance * 0.2)
        normalized = np.minimum(distance / radius, 1.0)
        shading = np.sqrt(1 - normalized * normalized)
        value = np.clip((brightness + surface * 30) * shading, 20, 255)
        write_gray(buffer, value, mask=inside)


def draw_star(buffer: PixelBuffer, x: int, y: int, brightness: float, size: int) -> None:
    """Stamp one star, keeping whichever of old and new value is brighter.

    Pixels within Euclidean distance ``size`` of ``(x, y)`` receive
    ``brightness * (1 - dist/size)``. The stamp is merged by component-wise
    maximum, so drawing never darkens a pixel. Off-buffer pixels are skipped.
    """
    y0, y1 = max(y - size, 0), min(y + size + 1, buffer.height)
    x0, x1 = max(x - size, 0), min(x + size + 1, buffer.width)
    if y0 >= y1 or x0 >= x1:
        return

    dy, dx = np.mgrid[y0 - y : y1 - y, x0 - x : x1 - x]
    distance = np.sqrt(dx * dx + dy * dy)
    value = np.where(distance <= size, brightness * (1 - distance / size), 0.0)

    patch = buffer.pixels[y0:y1, x0:x1, :3]
    patch[...] = to_bytes(np.maximum(patch.astype(np.float64), value[..., np.newaxis]))


@pattern_generator
def starfield(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Scattered stars of radius 1 to 3 on black, one per thousand pixels."""
    fill(buffer, 0, 0, 0)
    count = math.floor(width * height * 0.001)
    logger.debug(f"starfield: {count} stars")

    for _ in range(count):
        x = math.floor(draw_uniform(rng, 0.0, width))
        y = math.floor(draw_uniform(rng, 0.0, height))
        brightness = draw_uniform(rng, 150.0, 105.0)
        if draw_chance(rng, 0.95):
            size = 1
        else:
            size = 2 if draw_chance(rng, 0.8) else 3
        draw_star(buffer, x, y, brightness, size)


pattern_registry.register(
    "galaxy", galaxy, category="cosmic", multicolor=True, description="Three-armed spiral galaxy"
)
pattern_registry.register(
    "nebula", nebula, category="cosmic", multicolor=True, description="Gas clouds and sparse stars"
)
pattern_registry.register(
    "stars", starfield, category="cosmic", multicolor=True, description="Starfield"
)
pattern_registry.register(
    "blackhole",
    black_hole,
    category="cosmic",
    description="Event horizon with accretion disk",
)
pattern_registry.register(
    "planets", planets, category="cosmic", multicolor=True, description="Shaded planets"
)
pattern_registry.register(
    "wormhole", wormhole, category="cosmic", description="Spiral tunnel"
)
