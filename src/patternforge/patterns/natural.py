"""Natural family: bolts, clouds, ridgelines, growth and line-drawn figures."""

import logging
import math

import numpy as np

from ..core.buffer import PixelBuffer
from ..core.contract import pattern_generator
from ..core.drawing import (
    disc_offsets,
    half_up,
    plot,
    ring_points,
    round_half_up,
    segment,
    stroke,
)
from ..core.random_source import (
    RandomSource,
    draw_above,
    draw_chance,
    draw_count,
    draw_field,
    draw_uniform,
)
from ..core.raster import coordinate_grid, fill, write_gray
from ..core.registry import pattern_registry
from .basic import simple_noise

logger = logging.getLogger(__name__)

TWO_PI = 2 * math.pi

LIGHTNING_BIAS = 0.7
LIGHTNING_JITTER = 1 - LIGHTNING_BIAS
LIGHTNING_STEP = 3
CLOUD_OCTAVES = 4
TERRAIN_WAVES = ((0.001, 50), (0.003, 30), (0.01, 15), (0.02, 8))


@pattern_generator
def lightning(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Jagged white bolts crossing a black sky from one side to the other.

    Each bolt starts on the left or right edge and walks toward a random
    point on the opposite edge in steps of about 3 pixels, mixing a 70%
    pull toward the target with a random sideways jitter. The walk stops
    within 5 pixels of the target or when it revisits a pixel. Every visited
    pixel is lit and each of its 8 neighbours is lit with probability 0.7.
    """
    fill(buffer, 0, 0, 0)
    bolts = draw_count(rng, 3, 5)
    logger.debug(f"lightning: {bolts} bolts")
    pixels = buffer.pixels

    for _ in range(bolts):
        x = 0 if draw_chance(rng, 0.5) else width - 1
        y = draw_count(rng, 0, height)
        target_x = width - 1 if x == 0 else 0
        target_y = draw_count(rng, 0, height)

        visited = set()
        while abs(x - target_x) > 5 or abs(y - target_y) > 5:
            if (x, y) in visited:
                break
            visited.add((x, y))

            pixels[y, x, :3] = 255
            top, bottom = max(y - 1, 0), min(y + 2, height)
            left, right = max(x - 1, 0), min(x + 2, width)
            glow = draw_field(rng, (bottom - top, right - left)) > 0.3
            pixels[top:bottom, left:right, :3][glow] = 255

            dx = target_x - x
            dy = target_y - y
            distance = math.sqrt(dx * dx + dy * dy)
            move_x = dx / distance * LIGHTNING_BIAS + draw_uniform(rng, -0.5, 1.0) * LIGHTNING_JITTER
            move_y = dy / distance * LIGHTNING_BIAS + draw_uniform(rng, -0.5, 1.0) * LIGHTNING_JITTER
            x = min(max(half_up(x + move_x * LIGHTNING_STEP), 0), width - 1)
            y = min(max(half_up(y + move_y * LIGHTNING_STEP), 0), height - 1)


@pattern_generator
def cloud(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Turbulence noise thresholded against a per-pixel random cloudiness.

    Four octaves of ``|simple_noise|`` starting at a scale in
    ``[0.003, 0.008)``. A pixel is white when the turbulence exceeds its
    own cloudiness draw in ``[0.3, 0.6)``.
    """
    scale = draw_uniform(rng, 0.003, 0.005)

    xs, ys = coordinate_grid(width, height)
    turbulence = np.zeros((height, width))
    amplitude = 1.0
    frequency = scale
    for _ in range(CLOUD_OCTAVES):
        turbulence += np.abs(simple_noise(xs * frequency, ys * frequency)) * amplitude
        amplitude *= 0.5
        frequency *= 2

    cloudiness = 0.3 + draw_field(rng, (height, width)) * 0.3
    write_gray(buffer, np.where(turbulence > cloudiness, 255, 0))


def _smooth_in_place(heights: list) -> None:
    # Each sample averages with its already-smoothed left neighbour
    for x in range(1, len(heights) - 1):
        heights[x] = (heights[x - 1] + heights[x] + heights[x + 1]) / 3


@pattern_generator
def terrain(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Three to five black mountain ridgelines under a white sky.

    Layer ``l`` has a base height of ``height * (0.3 + 0.2*l + r*0.3)``
    plus four sine waves whose amplitude grows with the layer and a
    per-column jitter of up to 10 pixels. The profile is clamped to the
    buffer and smoothed twice before every pixel below it is filled.
    """
    fill(buffer, 255, 255, 255)
    layers = draw_count(rng, 3, 3)
    columns = np.arange(width, dtype=np.float64)
    rows = np.arange(height)[:, np.newaxis]

    for layer in range(layers):
        base = height * (0.3 + layer * 0.2 + draw_uniform(rng, 0.0, 0.3))
        profile = np.full(width, base)
        for frequency, amplitude in TERRAIN_WAVES:
            profile += np.sin(columns * frequency) * amplitude * (1 + layer)
        profile += (draw_field(rng, (width,)) - 0.5) * 20
        profile = np.clip(profile, 0, height).tolist()

        for _ in range(2):
            _smooth_in_place(profile)

        ground = rows >= np.floor(np.asarray(profile))[np.newaxis, :]
        buffer.pixels[ground, :3] = 0


def _stroke_by_radius(buffer, xs, ys, radii):
    """Stamp each point with its own brush radius, one pass per radius."""
    inside = (xs >= 0) & (xs < buffer.width) & (ys >= 0) & (ys < buffer.height)
    for radius in np.unique(radii[inside]):
        chosen = inside & (radii == radius)
        stroke(buffer, xs[chosen], ys[chosen], int(radius))


def _grow_branch(buffer, start_x, start_y, angle, length, rng):
    """Trace one wavy branch, spawning straight sub-branches along the way.

    Only points whose center lies inside the buffer are stamped, and only
    in-buffer steps past the tenth may sprout a sub-branch.
    """
    steps = math.floor(length)
    if steps <= 0:
        return

    k = np.arange(steps)
    path_x = start_x + np.cumsum(math.cos(angle) + np.sin(k * 0.1) * 0.5)
    path_y = start_y + np.cumsum(math.sin(angle) + np.cos(k * 0.15) * 0.3)
    xs = [round_half_up(path_x)]
    ys = [round_half_up(path_y)]
    radii = [np.maximum(1, np.floor(3 - k / steps * 2)).astype(int)]
    inside = (xs[0] >= 0) & (xs[0] < buffer.width) & (ys[0] >= 0) & (ys[0] < buffer.height)

    for step in np.flatnonzero(inside & (k > 10)):
        if not draw_above(rng, 0.85):
            continue
        sub_angle = angle + draw_uniform(rng, -0.5, 1.0) * math.pi * 0.5
        sub_steps = math.floor((length - step) * 0.6)
        if sub_steps <= 0:
            continue
        j = np.arange(sub_steps)
        xs.append(round_half_up(path_x[step] + (j + 1) * math.cos(sub_angle) * 0.8))
        ys.append(round_half_up(path_y[step] + (j + 1) * math.sin(sub_angle) * 0.8))
        radii.append(np.maximum(1, np.floor(2 - j / sub_steps * 1.5)).astype(int))

    _stroke_by_radius(buffer, np.concatenate(xs), np.concatenate(ys), np.concatenate(radii))


@pattern_generator
def organic(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Branching growth radiating from 8-19 centers.

    Each center sends 5-14 wavy branches outward, tapering from a brush
    radius of 3 to 1. Past the tenth step a branch sprouts a straight
    sub-branch with probability 0.15. Every center ends with a solid node
    of radius 5-12.
    """
    fill(buffer, 255, 255, 255)
    count = draw_count(rng, 8, 12)
    centers = [
        (draw_uniform(rng, 0.0, width), draw_uniform(rng, 0.0, height), draw_uniform(rng, 20.0, 80.0))
        for _ in range(count)
    ]
    logger.debug(f"organic: {count} growth centers")

    for center_x, center_y, radius in centers:
        branches = draw_count(rng, 5, 10)
        for branch in range(branches):
            angle = branch / branches * TWO_PI + draw_uniform(rng, -0.5, 1.0) * 0.5
            length = radius * draw_uniform(rng, 0.5, 0.8)
            _grow_branch(buffer, center_x, center_y, angle, length, rng)

        node = draw_count(rng, 5, 8)
        stroke(buffer, [half_up(center_x)], [half_up(center_y)], node)


def _circle(buffer, center_x, center_y, radius, step=0.1):
    """Outline of a circle with rounded center and radius."""
    r = half_up(radius)
    plot(buffer, *ring_points(half_up(center_x), half_up(center_y), r, r, step))


def _line(buffer, x0, y0, x1, y1):
    plot(buffer, *segment(x0, y0, x1, y1))


def _face_outline(buffer, cx, cy, w, h):
    angles = np.arange(0.0, TWO_PI, 0.02)
    sines = np.sin(angles)
    jaw = np.where(sines < 0, 0.8, 1.0)
    temple = np.where(np.abs(sines) > 0.7, 0.9, 1.0)
    xs = round_half_up(cx + np.cos(angles) * w * jaw * temple)
    ys = round_half_up(cy + sines * h)
    plot(buffer, xs, ys)


def _eye(buffer, center_x, center_y, width, height):
    cx, cy = half_up(center_x), half_up(center_y)
    w, h = half_up(width / 2), half_up(height / 2)

    angles = np.arange(0.0, TWO_PI, 0.05)
    almond = 1 + np.cos(angles * 2) * 0.3
    plot(buffer, round_half_up(cx + np.cos(angles) * w * almond), round_half_up(cy + np.sin(angles) * h))

    _circle(buffer, cx, cy, min(w, h) * 0.7)
    dx, dy = disc_offsets(half_up(min(w, h) * 0.3))
    plot(buffer, cx + dx, cy + dy)


def _eyebrow(buffer, center_x, center_y, width):
    cx, cy = half_up(center_x), half_up(center_y)
    w = half_up(width / 2)
    for x in range(-w, w + 1):
        t = x / w
        thickness = max(1, half_up(3 * (1 - abs(t))))
        lift = half_up(math.sin(t * math.pi * 0.3) * 3)
        plot(buffer, np.full(thickness, cx + x), cy + lift - np.arange(thickness))


def _nose(buffer, center_x, center_y, width, height):
    cx, cy = half_up(center_x), half_up(center_y)
    w, h = half_up(width / 2), half_up(height)
    rows = np.arange(h)
    spread = round_half_up(w * (0.3 + rows / h * 0.7))
    plot(buffer, np.concatenate([cx - spread, cx + spread]), np.tile(cy + rows, 2))

    _circle(buffer, cx - w * 0.6, cy + h * 0.8, w * 0.2)
    _circle(buffer, cx + w * 0.6, cy + h * 0.8, w * 0.2)


def _mouth(buffer, center_x, center_y, width, style):
    cx, cy = half_up(center_x), half_up(center_y)
    w = half_up(width / 2)
    offsets = np.arange(-w, w + 1)
    arc = np.sin(offsets / w * math.pi)

    if style == 3:
        plot(buffer, cx + offsets, cy - round_half_up(arc * w * 0.2))
        plot(buffer, cx + offsets, cy + round_half_up(arc * w * 0.3) + 5)
        return
    if style == 0:
        curve = arc * 2
    elif style == 1:
        curve = -arc * w * 0.3
    else:
        curve = arc * w * 0.2
    plot(buffer, cx + offsets, cy + round_half_up(curve))


def _hair(buffer, center_x, center_y, face_width, face_height, style, rng):
    cx, cy = half_up(center_x), half_up(center_y)
    w, h = half_up(face_width / 2), half_up(face_height / 2)
    reach = 1.5 if style == 1 else 0.6

    strands = math.floor(0.8 * math.pi / 0.1) + 1
    for angle in 0.1 * math.pi + np.arange(strands) * 0.1:
        length = h * draw_uniform(rng, 0.8, reach)
        lengths = np.arange(0.0, length, 2.0)
        if lengths.size == 0:
            continue
        root_x = cx + math.cos(angle + math.pi) * w
        root_y = cy + math.sin(angle + math.pi) * h

        if style == 2:
            # Curls hang straight down from the hairline
            xs = root_x + np.sin(lengths * 0.3) * 8
            ys = root_y + np.cos(lengths * 0.3) * 4 + lengths * 0.8
        elif style == 1:
            sway = np.sin(lengths * 0.1) * 10
            xs = root_x + np.cumsum(math.cos(angle + math.pi) * 0.5 + sway * 0.1)
            ys = root_y + np.cumsum(1 + draw_field(rng, lengths.shape) * 0.5)
        else:
            steps = np.arange(1, lengths.size + 1)
            xs = root_x + steps * math.cos(angle + math.pi) * 2
            ys = root_y + steps * math.sin(angle + math.pi) * 2
        plot(buffer, round_half_up(xs), round_half_up(ys))


def _face_contours(buffer, cx, cy, w, h):
    _line(buffer, cx - w * 0.7, cy - h * 0.1, cx - w * 0.3, cy + h * 0.2)
    _line(buffer, cx + w * 0.7, cy - h * 0.1, cx + w * 0.3, cy + h * 0.2)
    _line(buffer, cx - w * 0.8, cy + h * 0.5, cx, cy + h * 0.9)
    _line(buffer, cx + w * 0.8, cy + h * 0.5, cx, cy + h * 0.9)


def _glasses(buffer, center_x, eye_y, eye_spacing, eye_width):
    cx, cy = half_up(center_x), half_up(eye_y)
    spacing = half_up(eye_spacing)
    lens = half_up(eye_width * 1.3)
    _circle(buffer, cx - spacing, cy, lens)
    _circle(buffer, cx + spacing, cy, lens)
    _line(buffer, cx - spacing + lens, cy, cx + spacing - lens, cy)


@pattern_generator
def faces(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """Two to five line-drawn faces.

    Every face has an outline narrowed at the jaw and temples, almond eyes
    with iris and pupil, eyebrows, a nose with nostrils, one of four mouth
    shapes and contour lines along cheeks and jaw. Hair (straight, flowing
    or curly) appears when its draw exceeds 0.3 and glasses when theirs
    exceeds 0.7.
    """
    fill(buffer, 255, 255, 255)
    count = draw_count(rng, 2, 4)
    logger.debug(f"faces: {count} faces")

    for _ in range(count):
        face_x = draw_uniform(rng, 0.0, width)
        face_y = draw_uniform(rng, 0.0, height)
        face_width = draw_uniform(rng, 120.0, 180.0)
        face_height = face_width * draw_uniform(rng, 1.2, 0.4)

        cx, cy = half_up(face_x), half_up(face_y)
        w, h = half_up(face_width / 2), half_up(face_height / 2)
        _face_outline(buffer, cx, cy, w, h)

        eye_y = face_y - face_height * 0.15
        eye_spacing = face_width * 0.25
        eye_width = face_width * 0.12
        eye_height = eye_width * 0.6
        for eye_x in (face_x - eye_spacing, face_x + eye_spacing):
            _eye(buffer, eye_x, eye_y, eye_width, eye_height)
        for eye_x in (face_x - eye_spacing, face_x + eye_spacing):
            _eyebrow(buffer, eye_x, eye_y - eye_height * 1.2, eye_width * 1.1)

        _nose(buffer, face_x, face_y + face_height * 0.05, face_width * 0.08, face_height * 0.15)

        mouth_width = face_width * draw_uniform(rng, 0.15, 0.1)
        mouth_style = draw_count(rng, 0, 4)
        _mouth(buffer, face_x, face_y + face_height * 0.25, mouth_width, mouth_style)

        if draw_above(rng, 0.3):
            _hair(buffer, face_x, face_y, face_width, face_height, draw_count(rng, 0, 3), rng)

        _face_contours(buffer, cx, cy, w, h)

        if draw_above(rng, 0.7):
            _glasses(buffer, face_x, eye_y, eye_spacing, eye_width)


def _sides(buffer, cx, top, half_widths):
    """Plot a symmetric pair of side pixels for each row starting at ``top``."""
    offsets = round_half_up(half_widths)
    rows = top + np.arange(offsets.size)
    plot(buffer, np.concatenate([cx - offsets, cx + offsets]), np.tile(rows, 2))


def _torso_profile(t, w):
    return np.where(
        t < 0.3,
        w * (1 - t * 0.2),
        np.where(t < 0.6, w * (0.8 - (t - 0.3) * 0.3), w * (0.5 + (t - 0.6) * 0.4)),
    )


def _hspan(buffer, x, y, half_width):
    """Horizontal run from ``x - half_width`` to ``x + half_width`` in unit steps."""
    offsets = -half_width + np.arange(math.floor(2 * half_width) + 1)
    xs = round_half_up(x + offsets)
    plot(buffer, xs, np.full(xs.size, half_up(y)))


def _limb(buffer, x, y, length, stride_x, stride_y, widths, bend=None):
    """Walk a tapering limb segment in steps of 2 and return where it ends."""
    for i in np.arange(0.0, length, 2.0):
        t = i / length
        x += stride_x + (bend(t) if bend is not None else 0.0)
        y += stride_y
        _hspan(buffer, x, y, widths[0] - t * widths[1])
    return x, y


def _arm(buffer, start_x, start_y, length, left):
    x, y = half_up(start_x), half_up(start_y)
    total = half_up(length)
    direction = -0.3 if left else 0.3
    turn = -1.0 if left else 1.0

    x, y = _limb(
        buffer,
        x,
        y,
        total * 0.55,
        direction,
        1.0,
        (8, 3),
        bend=lambda t: turn * math.sin(t * math.pi) * 10 * 0.1,
    )
    _circle(buffer, x, y, 6)
    x, y = _limb(buffer, x, y, total * 0.45, direction * 0.5, 1.2, (5, 2))
    _circle(buffer, x, y, 4)


def _leg(buffer, start_x, start_y, length, left):
    x, y = half_up(start_x), half_up(start_y)
    total = half_up(length)

    x, y = _limb(buffer, x, y, total * 0.55, 0.0, 1.0, (12, 4))
    _circle(buffer, x, y, 8)
    x, y = _limb(buffer, x, y, total * 0.45, 0.0, 1.2, (8, 3))

    direction = -1 if left else 1
    for i in range(20):
        foot = 6 - abs(i - 10) * 0.3
        offsets = -foot + np.arange(math.floor(2 * foot) + 1)
        plot(buffer, round_half_up(x + i * direction + offsets), round_half_up(y + offsets * 0.2))


def _clothing(buffer, center_x, torso_y, torso_width, torso_height, rng):
    cx, ty = half_up(center_x), half_up(torso_y)
    w, h = half_up(torso_width / 2), half_up(torso_height)

    angles = np.arange(0.0, math.pi, 0.1)
    plot(buffer, round_half_up(cx + np.cos(angles) * w * 0.4), round_half_up(ty + np.sin(angles) * h * 0.15))

    belt_y = ty + h * 0.7
    _line(buffer, cx - w * 0.9, belt_y, cx + w * 0.9, belt_y)

    if draw_above(rng, 0.5):
        pocket_x = cx + w * 0.3
        pocket_y = ty + h * 0.3
        size = w * 0.2
        _line(buffer, pocket_x - size, pocket_y, pocket_x + size, pocket_y)
        _line(buffer, pocket_x - size, pocket_y, pocket_x - size, pocket_y + size)
        _line(buffer, pocket_x + size, pocket_y, pocket_x + size, pocket_y + size)


def _body_contours(buffer, center_x, center_y, body_width, body_height, rng):
    cx, cy = half_up(center_x), half_up(center_y)
    w, h = half_up(body_width / 2), half_up(body_height / 2)
    t = np.arange(2 * h) / (2 * h)
    profile = np.where(
        t < 0.2,
        w * 0.8,
        np.where(t < 0.6, w * (0.8 - (t - 0.2) * 0.3), w * (0.5 + (t - 0.6) * 0.4)),
    )
    shaded = draw_field(rng, t.shape) > 0.7
    offsets = round_half_up(profile * 0.9)[shaded]
    rows = (cy - h + np.arange(2 * h))[shaded]
    plot(buffer, np.concatenate([cx - offsets, cx + offsets]), np.tile(rows, 2))


@pattern_generator
def bodies(buffer: PixelBuffer, width: int, height: int, rng: RandomSource) -> None:
    """One to three line-drawn standing figures.

    A figure 200-500 px tall has an oval head, a neck, a torso that narrows
    to the waist and widens to the hips, tapering arms and legs with round
    joints, hands and feet. Clothing (neckline and belt, sometimes a
    pocket) appears when its draw exceeds 0.4, and each row of the outline
    gets a contour pixel pair with probability 0.3.
    """
    fill(buffer, 255, 255, 255)
    count = draw_count(rng, 1, 3)
    logger.debug(f"bodies: {count} figures")

    for _ in range(count):
        body_x = draw_uniform(rng, 0.0, width)
        body_y = draw_uniform(rng, 0.0, height)
        body_height = draw_uniform(rng, 200.0, 300.0)
        body_width = body_height * draw_uniform(rng, 0.25, 0.15)
        cx = half_up(body_x)

        head_radius = half_up(body_height * 0.08)
        head_y = body_y - body_height * 0.4
        plot(buffer, *ring_points(cx, half_up(head_y), head_radius, head_radius * 1.2, 0.05))

        neck_y = head_y + body_height * 0.08
        neck_height = body_height * 0.08
        neck_rows = half_up(neck_height)
        neck_half = half_up(body_width * 0.3 / 2)
        _sides(buffer, cx, half_up(neck_y), neck_half * (1 + np.arange(neck_rows) / neck_rows * 0.3))

        torso_y = neck_y + neck_height
        torso_height = body_height * 0.5
        torso_rows = half_up(torso_height)
        torso_half = half_up(body_width / 2)
        torso_top = half_up(torso_y)
        _sides(buffer, cx, torso_top, _torso_profile(np.arange(torso_rows) / torso_rows, torso_half))
        _line(buffer, cx - torso_half, torso_top, cx + torso_half, torso_top)

        shoulder_y = torso_y + torso_height * 0.1
        arm_length = body_height * 0.35
        _arm(buffer, body_x - body_width * 0.6, shoulder_y, arm_length, left=True)
        _arm(buffer, body_x + body_width * 0.6, shoulder_y, arm_length, left=False)

        hip_y = torso_y + torso_height
        leg_length = body_height * 0.45
        _leg(buffer, body_x - body_width * 0.2, hip_y, leg_length, left=True)
        _leg(buffer, body_x + body_width * 0.2, hip_y, leg_length, left=False)

        if draw_above(rng, 0.4):
            _clothing(buffer, body_x, torso_y, body_width, torso_height, rng)

        _body_contours(buffer, body_x, body_y, body_width, body_height, rng)


pattern_registry.register(
    "lightning", lightning, category="natural", description="Branching lightning bolts"
)
pattern_registry.register(
    "cloud", cloud, category="natural", multicolor=True, description="Turbulent cloud cover"
)
pattern_registry.register(
    "terrain", terrain, category="natural", multicolor=True, description="Layered mountain ridges"
)
pattern_registry.register(
    "organic", organic, category="natural", description="Branching organic growth"
)
pattern_registry.register(
    "faces", faces, category="natural", multicolor=True, description="Line-drawn faces"
)
pattern_registry.register(
    "bodies", bodies, category="natural", multicolor=True, description="Line-drawn figures"
)
