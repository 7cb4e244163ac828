"""Unit tests for the pattern generator families.

Every registered generator is run against the shared contract (full
overwrite, opaque alpha, determinism for a fixed seed, no failure at the
edges of the random range). Selected generators are then pinned with a
constant random source so individual pixels can be checked by hand.
"""

import logging
import math

import numpy as np
import pytest

from patternforge.core.buffer import PixelBuffer
from patternforge.core.random_source import make_rng
from patternforge.core.raster import coordinate_grid, luma, to_bytes, write_rgb
from patternforge.core.registry import pattern_registry
from patternforge.patterns.abstract import (
    abstract_art,
    flow_field,
    fold_angle,
    ink_blot,
    kaleidoscope,
    paint_splash,
)
from patternforge.patterns.architectural import bridges, cityscape, gothic
from patternforge.patterns.basic import WAVE_VARIANTS, noise
from patternforge.patterns.cosmic import (
    black_hole,
    draw_star,
    galaxy,
    nebula,
    planets,
    starfield,
    wormhole,
)
from patternforge.patterns.geometric import (
    cellular,
    crystals,
    fractal,
    honeycomb,
    mandala,
    spiral,
    voronoi,
)
from patternforge.patterns.glitch import (
    corrupt_data,
    datamosh,
    pixel_sort,
    scan_lines,
    sort_block,
    sort_column_segment,
    sort_row_segment,
    static_interference,
)
from patternforge.patterns.natural import bodies, cloud, faces, lightning, organic, terrain
from patternforge.patterns.structural import circuit, maze, neural
from patternforge.patterns.texture import lace, marble, wood

ALL_PATTERNS = pattern_registry.list_available()


def _rows(samples: np.ndarray) -> list[tuple[int, ...]]:
    return sorted(tuple(int(v) for v in px) for px in samples.reshape(-1, 3))


class TestGeneratorContract:
    """Tests applied to every registered generator."""

    @pytest.mark.parametrize("name", ALL_PATTERNS)
    def test_overwrites_every_pixel(self, name):
        """Test that output is opaque and independent of prior contents."""
        first = PixelBuffer.allocate(48, 32)
        second = PixelBuffer.allocate(48, 32)
        second.pixels[...] = 123

        pattern_registry.generate(name, first, rng=make_rng(11))
        pattern_registry.generate(name, second, rng=make_rng(11))

        assert (first.pixels[..., 3] == 255).all()
        assert np.array_equal(first.pixels, second.pixels)

    @pytest.mark.parametrize("name", ALL_PATTERNS)
    def test_same_seed_same_bytes(self, name):
        """Test that a fixed seed gives byte-identical output."""
        first = PixelBuffer.allocate(40, 40)
        second = PixelBuffer.allocate(40, 40)
        pattern_registry.generate(name, first, rng=make_rng(2024))
        pattern_registry.generate(name, second, rng=make_rng(2024))
        assert first.tobytes() == second.tobytes()

    @pytest.mark.parametrize("value", [0.0, 0.5, 0.99])
    @pytest.mark.parametrize("name", ALL_PATTERNS)
    def test_constant_draws(self, name, value, make_constant_rng):
        """Test that draws at the edges of their ranges stay in bounds."""
        buffer = PixelBuffer.allocate(48, 32)
        pattern_registry.generate(name, buffer, rng=make_constant_rng(value))
        assert (buffer.pixels[..., 3] == 255).all()

    @pytest.mark.parametrize("name", ALL_PATTERNS)
    def test_single_pixel_buffer(self, name):
        """Test that a 1x1 buffer is handled."""
        buffer = PixelBuffer.allocate(1, 1)
        pattern_registry.generate(name, buffer, rng=make_rng(5))
        assert buffer.get(0, 0)[3] == 255

    def test_default_rng_when_omitted(self):
        """Test that omitting the random source still fills the buffer."""
        buffer = PixelBuffer.allocate(16, 16)
        noise(buffer, 16, 16)
        assert set(np.unique(buffer.pixels[..., 0])) <= {0, 255}


class TestBasicPatterns:
    """Tests for the basic family."""

    def test_noise_is_binary(self):
        """Test that noise writes only black and white gray pixels."""
        buffer = PixelBuffer.allocate(32, 32)
        noise(buffer, 32, 32, make_rng(1))
        rgb = buffer.pixels[..., :3]
        assert set(np.unique(rgb)) == {0, 255}
        assert (rgb[..., 0] == rgb[..., 1]).all()

    def test_noise_threshold_is_strict(self, make_constant_rng):
        """Test that a draw of exactly 0.5 is black."""
        buffer = PixelBuffer.allocate(4, 4)
        noise(buffer, 4, 4, make_constant_rng(0.5))
        assert not buffer.pixels[..., :3].any()

    def test_six_wave_variants(self):
        """Test that all wave variants are available."""
        assert list(WAVE_VARIANTS) == [
            "radial",
            "linear",
            "standing",
            "interference",
            "modulated",
            "ripple",
        ]


class TestAbstractPatterns:
    """Tests for the abstract family."""

    def test_abstract_art_origin_off(self, constant_rng):
        """Test that a zero phase leaves the origin below threshold."""
        buffer = PixelBuffer.allocate(4, 4)
        abstract_art(buffer, 4, 4, constant_rng)
        assert buffer.get(0, 0) == (0, 0, 0, 255)

    def test_flow_field_origin_white(self, constant_rng):
        """Test that the origin carries no stroke at zero phase."""
        buffer = PixelBuffer.allocate(8, 8)
        flow_field(buffer, 8, 8, constant_rng)
        assert buffer.get(0, 0) == (255, 255, 255, 255)

    def test_ink_blot_center_is_black(self, constant_rng):
        """Test that a blot center is inked."""
        buffer = PixelBuffer.allocate(16, 16)
        ink_blot(buffer, 16, 16, constant_rng)
        assert buffer.get(0, 0) == (0, 0, 0, 255)

    def test_fold_angle_range(self):
        """Test that folded angles stay within half a segment."""
        angles = np.linspace(-10, 10, 401)
        for segments in (6, 8, 11):
            folded = fold_angle(angles, segments)
            assert folded.min() >= 0
            assert folded.max() <= math.pi / segments + 1e-12

    def test_fold_angle_mirrors(self):
        """Test that angles equidistant from a segment edge fold together."""
        segment = 2 * math.pi / 6
        assert float(fold_angle(segment - 0.1, 6)) == pytest.approx(float(fold_angle(0.1, 6)))
    @pytest.mark.parametrize("value, segments", [(0.0, 6), (0.99, 11)])
    def test_kaleidoscope_segment_range(self, value, segments, make_constant_rng, caplog):
        """Test that the segment count spans 6 to 11."""
        buffer = PixelBuffer.allocate(16, 16)
        with caplog.at_level(logging.DEBUG, logger="patternforge.patterns.abstract"):
            kaleidoscope(buffer, 16, 16, make_constant_rng(value))
        assert f"kaleidoscope: {segments} segments" in caplog.text

    def test_paint_splash_inks_rear_wedge(self, make_constant_rng):
        """Test that pixels behind the splash direction are inked."""
        buffer = PixelBuffer.allocate(40, 40)
        paint_splash(buffer, 40, 40, make_constant_rng(0.5))
        assert buffer.get(15, 20)[:3] == (0, 0, 0)
        assert buffer.get(25, 20)[:3] == (0, 0, 0)



class TestCosmicPatterns:
    """Tests for the cosmic family."""

    def test_black_hole_center_is_black(self):
        """Test that the event horizon is pure black."""
        buffer = PixelBuffer.allocate(40, 40)
        black_hole(buffer, 40, 40, make_rng(3))
        assert buffer.get(20, 20) == (0, 0, 0, 255)

    def test_planets_shading_and_background(self, constant_rng):
        """Test planet center brightness and the untouched background."""
        buffer = PixelBuffer.allocate(48, 32)
        planets(buffer, 48, 32, constant_rng)
        assert buffer.get(0, 0)[:3] == (100, 100, 100)
        assert buffer.get(47, 31)[:3] == (20, 20, 20)

    def test_starfield_single_star(self, constant_rng):
        """Test that one radius-1 star lights only its center pixel."""
        buffer = PixelBuffer.allocate(48, 32)
        starfield(buffer, 48, 32, constant_rng)
        assert buffer.get(0, 0)[:3] == (150, 150, 150)
        assert buffer.get(1, 0)[:3] == (0, 0, 0)
        assert buffer.get(0, 1)[:3] == (0, 0, 0)
        assert buffer.pixels[..., :3].sum() == 150 * 3

    def test_draw_star_keeps_brighter_pixels(self, small_buffer):
        """Test that stamping never darkens a pixel."""
        small_buffer.set(10, 10, 200, 200, 200)
        draw_star(small_buffer, 10, 10, 100.0, 2)
        assert small_buffer.get(10, 10)[:3] == (200, 200, 200)
        assert small_buffer.get(11, 10)[:3] == (50, 50, 50)
        assert small_buffer.get(13, 10)[:3] == (0, 0, 0)

    def test_draw_star_clips_at_edge(self, small_buffer):
        """Test that a star off the corner only writes in-bounds pixels."""
        draw_star(small_buffer, 0, 0, 255.0, 3)
        assert small_buffer.get(0, 0)[:3] == (255, 255, 255)
        draw_star(small_buffer, -10, -10, 255.0, 3)
    def test_galaxy_core_and_arm(self, make_constant_rng):
        """Test the inverted core glow and a saturated arm pixel."""
        buffer = PixelBuffer.allocate(40, 40)
        galaxy(buffer, 40, 40, make_constant_rng(0.5))
        assert buffer.get(20, 20) == (46, 46, 46, 255)
        assert buffer.get(10, 20) == (0, 0, 0, 255)

    def test_wormhole_tunnel_and_surround(self, make_constant_rng):
        """Test a black tunnel center and a white far field."""
        small = PixelBuffer.allocate(40, 40)
        wormhole(small, 40, 40, make_constant_rng(0.5))
        assert small.get(20, 20)[:3] == (0, 0, 0)

        wide = PixelBuffer.allocate(1500, 20)
        wormhole(wide, 1500, 20, make_constant_rng(0.5))
        assert wide.get(0, 10)[:3] == (255, 255, 255)

    def test_nebula_background_is_black(self, make_constant_rng):
        """Test a saturated cloud core with nothing drawn outside it."""
        buffer = PixelBuffer.allocate(1200, 20)
        nebula(buffer, 1200, 20, make_constant_rng(0.5))
        assert buffer.get(600, 10)[:3] == (255, 255, 255)
        assert buffer.get(0, 10) == (0, 0, 0, 255)
        assert set(np.unique(buffer.pixels[..., 0])) == {0, 255}



class TestGlitchPatterns:
    """Tests for the glitch family."""

    def test_sort_row_segment(self, noisy_buffer):
        """Test that a sorted row run is a permutation in luma order."""
        before = noisy_buffer.pixels[5, 3:21, :3].copy()
        rest = noisy_buffer.pixels[5, 21:, :3].copy()
        sort_row_segment(noisy_buffer, 5, 3, 20)
        after = noisy_buffer.pixels[5, 3:21, :3]

        assert _rows(after) == _rows(before)
        assert (np.diff(luma(after)) >= 0).all()
        assert np.array_equal(noisy_buffer.pixels[5, 21:, :3], rest)

    def test_sort_column_segment(self, noisy_buffer):
        """Test that a sorted column run is a permutation in luma order."""
        before = noisy_buffer.pixels[:, 7, :3].copy()
        sort_column_segment(noisy_buffer, 7, 0, 29)
        after = noisy_buffer.pixels[:, 7, :3]

        assert _rows(after) == _rows(before)
        assert (np.diff(luma(after)) >= 0).all()

    def test_sort_block_raster_order(self, noisy_buffer):
        """Test that a clipped block is sorted left to right, top to bottom."""
        before = noisy_buffer.pixels[25:30, 35:40, :3].copy()
        untouched = noisy_buffer.pixels[:25].copy()

        sort_block(noisy_buffer, 35, 25, 10, 8)
        after = noisy_buffer.pixels[25:30, 35:40, :3]

        assert _rows(after) == _rows(before)
        assert (np.diff(luma(after.reshape(-1, 3))) >= 0).all()
        assert np.array_equal(noisy_buffer.pixels[:25], untouched)

    def test_corrupt_data_repeated_flips(self, constant_rng):
        """Test that an odd number of flips on one channel inverts it."""
        buffer = PixelBuffer.allocate(48, 32)
        corrupt_data(buffer, 48, 32, constant_rng)
        assert buffer.get(0, 0) == (255, 0, 0, 255)

    def test_scan_lines_darken_rows(self, constant_rng):
        """Test that scan lines darken every spacing-th row."""
        buffer = PixelBuffer.allocate(48, 32)
        scan_lines(buffer, 48, 32, constant_rng)
        assert buffer.get(0, 1)[:3] == (120, 120, 120)
        assert buffer.get(0, 0)[0] < 120
        assert buffer.get(0, 3)[0] == buffer.get(0, 0)[0]

    def test_pixel_sort_final_block_sorted(self, make_constant_rng):
        """Test that sorting only permutes the gradient and the last block is ordered."""
        buffer = PixelBuffer.allocate(48, 32)
        pixel_sort(buffer, 48, 32, make_constant_rng(0.5))

        base = PixelBuffer.allocate(48, 32)
        xs, ys = coordinate_grid(48, 32)
        write_rgb(base, xs / 48 * 255, ys / 32 * 255, (xs / 48 * 255 + ys / 32 * 255) / 2)

        assert not np.array_equal(buffer.pixels, base.pixels)
        assert _rows(buffer.pixels[..., :3]) == _rows(base.pixels[..., :3])
        block = buffer.pixels[16:31, 24:48, :3].reshape(-1, 3)
        assert (np.diff(luma(block)) >= 0).all()

    def test_static_interference_dropout_draws(self, constant_rng):
        """Test that dropouts draw 5% of the pixels and black wins below 0.7."""
        buffer = PixelBuffer.allocate(48, 32)
        static_interference(buffer, 48, 32, constant_rng)
        assert constant_rng.sizes.count((77,)) == 3
        assert buffer.get(0, 0) == (0, 0, 0, 255)

    def test_datamosh_copies_in_place(self, make_scripted_rng):
        """Test that a leftward copy re-reads pixels it already overwrote."""
        # 20 glitches; the first moves x 10..19 of rows 0..4 by -5, the rest
        # fall entirely outside the buffer
        rng = make_scripted_rng([0.0, 0.25, 0.0, 0.0, 0.0, 0.4], fallback=0.0, field=0.5)
        buffer = PixelBuffer.allocate(40, 40)
        datamosh(buffer, 40, 40, rng)

        base_row = to_bytes(100 + np.sin(np.arange(40) * 0.1) * 50)
        assert buffer.get(10, 0)[0] == base_row[5]
        assert buffer.get(15, 0)[0] == base_row[5]
        assert buffer.get(19, 0)[0] == base_row[9]
        assert buffer.get(20, 0)[0] == base_row[20]


class TestArchitecturalPatterns:
    """Tests for the architectural family."""

    def test_gothic_tracery_threshold(self, make_constant_rng):
        """Test that tracery is drawn only when its draw exceeds 0.5."""
        with_tracery = PixelBuffer.allocate(200, 200)
        gothic(with_tracery, 200, 200, make_constant_rng(0.99))
        assert with_tracery.get(16, 188)[:3] == (0, 0, 0)

        without = PixelBuffer.allocate(200, 200)
        gothic(without, 200, 200, make_constant_rng(0.0))
        assert without.get(172, 188)[:3] == (80, 80, 80)

    def test_bridges_tower_threshold(self, make_constant_rng):
        """Test that the cable-stayed tower appears only above 0.5."""
        with_tower = PixelBuffer.allocate(100, 100)
        bridges(with_tower, 100, 100, make_constant_rng(0.99))
        assert with_tower.get(50, 30)[:3] == (60, 60, 60)
        assert with_tower.get(50, 28)[:3] == (40, 40, 40)

        without = PixelBuffer.allocate(100, 100)
        bridges(without, 100, 100, make_constant_rng(0.0))
        assert without.get(50, 30)[:3] == (180, 200, 220)

    def test_cityscape_windows_unlit_at_threshold(self, make_constant_rng):
        """Test that a draw of exactly 0.3 leaves windows dark."""
        rng = make_constant_rng(0.3)
        buffer = PixelBuffer.allocate(460, 100)
        cityscape(buffer, 460, 100, rng)
        assert rng.calls == 85


class TestGeometricPatterns:
    """Tests for the geometric family."""

    def test_cellular_majority_rule(self, make_scripted_rng):
        """Test that interior dead cells with enough live neighbours revive."""
        field = np.full((3, 4), 0.9)
        field[0, 0] = field[1, 1] = field[1, 2] = 0.0
        buffer = PixelBuffer.allocate(4, 3)
        cellular(buffer, 4, 3, make_scripted_rng(field=field))

        assert buffer.get(0, 0)[:3] == (0, 0, 0)
        assert buffer.get(1, 1)[:3] == (255, 255, 255)
        assert buffer.get(2, 1)[:3] == (255, 255, 255)
        assert (buffer.pixels[..., :3] == 255).sum() == 11 * 3

    def test_fractal_inside_and_escaped(self, make_constant_rng):
        """Test a bounded point is black and an escaped one white."""
        buffer = PixelBuffer.allocate(40, 40)
        fractal(buffer, 40, 40, make_constant_rng(0.5))
        assert buffer.get(20, 20)[:3] == (0, 0, 0)
        assert buffer.get(0, 0)[:3] == (255, 255, 255)

    def test_voronoi_seed_count(self, make_constant_rng):
        """Test that tiny images get no seeds and larger ones take the seed color."""
        tiny = PixelBuffer.allocate(48, 32)
        voronoi(tiny, 48, 32, make_constant_rng(0.99))
        assert not tiny.pixels[..., :3].any()

        white = PixelBuffer.allocate(100, 100)
        voronoi(white, 100, 100, make_constant_rng(0.99))
        assert (white.pixels[..., :3] == 255).all()

        black = PixelBuffer.allocate(100, 100)
        voronoi(black, 100, 100, make_constant_rng(0.5))
        assert not black.pixels[..., :3].any()

    def test_spiral_passes_through_center(self, constant_rng):
        """Test that spirals start at the center on a white background."""
        buffer = PixelBuffer.allocate(40, 40)
        spiral(buffer, 40, 40, constant_rng)
        assert buffer.get(20, 20)[:3] == (0, 0, 0)
        assert buffer.get(0, 0)[:3] == (255, 255, 255)

    def test_honeycomb_outline_and_fill(self, make_constant_rng):
        """Test outlines on white and filled cells above 0.7."""
        outlined = PixelBuffer.allocate(48, 32)
        honeycomb(outlined, 48, 32, make_constant_rng(0.0))
        assert outlined.get(0, 0)[:3] == (255, 255, 255)
        assert outlined.get(10, 0)[:3] == (0, 0, 0)

        filled = PixelBuffer.allocate(48, 32)
        honeycomb(filled, 48, 32, make_constant_rng(0.99))
        assert filled.get(0, 0)[:3] == (0, 0, 0)

    def test_crystals_outline(self, constant_rng):
        """Test a crystal edge pixel against the white background."""
        buffer = PixelBuffer.allocate(48, 32)
        crystals(buffer, 48, 32, constant_rng)
        assert buffer.get(0, 0)[:3] == (255, 255, 255)
        assert buffer.get(21, 0)[:3] == (0, 0, 0)

    def test_mandala_center(self, constant_rng):
        """Test that motifs meet at the center and the corner stays blank."""
        buffer = PixelBuffer.allocate(48, 32)
        mandala(buffer, 48, 32, constant_rng)
        assert buffer.get(24, 16)[:3] == (0, 0, 0)
        assert buffer.get(0, 0)[:3] == (255, 255, 255)


class TestNaturalPatterns:
    """Tests for the natural family."""

    def test_lightning_bolt_path(self, make_constant_rng):
        """Test the lit bolt and its glow against the dark sky."""
        buffer = PixelBuffer.allocate(48, 32)
        lightning(buffer, 48, 32, make_constant_rng(0.5))
        assert buffer.get(20, 16)[:3] == (255, 255, 255)
        assert buffer.get(20, 17)[:3] == (255, 255, 255)
        assert buffer.get(20, 19)[:3] == (0, 0, 0)
        assert buffer.get(2, 16)[:3] == (0, 0, 0)

    def test_cloud_origin_clear(self, constant_rng):
        """Test that zero cloudiness leaves the origin black."""
        buffer = PixelBuffer.allocate(32, 32)
        cloud(buffer, 32, 32, constant_rng)
        assert buffer.get(0, 0)[:3] == (0, 0, 0)

    def test_terrain_fills_below_profile(self, constant_rng):
        """Test sky above the ridge and ground below it."""
        buffer = PixelBuffer.allocate(48, 100)
        terrain(buffer, 48, 100, constant_rng)
        assert buffer.get(0, 19)[:3] == (255, 255, 255)
        assert buffer.get(0, 20)[:3] == (0, 0, 0)

    def test_organic_growth_from_origin(self, constant_rng):
        """Test that growth starting at the origin leaves the far corner blank."""
        buffer = PixelBuffer.allocate(48, 32)
        organic(buffer, 48, 32, constant_rng)
        assert buffer.get(0, 0)[:3] == (0, 0, 0)
        assert buffer.get(47, 31)[:3] == (255, 255, 255)

    def test_faces_outline(self, constant_rng):
        """Test face outline pixels and a blank cheek."""
        buffer = PixelBuffer.allocate(100, 80)
        faces(buffer, 100, 80, constant_rng)
        assert buffer.get(60, 0)[:3] == (0, 0, 0)
        assert buffer.get(0, 36)[:3] == (0, 0, 0)
        assert buffer.get(30, 20)[:3] == (255, 255, 255)

    def test_bodies_figure(self, constant_rng):
        """Test a figure pixel and the blank background."""
        buffer = PixelBuffer.allocate(60, 60)
        bodies(buffer, 60, 60, constant_rng)
        assert buffer.get(13, 12)[:3] == (0, 0, 0)
        assert buffer.get(40, 30)[:3] == (255, 255, 255)


class TestTexturePatterns:
    """Tests for the texture family."""

    def test_marble_origin(self, constant_rng):
        """Test that the zero-phase vein field is dark at the origin."""
        buffer = PixelBuffer.allocate(16, 16)
        marble(buffer, 16, 16, constant_rng)
        assert buffer.get(0, 0)[:3] == (0, 0, 0)

    def test_wood_center_ring(self, constant_rng):
        """Test the center of the ring pattern."""
        buffer = PixelBuffer.allocate(40, 40)
        wood(buffer, 40, 40, constant_rng)
        assert buffer.get(20, 20)[:3] == (255, 255, 255)

    def test_lace_motif(self, constant_rng):
        """Test a flower petal pixel and the blank cell center."""
        buffer = PixelBuffer.allocate(100, 100)
        lace(buffer, 100, 100, constant_rng)
        assert buffer.get(43, 25)[:3] == (0, 0, 0)
        assert buffer.get(25, 25)[:3] == (255, 255, 255)


class TestStructuralPatterns:
    """Tests for the structural family."""

    def test_maze_rooms_and_corridors(self, make_constant_rng):
        """Test rooms, walls and a corridor opened above 0.5."""
        closed = PixelBuffer.allocate(48, 32)
        maze(closed, 48, 32, make_constant_rng(0.0))
        assert closed.get(0, 0)[:3] == (255, 255, 255)
        assert closed.get(5, 5)[:3] == (255, 255, 255)
        assert closed.get(9, 5)[:3] == (0, 0, 0)

        open_ = PixelBuffer.allocate(48, 32)
        maze(open_, 48, 32, make_constant_rng(0.99))
        assert open_.get(9, 5)[:3] == (255, 255, 255)

    def test_circuit_layers(self, constant_rng):
        """Test trace, component, via and board colors."""
        buffer = PixelBuffer.allocate(48, 32)
        circuit(buffer, 48, 32, constant_rng)
        assert buffer.get(0, 5)[:3] == (200, 150, 50)
        assert buffer.get(20, 15)[:3] == (90, 90, 90)
        assert buffer.get(0, 0)[:3] == (180, 180, 180)
        assert buffer.get(40, 25)[:3] == (20, 60, 20)

    def test_neural_node_and_background(self, constant_rng):
        """Test an impulse over a node, the node rim and the background."""
        buffer = PixelBuffer.allocate(48, 32)
        neural(buffer, 48, 32, constant_rng)
        assert buffer.get(0, 0)[:3] == (255, 255, 255)
        assert buffer.get(4, 0)[:3] == (200, 255, 255)
        assert buffer.get(6, 0)[:3] == (20, 20, 40)
