"""Unit tests for the pattern registry."""

import pytest

from patternforge.core.buffer import PixelBuffer
from patternforge.core.contract import pattern_generator
from patternforge.core.registry import PatternRegistry, pattern_registry
from patternforge.core.validation import ValidationError


@pattern_generator
def _solid(buffer, width, height, rng):
    buffer.pixels[...] = (42, 42, 42, 255)


@pattern_generator
def _draws_once(buffer, width, height, rng):
    value = int(rng.random() * 255)
    buffer.pixels[...] = (value, value, value, 255)


class TestPatternRegistry:
    """Tests for an isolated PatternRegistry."""

    @pytest.fixture
    def registry(self):
        reg = PatternRegistry()
        reg.register("solid", _solid, category="basic", description="Flat gray")
        reg.register("draws", _draws_once, category="glitch", multicolor=True)
        return reg

    def test_register_and_list(self, registry):
        """Test that registered ids are listed in order."""
        assert registry.list_available() == ["solid", "draws"]
        assert len(registry) == 2
        assert "solid" in registry
        assert "missing" not in registry

    def test_overwrite(self, registry, caplog):
        """Test that re-registering replaces the entry and warns."""
        registry.register("solid", _draws_once, category="abstract")
        assert registry.get_pattern_category("solid") == "abstract"
        assert registry.list_available() == ["solid", "draws"]
        assert "already registered" in caplog.text

    def test_unknown_pattern_raises_key_error(self, registry):
        """Test that lookups of unknown ids list the available patterns."""
        with pytest.raises(KeyError, match="Available patterns: solid, draws"):
            registry.get_pattern_info("nope")
        with pytest.raises(KeyError):
            registry.generate("nope", PixelBuffer.allocate(2, 2))

    def test_generate_dispatches(self, registry):
        """Test that generate calls the registered function."""
        buffer = PixelBuffer.allocate(3, 2)
        registry.generate("solid", buffer)
        assert buffer.get(2, 1) == (42, 42, 42, 255)

    def test_generate_passes_rng(self, registry, make_constant_rng):
        """Test that the injected random source reaches the generator."""
        rng = make_constant_rng(0.5)
        buffer = PixelBuffer.allocate(2, 2)
        registry.generate("draws", buffer, rng=rng)
        assert rng.calls == 1
        assert buffer.get(0, 0)[:3] == (127, 127, 127)

    def test_categories_and_metadata(self, registry):
        """Test category grouping and multicolor flags."""
        assert registry.categories() == ["basic", "glitch"]
        assert registry.get_patterns_by_category("glitch") == ["draws"]
        assert registry.is_multicolor_candidate("draws") is True
        assert registry.is_multicolor_candidate("solid") is False

    def test_describe(self, registry):
        """Test listing metadata."""
        assert registry.describe("solid") == {
            "name": "solid",
            "category": "basic",
            "multicolor": False,
            "description": "Flat gray",
            "entry_point": "_solid",
        }


class TestGlobalRegistry:
    """Tests for the registrations made by the pattern families."""

    def test_basic_patterns_listed_first(self):
        """Test that listing order starts with the basic family."""
        assert pattern_registry.list_available()[:4] == ["noise", "perlin", "wave", "static"]

    def test_all_implemented_families_registered(self):
        """Test that every implemented category is present."""
        assert pattern_registry.categories() == [
            "basic",
            "geometric",
            "natural",
            "abstract",
            "cosmic",
            "architectural",
            "texture",
            "structural",
            "glitch",
        ]
        assert len(pattern_registry) == 47

    def test_multicolor_candidates(self):
        """Test multicolor flags on a few known patterns."""
        assert pattern_registry.is_multicolor_candidate("galaxy")
        assert pattern_registry.is_multicolor_candidate("flow")
        assert not pattern_registry.is_multicolor_candidate("blackhole")
        assert not pattern_registry.is_multicolor_candidate("ink")
        assert pattern_registry.is_multicolor_candidate("mandala")
        assert pattern_registry.is_multicolor_candidate("faces")
        assert not pattern_registry.is_multicolor_candidate("cellular")
        assert not pattern_registry.is_multicolor_candidate("circuit")

    def test_mismatched_buffer_rejected(self):
        """Test that dispatch validates the buffer against itself."""
        buffer = PixelBuffer.allocate(4, 4)
        buffer.width = 8
        with pytest.raises(ValidationError):
            pattern_registry.generate("noise", buffer)
