"""Integration tests for the patternforge command-line interface."""

from __future__ import annotations

import pytest

from patternforge import cli


@pytest.fixture(autouse=True)
def _isolated_outputs(monkeypatch, test_config):
    """Point the CLI's global config at the test configuration."""
    monkeypatch.setattr(cli, "config", test_config)
    monkeypatch.setattr("patternforge.core.generator.default_config", test_config)


class TestListCommand:
    """Test ``patternforge list``."""

    def test_list_all(self, capsys):
        """All categories are printed."""
        assert cli.main(["list"]) == 0
        out = capsys.readouterr().out
        assert "basic:" in out
        assert "glitch:" in out
        assert "static_interference" in out

    def test_list_category(self, capsys):
        """A single category can be listed."""
        assert cli.main(["list", "--category", "cosmic"]) == 0
        out = capsys.readouterr().out
        assert "blackhole" in out
        assert "noise" not in out

    def test_list_texture_category(self, capsys):
        """The texture family is listed."""
        assert cli.main(["list", "--category", "texture"]) == 0
        out = capsys.readouterr().out
        assert "marble" in out
        assert "lace" in out

    def test_list_unknown_category(self, capsys):
        """Unknown categories return a non-zero status."""
        assert cli.main(["list", "--category", "plasma"]) == 1
        assert "ERROR" in capsys.readouterr().out


class TestCatalogCommand:
    """Test ``patternforge catalog``."""

    def test_catalog(self, capsys):
        """The full catalog is printed and in sync."""
        assert cli.main(["catalog"]) == 0
        out = capsys.readouterr().out
        assert "Total: 47 patterns" in out
        assert "[x] Galaxy" in out
        assert "[x] Voronoi" in out
        assert "geometric (7/7)" in out
        assert "[ ]" not in out

    def test_catalog_pending(self, capsys):
        """--pending reports that no entries are left unimplemented."""
        assert cli.main(["catalog", "--pending"]) == 0
        out = capsys.readouterr().out
        assert "Galaxy" not in out
        assert "Voronoi" not in out
        assert "0 pending of 47" in out


class TestRenderCommand:
    """Test ``patternforge render``."""

    def test_render_to_output(self, capsys, temp_dir):
        """Rendering writes the requested file and prints its path."""
        target = temp_dir / "galaxy.png"
        status = cli.main(
            ["render", "galaxy", "--width", "32", "--height", "24", "--seed", "1", "-o", str(target)]
        )
        assert status == 0
        assert target.exists()
        assert str(target) in capsys.readouterr().out

    def test_render_color(self, temp_dir):
        """--color is accepted."""
        target = temp_dir / "ink.png"
        assert cli.main(["render", "ink", "--width", "16", "--height", "16", "--color", "-o", str(target)]) == 0
        assert target.exists()

    def test_render_unknown_pattern(self, capsys):
        """Unknown patterns print an error and return 1."""
        assert cli.main(["render", "plasma"]) == 1
        out = capsys.readouterr().out
        assert out.startswith("ERROR: Pattern 'plasma' not found")

    def test_render_over_budget(self, capsys):
        """Oversized requests print an error and return 1."""
        assert cli.main(["render", "noise", "--width", "1000", "--height", "1000"]) == 1
        assert "exceeds maximum" in capsys.readouterr().out
