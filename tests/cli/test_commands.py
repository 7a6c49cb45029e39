"""
Tests for the which, config and cache command implementations.
"""

from unittest.mock import patch

import pytest

from bukit.cli.parser import CLI
from bukit.cli.utils import format_size
from bukit.toolchain.cache import ToolCache


@pytest.fixture
def project(tmp_path):
    """Project whose bu.star points buck2 at a local file:// artifact."""
    artifact = tmp_path / "dist" / "buck2"
    artifact.parent.mkdir()
    artifact.write_bytes(b"local buck2")

    root = tmp_path / "project"
    root.mkdir()
    (root / "bu.star").write_text(
        "bu.register_tool(\n"
        '    name = "buck2",\n'
        f'    url_template = "{artifact.as_uri()}",\n'
        '    strategies = ["url"],\n'
        ")\n"
    )
    return root


def _run(tmp_path, project_root, *argv):
    return CLI().run(
        [
            "--cache-dir",
            str(tmp_path / "cache"),
            "--project-root",
            str(project_root),
            *argv,
        ]
    )


class TestWhich:
    """Tests for `bu which`."""

    def test_prints_resolved_path(self, tmp_path, project, capsys):
        result = _run(tmp_path, project, "which", "buck2", "v1", "--offline")

        cache = ToolCache(tmp_path / "cache")
        assert result == 0
        assert capsys.readouterr().out.strip() == str(cache.tool_path("buck2", "v1"))
        assert cache.is_installed("buck2", "v1")

    def test_unresolvable_tool(self, tmp_path, project, capsys):
        with patch("shutil.which", return_value=None):
            result = _run(tmp_path, project, "which", "ruff", "--offline")

        assert result == 1
        assert capsys.readouterr().out == ""

    def test_explicit_config(self, tmp_path, capsys):
        artifact = tmp_path / "ruff-bin"
        artifact.write_bytes(b"ruff")
        config = tmp_path / "tools.yaml"
        config.write_text(
            f"tools:\n  ruff:\n    url_template: {artifact.as_uri()}\n"
            "    strategies: [url]\n"
        )

        result = _run(
            tmp_path, tmp_path, "--config", str(config), "which", "ruff", "0.4"
        )

        assert result == 0
        assert capsys.readouterr().out.strip().endswith(
            str(ToolCache(tmp_path / "cache").tool_path("ruff", "0.4"))
        )

    def test_broken_config(self, tmp_path, capsys):
        (tmp_path / "bu.star").write_text("import os\n")

        assert _run(tmp_path, tmp_path, "which", "buck2") == 1


class TestConfigCommand:
    """Tests for `bu config`."""

    def test_defined_tool(self, tmp_path, project, capsys):
        assert _run(tmp_path, project, "config", "buck2") == 0

        out = capsys.readouterr().out
        assert "Tool:        buck2" in out
        assert "Strategies:  url" in out
        assert "bu.star" in out

    def test_undefined_tool(self, tmp_path, project, capsys):
        assert _run(tmp_path, project, "config", "ruff") == 0
        assert "Strategies:  host (no definition)" in capsys.readouterr().out

    def test_no_config_file(self, tmp_path, capsys):
        assert _run(tmp_path, tmp_path, "config", "ruff") == 0
        assert "Config file: (none)" in capsys.readouterr().out


class TestCacheCommands:
    """Tests for `bu cache list` and `bu cache clean`."""

    def test_list_empty(self, tmp_path, capsys):
        assert _run(tmp_path, tmp_path, "cache", "list") == 0
        assert "Cache is empty" in capsys.readouterr().out

    def test_list_entries(self, tmp_path, capsys):
        cache = ToolCache(tmp_path / "cache")
        cache.install("buck2", "v1", lambda d: d.write_bytes(b"x" * 2048))

        assert _run(tmp_path, tmp_path, "cache", "list") == 0

        out = capsys.readouterr().out
        assert "buck2@v1" in out
        assert "2.0 KB" in out
        assert "Total: 1 tool(s)" in out

    def test_clean(self, tmp_path, capsys):
        cache = ToolCache(tmp_path / "cache")
        cache.install("buck2", "v1", lambda d: d.write_bytes(b"x"))

        assert _run(tmp_path, tmp_path, "cache", "clean") == 0

        assert cache.list_installed() == []
        assert "Cleaned cache" in capsys.readouterr().out

    def test_clean_missing_cache(self, tmp_path, capsys):
        assert _run(tmp_path, tmp_path, "cache", "clean") == 0
        assert "Cache is already empty" in capsys.readouterr().out


class TestFormatSize:
    """Tests for format_size."""

    @pytest.mark.parametrize(
        "size,expected",
        [
            (0, "0 B"),
            (500, "500 B"),
            (1024, "1.0 KB"),
            (2048, "2.0 KB"),
            (1536 * 1024, "1.5 MB"),
            (3 * 1024**3, "3.0 GB"),
        ],
    )
    def test_format(self, size, expected):
        assert format_size(size) == expected
