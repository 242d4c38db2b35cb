"""Tests for the render and build commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from folio.cli import cli


@pytest.mark.usefixtures("_isolated_site")
class TestRenderCommand:
    def test_prints_html(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["render", "blog", "hello-world"])
        assert result.exit_code == 0
        assert '<div class="link-card-wrap">' not in result.output
        assert '<li><a class="link-card link-card--light"' in result.output

    def test_theme_option(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["render", "blog", "second", "--theme", "dark"])
        assert result.exit_code == 0
        assert '<div class="link-card-wrap"><a class="link-card link-card--dark" href="/guide">' in result.output

    def test_theme_from_config(self, cli_runner: CliRunner, site_root: Path) -> None:
        (site_root / "folio.toml").write_text('[render]\ntheme = "dark"\n')
        result = cli_runner.invoke(cli, ["render", "blog", "second"])
        assert "link-card--dark" in result.output

    def test_output_file(self, cli_runner: CliRunner, site_root: Path) -> None:
        result = cli_runner.invoke(cli, ["render", "blog", "second", "-o", "out/second.html"])
        assert result.exit_code == 0
        html = (site_root / "out" / "second.html").read_text(encoding="utf-8")
        assert "link-card" in html

    def test_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "render", "blog", "second"])
        data = json.loads(result.output)
        assert data["op"] == "render_document"
        assert "link-card" in data["data"]["html"]

    def test_missing(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["render", "blog", "ghost"])
        assert result.exit_code == 1


@pytest.mark.usefixtures("_isolated_site")
class TestBuildCommand:
    def test_builds(self, cli_runner: CliRunner, site_root: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "build", "public"])
        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["pages"] == 3
        assert (site_root / "public" / "blog" / "undated.html").is_file()
