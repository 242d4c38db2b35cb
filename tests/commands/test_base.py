"""Tests for the shared command base and parameter decorators."""

from __future__ import annotations

import click
import pytest
from click.testing import CliRunner

from folio.commands._base import (
    FolioCommand,
    FolioGroup,
    collection_argument,
    like_state_option,
    theme_option,
)
from folio.domain.types import CollectionName, Theme


@click.group(cls=FolioGroup, examples="  tool echo blog")
def tool() -> None:
    """Scratch group for exercising the decorators."""


@tool.command()
@collection_argument
@theme_option
@like_state_option
def echo(collection: CollectionName, theme: Theme | None, liked: bool | None) -> None:
    click.echo(f"{collection!r}|{theme!r}|{liked!r}")


@tool.command(examples="  tool plain")
def plain() -> None:
    click.echo("ran")


class TestExamplesFlag:
    def test_group_prints_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(tool, ["--examples"], prog_name="tool")
        assert result.exit_code == 0
        assert result.stdout == "tool examples:\n  tool echo blog\n"

    def test_subcommand_inherits_class(self) -> None:
        assert isinstance(tool.commands["plain"], FolioCommand)

    def test_subcommand_examples_skip_body(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(tool, ["plain", "--examples"], prog_name="tool")
        assert result.exit_code == 0
        assert "tool plain examples:" in result.stdout
        assert "ran" not in result.stdout

    def test_no_flag_without_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(tool, ["echo", "blog", "--examples"])
        assert result.exit_code == 2
        assert "No such option" in result.stderr


class TestParameterDecorators:
    def test_values_arrive_as_domain_types(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(tool, ["echo", "research", "--theme", "dark", "--set", "unlike"])
        assert result.exit_code == 0
        expected = f"{CollectionName.RESEARCH!r}|{Theme.DARK!r}|False"
        assert result.stdout.strip() == expected

    def test_defaults(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(tool, ["echo", "blog"])
        assert result.stdout.strip() == f"{CollectionName.BLOG!r}|None|None"

    @pytest.mark.parametrize("args", [["echo", "podcasts"], ["echo", "blog", "--theme", "sepia"]])
    def test_unknown_choice_rejected(self, cli_runner: CliRunner, args: list[str]) -> None:
        result = cli_runner.invoke(tool, args)
        assert result.exit_code == 2
        assert "Invalid value" in result.stderr
