"""Click plumbing shared by folio's command modules.

Commands and groups built on :class:`FolioCommand` / :class:`FolioGroup`
take an ``examples`` string that an eager ``--examples`` flag prints.
The parameter decorators hand command bodies domain values
(:class:`CollectionName`, :class:`Theme`, a like state) instead of raw
strings, so no command converts its own arguments.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import click

from folio.domain.types import CollectionName, Theme

F = TypeVar("F", bound=Callable[..., Any])


class ExamplesMixin:
    """Adds ``--examples`` to a Click command constructed with ``examples=``."""

    params: list[click.Parameter]

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._print_examples,
                    help="Show usage examples and exit.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.secho(f"{ctx.command_path} examples:", bold=True)
        click.echo(self.examples)
        ctx.exit(0)


class FolioCommand(ExamplesMixin, click.Command):
    """A folio leaf command."""


class FolioGroup(ExamplesMixin, click.Group):
    """A folio command group. Subcommands are :class:`FolioCommand` by default."""

    command_class = FolioCommand


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------


def _to_collection(_ctx: click.Context, _param: click.Parameter, value: str) -> CollectionName:
    return CollectionName(value)


def _to_theme(_ctx: click.Context, _param: click.Parameter, value: str | None) -> Theme | None:
    return None if value is None else Theme(value)


def _to_like_state(_ctx: click.Context, _param: click.Parameter, value: str | None) -> bool | None:
    return None if value is None else value == "like"


def collection_argument(f: F) -> F:
    """Positional ``COLLECTION``, passed on as a :class:`CollectionName`."""
    return click.argument(
        "collection",
        type=click.Choice([c.value for c in CollectionName]),
        callback=_to_collection,
    )(f)


def theme_option(f: F) -> F:
    """``--theme`` override, passed on as a :class:`Theme` or None."""
    return click.option(
        "--theme",
        type=click.Choice([t.value for t in Theme]),
        default=None,
        callback=_to_theme,
        help="Override the configured theme.",
    )(f)


def like_state_option(f: F) -> F:
    """``--set like|unlike``, passed on as ``liked``: True, False, or None to flip."""
    return click.option(
        "--set",
        "liked",
        type=click.Choice(["like", "unlike"]),
        default=None,
        callback=_to_like_state,
        help="Set an explicit state instead of flipping.",
    )(f)
