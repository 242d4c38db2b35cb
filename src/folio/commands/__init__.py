"""Subcommand modules for folio.

Provides register_commands() which uses deferred imports to keep
``folio --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from folio.commands.docs import docs
    from folio.commands.likes import likes

    cli.add_command(docs)
    cli.add_command(likes)

    # --- Standalone commands ---
    from folio.commands.render import build, render

    cli.add_command(render)
    cli.add_command(build)
