"""Command group: read and toggle like counts."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from folio.commands._base import FolioGroup, collection_argument, like_state_option

if TYPE_CHECKING:
    from folio.commands._context import AppContext
    from folio.domain.types import CollectionName

_LIKES_EXAMPLES = """\
  folio likes show blog hello-world second-post
  folio likes toggle blog hello-world
  folio likes toggle blog hello-world --set unlike"""


@click.group(cls=FolioGroup, examples=_LIKES_EXAMPLES)
@click.pass_obj
def likes(app: AppContext) -> None:
    """Show and change like counts."""


@likes.command(
    examples="""\
  folio likes show blog hello-world
  folio --json likes show research a b c"""
)
@collection_argument
@click.argument("slugs", nargs=-1, required=True)
@click.pass_obj
def show(app: AppContext, collection: CollectionName, slugs: tuple[str, ...]) -> None:
    """Show like counts in one batched request."""
    app.emit(app.service.like_status(collection, slugs))


@likes.command(
    examples="""\
  folio likes toggle blog hello-world
  folio likes toggle blog hello-world --set like
  folio likes toggle blog hello-world --set unlike"""
)
@collection_argument
@click.argument("slug")
@like_state_option
@click.pass_obj
def toggle(app: AppContext, collection: CollectionName, slug: str, liked: bool | None) -> None:
    """Flip (or set) whether you like a document."""
    app.emit(app.service.toggle_like(collection, slug, liked=liked))
