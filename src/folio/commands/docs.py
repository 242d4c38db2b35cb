"""Command group: list, show, and create documents in a collection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from folio.commands._base import FolioGroup, collection_argument

if TYPE_CHECKING:
    from folio.commands._context import AppContext
    from folio.domain.types import CollectionName

_DOCS_EXAMPLES = """\
  folio docs list blog
  folio docs list research --tag ml --limit 5
  folio docs get blog hello-world
  folio docs new blog "Hello World" --tag intro --tag meta"""


@click.group(cls=FolioGroup, examples=_DOCS_EXAMPLES)
@click.pass_obj
def docs(app: AppContext) -> None:
    """Browse and create markdown documents."""


@docs.command(
    "list",
    examples="""\
  folio docs list blog
  folio docs list resources --tag python
  folio --json docs list research --limit 3""",
)
@collection_argument
@click.option("--tag", default=None, help="Only documents carrying this tag.")
@click.option("--limit", default=None, type=click.IntRange(min=0), help="Max results.")
@click.pass_obj
def list_cmd(
    app: AppContext,
    collection: CollectionName,
    tag: str | None,
    limit: int | None,
) -> None:
    """List documents in a collection, newest first."""
    app.emit(app.service.list_documents(collection, tag=tag, limit=limit))


@docs.command(
    examples="""\
  folio docs get blog hello-world
  folio --json docs get research attention-notes"""
)
@collection_argument
@click.argument("slug")
@click.pass_obj
def get(app: AppContext, collection: CollectionName, slug: str) -> None:
    """Show one document's header fields and body."""
    app.emit(app.service.get_document(collection, slug))


@docs.command(
    examples="""\
  folio docs new blog "Hello World"
  folio docs new resources "Reading List" --slug reading --date 2024-05-01
  folio docs new research "Notes" --description "Working notes" --tag ml --tag nlp"""
)
@collection_argument
@click.argument("title")
@click.option("--slug", default=None, help="File name stem (defaults to the slugified title).")
@click.option("--date", "date_", default=None, help="Publication date (defaults to today).")
@click.option("--description", default=None, help="One-line summary.")
@click.option("--tag", "tags", multiple=True, help="Tag (repeatable).")
@click.pass_obj
def new(
    app: AppContext,
    collection: CollectionName,
    title: str,
    slug: str | None,
    date_: str | None,
    description: str | None,
    tags: tuple[str, ...],
) -> None:
    """Create a new document with a header block."""
    app.emit(
        app.service.new_document(
            collection,
            title,
            slug=slug,
            date=date_,
            description=description,
            tags=tags,
        )
    )
