"""Commands: render one document, or build the whole site to HTML."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from folio.commands._base import FolioCommand, collection_argument, theme_option

if TYPE_CHECKING:
    from folio.commands._context import AppContext
    from folio.domain.types import CollectionName, Theme


@click.command(
    cls=FolioCommand,
    examples="""\
  folio render blog hello-world
  folio render blog hello-world --theme dark -o hello.html
  folio --json render resources reading-list""",
)
@collection_argument
@click.argument("slug")
@theme_option
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the HTML to a file instead of stdout.",
)
@click.pass_obj
def render(
    app: AppContext,
    collection: CollectionName,
    slug: str,
    theme: Theme | None,
    output: Path | None,
) -> None:
    """Render a document body to themed HTML with link cards."""
    result = app.service.render_document(
        collection,
        slug,
        theme=theme,
    )
    if not result.ok or not app.human_output:
        app.emit(result)
        return

    html = result.data["html"]
    if output is None:
        click.echo(html)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html + "\n", encoding="utf-8")
    click.echo(f"Wrote {output}")


@click.command(
    cls=FolioCommand,
    examples="""\
  folio build public
  folio build dist --theme dark""",
)
@click.argument("out_dir", type=click.Path(file_okay=False, path_type=Path))
@theme_option
@click.pass_obj
def build(app: AppContext, out_dir: Path, theme: Theme | None) -> None:
    """Render every collection to static HTML pages."""
    app.emit(app.service.build_site(out_dir, theme=theme))
