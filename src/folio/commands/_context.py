"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy service construction and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from folio.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from folio.config.settings import FolioSettings
    from folio.services.content import ContentService
    from folio.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The content service is created on first use so ``--help`` and
    ``--version`` never touch the content directory.
    """

    def __init__(self, settings: FolioSettings) -> None:
        self.settings = settings
        self._service: ContentService | None = None

        from folio.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            log_json=settings.log_json,
            site_root=settings.site_root,
        )

    @property
    def service(self) -> ContentService:
        if self._service is None:
            from folio.services.content import ContentService

            self._service = ContentService(self.settings)
        return self._service

    @property
    def human_output(self) -> bool:
        return not (self.settings.json_output or self.settings.quiet)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings go to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
