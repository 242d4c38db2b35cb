"""Logging setup for folio commands.

structlog and plain stdlib loggers share one stderr handler, rendered
either for a terminal or as JSON lines (``--log-json``). The site being
worked on is bound into structlog's context variables, so every line
carries ``site_root``; the loader adds ``collection`` while it runs.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import structlog
from structlog.types import Processor

# Third-party loggers held at WARNING even under --verbose.
QUIET_LOGGERS = ("httpx", "httpcore", "markdown_it")


def _pre_chain() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_json: bool) -> Processor:
    if log_json:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def bind_site(site_root: Path | None) -> None:
    """Replace the bound logging context with *site_root* (or nothing)."""
    structlog.contextvars.clear_contextvars()
    if site_root is not None:
        structlog.contextvars.bind_contextvars(site_root=str(site_root))


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    site_root: Path | None = None,
) -> None:
    """Route all folio logging to stderr.

    Args:
        verbose: Let ``folio.*`` loggers through at DEBUG instead of WARNING.
        log_json: Render JSON lines instead of console output.
        site_root: Bound as ``site_root`` on every line when given.
    """
    pre_chain = _pre_chain()
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)
    logging.getLogger("folio").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    bind_site(site_root)
