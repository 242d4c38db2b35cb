"""folio — markdown content collections with link-card rendering."""

__version__ = "0.3.0"
