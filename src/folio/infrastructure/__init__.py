"""Infrastructure layer — source files, markdown tokenizing, like API and cache.

Adapters around third-party libraries (markdown-it-py, httpx, Jinja2).
It must never import from services, commands, or output.
"""
