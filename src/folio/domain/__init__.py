"""Domain layer — documents, frontmatter, node tree, card rules, like state.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
