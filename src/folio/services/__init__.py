"""Service layer — loading, rendering and like reconciliation.

Services may import from domain and infrastructure layers.
They must never import from commands or output.
"""
