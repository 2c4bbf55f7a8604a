"""Service layer — the document access layer and ServiceResult wrappers.

Services may import from domain and infrastructure layers.
They must never import from commands or output.
"""
