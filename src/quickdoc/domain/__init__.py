"""Domain layer — field models, schema descriptors, dotted paths, errors.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
