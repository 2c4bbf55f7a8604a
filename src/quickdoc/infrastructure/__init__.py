"""Infrastructure layer — document stores, database engine, filesystem.

This layer depends on stdlib and third-party libs (SQLAlchemy, anyio).
It may import domain value types but never services, commands, or output.
"""
