"""Database Package — declarative Base shared by models/, alembic and the session manager.

Invariants:
    - Single async engine per process (initialized via infrastructure.database.init_db)

Design Decisions:
    - asyncpg driver for PostgreSQL (ADR: native async, no thread pool overhead)
"""
