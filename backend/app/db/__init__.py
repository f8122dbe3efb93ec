"""Database Package — SQLAlchemy declarative Base.

Invariants:
    - Engine and sessions live in infrastructure/database.py; this package only
      defines table metadata

Design Decisions:
    - asyncpg driver for PostgreSQL (native async, no thread pool overhead)
"""
