"""Infrastructure Layer — database, identity tokens and logging setup.

Invariants:
    - Infrastructure may raise core error types but holds no business rules
    - Library faults (SQLAlchemy, PyJWT) are mapped at this boundary

Design Decisions:
    - Thin wrappers over the libraries, one concern per module
"""
