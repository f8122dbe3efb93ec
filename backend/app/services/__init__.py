"""Services Layer — SQLAlchemy implementations of the service façade Protocols.

Invariants:
    - One service class per Protocol in core.service_protocols
    - Services receive an AsyncSession; they never open their own
    - Business rules delegate to pure core modules (discounts, analytics)

Design Decisions:
    - Routes obtain services through api.dependencies (swappable in tests)
"""
