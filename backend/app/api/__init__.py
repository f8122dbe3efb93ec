"""API Layer — FastAPI routes, auth gate, error handlers and response shaping.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Every endpoint answers with the success envelope or the flat error envelope

Design Decisions:
    - Thin routes delegate to services (impureim sandwich)
"""
