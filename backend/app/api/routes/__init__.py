"""Route Modules — one file per resource/concern.

Invariants:
    - Each module defines its own APIRouter with prefix, tags and ShapedRoute
    - Routes never contain business logic (parse, delegate to a service, shape)

Design Decisions:
    - Explicit registration in main.py over auto-discovery
"""
