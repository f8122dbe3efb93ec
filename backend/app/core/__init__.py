"""Core Layer — pure domain logic and the contracts the shell implements.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Functions are pure and deterministic (clocks are passed in, never read)
    - service_protocols only declares interfaces; implementations live in services/

Design Decisions:
    - Functional core separated from imperative shell (impureim sandwich):
      routes parse, services do IO, core decides
"""
