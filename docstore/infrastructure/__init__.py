"""Infrastructure Layer — persistence adapters and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All adapter IO errors mapped to core/errors.py types by Database

Design Decisions:
    - Adapters are swappable behind the core Adapter protocol (file, JSON5, memory)
"""
