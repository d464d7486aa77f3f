"""API Layer — FastAPI routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All errors leave the API as the structured error envelope

Design Decisions:
    - Thin routes delegate to StoreService (ADR: impureim sandwich)
"""
