"""Core Layer — pure query engine, no IO, no async, no HTTP.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - Functions operate on the loaded snapshot (plain dicts and lists)

Design Decisions:
    - Functional core separated from imperative shell (ADR: persistence stays in the shell)
"""
