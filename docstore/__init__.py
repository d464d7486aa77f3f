"""docstore — a JSON document store served over a filter/sort/paginate REST API.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""

__version__ = "1.0.0"
