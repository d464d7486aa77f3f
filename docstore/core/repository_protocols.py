"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core never imports from the shell
    - Persistence accessed only through the Adapter protocol
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: adapters do IO, the pure query functions that operate on
      the loaded snapshot are never async themselves
"""

from typing import Protocol

from docstore.core.domain_types import Data


class Adapter(Protocol):
    """Snapshot persistence, implemented by infrastructure adapters."""
    async def read(self) -> Data | None: ...
    async def write(self, data: Data) -> None: ...


class NamingConvention(Protocol):
    """Contract for relation discovery by collection name."""
    def singularize(self, name: str) -> str: ...
    def pluralize(self, name: str) -> str: ...
    def foreign_key(self, name: str) -> str: ...
