"""Observer — adapter wrapper that fires hooks around every read and write.

Invariants:
    - Hooks are plain callables; the default hooks do nothing
    - on_write_end / on_read_end only fire when the wrapped call succeeded

Design Decisions:
    - Composition over subclassing adapters: any Adapter can be observed
"""

from typing import Callable

from docstore.core.domain_types import Data
from docstore.core.repository_protocols import Adapter


def _noop(*_args) -> None:
    return None


class Observer:
    """Wraps an Adapter and reports read/write lifecycle events."""

    def __init__(self, adapter: Adapter):
        self._adapter = adapter
        self.on_read_start: Callable[[], None] = _noop
        self.on_read_end: Callable[[Data | None], None] = _noop
        self.on_write_start: Callable[[], None] = _noop
        self.on_write_end: Callable[[], None] = _noop

    @property
    def path(self):
        return getattr(self._adapter, "path", None)

    async def read(self) -> Data | None:
        self.on_read_start()
        data = await self._adapter.read()
        self.on_read_end(data)
        return data

    async def write(self, data: Data) -> None:
        self.on_write_start()
        await self._adapter.write(data)
        self.on_write_end()
