"""Database — owns the in-memory snapshot and its persistence adapter.

Invariants:
    - `data` is the single in-memory store; services mutate it in place
    - read() validates the snapshot shape before replacing `data`
    - Adapter decode errors mapped to SnapshotFormatError, OS errors to PersistenceError
    - A failed write leaves `data` untouched (caller reconciles)

Design Decisions:
    - Thin lowdb-style wrapper: adapter does IO, Database does shape checks and
      error mapping (same split as a session manager over a driver)
    - Default snapshot deep-copied so two databases never share a mutable default
"""

import copy
import logging

from docstore.core.domain_types import Data, is_item
from docstore.core.errors import PersistenceError, SnapshotFormatError
from docstore.core.repository_protocols import Adapter

logger = logging.getLogger(__name__)


def validate_snapshot(obj: object, source: str | None = None) -> Data:
    """Check that `obj` maps names to a record or a list of records."""
    if not isinstance(obj, dict):
        raise SnapshotFormatError(
            f"top level must be an object, got {type(obj).__name__}", source,
        )
    for name, value in obj.items():
        if not isinstance(name, str):
            raise SnapshotFormatError(f"collection name {name!r} is not a string", source)
        if isinstance(value, list):
            if not all(is_item(item) for item in value):
                raise SnapshotFormatError(
                    f"collection '{name}' must contain only objects", source,
                )
        elif not is_item(value):
            raise SnapshotFormatError(
                f"collection '{name}' must be an object or a list of objects", source,
            )
    return obj


class Database:
    """In-memory snapshot plus the adapter that persists it."""

    def __init__(self, adapter: Adapter, default: Data | None = None):
        self.adapter = adapter
        self._default = default if default is not None else {}
        self.data: Data = copy.deepcopy(self._default)

    async def read(self) -> Data:
        """Load the snapshot from the adapter, replacing `data`."""
        try:
            snapshot = await self.adapter.read()
        except (SnapshotFormatError, PersistenceError):
            raise
        except ValueError as e:
            logger.error(f"Snapshot decode error: {e}")
            raise SnapshotFormatError(str(e), _describe(self.adapter))
        except OSError as e:
            logger.error(f"Snapshot read error: {e}")
            raise PersistenceError(str(e), "read")

        if snapshot is None:
            self.data = copy.deepcopy(self._default)
        else:
            self.data = validate_snapshot(snapshot, _describe(self.adapter))
        return self.data

    async def write(self) -> None:
        """Persist the current `data`."""
        try:
            await self.adapter.write(self.data)
        except PersistenceError:
            raise
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Snapshot write error: {e}")
            raise PersistenceError(str(e), "write")


def _describe(adapter: Adapter) -> str:
    path = getattr(adapter, "path", None)
    return str(path) if path is not None else type(adapter).__name__
