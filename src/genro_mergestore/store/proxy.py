# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Key-path proxy of a MergeStore."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from ..paths import full_identifier

if TYPE_CHECKING:
    from ..entry import PathEntry
    from ..payloads import MergeablePayload
    from .core import MergeStore

_NOTSET: Any = object()


class StoreProxy:
    """A view of a MergeStore rooted at one key-path.

    Operations delegate to the store with the proxy key-path prefixed. The
    proxy owns nothing and must not outlive its store. Create it with
    MergeStore.create_proxy().

    Example:
        >>> det = store.create_proxy('/DET/', create_if_needed=True)
        >>> det.adopt(Counter('hits', 3))         # -> /DET/hits
        >>> det.adopt('ch1', Counter('hits', 1))  # -> /DET/ch1/hits
        >>> det.get('hits').value
        3
    """

    __slots__ = ('_store', '_entry')

    def __init__(self, store: MergeStore, entry: PathEntry) -> None:
        self._store = store
        self._entry = entry

    def __repr__(self) -> str:
        return f'StoreProxy({self.key_path!r}, names={self.names()!r})'

    def __len__(self) -> int:
        return len(self._entry)

    def __iter__(self) -> Iterator[MergeablePayload]:
        return self.create_iterator()

    def __contains__(self, name: str) -> bool:
        return name in self._entry

    @property
    def key_path(self) -> str:
        return self._entry.key_path

    @property
    def store(self) -> MergeStore:
        return self._store

    def names(self) -> list[str]:
        return self._entry.names()

    def get(self, name: str) -> MergeablePayload | None:
        """Get the payload called name at the proxy key-path."""
        return self._entry.get(name)

    def get_view(self, name: str) -> MergeablePayload | None:
        """Like MergeStore.get_view() with a bare ``name[:action]``."""
        name, _, action = name.partition(':')
        return self._store._view(
            self.get(name), full_identifier(self.key_path, name), action.upper()
        )

    def adopt(self, sub_path: Any, payload: Any = _NOTSET) -> bool:
        """Adopt payload at the proxy key-path, or below it at sub_path."""
        if payload is _NOTSET:
            return self._store.adopt(self.key_path, sub_path)
        return self._store.adopt(self.key_path + sub_path, payload)

    def create_iterator(self, reverse: bool = False) -> Iterator[MergeablePayload]:
        """Iterate over the payloads at the proxy key-path."""
        return iter(self._entry.objects(reverse=reverse))
