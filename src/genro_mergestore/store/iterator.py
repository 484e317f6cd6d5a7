# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Two-level iterator over a MergeStore."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..payloads import MergeablePayload
    from .core import MergeStore


class StoreIterator:
    """Restartable cursor over the (key_path, payload) pairs of a store.

    The outer level walks key-paths in the store's creation order, the inner
    level walks each key-path's payloads in insertion order. Exhausting an
    inner collection moves on to the next key-path. Once everything has been
    visited the iterator stays exhausted until reset(). With reverse=True
    both levels run backwards.

    Each level is snapshotted when entered, but the store must not be
    modified while iterating.

    Example:
        >>> it = store.create_iterator()
        >>> for key_path, payload in it:
        ...     print(key_path, payload.name)
        >>> it.reset()
        >>> it.next_object()  # first payload again
    """

    __slots__ = ('_store', 'reverse', 'key_path', '_paths', '_objects')

    def __init__(self, store: MergeStore, reverse: bool = False) -> None:
        self._store = store
        self.reverse = reverse
        self.key_path: str | None = None
        self._paths: Iterator[str] | None = None
        self._objects: Iterator[MergeablePayload] | None = None

    def __iter__(self) -> StoreIterator:
        return self

    def __next__(self) -> tuple[str, MergeablePayload]:
        while True:
            if self._objects is None:
                if self._paths is None:
                    key_paths = list(self._store._entries)
                    if self.reverse:
                        key_paths.reverse()
                    self._paths = iter(key_paths)
                key_path = next(self._paths, None)
                if key_path is None:
                    raise StopIteration
                entry = self._store._entries.get(key_path)
                if entry is None:
                    continue
                self.key_path = key_path
                self._objects = iter(entry.objects(reverse=self.reverse))

            payload = next(self._objects, None)
            if payload is None:
                self._objects = None
                continue
            return self.key_path, payload  # type: ignore[return-value]

    def next_object(self) -> MergeablePayload | None:
        """Return the next payload, or None when exhausted."""
        try:
            return next(self)[1]
        except StopIteration:
            return None

    def reset(self) -> None:
        """Discard both cursors; iteration restarts from the beginning."""
        self.key_path = None
        self._paths = None
        self._objects = None
