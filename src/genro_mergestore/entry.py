# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""MergeStore key-path entry."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from .paths import ROOT, split_key_path

if TYPE_CHECKING:
    from .payloads import MergeablePayload


class PathEntry:
    """The named-object collection stored at one key-path.

    Each entry has:
    - key_path: The canonical key-path it is stored under
    - objects: Payloads by name, in insertion order

    An entry may be empty: it exists as soon as its key-path was created,
    whether or not anything was adopted there.

    Example:
        >>> entry = PathEntry('/DET/')
        >>> entry.add(Counter('h', 1))
        >>> entry.names()
        ['h']
    """

    __slots__ = ('key_path', '_objects')

    def __init__(self, key_path: str) -> None:
        self.key_path = key_path
        self._objects: dict[str, MergeablePayload] = {}

    def __repr__(self) -> str:
        return f'PathEntry({self.key_path!r}, names={self.names()!r})'

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[MergeablePayload]:
        return iter(list(self._objects.values()))

    def __contains__(self, name: str) -> bool:
        return name in self._objects

    @property
    def is_root(self) -> bool:
        return self.key_path == ROOT

    @property
    def segments(self) -> list[str]:
        return split_key_path(self.key_path)

    def get(self, name: str) -> MergeablePayload | None:
        return self._objects.get(name)

    def add(self, payload: MergeablePayload) -> None:
        """Insert payload; the caller checks that its name is free."""
        self._objects[payload.name] = payload

    def pop(self, name: str) -> MergeablePayload:
        return self._objects.pop(name)

    def names(self) -> list[str]:
        return list(self._objects)

    def objects(self, reverse: bool = False) -> list[MergeablePayload]:
        """Return the payloads in insertion order (or reversed)."""
        values = list(self._objects.values())
        if reverse:
            values.reverse()
        return values
