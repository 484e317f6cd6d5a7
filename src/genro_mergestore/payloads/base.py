# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""MergeablePayload - Abstract base class for objects held by a MergeStore."""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import Any

from ..exceptions import TypeMismatchError


class MergeablePayload(ABC):
    """Abstract base class for mergeable statistical objects.

    A payload is identified inside a key-path by its name, and its concrete
    type is identified by ``type_tag`` (the class name). Subclasses implement
    merge_in_place() to absorb the accumulated state of another instance of
    the same class:

        class Counter(MergeablePayload):
            def merge_in_place(self, other):
                self._check_same_type(other)
                self.value += other.value

    The remaining hooks are optional:

    - is_empty(): used by MergeStore.prune_empty_objects() and report()
    - transform(action, name): derived views, e.g. histogram projections
    - estimate_size(): memory footprint in bytes
    - summary(): one-line description for reports
    """

    def __init__(self, name: str, title: str = '') -> None:
        if not name:
            raise ValueError('A payload needs a non-empty name')
        if '/' in name:
            raise ValueError(f"Payload name {name!r} cannot contain '/'")
        self.name = name
        self.title = title

    def __repr__(self) -> str:
        return f'{self.type_tag}({self.name!r})'

    @property
    def type_tag(self) -> str:
        """Concrete type identifier used for type matching."""
        return type(self).__name__

    def clone(self, name: str | None = None) -> MergeablePayload:
        """Return an independent deep copy, optionally renamed."""
        duplicate = copy.deepcopy(self)
        if name is not None:
            duplicate.name = name
        return duplicate

    @abstractmethod
    def merge_in_place(self, other: MergeablePayload) -> None:
        """Absorb the state of other, an instance of the same class.

        Raises:
            TypeMismatchError: other is not of the same concrete type.
            IncompatiblePayloadError: other cannot be combined with self
                (e.g. different binning).
        """

    def is_empty(self) -> bool:
        return False

    def transform(self, action: str, name: str) -> MergeablePayload | None:
        """Return a derived view for action (upper case), or None."""
        return None

    def estimate_size(self) -> int | None:
        return None

    def summary(self) -> str:
        return ''

    def _check_same_type(self, other: Any) -> None:
        if type(other) is not type(self):
            other_tag = getattr(other, 'type_tag', type(other).__name__)
            raise TypeMismatchError(self.type_tag, other_tag)


def type_tag_of(obj: Any) -> str:
    """Return the type tag of a payload, a payload class, or a tag string."""
    if isinstance(obj, str):
        return obj
    if isinstance(obj, type):
        return obj.__name__
    return obj.type_tag
