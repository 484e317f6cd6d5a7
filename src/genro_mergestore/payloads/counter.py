# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Counter payload."""

from __future__ import annotations

from .base import MergeablePayload


class Counter(MergeablePayload):
    """A named running total.

    Example:
        >>> c = Counter('events', 5)
        >>> c.merge_in_place(Counter('events', 7))
        >>> c.value
        12
    """

    def __init__(self, name: str, value: int | float = 0, title: str = '') -> None:
        super().__init__(name, title)
        self.value = value

    def __repr__(self) -> str:
        return f'Counter({self.name!r}, {self.value!r})'

    def __eq__(self, other: object) -> bool:
        if type(other) is not Counter:
            return NotImplemented
        return self.name == other.name and self.value == other.value

    __hash__ = None  # type: ignore[assignment]

    def add(self, amount: int | float = 1) -> None:
        self.value += amount

    def merge_in_place(self, other: MergeablePayload) -> None:
        self._check_same_type(other)
        self.value += other.value  # type: ignore[attr-defined]

    def is_empty(self) -> bool:
        return self.value == 0

    def estimate_size(self) -> int:
        return 8 + len(self.name) + len(self.title)

    def summary(self) -> str:
        return f'Value={self.value}'
