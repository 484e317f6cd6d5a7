# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Pending diagnostic messages of a store."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterator

_logger = logging.getLogger(__name__)


class PendingMessages:
    """Recoverable lookup failures aggregated by message text.

    The log never influences store behaviour; it is cleared by the caller.

    Example:
        >>> messages = PendingMessages()
        >>> messages.record('Did not find object h in /A/')
        >>> messages.record('Did not find object h in /A/')
        >>> messages.as_dict()
        {'Did not find object h in /A/': 2}
    """

    __slots__ = ('_counts',)

    def __init__(self) -> None:
        self._counts: Counter[str] = Counter()

    def __len__(self) -> int:
        return len(self._counts)

    def __iter__(self) -> Iterator[tuple[str, int]]:
        return iter(sorted(self._counts.items()))

    def __repr__(self) -> str:
        return f'PendingMessages({dict(self._counts)!r})'

    def record(self, message: str) -> None:
        """Count one more occurrence of message."""
        self._counts[message] += 1

    def count(self, message: str) -> int:
        return self._counts.get(message, 0)

    def clear(self) -> None:
        self._counts.clear()

    def as_dict(self) -> dict[str, int]:
        """Return a copy of the message counters."""
        return dict(self._counts)

    def log(self, prefix: str = '', level: int = logging.INFO) -> None:
        """Emit one log record per message, sorted by text."""
        for message, count in self:
            _logger.log(
                level, '%s : message %s appeared %5d times', prefix, message, count
            )
