# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Maintenance methods of MergeStore: pruning, removal, projection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..paths import canonicalize, full_identifier, split_key_path
from ..payloads import type_tag_of

if TYPE_CHECKING:
    from ..entry import PathEntry
    from .core import MergeStore

_logger = logging.getLogger(__name__)


class MaintenanceMixin:
    """Bulk removal and restructuring of the store entries.

    prune() works on key-path entries, while remove(), remove_by_type() and
    prune_empty_objects() work on payloads and never delete an entry.
    """

    __slots__ = ()

    name: str
    title: str
    _entries: dict[str, PathEntry]

    def prune(self, prefix: str) -> int:
        """Delete every key-path entry starting with prefix, with its payloads.

        Returns:
            The number of key-path entries deleted (not of payloads).
        """
        doomed = [key_path for key_path in self._entries if key_path.startswith(prefix)]
        for key_path in doomed:
            del self._entries[key_path]
        _logger.debug('Pruned %d entries under %s', len(doomed), prefix)
        return len(doomed)

    def prune_empty_objects(self) -> int:
        """Remove every payload whose is_empty() is True.

        Returns:
            The number of payloads removed.
        """
        doomed = [
            full_identifier(entry.key_path, payload.name)
            for entry in self._entries.values()
            for payload in entry
            if payload.is_empty()
        ]
        for identifier in doomed:
            self.remove(identifier)  # type: ignore[attr-defined]
            _logger.debug('Removing %s', identifier)
        return len(doomed)

    def remove_by_type(self, type_tag: Any) -> int:
        """Remove every payload of a concrete type.

        Args:
            type_tag: A type tag (class name) or a payload class.

        Returns:
            The number of payloads removed.
        """
        tag = type_tag_of(type_tag)
        removed = 0
        for entry in self._entries.values():
            for payload in entry:
                if payload.type_tag == tag:
                    entry.pop(payload.name)
                    removed += 1
        return removed

    def project(self, key_path: str) -> MergeStore:
        """Extract the sub-tree under key_path as a new independent store.

        Every payload whose key-path starts with key_path is cloned into
        the new store, re-keyed with key_path stripped from the front (root
        level when nothing is left).

        Example:
            >>> store.adopt('/x/y/', Counter('name', 1))
            >>> store.project('/x/').get('/y/name').value
            1
        """
        prefix = canonicalize(key_path)
        projected = type(self)(  # type: ignore[call-arg]
            f'{self.name} {key_path}',
            self.title,
            options=self.options,  # type: ignore[attr-defined]
        )
        for path, entry in self._entries.items():
            if not path.startswith(prefix):
                continue
            new_path = canonicalize(path[len(prefix):])
            for payload in entry:
                projected.adopt(new_path, payload.clone())
        return projected

    def estimate_size(self, show: bool = False) -> int:
        """Estimate the memory used by the payloads, in bytes.

        Payloads that cannot estimate their size are skipped with a
        warning. With show, the size of each payload is logged.
        """
        size = 0
        for payload in self.iter_objects():  # type: ignore[attr-defined]
            this_size = payload.estimate_size()
            if this_size is None:
                _logger.warning('Cannot estimate size of %s', payload.type_tag)
                continue
            size += this_size
            if show:
                _logger.info('Size of %-30s is %20d bytes', payload.name, this_size)
        return size

    def as_dict(self) -> dict[str, Any]:
        """Convert to a nested dict for browsing.

        Key segments become nested dicts and payloads are stored under their
        name, at the level of their key-path.

        Raises:
            ValueError: If an object name equals a key segment at the same
                level.

        Example:
            >>> store.as_dict()
            {'DET': {'hits': Counter('hits', 5), 'ch1': {...}}}
        """
        result: dict[str, Any] = {}
        for key_path in sorted(self._entries):
            node = result
            for segment in split_key_path(key_path):
                node = node.setdefault(segment, {})
                if not isinstance(node, dict):
                    raise ValueError(
                        f"key '{segment}' of {key_path} clashes with an object name"
                    )
            for payload in self._entries[key_path]:
                if isinstance(node.get(payload.name), dict):
                    raise ValueError(
                        f"object {payload.name} of {key_path} clashes with a key"
                    )
                node[payload.name] = payload
        return result
