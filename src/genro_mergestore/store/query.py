# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Query methods of MergeStore.

Three kinds of pattern are understood:

- Sum patterns, for get_sum(): ``/A1,A2/B1/name1,name2``. Each group is an
  alternation of exact values; the last group applies to object names, the
  others to key levels 0, 1, ...
- Selection patterns, for select() and report(): ``/A*/B?/h*:regex``. Each
  level is a glob; the last one applies to object names; the optional
  ``:regex`` suffix is searched in the payload type tag.
- Key levels, for list_keys(): a 0-based index.
"""

from __future__ import annotations

import fnmatch
import logging
import re
from typing import TYPE_CHECKING

from ..paths import canonicalize, full_identifier, split_key_path
from .merging import merge_object

if TYPE_CHECKING:
    from ..entry import PathEntry
    from ..payloads import MergeablePayload

_logger = logging.getLogger(__name__)


def _tokens(pattern: str) -> list[str]:
    return [token for token in pattern.split('/') if token]


class QueryMixin:
    """Lookup, listing and pattern queries over the store entries."""

    __slots__ = ()

    name: str
    title: str
    _entries: dict[str, PathEntry]
    _show_empty: bool

    def sorted_key_paths(self) -> list[str]:
        """Return all key-paths in lexical order."""
        return sorted(self._entries)

    def list_keys(self, level: int) -> list[str]:
        """Return the distinct key values at a 0-based level.

        Values are taken from the sorted key-paths, in first-seen order;
        key-paths with fewer levels are ignored.

        Example:
            >>> store.list_keys(0)
            ['DET', 'TRK']
        """
        if level < 0:
            raise ValueError(f'level must be >= 0, got {level}')
        keys: list[str] = []
        for key_path in self.sorted_key_paths():
            segments = split_key_path(key_path)
            if level < len(segments) and segments[level] not in keys:
                keys.append(segments[level])
        return keys

    def list_object_names(self, key_path: str) -> list[str]:
        """Return the names of the payloads stored exactly at key_path."""
        entry = self._entries.get(canonicalize(key_path))
        if entry is None:
            return []
        return entry.names()

    def get_sum(self, pattern: str) -> MergeablePayload | None:
        """Sum every payload matching an OR pattern.

        The pattern ``/key1_1,key1_2/key2_1/name_1,name_2`` selects the
        key-paths whose level 0 key is key1_1 or key1_2 and level 1 key is
        key2_1, and within them the objects named name_1 or name_2. Matching
        is by exact string equality; levels beyond the pattern are free.

        Returns:
            A new payload (clone of the first match with the others merged
            in), or None when nothing matches.

        Example:
            >>> store.get_sum('/DET,TRK/hits')
        """
        groups = [set(token.split(',')) for token in _tokens(pattern)]
        if not groups:
            return None
        key_groups, names = groups[:-1], groups[-1]

        total: MergeablePayload | None = None
        added: list[str] = []
        for key_path, entry in list(self._entries.items()):
            segments = split_key_path(key_path)
            if len(segments) < len(key_groups):
                continue
            if any(seg not in group for seg, group in zip(segments, key_groups)):
                continue

            for payload in entry:
                if payload.name not in names:
                    continue
                if total is None:
                    total = payload.clone()
                else:
                    merge_object(total, payload)
                added.append(full_identifier(key_path, payload.name))

        _logger.debug('Adding objects: %s', ' '.join(added))
        return total

    def select(
        self, pattern: str = '*'
    ) -> list[tuple[str, list[MergeablePayload]]]:
        """Select key-paths and payloads with a wildcard pattern.

        Args:
            pattern: ``/glob0/glob1/.../nameglob[:type_regex]``. A bare
                ``*`` selects everything. Missing key levels compare as
                empty strings.

        Returns:
            (key_path, payloads) for every key-path whose keys match, in
            sorted order; payloads are the matching ones sorted by name
            (possibly none). Empty payloads are left out unless
            show_empty_objects() was turned on.

        Example:
            >>> store.select('/DET/*/h*:Histogram')
        """
        pattern, _, type_pattern = pattern.partition(':')
        type_regex = re.compile(type_pattern) if type_pattern else None
        tokens = _tokens(pattern) or ['*']
        key_globs, name_glob = tokens[:-1], tokens[-1]

        selection: list[tuple[str, list[MergeablePayload]]] = []
        for key_path in self.sorted_key_paths():
            segments = split_key_path(key_path)
            if not all(
                fnmatch.fnmatchcase(segments[i] if i < len(segments) else '', glob)
                for i, glob in enumerate(key_globs)
            ):
                continue

            entry = self._entries[key_path]
            payloads = []
            for name in sorted(entry.names()):
                payload = entry.get(name)
                assert payload is not None
                if type_regex is not None and not type_regex.search(payload.type_tag):
                    continue
                if not fnmatch.fnmatchcase(name, name_glob):
                    continue
                if payload.is_empty() and not self._show_empty:
                    continue
                payloads.append(payload)
            selection.append((key_path, payloads))
        return selection

    def report(self, pattern: str = '') -> str:
        """Describe the store, and the payloads selected by pattern.

        The first line gives the key and object counts. With a pattern (see
        select()), each selected key-path is listed followed by one line per
        payload: ``    (TypeTag) name | summary``. Key-paths without
        matching payloads are listed only when the name glob is ``*`` with
        no type filter, or ``-`` (which lists key-paths alone).
        """
        lines = [
            f'{type(self).__name__}({self.name},{self.title}) : '
            f'{self.number_of_keys()} keys and {self.number_of_objects()} objects'  # type: ignore[attr-defined]
        ]
        if not pattern:
            return '\n'.join(lines)

        path_pattern, _, type_pattern = pattern.partition(':')
        name_glob = (_tokens(path_pattern) or ['*'])[-1]
        list_bare_keys = name_glob == '-' or (name_glob == '*' and not type_pattern)

        selection = self.select(pattern)
        lines.append(f'Number of identifiers {len(selection)}')
        for key_path, payloads in selection:
            if payloads or list_bare_keys:
                lines.append(key_path)
            for payload in payloads:
                line = f'    ({payload.type_tag}) {payload.name}'
                summary = payload.summary()
                if summary:
                    line += f' | {summary}'
                lines.append(line)
        return '\n'.join(lines)
