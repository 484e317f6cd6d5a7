# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Key-path encoding and decoding.

A key-path is a tuple of key segments written as ``/key1/key2/.../keyN/``.
A full identifier is a key-path followed by an object name, as in
``/key1/key2/objectName``. Segments are addressed by their 0-based index;
index ``-1`` is the object name.

Example:
    >>> canonicalize('A/B')
    '/A/B/'
    >>> decompose_segment('/A/B/h', 1)
    'B'
    >>> key_path_of('/A/B/h'), object_name_of('/A/B/h')
    ('/A/B/', 'h')
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .exceptions import IndexOutOfRangeError, MalformedIdentifierError

_logger = logging.getLogger(__name__)

SEPARATOR = '/'
ROOT = '/'

# stands in for the object name when decoding a bare key-path
_DUMMY_NAME = 'dummy'


def canonicalize(text: str | None) -> str:
    """Return the canonical form of a key-path.

    Adds the missing leading and trailing separators and collapses doubled
    ones. Never fails; an empty input is the root path.
    """
    if not text:
        return ROOT
    segments = [s for s in text.split(SEPARATOR) if s]
    if not segments:
        return ROOT
    return SEPARATOR + SEPARATOR.join(segments) + SEPARATOR


def split_key_path(key_path: str) -> list[str]:
    """Return the key segments of a key-path (empty for the root)."""
    return [s for s in key_path.split(SEPARATOR) if s]


def join_segments(segments: Iterable[str]) -> str:
    """Build a canonical key-path from key segments."""
    return canonicalize(SEPARATOR.join(segments))


def _separator_positions(identifier: str) -> list[int]:
    if identifier and not identifier.startswith(SEPARATOR):
        raise MalformedIdentifierError(identifier)
    return [i for i, char in enumerate(identifier) if char == SEPARATOR]


def split_segment(identifier: str, index: int) -> str:
    """Extract the index-th segment of an identifier, raising on errors.

    Raises:
        MalformedIdentifierError: identifier is non-empty and does not start
            with the separator.
        IndexOutOfRangeError: index is not below the number of key levels.
    """
    positions = _separator_positions(identifier)
    nkeys = len(positions) - 1
    if index >= nkeys:
        raise IndexOutOfRangeError(identifier, index, nkeys)
    if index < 0:
        return identifier[positions[-1] + 1:]
    return identifier[positions[index] + 1:positions[index + 1]]


def decompose_segment(identifier: str, index: int, strict: bool = False) -> str:
    """Extract the index-th segment of ``/key1/key2/.../keyN/objectName``.

    The object name is index ``-1``. Malformed identifiers and out of range
    indexes are logged and give an empty string, so callers must check for
    emptiness. With ``strict`` the error is raised instead.
    """
    try:
        return split_segment(identifier, index)
    except (MalformedIdentifierError, IndexOutOfRangeError) as exc:
        if strict:
            raise
        _logger.error('%s', exc)
        return ''


def get_key(key_path: str, index: int, strict: bool = False) -> str:
    """Return the index-th key of a key-path (no object name in it)."""
    return decompose_segment(key_path + _DUMMY_NAME, index, strict=strict)


def count_levels(identifier: str) -> int:
    """Number of key levels in a full identifier (0 for a root object)."""
    return max(identifier.count(SEPARATOR) - 1, 0)


def key_path_of(full_identifier: str, strict: bool = False) -> str:
    """Return the canonical key-path of a full identifier.

    An identifier without any separator is a root-level object name.
    """
    if SEPARATOR not in full_identifier:
        return ROOT
    if not full_identifier.startswith(SEPARATOR):
        exc = MalformedIdentifierError(full_identifier)
        if strict:
            raise exc
        _logger.error('%s', exc)
        return ''
    segments = [
        decompose_segment(full_identifier, i, strict=strict)
        for i in range(count_levels(full_identifier))
    ]
    return join_segments(segments)


def object_name_of(full_identifier: str, strict: bool = False) -> str:
    """Return the object name (last segment) of a full identifier."""
    if SEPARATOR not in full_identifier:
        return full_identifier
    return decompose_segment(full_identifier, -1, strict=strict)


def full_identifier(key_path: str, name: str) -> str:
    """Concatenate a key-path and an object name."""
    return canonicalize(key_path) + name


def migrate_legacy_key(key: str) -> str:
    """Convert a legacy key (with ``./`` fragments) to the current format."""
    return canonicalize(key.replace('./', ''))


def normalize_name(store_name: str, identifier: str, action: str) -> str:
    """Build a separator-free name for a derived view of an object."""
    name = f'{store_name}_{identifier}_{action}'
    return name.replace('/', '_').replace('-', '_')
