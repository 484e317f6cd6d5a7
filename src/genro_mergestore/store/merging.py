# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Merging of payloads and stores.

merge_stores() folds sources into a destination store, left to right. For
every (key_path, payload) of a source, in the source's traversal order:

- absent from the destination: a clone is adopted at key_path
- present: the destination payload absorbs it with merge_in_place()

A pair that cannot be merged (different concrete types, incompatible
state) is logged, recorded in the destination's pending messages and
skipped; the rest of the merge proceeds. There is no rollback.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from ..exceptions import IncompatiblePayloadError, TypeMismatchError
from ..paths import full_identifier
from ..payloads import MergeablePayload, type_tag_of

if TYPE_CHECKING:
    from .core import MergeStore

_logger = logging.getLogger(__name__)


def merge_object(base: Any, other: Any) -> bool:
    """Add other to base in place.

    Returns:
        True if merged. False (logged) if the two objects are not of the
        same concrete type, are not mergeable, or the payload refuses the
        merge; base is left unchanged in that case.
    """
    if type(base) is not type(other):
        _logger.error(
            'MergeObject: Cannot add %s to %s', type_tag_of(other), type_tag_of(base)
        )
        return False
    if not isinstance(base, MergeablePayload):
        _logger.error('MergeObject: %s objects are not mergeable', type(base).__name__)
        return False
    try:
        base.merge_in_place(other)
    except (TypeMismatchError, IncompatiblePayloadError) as exc:
        _logger.error('MergeObject: %s', exc)
        return False
    return True


def merge_stores(destination: MergeStore, sources: Iterable[Any] | None) -> int:
    """Merge a sequence of stores into destination.

    Args:
        destination: The store receiving the merged payloads.
        sources: Stores to fold in, in order. Items that are not
            MergeStore instances are logged and skipped.

    Returns:
        0 if sources is None, otherwise 1 (destination) plus the number of
        source stores processed.

    Example:
        >>> merge_stores(total, [job1, job2])
        3
    """
    from .core import MergeStore

    if sources is None:
        return 0

    count = 0
    for source in sources:
        if not isinstance(source, MergeStore):
            _logger.error(
                'object %r is a %s instead of a MergeStore',
                getattr(source, 'name', source),
                type(source).__name__,
            )
            continue
        count += 1
        _merge_one(destination, source)

    return count + 1


def _merge_one(destination: MergeStore, source: MergeStore) -> None:
    for key_path, payload in source.create_iterator():
        existing = destination._lookup(key_path, payload.name)
        if existing is None:
            if not destination.adopt(key_path, payload.clone()):
                _logger.error('adoption of object %s failed', payload.name)
            continue
        if not merge_object(existing, payload):
            destination._messages.record(
                f'Could not merge {type_tag_of(payload)} into '
                f'{type_tag_of(existing)} at {full_identifier(key_path, payload.name)}'
            )
