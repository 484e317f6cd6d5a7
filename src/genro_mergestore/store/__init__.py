# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""MergeStore package - Keyed container of mergeable objects.

This package provides the MergeStore class, an owning store of mergeable
payloads indexed by key-paths, and its traversal helpers.

The package is organized into:
- core: Main MergeStore class with adoption, lookup, removal and attach
- merging: Payload and store merging
- query: Key listings, OR-pattern sums and wildcard selection
- maintenance: Pruning, removal by type, projection, size estimate
- iterator: Two-level restartable iterator
- proxy: View rooted at one key-path

Example:
    >>> from genro_mergestore import MergeStore, Counter
    >>> store = MergeStore('stats')
    >>> store.adopt('/A/', Counter('c', 5))
    True
    >>> store.get('/A/c').value
    5
"""

from .core import MergeStore
from .iterator import StoreIterator
from .merging import merge_object, merge_stores
from .proxy import StoreProxy

__all__ = ["MergeStore", "StoreIterator", "StoreProxy", "merge_object", "merge_stores"]
