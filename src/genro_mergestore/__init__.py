# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-MergeStore - Keyed aggregation store for mergeable statistical objects.

A small library that holds histograms, profiles, counters and other
mergeable objects under multi-level keys, folds partial stores produced by
parallel jobs into one, and queries the result by keys and patterns.
"""

__version__ = "0.1.0"

from .config import StoreOptions
from .diagnostics import PendingMessages
from .entry import PathEntry
from .exceptions import (
    AdoptConflictError,
    AttachConflictError,
    IncompatiblePayloadError,
    IndexOutOfRangeError,
    MalformedIdentifierError,
    MergeStoreError,
    NotFoundError,
    NotMergeableError,
    TypeMismatchError,
)
from .paths import (
    canonicalize,
    decompose_segment,
    get_key,
    key_path_of,
    object_name_of,
)
from .payloads import (
    Counter,
    Histogram1D,
    Histogram2D,
    MergeablePayload,
    PointSet,
    Profile,
    SparseHistogram,
)
from .store import MergeStore, StoreIterator, StoreProxy, merge_object, merge_stores

__all__ = [
    # Core classes
    "MergeStore",
    "StoreIterator",
    "StoreProxy",
    "PathEntry",
    "StoreOptions",
    "PendingMessages",
    # Merging
    "merge_object",
    "merge_stores",
    # Paths
    "canonicalize",
    "decompose_segment",
    "get_key",
    "key_path_of",
    "object_name_of",
    # Payloads
    "MergeablePayload",
    "Counter",
    "Histogram1D",
    "Histogram2D",
    "Profile",
    "PointSet",
    "SparseHistogram",
    # Exceptions
    "MergeStoreError",
    "MalformedIdentifierError",
    "IndexOutOfRangeError",
    "NotFoundError",
    "AdoptConflictError",
    "NotMergeableError",
    "TypeMismatchError",
    "IncompatiblePayloadError",
    "AttachConflictError",
]
