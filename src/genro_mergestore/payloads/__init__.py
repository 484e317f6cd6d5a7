# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Mergeable payloads.

This package provides the MergeablePayload capability that every object
adopted by a MergeStore implements, plus reference payloads:

- Counter: a running total
- Histogram1D, Histogram2D, Profile: numpy-backed binned accumulators
- SparseHistogram: weights on filled bins only
- PointSet: ordered (x, y) points
"""

from .base import MergeablePayload, type_tag_of
from .counter import Counter
from .histogram import Histogram1D, Histogram2D, Profile
from .pointset import PointSet
from .sparse import SparseHistogram

__all__ = [
    "MergeablePayload",
    "type_tag_of",
    "Counter",
    "Histogram1D",
    "Histogram2D",
    "Profile",
    "PointSet",
    "SparseHistogram",
]
