# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Point set payload (a graph of (x, y) points)."""

from __future__ import annotations

import math

import numpy as np

from .base import MergeablePayload


class PointSet(MergeablePayload):
    """Ordered (x, y) points; merging appends the other set's points."""

    def __init__(self, name: str, title: str = '') -> None:
        super().__init__(name, title)
        self.points: list[tuple[float, float]] = []

    def __len__(self) -> int:
        return len(self.points)

    def add_point(self, x: float, y: float) -> None:
        self.points.append((float(x), float(y)))

    def _axis(self, axis: int) -> np.ndarray:
        return np.array([p[axis] for p in self.points], dtype=float)

    def mean(self, axis: int = 1) -> float:
        """Mean of the x (axis=0) or y (axis=1) coordinates, NaN when empty."""
        if not self.points:
            return math.nan
        return float(np.mean(self._axis(axis)))

    def rms(self, axis: int = 1) -> float:
        """Standard deviation of the chosen coordinate, NaN when empty."""
        if not self.points:
            return math.nan
        return float(np.std(self._axis(axis)))

    def merge_in_place(self, other: MergeablePayload) -> None:
        self._check_same_type(other)
        assert isinstance(other, PointSet)
        self.points.extend(other.points)

    def is_empty(self) -> bool:
        return not self.points

    def estimate_size(self) -> int:
        return 16 * len(self.points) + len(self.name) + len(self.title)

    def summary(self) -> str:
        mean = self.mean()
        flag = '' if math.isfinite(mean) else ' !'
        return (
            f'{self.title} | Npts={len(self.points)} '
            f'Mean={mean:g} RMS={self.rms():g}{flag}'
        )
