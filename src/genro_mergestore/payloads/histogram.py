# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Binned payloads: 1D and 2D histograms and profiles.

Bin arrays follow the usual convention of keeping an underflow bin at index
0 and an overflow bin at index ``nbins + 1``; in-range bins are ``1..nbins``.

Histogram2D supports four derived views through transform():

- ``PX``: projection on the x axis (Histogram1D)
- ``PY``: projection on the y axis (Histogram1D)
- ``PFX``: profile of y along x (Profile)
- ``PFY``: profile of x along y (Profile)
"""

from __future__ import annotations

import numpy as np

from ..exceptions import IncompatiblePayloadError
from .base import MergeablePayload


def _edges(bins: int, low: float, high: float) -> np.ndarray:
    if bins < 1:
        raise ValueError(f'bins must be positive, got {bins}')
    if not high > low:
        raise ValueError(f'invalid axis range [{low}, {high}]')
    return np.linspace(low, high, bins + 1)


def _bin_index(edges: np.ndarray, values: np.ndarray) -> np.ndarray:
    # 0 for underflow, nbins + 1 for overflow
    return np.searchsorted(edges, values, side='right')


def _centers(edges: np.ndarray) -> np.ndarray:
    return (edges[:-1] + edges[1:]) / 2.0


class _Binned(MergeablePayload):
    """Shared merging and sizing logic of the numpy-backed payloads."""

    _arrays: tuple[str, ...] = ()

    def _check_binning(self, other: _Binned) -> None:
        for axis in self._axes():
            if not np.array_equal(getattr(self, axis), getattr(other, axis)):
                raise IncompatiblePayloadError(
                    f'Cannot merge {other.name} into {self.name}: '
                    f'different {axis}'
                )

    def _axes(self) -> tuple[str, ...]:
        return ('edges',)

    def merge_in_place(self, other: MergeablePayload) -> None:
        self._check_same_type(other)
        assert isinstance(other, _Binned)
        self._check_binning(other)
        for attr in self._arrays:
            getattr(self, attr)[...] += getattr(other, attr)
        self.entries += other.entries  # type: ignore[attr-defined]

    def is_empty(self) -> bool:
        return self.entries == 0  # type: ignore[attr-defined]

    def estimate_size(self) -> int:
        size = sum(getattr(self, attr).nbytes for attr in self._arrays)
        size += sum(getattr(self, axis).nbytes for axis in self._axes())
        return size + len(self.name) + len(self.title)


class Histogram1D(_Binned):
    """Fixed-width 1D histogram with weights.

    Example:
        >>> h = Histogram1D('adc', 10, 0.0, 100.0)
        >>> h.fill(12.5)
        >>> h.fill_many([1.0, 99.0, 150.0])
        >>> h.entries, h.bin_content(2), h.bin_content(11)
        (4, 1.0, 1.0)
    """

    _arrays = ('counts', 'sumw2')

    def __init__(
        self,
        name: str,
        bins: int,
        low: float,
        high: float,
        title: str = '',
    ) -> None:
        super().__init__(name, title)
        self.edges = _edges(bins, low, high)
        self.counts = np.zeros(bins + 2)
        self.sumw2 = np.zeros(bins + 2)
        self.entries = 0

    @property
    def nbins(self) -> int:
        return len(self.edges) - 1

    def fill(self, x: float, weight: float = 1.0) -> None:
        index = int(_bin_index(self.edges, np.asarray(x)))
        self.counts[index] += weight
        self.sumw2[index] += weight * weight
        self.entries += 1

    def fill_many(self, values, weights=None) -> None:
        values = np.asarray(values, dtype=float)
        weights = np.ones_like(values) if weights is None else np.asarray(weights, dtype=float)
        indexes = _bin_index(self.edges, values)
        np.add.at(self.counts, indexes, weights)
        np.add.at(self.sumw2, indexes, weights * weights)
        self.entries += len(values)

    def bin_content(self, index: int) -> float:
        return float(self.counts[index])

    def sum_of_weights(self) -> float:
        """Sum of in-range bin contents (under/overflow excluded)."""
        return float(self.counts[1:-1].sum())

    def mean(self) -> float:
        total = self.sum_of_weights()
        if total == 0:
            return 0.0
        return float(np.dot(self.counts[1:-1], _centers(self.edges)) / total)

    def summary(self) -> str:
        return f'{self.title} | Entries={self.entries} Sum={self.sum_of_weights():g}'


class Profile(_Binned):
    """Mean of y in bins of x."""

    _arrays = ('sum_w', 'sum_wy', 'sum_wy2')

    def __init__(
        self,
        name: str,
        bins: int,
        low: float,
        high: float,
        title: str = '',
    ) -> None:
        super().__init__(name, title)
        self.edges = _edges(bins, low, high)
        self.sum_w = np.zeros(bins + 2)
        self.sum_wy = np.zeros(bins + 2)
        self.sum_wy2 = np.zeros(bins + 2)
        self.entries = 0

    @property
    def nbins(self) -> int:
        return len(self.edges) - 1

    def fill(self, x: float, y: float, weight: float = 1.0) -> None:
        index = int(_bin_index(self.edges, np.asarray(x)))
        self.sum_w[index] += weight
        self.sum_wy[index] += weight * y
        self.sum_wy2[index] += weight * y * y
        self.entries += 1

    def bin_mean(self, index: int) -> float:
        """Mean y of bin index, 0 for a bin without entries."""
        if self.sum_w[index] == 0:
            return 0.0
        return float(self.sum_wy[index] / self.sum_w[index])

    def bin_entries(self, index: int) -> float:
        return float(self.sum_w[index])

    def summary(self) -> str:
        return f'{self.title} | Entries={self.entries} Sum={float(self.sum_w[1:-1].sum()):g}'


class Histogram2D(_Binned):
    """Fixed-width 2D histogram with projection and profile views."""

    _arrays = ('counts', 'sumw2')

    def __init__(
        self,
        name: str,
        xbins: int,
        xlow: float,
        xhigh: float,
        ybins: int,
        ylow: float,
        yhigh: float,
        title: str = '',
    ) -> None:
        super().__init__(name, title)
        self.xedges = _edges(xbins, xlow, xhigh)
        self.yedges = _edges(ybins, ylow, yhigh)
        self.counts = np.zeros((xbins + 2, ybins + 2))
        self.sumw2 = np.zeros((xbins + 2, ybins + 2))
        self.entries = 0

    def _axes(self) -> tuple[str, ...]:
        return ('xedges', 'yedges')

    def fill(self, x: float, y: float, weight: float = 1.0) -> None:
        ix = int(_bin_index(self.xedges, np.asarray(x)))
        iy = int(_bin_index(self.yedges, np.asarray(y)))
        self.counts[ix, iy] += weight
        self.sumw2[ix, iy] += weight * weight
        self.entries += 1

    def bin_content(self, ix: int, iy: int) -> float:
        return float(self.counts[ix, iy])

    def sum_of_weights(self) -> float:
        return float(self.counts[1:-1, 1:-1].sum())

    def summary(self) -> str:
        return f'{self.title} | Entries={self.entries} Sum={self.sum_of_weights():g}'

    def transform(self, action: str, name: str) -> MergeablePayload | None:
        if action == 'PX':
            return self.projection(0, name)
        if action == 'PY':
            return self.projection(1, name)
        if action == 'PFX':
            return self.profile(0, name)
        if action == 'PFY':
            return self.profile(1, name)
        return None

    def _axis_edges(self, axis: int) -> tuple[np.ndarray, np.ndarray]:
        if axis == 0:
            return self.xedges, self.yedges
        return self.yedges, self.xedges

    def _oriented(self, array: np.ndarray, axis: int) -> np.ndarray:
        # rows follow the kept axis, in-range bins of the summed axis only
        return array[:, 1:-1] if axis == 0 else array.T[:, 1:-1]

    def projection(self, axis: int, name: str) -> Histogram1D:
        """Sum the in-range bins of the other axis onto axis (0=x, 1=y)."""
        kept, _ = self._axis_edges(axis)
        result = Histogram1D(
            name, len(kept) - 1, float(kept[0]), float(kept[-1]), self.title
        )
        result.counts[...] = self._oriented(self.counts, axis).sum(axis=1)
        result.sumw2[...] = self._oriented(self.sumw2, axis).sum(axis=1)
        result.entries = self.entries
        return result

    def profile(self, axis: int, name: str) -> Profile:
        """Mean of the other coordinate (at bin centers) in bins of axis."""
        kept, summed = self._axis_edges(axis)
        result = Profile(
            name, len(kept) - 1, float(kept[0]), float(kept[-1]), self.title
        )
        weights = self._oriented(self.counts, axis)
        centers = _centers(summed)
        result.sum_w[...] = weights.sum(axis=1)
        result.sum_wy[...] = weights @ centers
        result.sum_wy2[...] = weights @ (centers * centers)
        result.entries = self.entries
        return result
