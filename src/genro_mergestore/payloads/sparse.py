# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Sparse N-dimensional accumulator."""

from __future__ import annotations

from ..exceptions import IncompatiblePayloadError
from .base import MergeablePayload

# bytes per filled bin used by estimate_size (single precision content)
_BYTES_PER_BIN = 4


class SparseHistogram(MergeablePayload):
    """Weights accumulated on integer bin coordinates, storing filled bins only.

    Example:
        >>> s = SparseHistogram('occupancy', ndim=2)
        >>> s.fill((3, 7))
        >>> s.fill((3, 7), 2.0)
        >>> s.bin_content((3, 7))
        3.0
    """

    def __init__(self, name: str, ndim: int, title: str = '') -> None:
        super().__init__(name, title)
        if ndim < 1:
            raise ValueError(f'ndim must be positive, got {ndim}')
        self.ndim = ndim
        self.entries = 0
        self._bins: dict[tuple[int, ...], float] = {}

    def fill(self, coordinates: tuple[int, ...], weight: float = 1.0) -> None:
        coordinates = tuple(int(c) for c in coordinates)
        if len(coordinates) != self.ndim:
            raise ValueError(
                f'{self.name} expects {self.ndim} coordinates, got {len(coordinates)}'
            )
        self._bins[coordinates] = self._bins.get(coordinates, 0.0) + weight
        self.entries += 1

    def bin_content(self, coordinates: tuple[int, ...]) -> float:
        return self._bins.get(tuple(coordinates), 0.0)

    @property
    def n_filled_bins(self) -> int:
        return len(self._bins)

    def sum_of_weights(self) -> float:
        return sum(self._bins.values())

    def merge_in_place(self, other: MergeablePayload) -> None:
        self._check_same_type(other)
        assert isinstance(other, SparseHistogram)
        if other.ndim != self.ndim:
            raise IncompatiblePayloadError(
                f'Cannot merge {other.ndim}-dimensional {other.name} '
                f'into {self.ndim}-dimensional {self.name}'
            )
        for coordinates, weight in other._bins.items():
            self._bins[coordinates] = self._bins.get(coordinates, 0.0) + weight
        self.entries += other.entries

    def is_empty(self) -> bool:
        return self.entries == 0

    def estimate_size(self) -> int:
        return _BYTES_PER_BIN * self.n_filled_bins

    def summary(self) -> str:
        return f'{self.title} | Entries={self.entries} Bins={self.n_filled_bins}'
