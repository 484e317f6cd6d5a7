# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for the payload capability and the reference payloads."""

import math

import numpy as np
import pytest

from genro_mergestore import (
    Counter,
    Histogram1D,
    Histogram2D,
    IncompatiblePayloadError,
    MergeablePayload,
    PointSet,
    Profile,
    SparseHistogram,
    TypeMismatchError,
)
from genro_mergestore.payloads import type_tag_of


class TestMergeablePayload:
    """Tests for the MergeablePayload base class."""

    def test_is_abstract(self):
        """Test merge_in_place must be implemented."""
        with pytest.raises(TypeError):
            MergeablePayload('x')

    def test_name_validation(self):
        """Test empty names and names with separators are refused."""
        with pytest.raises(ValueError):
            Counter('')
        with pytest.raises(ValueError, match="cannot contain"):
            Counter('a/b')

    def test_type_tag(self):
        """Test the type tag is the class name."""
        assert Counter('c').type_tag == 'Counter'
        assert type_tag_of(Counter) == 'Counter'
        assert type_tag_of('Histogram1D') == 'Histogram1D'
        assert type_tag_of(Histogram1D('h', 2, 0, 1)) == 'Histogram1D'

    def test_clone_is_independent(self):
        """Test clone returns a deep, renamable copy."""
        h = Histogram1D('h', 4, 0.0, 4.0)
        h.fill(1.5)
        copy = h.clone()
        copy.fill(1.5)
        assert h.bin_content(2) == 1.0
        assert copy.bin_content(2) == 2.0
        assert h.clone('other').name == 'other'

    def test_defaults(self):
        """Test optional hooks have neutral defaults."""

        class Plain(MergeablePayload):
            def merge_in_place(self, other):
                self._check_same_type(other)

        plain = Plain('p')
        assert plain.is_empty() is False
        assert plain.transform('PX', 'name') is None
        assert plain.estimate_size() is None
        assert plain.summary() == ''
        assert repr(plain) == "Plain('p')"


class TestCounter:
    """Tests for Counter."""

    def test_merge_adds(self):
        """Test merging sums the values."""
        c = Counter('c', 5)
        c.merge_in_place(Counter('c', 7))
        assert c.value == 12

    def test_merge_other_type_raises(self):
        """Test merging a different type raises TypeMismatchError."""
        with pytest.raises(TypeMismatchError, match="Cannot add PointSet to Counter"):
            Counter('c').merge_in_place(PointSet('c'))

    def test_is_empty(self):
        """Test a zero counter is empty."""
        c = Counter('c')
        assert c.is_empty()
        c.add()
        assert not c.is_empty()

    def test_equality(self):
        """Test counters compare by name and value."""
        assert Counter('c', 3) == Counter('c', 3)
        assert Counter('c', 3) != Counter('c', 4)
        assert Counter('c', 3) != Counter('d', 3)


class TestHistogram1D:
    """Tests for Histogram1D."""

    def test_fill_and_flow_bins(self):
        """Test in-range, underflow and overflow filling."""
        h = Histogram1D('h', 10, 0.0, 100.0)
        h.fill(12.5)
        h.fill(-1.0)
        h.fill(100.0)
        h.fill(55.0, weight=2.0)
        assert h.entries == 4
        assert h.bin_content(2) == 1.0
        assert h.bin_content(0) == 1.0
        assert h.bin_content(11) == 1.0
        assert h.bin_content(6) == 2.0
        assert h.sum_of_weights() == 3.0

    def test_fill_many(self):
        """Test vectorized filling."""
        h = Histogram1D('h', 4, 0.0, 4.0)
        h.fill_many([0.5, 0.5, 3.5], weights=[1.0, 2.0, 1.0])
        assert h.entries == 3
        assert h.bin_content(1) == 3.0
        assert h.bin_content(4) == 1.0
        assert h.sumw2[1] == 5.0

    def test_merge(self):
        """Test merging adds contents and entries."""
        a = Histogram1D('h', 4, 0.0, 4.0)
        b = Histogram1D('h', 4, 0.0, 4.0)
        a.fill(0.5)
        b.fill(0.5)
        b.fill(2.5)
        a.merge_in_place(b)
        assert a.entries == 3
        assert a.bin_content(1) == 2.0
        assert a.bin_content(3) == 1.0

    def test_merge_different_binning_raises(self):
        """Test different edges are incompatible."""
        a = Histogram1D('h', 4, 0.0, 4.0)
        b = Histogram1D('h', 8, 0.0, 4.0)
        with pytest.raises(IncompatiblePayloadError):
            a.merge_in_place(b)

    def test_empty_and_summary(self):
        """Test is_empty and the report summary."""
        h = Histogram1D('h', 4, 0.0, 4.0, title='ADC')
        assert h.is_empty()
        h.fill(1.0)
        assert not h.is_empty()
        assert h.summary() == 'ADC | Entries=1 Sum=1'

    def test_mean(self):
        """Test the mean of bin centers."""
        h = Histogram1D('h', 4, 0.0, 4.0)
        assert h.mean() == 0.0
        h.fill_many([0.5, 2.5])
        assert h.mean() == pytest.approx(1.5)

    def test_invalid_axis(self):
        """Test invalid binning is refused."""
        with pytest.raises(ValueError):
            Histogram1D('h', 0, 0.0, 1.0)
        with pytest.raises(ValueError):
            Histogram1D('h', 2, 1.0, 1.0)

    def test_estimate_size(self):
        """Test the size estimate counts the numpy buffers."""
        h = Histogram1D('h', 8, 0.0, 1.0)
        assert h.estimate_size() == 10 * 8 * 2 + 9 * 8 + 1


class TestHistogram2D:
    """Tests for Histogram2D and its derived views."""

    @pytest.fixture
    def h2(self):
        h = Histogram2D('h2', 2, 0.0, 2.0, 2, 0.0, 2.0)
        h.fill(0.5, 0.5)
        h.fill(0.5, 1.5)
        h.fill(1.5, 1.5, weight=2.0)
        return h

    def test_fill(self, h2):
        """Test 2D filling."""
        assert h2.entries == 3
        assert h2.bin_content(1, 1) == 1.0
        assert h2.bin_content(2, 2) == 2.0
        assert h2.sum_of_weights() == 4.0

    def test_projection_x(self, h2):
        """Test PX sums over y."""
        px = h2.transform('PX', 'px')
        assert isinstance(px, Histogram1D)
        assert px.name == 'px'
        assert px.bin_content(1) == 2.0
        assert px.bin_content(2) == 2.0

    def test_projection_y(self, h2):
        """Test PY sums over x."""
        py = h2.transform('PY', 'py')
        assert py.bin_content(1) == 1.0
        assert py.bin_content(2) == 3.0

    def test_profile_x(self, h2):
        """Test PFX gives the mean y per x bin."""
        pfx = h2.transform('PFX', 'pfx')
        assert isinstance(pfx, Profile)
        assert pfx.bin_mean(1) == pytest.approx(1.0)
        assert pfx.bin_mean(2) == pytest.approx(1.5)

    def test_profile_y(self, h2):
        """Test PFY gives the mean x per y bin."""
        pfy = h2.transform('PFY', 'pfy')
        assert pfy.bin_mean(1) == pytest.approx(0.5)
        assert pfy.bin_mean(2) == pytest.approx((0.5 + 2 * 1.5) / 3)

    def test_unknown_action(self, h2):
        """Test unknown actions give no view."""
        assert h2.transform('RB', 'x') is None

    def test_merge_checks_both_axes(self, h2):
        """Test y binning must match too."""
        other = Histogram2D('h2', 2, 0.0, 2.0, 4, 0.0, 2.0)
        with pytest.raises(IncompatiblePayloadError, match="yedges"):
            h2.merge_in_place(other)


class TestProfile:
    """Tests for Profile."""

    def test_fill_and_merge(self):
        """Test per-bin means survive merging."""
        a = Profile('p', 2, 0.0, 2.0)
        b = Profile('p', 2, 0.0, 2.0)
        a.fill(0.5, 10.0)
        b.fill(0.5, 20.0)
        a.merge_in_place(b)
        assert a.entries == 2
        assert a.bin_mean(1) == pytest.approx(15.0)
        assert a.bin_mean(2) == 0.0
        assert a.bin_entries(1) == 2.0


class TestSparseHistogram:
    """Tests for SparseHistogram."""

    def test_fill_and_merge(self):
        """Test sparse accumulation and merging."""
        a = SparseHistogram('s', ndim=2)
        b = SparseHistogram('s', ndim=2)
        a.fill((1, 2))
        b.fill((1, 2), 2.0)
        b.fill((5, 5))
        a.merge_in_place(b)
        assert a.bin_content((1, 2)) == 3.0
        assert a.bin_content((5, 5)) == 1.0
        assert a.n_filled_bins == 2
        assert a.entries == 3
        assert a.estimate_size() == 8

    def test_wrong_dimension(self):
        """Test coordinate count and merge dimension checks."""
        s = SparseHistogram('s', ndim=2)
        with pytest.raises(ValueError):
            s.fill((1,))
        with pytest.raises(IncompatiblePayloadError):
            s.merge_in_place(SparseHistogram('s', ndim=3))


class TestPointSet:
    """Tests for PointSet."""

    def test_merge_appends(self):
        """Test merging appends the other points in order."""
        a = PointSet('g')
        b = PointSet('g')
        a.add_point(0, 1)
        b.add_point(1, 3)
        a.merge_in_place(b)
        assert a.points == [(0.0, 1.0), (1.0, 3.0)]
        assert a.mean() == pytest.approx(2.0)
        assert a.rms() == pytest.approx(1.0)
        assert a.mean(axis=0) == pytest.approx(0.5)

    def test_empty_summary_is_flagged(self):
        """Test an empty set has a NaN mean flagged in the summary."""
        g = PointSet('g', title='gain')
        assert g.is_empty()
        assert math.isnan(g.mean())
        assert g.summary().endswith(' !')
        assert np.isnan(g.rms())
