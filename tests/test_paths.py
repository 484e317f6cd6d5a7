# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for key-path encoding and decoding."""

import logging

import pytest

from genro_mergestore import IndexOutOfRangeError, MalformedIdentifierError
from genro_mergestore.paths import (
    ROOT,
    canonicalize,
    count_levels,
    decompose_segment,
    get_key,
    join_segments,
    key_path_of,
    migrate_legacy_key,
    normalize_name,
    object_name_of,
    split_key_path,
)


class TestCanonicalize:
    """Tests for canonicalize."""

    def test_adds_missing_separators(self):
        """Test leading and trailing separators are added."""
        assert canonicalize('A/B') == '/A/B/'
        assert canonicalize('/A/B') == '/A/B/'
        assert canonicalize('A/B/') == '/A/B/'

    def test_collapses_doubled_separators(self):
        """Test consecutive separators are collapsed."""
        assert canonicalize('//A//B///') == '/A/B/'

    def test_empty_is_root(self):
        """Test empty input and bare separators give the root."""
        assert canonicalize('') == ROOT
        assert canonicalize(None) == ROOT
        assert canonicalize('///') == ROOT

    def test_idempotent(self):
        """Test canonical paths are left unchanged."""
        assert canonicalize('/A/B/') == '/A/B/'
        assert canonicalize(canonicalize('x//y')) == '/x/y/'


class TestDecomposeSegment:
    """Tests for decompose_segment and friends."""

    def test_key_levels(self):
        """Test each key level is extracted by index."""
        assert decompose_segment('/A/B/h', 0) == 'A'
        assert decompose_segment('/A/B/h', 1) == 'B'

    def test_last_is_object_name(self):
        """Test index -1 returns the object name."""
        assert decompose_segment('/A/B/h', -1) == 'h'
        assert decompose_segment('/h', -1) == 'h'

    def test_round_trip(self):
        """Test segments survive canonicalize then decompose."""
        segments = ['DET', 'ch-1', 'run_42', 'x.y']
        key_path = join_segments(segments)
        assert [get_key(key_path, i) for i in range(len(segments))] == segments

    def test_index_out_of_range_logs_and_returns_empty(self, caplog):
        """Test an index past the key levels is logged, giving ''."""
        with caplog.at_level(logging.ERROR):
            assert decompose_segment('/A/B/h', 2) == ''
        assert 'Requiring index 2' in caplog.text

    def test_malformed_logs_and_returns_empty(self, caplog):
        """Test an identifier without leading separator is logged, giving ''."""
        with caplog.at_level(logging.ERROR):
            assert decompose_segment('A/B/h', 0) == ''
        assert 'malformed' in caplog.text

    def test_strict_raises(self):
        """Test strict mode raises the error instead."""
        with pytest.raises(IndexOutOfRangeError):
            decompose_segment('/A/h', 1, strict=True)
        with pytest.raises(MalformedIdentifierError):
            decompose_segment('A/h', 0, strict=True)

    def test_index_out_of_range_is_index_error(self):
        """Test IndexOutOfRangeError can be caught as IndexError."""
        with pytest.raises(IndexError):
            decompose_segment('/h', 0, strict=True)


class TestIdentifierParts:
    """Tests for key_path_of, object_name_of and helpers."""

    def test_key_path_of(self):
        """Test the key-path of a full identifier."""
        assert key_path_of('/A/B/h') == '/A/B/'
        assert key_path_of('/h') == ROOT
        assert key_path_of('h') == ROOT

    def test_key_path_of_malformed(self, caplog):
        """Test a malformed identifier gives an empty key-path."""
        with caplog.at_level(logging.ERROR):
            assert key_path_of('A/h') == ''
        with pytest.raises(MalformedIdentifierError):
            key_path_of('A/h', strict=True)

    def test_object_name_of(self):
        """Test the object name of a full identifier."""
        assert object_name_of('/A/B/h') == 'h'
        assert object_name_of('h') == 'h'

    def test_count_levels(self):
        """Test the number of key levels."""
        assert count_levels('/A/B/h') == 2
        assert count_levels('/h') == 0
        assert count_levels('h') == 0

    def test_split_key_path(self):
        """Test key-path splitting."""
        assert split_key_path('/A/B/') == ['A', 'B']
        assert split_key_path(ROOT) == []

    def test_migrate_legacy_key(self):
        """Test legacy './' fragments are dropped."""
        assert migrate_legacy_key('./A/./B/') == '/A/B/'
        assert migrate_legacy_key('/A/B/') == '/A/B/'

    def test_normalize_name(self):
        """Test derived names contain no separators or dashes."""
        assert normalize_name('stats', '/A/ch-1/h2', 'PX') == 'stats__A_ch_1_h2_PX'
