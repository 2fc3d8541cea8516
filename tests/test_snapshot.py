"""
Tests for snapshot summaries and the JSONL snapshot file format
"""

import io
import json
from datetime import datetime, timezone

import pytest

from doctree_copier.snapshot import dump_snapshot, load_snapshot, summarize_snapshot


class TestSummarizeSnapshot:
    """Test summarize_snapshot"""

    def test_groups_by_collection_pattern(self, users_tree):
        assert summarize_snapshot(users_tree) == {
            'users': 3,
            'users/*/addresses': 1,
            'users/*/orders': 2,
            'users/*/orders/*/lines': 1,
            'users/*/orders/*/lines/*/notes': 1,
        }

    def test_empty(self):
        assert summarize_snapshot({}) == {}


class TestSnapshotFile:
    """Test dump_snapshot / load_snapshot"""

    def test_one_record_per_line(self):
        """Test each document is written as its own JSON line keyed by path"""
        fh = io.StringIO()

        written = dump_snapshot({'users/u1': {'name': 'A'}, 'users/u1/orders/o1': {'total': 5}}, fh)

        lines = fh.getvalue().splitlines()
        assert written == 2
        assert [json.loads(line) for line in lines] == [
            {'path': 'users/u1', 'data': {'name': 'A'}},
            {'path': 'users/u1/orders/o1', 'data': {'total': 5}},
        ]

    def test_reload(self, users_tree):
        fh = io.StringIO()
        dump_snapshot(users_tree, fh)
        fh.seek(0)

        assert load_snapshot(fh) == users_tree

    def test_datetime_and_bytes(self):
        """Test tagged values come back as datetime and bytes"""
        created = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
        snapshot = {'files/f1': {'created': created, 'blob': b'\x00\xff', 'history': [created]}}
        fh = io.StringIO()

        dump_snapshot(snapshot, fh)
        fh.seek(0)
        loaded = load_snapshot(fh)

        assert loaded == snapshot
        assert '__datetime__' in fh.getvalue()

    @pytest.mark.parametrize('field', [
        {'__datetime__': 'not a date'},
        {'__bytes__': 'plain text'},
        {'__mapping__': {'a': 1}},
        {'__datetime__': datetime(2024, 5, 1, tzinfo=timezone.utc)},
    ])
    def test_tag_shaped_user_fields(self, field):
        """Test user mappings that look like tagged values survive reload"""
        snapshot = {'users/u1': {'meta': field}, 'users/u2': field}
        fh = io.StringIO()

        dump_snapshot(snapshot, fh)
        fh.seek(0)

        assert load_snapshot(fh) == snapshot

    def test_unsupported_value(self):
        """Test values without an encoding raise TypeError naming the path"""
        with pytest.raises(TypeError, match='users/u1'):
            dump_snapshot({'users/u1': {'obj': object()}}, io.StringIO())

    def test_blank_lines_ignored(self):
        fh = io.StringIO('{"path": "users/u1", "data": {}}\n\n')
        assert load_snapshot(fh) == {'users/u1': {}}

    def test_duplicate_path(self):
        fh = io.StringIO(
            '{"path": "users/u1", "data": {}}\n'
            '{"path": "users/u1", "data": {"x": 1}}\n'
        )
        with pytest.raises(ValueError, match='Duplicate'):
            load_snapshot(fh)

    @pytest.mark.parametrize('line', [
        'not json',
        '{"data": {}}',
        '{"path": "users", "data": {}}',
        '{"path": "users/u1", "data": [1, 2]}',
    ])
    def test_malformed_records(self, line):
        with pytest.raises(ValueError):
            load_snapshot(io.StringIO(line + '\n'))
