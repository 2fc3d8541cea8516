"""
Tests for path helpers
"""

import pytest

from doctree_copier.paths import (
    collection_of,
    collection_pattern,
    document_id_of,
    is_collection_path,
    is_document_path,
    join_path,
    split_path,
)


class TestPaths:
    """Test path helpers"""

    def test_split_path(self):
        assert split_path('users/u1/orders') == ['users', 'u1', 'orders']

    @pytest.mark.parametrize('path', ['', '/users', 'users/', 'users//orders'])
    def test_split_path_invalid(self, path):
        with pytest.raises(ValueError):
            split_path(path)

    def test_join_path(self):
        assert join_path('users', 'u1', 'orders') == 'users/u1/orders'

    def test_join_path_rejects_empty_segment(self):
        with pytest.raises(ValueError):
            join_path('users', '', 'orders')

    def test_document_and_collection_paths(self):
        assert is_collection_path('users')
        assert is_document_path('users/u1')
        assert is_collection_path('users/u1/orders')
        assert is_document_path('users/u1/orders/o1')
        assert not is_document_path('users/u1/orders')

    def test_collection_of(self):
        assert collection_of('users/u1/orders/o1') == 'users/u1/orders'
        assert document_id_of('users/u1/orders/o1') == 'o1'

    def test_collection_of_rejects_collection_path(self):
        with pytest.raises(ValueError):
            collection_of('users/u1/orders')

    def test_collection_pattern(self):
        assert collection_pattern('users/u1') == 'users'
        assert collection_pattern('users/u1/orders/o1') == 'users/*/orders'
        assert collection_pattern('users/u1/orders') == 'users/*/orders'
        assert collection_pattern('a/1/b/2/c/3') == 'a/*/b/*/c'
