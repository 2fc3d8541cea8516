"""
Test utility functions
"""

from unittest.mock import Mock, patch

from doctree_copier.utils import format_task_table_row
from doctree_copier.utils import test_connection as verify_connection  # Renamed to avoid pytest confusion
from doctree_copier.errors import StoreAccessError

from .conftest import InMemoryStore


class TestConnection:
    """Test connection checks"""

    @patch('doctree_copier.utils.StoreFactory.create')
    def test_connection_success(self, mock_create):
        store = InMemoryStore({'users/u1': {}, 'products/p1': {}})
        mock_create.return_value = store

        success, message = verify_connection('firestore://p')

        assert success is True
        assert message == 'OK (2 collections)'
        assert store.closed

    @patch('doctree_copier.utils.StoreFactory.create')
    def test_connection_failure(self, mock_create):
        mock_create.side_effect = StoreAccessError("Connection failed")

        success, message = verify_connection('mongodb://invalid/app')

        assert success is False
        assert 'Connection failed' in message

    @patch('doctree_copier.utils.StoreFactory.create')
    def test_listing_failure_closes_store(self, mock_create):
        store = InMemoryStore()
        store.list_collections = Mock(side_effect=StoreAccessError("denied"))
        mock_create.return_value = store

        success, message = verify_connection('firestore://p')

        assert success is False
        assert store.closed


class TestFormatTaskTableRow:
    """Test task table rows"""

    def test_copy_task(self):
        name, display, collection = format_task_table_row('nightly', {
            'source': 'mongodb://admin:secret@db/app',
            'target': 'stg-sa.json',
            'collection': 'users',
        })

        assert name == 'nightly'
        assert 'secret' not in display
        assert 'stg-sa.json' in display
        assert collection == 'users'

    def test_invalid_copy_task(self):
        _, display, collection = format_task_table_row('broken', {'source': 'a.json'})

        assert 'Invalid' in display
        assert collection == 'N/A'

    def test_export_and_import_tasks(self):
        _, display, collection = format_task_table_row('dump', {
            'type': 'export', 'source': 'a.json', 'collection': 'users', 'file': 'users.jsonl',
        })
        assert 'EXPORT' in display
        assert collection == 'users'

        _, display, collection = format_task_table_row('load', {
            'type': 'import', 'target': 'b.json', 'file': 'users.jsonl',
        })
        assert 'IMPORT' in display
        assert collection == 'from file'
