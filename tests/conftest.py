"""
Shared fixtures: an in-memory document store
"""

import copy
from dataclasses import dataclass, field

import pytest

from doctree_copier.errors import BatchCommitError, StoreAccessError
from doctree_copier.paths import collection_of, document_id_of, is_collection_path
from doctree_copier.stores import DocumentStore, StoredDocument, WriteBatch


@dataclass
class InMemoryWriteBatch(WriteBatch):
    store: 'InMemoryStore' = None
    writes: dict = field(default_factory=dict)

    def _set(self, path, data):
        self.writes[path] = data

    def commit(self, timeout=None):
        self.store.commit_calls.append(list(self.paths))
        if self.store.max_batch_writes is not None and len(self) > self.store.max_batch_writes:
            raise BatchCommitError(f"too many writes: {len(self)}", failed_paths=tuple(self.paths))
        if any(path in self.store.fail_commit_paths for path in self.paths):
            raise BatchCommitError("commit rejected", failed_paths=tuple(self.paths))
        for path, data in self.writes.items():
            self.store.docs[path] = copy.deepcopy(data)


class InMemoryStore(DocumentStore):
    """
    Store keeping documents in a dict keyed by full path

    Like Firestore, a sub-collection exists only while it holds documents.
    """

    description = 'memory'

    def __init__(self, docs=None):
        self.docs = {path: copy.deepcopy(data) for path, data in (docs or {}).items()}
        self.fail_read_paths: dict[str, int | None] = {}
        self.fail_commit_paths: set[str] = set()
        self.max_batch_writes: int | None = None
        self.commit_calls: list[list[str]] = []
        self.reads: list[str] = []
        self.closed = False
        self._retryable = False

    def fail_reads(self, path, times=None, retryable=False):
        """Fail reads of path, `times` times (None = always)"""
        self.fail_read_paths[path] = times
        self._retryable = retryable

    def _read(self, path):
        self.reads.append(path)
        if path in self.fail_read_paths:
            remaining = self.fail_read_paths[path]
            if remaining is None or remaining > 0:
                if remaining is not None:
                    self.fail_read_paths[path] = remaining - 1
                raise StoreAccessError("read failed", path=path, retryable=self._retryable)

    def list_collections(self):
        return sorted({path.split('/')[0] for path in self.docs})

    def list_documents(self, collection_path):
        assert is_collection_path(collection_path)
        self._read(collection_path)
        return [
            StoredDocument(id=document_id_of(path), data=copy.deepcopy(data))
            for path, data in sorted(self.docs.items())
            if collection_of(path) == collection_path
        ]

    def get_document(self, document_path):
        self._read(document_path)
        data = self.docs.get(document_path)
        return copy.deepcopy(data) if data is not None else None

    def list_subcollections(self, document_path):
        self._read(document_path)
        prefix = document_path + '/'
        return sorted({
            path[len(prefix):].split('/')[0]
            for path in self.docs
            if path.startswith(prefix)
        })

    def batch(self):
        return InMemoryWriteBatch(store=self)

    def close(self):
        self.closed = True


# Depth 4 tree; documents with 0, 1 and 2 sub-collections
TREE = {
    'users/u1': {'name': 'A'},
    'users/u1/orders/o1': {'total': 5},
    'users/u1/orders/o2': {'total': 7, 'items': [{'sku': 'x', 'qty': 1}]},
    'users/u1/orders/o1/lines/l1': {'sku': 'x'},
    'users/u1/orders/o1/lines/l1/notes/n1': {'text': 'fragile'},
    'users/u1/addresses/a1': {'city': 'Turin', 'geo': {'lat': 45.07, 'lng': 7.69}},
    'users/u2': {'name': 'B', 'tags': []},
    'users/u3': {},
    'products/p1': {'name': 'not exported'},
}


@pytest.fixture
def tree_store():
    return InMemoryStore(TREE)


@pytest.fixture
def empty_store():
    return InMemoryStore()


@pytest.fixture
def users_tree():
    return {path: data for path, data in TREE.items() if path.startswith('users/')}
