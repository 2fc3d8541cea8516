"""
doctree-copier - Copy a document collection tree between stores

Exports a collection and every nested sub-collection from a source
document store (Firestore or MongoDB) and writes it into a target store
through atomic write batches.
"""

__version__ = "1.0.0"

from .core import TreeCopier
from .errors import BatchCommitError, MigrationCancelled, MigrationError, StoreAccessError
from .exporter import export_collection
from .importer import import_snapshot, verify_import
from .settings import SettingsManager
from .stores import DocumentStore, StoreFactory

__all__ = [
    "TreeCopier",
    "export_collection",
    "import_snapshot",
    "verify_import",
    "DocumentStore",
    "StoreFactory",
    "SettingsManager",
    "MigrationError",
    "StoreAccessError",
    "BatchCommitError",
    "MigrationCancelled",
]
