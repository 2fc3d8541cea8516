"""
Collection tree exporter

Walks a root collection and every sub-collection reachable from its
documents, collecting each document under its full path.
"""

import threading
import time
from collections.abc import Callable
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Any, TypeVar

from .constants import DEFAULT_EXPORT_WORKERS, DEFAULT_MAX_RETRIES, DEFAULT_RETRY_DELAY
from .errors import MigrationCancelled, StoreAccessError
from .paths import join_path, validate_collection_path
from .snapshot import Snapshot
from .stores import DocumentStore

T = TypeVar('T')

ProgressCallback = Callable[[str, int], None]


def read_with_retry(
    read: Callable[[], T],
    max_retries: int = DEFAULT_MAX_RETRIES,
    retry_delay: float = DEFAULT_RETRY_DELAY,
    sleep: Callable[[float], None] = time.sleep
) -> T:
    """
    Run a store read, retrying transient failures with exponential backoff

    Args:
        read: Zero-argument callable performing the read
        max_retries: Total attempts before giving up
        retry_delay: Delay before the second attempt, doubled afterwards
        sleep: Sleep function (overridable in tests)

    Raises:
        StoreAccessError: When the failure is terminal or attempts run out
    """
    for attempt in range(1, max_retries + 1):
        try:
            return read()
        except StoreAccessError as e:
            if not e.retryable or attempt >= max_retries:
                raise
            sleep(retry_delay * 2 ** (attempt - 1))
    raise ValueError("max_retries must be at least 1")


class _LinkedCancel:
    """Set when the caller's event is set or when set() is called locally"""

    def __init__(self, parent: threading.Event | None):
        self.parent = parent
        self.local = threading.Event()

    def set(self) -> None:
        self.local.set()

    def is_set(self) -> bool:
        return self.local.is_set() or (self.parent is not None and self.parent.is_set())


def _check_cancelled(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise MigrationCancelled("Export cancelled")


def visit_collection(
    store: DocumentStore,
    collection_path: str,
    cancel: threading.Event | None = None,
    max_retries: int = DEFAULT_MAX_RETRIES,
    retry_delay: float = DEFAULT_RETRY_DELAY
) -> tuple[dict[str, dict[str, Any]], list[str]]:
    """
    Read one collection level

    Returns:
        (documents keyed by full path, sub-collection paths to visit next)
    """
    _check_cancelled(cancel)
    documents = read_with_retry(
        lambda: store.list_documents(collection_path), max_retries, retry_delay
    )

    found: dict[str, dict[str, Any]] = {}
    children: list[str] = []
    for doc in documents:
        document_path = join_path(collection_path, doc.id)
        found[document_path] = doc.data

        _check_cancelled(cancel)
        names = read_with_retry(
            lambda: store.list_subcollections(document_path), max_retries, retry_delay
        )
        children.extend(join_path(document_path, name) for name in names)
    return found, children


def _merge(snapshot: Snapshot, found: dict[str, dict[str, Any]]) -> None:
    for path, data in found.items():
        if path in snapshot:
            raise RuntimeError(f"Document visited twice: {path}")
        snapshot[path] = data


def export_collection(
    store: DocumentStore,
    root_path: str,
    max_workers: int = DEFAULT_EXPORT_WORKERS,
    cancel: threading.Event | None = None,
    on_collection: ProgressCallback | None = None,
    max_retries: int = DEFAULT_MAX_RETRIES,
    retry_delay: float = DEFAULT_RETRY_DELAY
) -> Snapshot:
    """
    Export a collection and all nested sub-collections

    Args:
        store: Source store
        root_path: Collection path to start from (e.g. 'users')
        max_workers: Number of collections read concurrently (1 = sequential)
        cancel: Event that aborts the walk when set
        on_collection: Called with (collection_path, documents_so_far) after each collection
        max_retries: Attempts per read for transient failures
        retry_delay: Base backoff delay in seconds

    Returns:
        Snapshot mapping every document path to its data

    Raises:
        StoreAccessError: If any read fails
        MigrationCancelled: If cancel is set during the walk
    """
    validate_collection_path(root_path)
    if max_workers < 1:
        raise ValueError("max_workers must be at least 1")

    if max_workers == 1:
        return _export_sequential(store, root_path, cancel, on_collection, max_retries, retry_delay)
    return _export_concurrent(store, root_path, max_workers, cancel, on_collection, max_retries, retry_delay)


def _export_sequential(store, root_path, cancel, on_collection, max_retries, retry_delay) -> Snapshot:
    snapshot: Snapshot = {}
    stack = [root_path]

    while stack:
        collection_path = stack.pop()
        found, children = visit_collection(store, collection_path, cancel, max_retries, retry_delay)
        _merge(snapshot, found)
        # Reversed so siblings come off the stack in listing order
        stack.extend(reversed(children))
        if on_collection:
            on_collection(collection_path, len(snapshot))

    return snapshot


def _export_concurrent(store, root_path, max_workers, cancel, on_collection, max_retries, retry_delay) -> Snapshot:
    snapshot: Snapshot = {}
    # The caller's event is only read, never set
    stop = _LinkedCancel(cancel)
    executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='export')
    pending: dict[Future, str] = {}

    def submit(path: str) -> None:
        future = executor.submit(visit_collection, store, path, stop, max_retries, retry_delay)
        pending[future] = path

    try:
        submit(root_path)
        while pending:
            done, _ = wait(pending, return_when=FIRST_COMPLETED)
            for future in done:
                collection_path = pending.pop(future)
                found, children = future.result()
                _merge(snapshot, found)
                for child in children:
                    submit(child)
                if on_collection:
                    on_collection(collection_path, len(snapshot))
    except BaseException:
        # Stop in-flight walks at their next read
        stop.set()
        executor.shutdown(wait=True, cancel_futures=True)
        raise

    executor.shutdown(wait=True)
    return snapshot
