"""
Snapshot importer and post-import verification
"""

import random
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .constants import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_VERIFICATION_SAMPLE_SIZE,
    FULL_VERIFY_THRESHOLD,
    ON_ERROR_ABORT,
    ON_ERROR_CONTINUE,
    SINGLE_BATCH,
)
from .errors import BatchCommitError, MigrationCancelled
from .stores import DocumentStore, comparable


@dataclass
class ImportResult:
    documents_written: int = 0
    batches_committed: int = 0


@dataclass
class VerificationResult:
    checked: int = 0
    missing: list[str] = field(default_factory=list)
    mismatched: list[str] = field(default_factory=list)

    @property
    def match(self) -> bool:
        return not self.missing and not self.mismatched


def chunk_paths(paths: list[str], batch_size: int) -> list[list[str]]:
    """Split paths into chunks of at most batch_size (0 = one chunk)"""
    if batch_size < 0:
        raise ValueError("batch_size must not be negative")
    if not paths:
        return []
    if batch_size == SINGLE_BATCH:
        return [list(paths)]
    return [paths[i:i + batch_size] for i in range(0, len(paths), batch_size)]


def import_snapshot(
    store: DocumentStore,
    snapshot: Mapping[str, Mapping[str, Any]],
    batch_size: int = DEFAULT_BATCH_SIZE,
    on_error: str = ON_ERROR_ABORT,
    timeout: float | None = None,
    cancel: threading.Event | None = None,
    on_batch: Callable[[int, int], None] | None = None
) -> ImportResult:
    """
    Write every snapshot document to the target store

    Each document is fully overwritten at its original path. Writes are
    grouped into atomic batches of at most batch_size documents.

    Args:
        store: Target store
        snapshot: Mapping of document path to data
        batch_size: Writes per batch, 0 for a single batch holding everything
        on_error: 'abort' stops at the first failed batch, 'continue' commits the rest first
        timeout: Per-commit timeout in seconds
        cancel: Event that stops the import before the next batch
        on_batch: Called with (documents_written, total) after each commit

    Raises:
        BatchCommitError: If any batch fails to commit
        MigrationCancelled: If cancel is set before all batches commit
    """
    if on_error not in (ON_ERROR_ABORT, ON_ERROR_CONTINUE):
        raise ValueError(f"Unknown on_error policy: {on_error}")

    result = ImportResult()
    total = len(snapshot)
    failures: list[BatchCommitError] = []

    for chunk in chunk_paths(sorted(snapshot), batch_size):
        if cancel is not None and cancel.is_set():
            raise MigrationCancelled(
                f"Import cancelled after {result.documents_written} of {total} documents"
            )

        batch = store.batch()
        for path in chunk:
            batch.set(path, snapshot[path])

        try:
            batch.commit(timeout=timeout)
        except BatchCommitError as e:
            if on_error == ON_ERROR_ABORT:
                raise BatchCommitError(
                    f"{e} ({result.documents_written} of {total} documents already committed)",
                    committed=result.documents_written,
                    failed_paths=tuple(chunk),
                ) from e
            failures.append(e)
            continue

        result.documents_written += len(chunk)
        result.batches_committed += 1
        if on_batch:
            on_batch(result.documents_written, total)

    if failures:
        failed_paths = tuple(path for failure in failures for path in failure.failed_paths)
        raise BatchCommitError(
            f"{len(failures)} batch(es) failed, {result.documents_written} of {total} documents committed: "
            f"{failures[0]}",
            committed=result.documents_written,
            failed_paths=failed_paths,
        )

    return result


def verify_import(
    store: DocumentStore,
    snapshot: Mapping[str, Mapping[str, Any]],
    sample_size: int = DEFAULT_VERIFICATION_SAMPLE_SIZE,
    rng: random.Random | None = None
) -> VerificationResult:
    """
    Read documents back from the target and compare them with the snapshot

    Small snapshots are checked in full, larger ones by random sample.
    References and timestamps are compared by value, not by client.
    """
    paths = sorted(snapshot)
    if len(paths) > max(sample_size, FULL_VERIFY_THRESHOLD):
        paths = sorted((rng or random).sample(paths, sample_size))

    result = VerificationResult()
    for path in paths:
        found = store.get_document(path)
        result.checked += 1
        if found is None:
            result.missing.append(path)
        elif comparable(found) != comparable(dict(snapshot[path])):
            result.mismatched.append(path)
    return result
