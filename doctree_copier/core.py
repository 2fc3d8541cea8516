#!/usr/bin/env python
"""
Document Tree Copy Tool
Export a collection tree from one store and import it into another
"""

import threading
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

from .constants import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_EXPORT_WORKERS,
    DEFAULT_STORE_TIMEOUT,
    DEFAULT_VERIFICATION_SAMPLE_SIZE,
    ON_ERROR_ABORT,
)
from .exporter import export_collection
from .formatting import format_docs, format_number
from .importer import import_snapshot, verify_import
from .snapshot import Snapshot, summarize_snapshot
from .stores import DocumentStore, StoreFactory

console = Console()


class TreeCopier:
    """Copies a collection tree between two independently connected stores"""

    def __init__(
        self,
        source: str | None,
        target: str | None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        workers: int = DEFAULT_EXPORT_WORKERS,
        timeout: float | None = DEFAULT_STORE_TIMEOUT,
        on_error: str = ON_ERROR_ABORT
    ):
        self.source_descriptor = source
        self.target_descriptor = target
        self.batch_size = batch_size
        self.workers = workers
        self.timeout = timeout
        self.on_error = on_error
        self.source_store: DocumentStore | None = None
        self.target_store: DocumentStore | None = None
        self.cancel = threading.Event()

    def connect(self):
        """Open the source and target stores that have a descriptor"""
        if self.source_descriptor and self.source_store is None:
            self.source_store = StoreFactory.create(self.source_descriptor, timeout=self.timeout)
        if self.target_descriptor and self.target_store is None:
            self.target_store = StoreFactory.create(self.target_descriptor, timeout=self.timeout)
        return self

    def close(self):
        """Close connections"""
        if self.source_store:
            self.source_store.close()
        if self.target_store:
            self.target_store.close()

    def export(self, collection: str) -> Snapshot:
        """Export a collection tree from the source store"""
        if self.source_store is None:
            raise RuntimeError("Source store is not connected")

        console.print(f"[cyan]📤 Exporting '{collection}' and its sub-collections...[/cyan]")
        with console.status("[dim]Walking collections...[/dim]") as status:
            def on_collection(path: str, documents: int) -> None:
                status.update(f"[dim]{path} · {format_number(documents)} documents[/dim]")

            snapshot = export_collection(
                self.source_store,
                collection,
                max_workers=self.workers,
                cancel=self.cancel,
                on_collection=on_collection
            )

        console.print(f"[green]✅ Exported {format_number(len(snapshot))} documents from '{collection}'[/green]")
        return snapshot

    def import_(self, snapshot: Mapping[str, Mapping[str, Any]]) -> dict[str, int]:
        """Import a snapshot into the target store"""
        if self.target_store is None:
            raise RuntimeError("Target store is not connected")

        console.print(f"[cyan]📥 Importing {format_number(len(snapshot))} documents...[/cyan]")
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console
        ) as progress:
            task = progress.add_task("Writing...", total=len(snapshot))
            result = import_snapshot(
                self.target_store,
                MappingProxyType(dict(snapshot)),
                batch_size=self.batch_size,
                on_error=self.on_error,
                timeout=self.timeout,
                cancel=self.cancel,
                on_batch=lambda written, total: progress.update(task, completed=written)
            )

        console.print(
            f"[green]✅ Wrote {format_number(result.documents_written)} documents "
            f"in {result.batches_committed} batch(es)[/green]"
        )
        return {
            'documents_written': result.documents_written,
            'batches_committed': result.batches_committed,
        }

    def verify(
        self,
        snapshot: Mapping[str, Mapping[str, Any]],
        sample_size: int = DEFAULT_VERIFICATION_SAMPLE_SIZE
    ) -> dict[str, Any]:
        """Verify that the target holds the snapshot's documents"""
        if self.target_store is None:
            raise RuntimeError("Target store is not connected")

        console.print("[cyan]🔍 Verifying copy...[/cyan]")
        result = verify_import(self.target_store, snapshot, sample_size=sample_size)
        return {
            'checked': result.checked,
            'missing': result.missing,
            'mismatched': result.mismatched,
            'match': result.match,
        }

    def migrate(self, collection: str, dry_run: bool = False, verify: bool = False) -> dict[str, Any]:
        """
        Export a collection tree from source and import it into target

        Args:
            collection: Root collection name
            dry_run: Export and summarize only, write nothing
            verify: Read documents back from target after import

        Returns:
            Summary of the run
        """
        snapshot = self.export(collection)
        collections = summarize_snapshot(snapshot)
        display_snapshot_summary(collections)

        summary: dict[str, Any] = {
            'documents_exported': len(snapshot),
            'collections': collections,
            'documents_written': 0,
            'batches_committed': 0,
        }

        if dry_run:
            console.print("[yellow]Dry run: nothing written to target[/yellow]")
            return summary

        summary.update(self.import_(snapshot))

        if verify:
            summary['verification'] = self.verify(snapshot)

        return summary


def display_snapshot_summary(collections: dict[str, int]) -> None:
    """Display documents per collection pattern"""
    table = Table(title="📋 Snapshot Summary", show_header=True)
    table.add_column("Collection", style="cyan")
    table.add_column("Documents", justify="right", style="green")

    for pattern, count in collections.items():
        table.add_row(pattern, format_docs(count))

    console.print(table)
    console.print(f"\n[bold]Total:[/bold] {format_docs(sum(collections.values()))} documents")
