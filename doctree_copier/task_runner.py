"""
Centralized task runner
Handles copy, export and import tasks for the CLI and saved tasks
"""

from pathlib import Path
from typing import Any

from rich.console import Console

from .constants import DEFAULT_BATCH_SIZE, DEFAULT_EXPORT_WORKERS, DEFAULT_STORE_TIMEOUT, ON_ERROR_ABORT
from .core import TreeCopier, display_snapshot_summary
from .formatting import format_number, format_size
from .settings import SettingsManager
from .snapshot import dump_snapshot, load_snapshot, summarize_snapshot
from .stores import mask_descriptor

console = Console()


def _build_copier(task_config: dict[str, Any], settings: SettingsManager | None) -> TreeCopier:
    resolve = settings.resolve if settings else (lambda value: value)
    return TreeCopier(
        resolve(task_config.get('source')),
        resolve(task_config.get('target')),
        batch_size=task_config.get('batch_size', DEFAULT_BATCH_SIZE),
        workers=task_config.get('workers', DEFAULT_EXPORT_WORKERS),
        timeout=task_config.get('timeout', DEFAULT_STORE_TIMEOUT),
        on_error=task_config.get('on_error', ON_ERROR_ABORT)
    )


def run_task(task_config: dict[str, Any], settings: SettingsManager | None = None) -> bool:
    """
    Execute a task based on its type

    Args:
        task_config: Task configuration dictionary
        settings: Used to resolve saved host names to descriptors

    Returns:
        True if successful, False otherwise
    """
    task_type = task_config.get('type', 'copy')
    runners = {
        'copy': run_copy_task,
        'export': run_export_task,
        'import': run_import_task,
    }
    runner = runners.get(task_type)
    if runner is None:
        console.print(f"[red]❌ Unknown task type: {task_type}[/red]")
        return False

    copier = _build_copier(task_config, settings)
    try:
        copier.connect()
        return runner(copier, task_config)
    except KeyboardInterrupt:
        copier.cancel.set()
        console.print("[red]Cancelled[/red]")
        return False
    except Exception as e:
        console.print(f"[red]❌ {task_type.capitalize()} error: {e}[/red]")
        return False
    finally:
        copier.close()


def run_copy_task(copier: TreeCopier, task_config: dict[str, Any]) -> bool:
    """Execute a copy task"""
    result = copier.migrate(
        task_config['collection'],
        dry_run=task_config.get('dry_run', False),
        verify=task_config.get('verify', False)
    )

    if task_config.get('dry_run'):
        return True

    console.print(f"[green]✅ Copied {format_number(result['documents_written'])} documents[/green]")

    verification = result.get('verification')
    if verification is not None:
        if verification['match']:
            console.print(f"[green]✅ Verification passed ({verification['checked']} documents checked)[/green]")
        else:
            console.print("[yellow]⚠ Verification issues found[/yellow]")
            console.print(f"  Missing: {len(verification['missing'])}")
            console.print(f"  Mismatched: {len(verification['mismatched'])}")
            return False

    return True


def run_export_task(copier: TreeCopier, task_config: dict[str, Any]) -> bool:
    """Export a collection tree to a snapshot file"""
    snapshot = copier.export(task_config['collection'])
    display_snapshot_summary(summarize_snapshot(snapshot))

    path = Path(task_config['file']).expanduser()
    with open(path, 'w', encoding='utf-8') as fh:
        written = dump_snapshot(snapshot, fh)

    console.print(f"[green]✅ Snapshot saved![/green]")
    console.print(f"  File: {path}")
    console.print(f"  Size: {format_size(path.stat().st_size)}")
    console.print(f"  Documents: {format_number(written)}")
    return True


def run_import_task(copier: TreeCopier, task_config: dict[str, Any]) -> bool:
    """Import a snapshot file into the target store"""
    path = Path(task_config['file']).expanduser()
    with open(path, 'r', encoding='utf-8') as fh:
        snapshot = load_snapshot(fh)

    display_snapshot_summary(summarize_snapshot(snapshot))
    if task_config.get('dry_run'):
        console.print("[yellow]Dry run: nothing written to target[/yellow]")
        return True

    result = copier.import_(snapshot)
    console.print(f"[green]✅ Imported {format_number(result['documents_written'])} documents from {path}[/green]")

    if task_config.get('verify'):
        verification = copier.verify(snapshot)
        if not verification['match']:
            console.print("[yellow]⚠ Verification issues found[/yellow]")
            return False
        console.print("[green]✅ Verification passed![/green]")
    return True


def display_task_summary(task_config: dict[str, Any]) -> None:
    """Display task configuration summary"""
    task_type = task_config.get('type', 'copy')

    console.print(f"[bold]Type:[/bold] {task_type.upper()}")
    if task_config.get('source'):
        console.print(f"[bold]Source:[/bold] {mask_descriptor(task_config['source'])}")
    if task_config.get('target'):
        console.print(f"[bold]Target:[/bold] {mask_descriptor(task_config['target'])}")
    if task_config.get('collection'):
        console.print(f"[bold]Collection:[/bold] {task_config['collection']}")
    if task_config.get('file'):
        console.print(f"[bold]File:[/bold] {task_config['file']}")
    if task_type != 'export':
        batch_size = task_config.get('batch_size', DEFAULT_BATCH_SIZE)
        console.print(f"[bold]Batch size:[/bold] {batch_size or 'single batch'}")
    console.print(f"[bold]Dry run:[/bold] {'Yes' if task_config.get('dry_run') else 'No'}")
