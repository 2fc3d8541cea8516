#!/usr/bin/env python
"""
doctree-copier CLI - Main entry point

Usage:
    # Direct copy
    dtc -s source-sa.json -t target-sa.json -c users

    # Export to / import from a snapshot file
    dtc -s source-sa.json -c users --export-to users.jsonl
    dtc -t target-sa.json --import-from users.jsonl

    # Task execution
    dtc --task nightly_users
    dtc --task nightly_users -y  # Automated mode
"""

import sys

import click
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .constants import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_EXPORT_WORKERS,
    DEFAULT_STORE_TIMEOUT,
    MAX_EXPORT_WORKERS,
    ON_ERROR_ABORT,
    ON_ERROR_CONTINUE,
)
from .settings import SettingsManager
from .stores import mask_descriptor
from .task_runner import display_task_summary, run_task
from .utils import format_task_table_row, test_connection

console = Console()


def _confirm_or_exit(assume_yes: bool, question: str) -> None:
    if not assume_yes and not click.confirm(question):
        console.print("[red]Cancelled[/red]")
        sys.exit(0)


@click.command()
@click.version_option(version=__version__)
@click.option('-s', '--source', help='Source store (service account file, firestore://project, mongodb:// URI or saved host)')
@click.option('-t', '--target', help='Target store (same formats as --source)')
@click.option('-c', '--collection', help='Root collection to copy')
@click.option('--batch-size', type=click.IntRange(min=0), default=DEFAULT_BATCH_SIZE, show_default=True,
              help='Writes per atomic batch (0 = one batch for everything)')
@click.option('--workers', type=click.IntRange(1, MAX_EXPORT_WORKERS), default=DEFAULT_EXPORT_WORKERS,
              show_default=True, help='Collections read concurrently during export')
@click.option('--timeout', type=float, default=DEFAULT_STORE_TIMEOUT, show_default=True,
              help='Timeout in seconds for each store call and commit')
@click.option('--continue-on-error', is_flag=True, help='Keep committing remaining batches after a failed one')
@click.option('--dry-run', is_flag=True, help='Export and summarize without writing')
@click.option('--verify', is_flag=True, help='Read documents back from target after import')
@click.option('--export-to', type=click.Path(dir_okay=False), help='Write the exported snapshot to a JSONL file')
@click.option('--import-from', type=click.Path(exists=True, dir_okay=False), help='Import a JSONL snapshot file')
@click.option('--task', help='Run a saved task')
@click.option('--save-task', help='Save the given options as a named task instead of running them')
@click.option('--list-tasks', is_flag=True, help='List saved tasks')
@click.option('--list-hosts', is_flag=True, help='List saved hosts')
@click.option('--add-host', help='Save a host as NAME=DESCRIPTOR')
@click.option('--verify-connection', help='Test connection to a store descriptor or saved host')
@click.option('-y', '--yes', 'assume_yes', is_flag=True, help='Assume yes to all prompts (fully automated)')
def main(source, target, collection, batch_size, workers, timeout, continue_on_error, dry_run, verify,
         export_to, import_from, task, save_task, list_tasks, list_hosts, add_host, verify_connection,
         assume_yes):
    """
    doctree-copier - Copy a document collection tree between stores

    Examples:

    Direct copy:
        dtc -s source-sa.json -t target-sa.json -c users

    Copy into MongoDB:
        dtc -s firestore://my-project -t mongodb://localhost/app -c users

    Save and run a task:
        dtc -s prod -t staging -c users --save-task users_to_staging
        dtc --task users_to_staging -y
    """
    settings_manager = SettingsManager()

    # Connection verification mode
    if verify_connection:
        success, message = test_connection(settings_manager.resolve(verify_connection))
        if success:
            console.print(f"[green]✅ {message}[/green]")
        else:
            console.print(f"[red]❌ {message}[/red]")
            sys.exit(1)
        return

    if add_host:
        name, sep, descriptor = add_host.partition('=')
        if not sep or not name or not descriptor:
            console.print("[red]❌ --add-host expects NAME=DESCRIPTOR[/red]")
            sys.exit(1)
        settings_manager.add_host(name, descriptor)
        console.print(f"[green]✅ Saved host '{name}'[/green]")
        return

    if list_tasks:
        tasks = settings_manager.list_tasks()
        if not tasks:
            console.print("[yellow]No saved tasks found[/yellow]")
            console.print("[dim]Create one with --save-task NAME[/dim]")
            return

        console.print()
        console.print(Panel("[bold blue]⚙️  SAVED TASKS[/bold blue]", expand=False))
        console.print()

        table = Table(title="Saved Tasks", box=box.ROUNDED)
        table.add_column("#", style="dim", width=4)
        table.add_column("Name", style="cyan")
        table.add_column("Source → Target", style="green")
        table.add_column("Collection", style="magenta")

        for idx, (name, task_config) in enumerate(tasks.items(), 1):
            table.add_row(str(idx), *format_task_table_row(name, task_config))

        console.print(table)
        console.print()
        console.print("[dim]Run a task with: dtc --task <name>[/dim]")
        console.print("[dim]Automated mode: dtc --task <name> -y[/dim]")
        return

    if list_hosts:
        hosts = settings_manager.list_hosts()
        if not hosts:
            console.print("[yellow]No saved hosts found[/yellow]")
            console.print("[dim]Add one with --add-host NAME=DESCRIPTOR[/dim]")
            return

        table = Table(title="💾 Saved Hosts", box=box.ROUNDED)
        table.add_column("Name", style="cyan")
        table.add_column("Descriptor", style="green")
        for name, descriptor in hosts.items():
            table.add_row(name, mask_descriptor(descriptor))

        console.print(table)
        console.print(f"\n[dim]Total: {len(hosts)} hosts[/dim]")
        return

    # Run task mode
    if task:
        task_config = settings_manager.get_task(task)
        if not task_config:
            console.print(f"[red]❌ Task '{task}' not found![/red]")
            console.print("[dim]Use --list-tasks to see available tasks[/dim]")
            sys.exit(1)

        console.print(f"[cyan]🚀 Running task: {task}[/cyan]\n")
        display_task_summary(task_config)
        _confirm_or_exit(assume_yes, "\nExecute this task?")

        if not run_task(task_config, settings_manager):
            sys.exit(1)
        console.print("[green]✅ Task completed successfully![/green]")
        return

    task_config = _task_from_options(
        source, target, collection, export_to, import_from,
        batch_size=batch_size,
        workers=workers,
        timeout=timeout,
        on_error=ON_ERROR_CONTINUE if continue_on_error else ON_ERROR_ABORT,
        dry_run=dry_run,
        verify=verify
    )
    if task_config is None:
        click.echo(click.get_current_context().get_help())
        sys.exit(1)

    if save_task:
        settings_manager.add_task(save_task, task_config)
        console.print(f"[green]✅ Saved task '{save_task}'[/green]")
        return

    display_task_summary(task_config)
    if not dry_run:
        _confirm_or_exit(assume_yes, "\nProceed?")

    if not run_task(task_config, settings_manager):
        sys.exit(1)


def _task_from_options(source, target, collection, export_to, import_from, **options) -> dict | None:
    """Build a task config from direct command line options"""
    if import_from:
        if not target:
            console.print("[red]❌ --target is required with --import-from[/red]")
            sys.exit(1)
        return {'type': 'import', 'target': target, 'file': import_from, **options}

    if export_to:
        if not source or not collection:
            console.print("[red]❌ --source and --collection are required with --export-to[/red]")
            sys.exit(1)
        return {'type': 'export', 'source': source, 'collection': collection, 'file': export_to, **options}

    if source or target or collection:
        if not (source and collection and (target or options.get('dry_run'))):
            console.print("[red]❌ --source, --target and --collection are required for a copy[/red]")
            sys.exit(1)
        return {'type': 'copy', 'source': source, 'target': target, 'collection': collection, **options}

    return None


if __name__ == '__main__':
    main()
