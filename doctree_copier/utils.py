"""
Utility functions for doctree-copier
"""

from rich.console import Console

from .constants import QUICK_CHECK_TIMEOUT
from .stores import StoreFactory, mask_descriptor

console = Console()


def test_connection(descriptor: str, timeout: float = QUICK_CHECK_TIMEOUT) -> tuple[bool, str]:
    """Open a store and list its root collections"""
    try:
        store = StoreFactory.create(descriptor, timeout=timeout)
    except Exception as e:
        return False, str(e)

    try:
        collections = store.list_collections()
        return True, f"OK ({len(collections)} collections)"
    except Exception as e:
        return False, str(e)
    finally:
        store.close()


def format_task_table_row(task_name: str, task_config: dict) -> tuple[str, str, str]:
    """
    Format a task for display in a table.
    Returns: (task_name, source_target_display, collection_display)
    """
    task_type = task_config.get('type', 'copy')

    if task_type == 'export':
        display = f"[cyan]EXPORT:[/cyan] {mask_descriptor(task_config.get('source', 'N/A'))} → {task_config.get('file', 'N/A')}"
        return task_name, display, task_config.get('collection', 'N/A')

    if task_type == 'import':
        display = f"[cyan]IMPORT:[/cyan] {task_config.get('file', 'N/A')} → {mask_descriptor(task_config.get('target', 'N/A'))}"
        return task_name, display, 'from file'

    source = task_config.get('source')
    target = task_config.get('target')
    collection = task_config.get('collection')
    if not all([source, target, collection]):
        return task_name, "[red]Invalid task config[/red]", "N/A"

    display = f"[green]{mask_descriptor(source)}[/green] → [green]{mask_descriptor(target)}[/green]"
    return task_name, display, collection
