"""
Settings manager for doctree-copier
Saved hosts (name -> store descriptor) and saved copy tasks
"""

import json
from pathlib import Path

from rich.console import Console

console = Console()

# Config file path
CONFIG_FILE = Path.home() / '.doctree_copier_settings.json'


def _empty_settings() -> dict:
    return {"hosts": {}, "tasks": {}}


class SettingsManager:
    """Manages saved hosts and tasks"""

    def __init__(self):
        self.config_file = CONFIG_FILE
        self.settings = self.load_settings()

    def load_settings(self) -> dict:
        """Load settings from file"""
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r') as f:
                    return json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                console.print(f"[yellow]⚠ Error loading settings: {e}[/yellow]")
        return _empty_settings()

    def save_settings(self):
        """Save settings to file"""
        try:
            with open(self.config_file, 'w') as f:
                json.dump(self.settings, f, indent=2)
        except OSError as e:
            console.print(f"[red]❌ Error saving settings: {e}[/red]")

    def add_host(self, name: str, descriptor: str):
        """Add or update a saved host"""
        self.settings.setdefault('hosts', {})[name] = descriptor
        self.save_settings()

    def get_host(self, name: str) -> str | None:
        """Get a saved host descriptor"""
        return self.settings.get('hosts', {}).get(name)

    def list_hosts(self) -> dict[str, str]:
        return self.settings.get('hosts', {})

    def delete_host(self, name: str) -> bool:
        if name in self.settings.get('hosts', {}):
            del self.settings['hosts'][name]
            self.save_settings()
            return True
        return False

    def resolve(self, name_or_descriptor: str | None) -> str | None:
        """Return the saved descriptor for a host name, or the value unchanged"""
        if not name_or_descriptor:
            return name_or_descriptor
        return self.get_host(name_or_descriptor) or name_or_descriptor

    def add_task(self, name: str, config: dict):
        """Add or update a saved task"""
        self.settings.setdefault('tasks', {})[name] = config
        self.save_settings()

    def get_task(self, name: str) -> dict | None:
        return self.settings.get('tasks', {}).get(name)

    def list_tasks(self) -> dict[str, dict]:
        return self.settings.get('tasks', {})

    def delete_task(self, name: str) -> bool:
        if name in self.settings.get('tasks', {}):
            del self.settings['tasks'][name]
            self.save_settings()
            return True
        return False
