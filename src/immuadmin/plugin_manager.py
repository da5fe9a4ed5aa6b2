"""Plugin manager for discovering and attaching admin command plugins."""

from collections.abc import Callable
from dataclasses import dataclass
from importlib.metadata import entry_points
from typing import TYPE_CHECKING

import typer

from immuadmin.config import Options
from immuadmin.errors import CommandRegistrationError
from immuadmin.log import get_logger

if TYPE_CHECKING:
    from immuadmin.dispatcher import Dispatcher

logger = get_logger("plugins")

PLUGIN_ENTRY_POINT = "immuadmin.commands"

# Names the bootstrap attaches itself after the registry has run
RESERVED_NAMES = frozenset({"version"})


@dataclass
class Plugin:
    """A command plugin found through its entry point."""

    name: str
    version: str
    description: str
    module_path: str
    factory: Callable[[Options], typer.Typer] | None = None

    def load(self, options: Options) -> typer.Typer:
        """Build the plugin's Typer app."""
        if self.factory is None:
            raise ValueError(f"Plugin {self.name} has no factory")
        app = self.factory(options)
        if not isinstance(app, typer.Typer):
            raise TypeError(f"{self.module_path} returned {type(app).__name__}, expected Typer")
        return app


class PluginManager:
    """Discovers installed plugins and attaches them to the root command."""

    def __init__(self, group: str = PLUGIN_ENTRY_POINT):
        self.group = group
        self.plugins: dict[str, Plugin] = {}
        self._discover_plugins()

    def _discover_plugins(self) -> None:
        for ep in entry_points(group=self.group):
            try:
                dist = ep.dist
                description = ""
                if dist:
                    description = dist.metadata.get("Summary", "") or ""

                self.plugins[ep.name] = Plugin(
                    name=ep.name,
                    version=dist.version if dist else "unknown",
                    description=description,
                    module_path=ep.value,
                    factory=ep.load(),
                )
            except Exception as e:
                logger.warning("could not load plugin", plugin=ep.name, error=str(e))

    def get_plugin(self, name: str) -> Plugin | None:
        """Get a plugin by name."""
        return self.plugins.get(name)

    def list_plugins(self) -> list[Plugin]:
        """List all discovered plugins."""
        return list(self.plugins.values())

    def register_plugin_commands(self, root: "Dispatcher", options: Options) -> list[str]:
        """Attach every plugin as a sub-command of the root.

        Returns:
            Names of the plugins that were attached
        """
        attached = []
        for name, plugin in self.plugins.items():
            if name in RESERVED_NAMES:
                logger.warning("plugin name is reserved", plugin=name)
                continue
            try:
                app = plugin.load(options)
                root.add_typer(app, name=name, help=plugin.description or None)
            except CommandRegistrationError:
                logger.warning("plugin name is already taken", plugin=name)
            except Exception as e:
                logger.warning("failed to register plugin", plugin=name, error=str(e))
            else:
                attached.append(name)
        return attached
