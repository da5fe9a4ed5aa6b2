"""
Registry of the admin commands attached to the root.

Built-in groups are attached first, then every plugin installed under the
``immuadmin.commands`` entry point group.
"""

from typing import TYPE_CHECKING

from immuadmin.commands import config as config_cmd
from immuadmin.config import Options
from immuadmin.plugin_manager import PluginManager

if TYPE_CHECKING:
    from immuadmin.dispatcher import Dispatcher


def init(root: "Dispatcher", options: Options) -> None:
    """Populate ``root`` with the admin commands."""
    root.add_typer(config_cmd.build_app(options), name="config")

    manager = PluginManager()
    manager.register_plugin_commands(root, options)


__all__ = ["init"]
