#!/usr/bin/env python3
"""Main entry point for the immuadmin CLI."""

import sys
from collections.abc import Sequence

from immuadmin import APP, commands
from immuadmin.config import Options
from immuadmin.dispatcher import Dispatcher
from immuadmin.identity import AppIdentity, build_identity
from immuadmin.version import version_command

SHORT_HELP = (
    "CLI admin client for immudb - the lightweight, high-speed immutable database "
    "for systems and applications"
)

LONG_HELP = f"""{SHORT_HELP}.

Environment variables:
  {APP.upper()}_ADDRESS=127.0.0.1
  {APP.upper()}_PORT=3322
  {APP.upper()}_MTLS=true"""


def build_dispatcher(
    options: Options | None = None, identity: AppIdentity | None = None
) -> Dispatcher:
    """Assemble the root command with every subcommand attached."""
    options = options or Options()
    identity = identity or build_identity()

    root = Dispatcher(APP, SHORT_HELP, LONG_HELP, options)
    root.on_initialize(lambda: options.init_config(APP))

    commands.init(root, options)
    root.add_command(version_command(identity), name="version", help=f"Show the {APP} version")
    return root


def run(argv: Sequence[str] | None = None) -> None:
    """Console script entry point. The only place the process exits."""
    sys.exit(build_dispatcher().execute(argv))


if __name__ == "__main__":
    run()
