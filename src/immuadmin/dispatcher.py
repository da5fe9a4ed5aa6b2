"""
Root command dispatcher.

Owns the command tree, fires the initialization hooks right before the
selected command runs and turns every failure into an exit status. It is
the only component that decides how the process ends.
"""

import functools
import importlib
from collections.abc import Callable, Sequence
from enum import Enum
from pathlib import Path
from typing import Any

import typer

from immuadmin.config import Options
from immuadmin.errors import CommandRegistrationError, DispatchError
from immuadmin.log import get_logger
from immuadmin.utils.common import print_plain, show_help

logger = get_logger("dispatcher")

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

# Exception classes of the click build typer actually runs on, bundled or standalone
click_exceptions = importlib.import_module(typer.Exit.__module__)


class DispatchState(Enum):
    """Lifecycle of a dispatcher. Each instance runs through it once."""

    ASSEMBLED = "assembled"
    DISPATCHING = "dispatching"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class Dispatcher:
    """Root of the command tree.

    Args:
        name: Usage name of the root command
        short_help: One-line description
        help: Long description shown by ``--help``
        options: Settings holder shared with the registered commands
        silence_usage: Print only the message on usage errors, not the usage line
        silence_errors: Report errors here instead of through click
        disable_autogen_tag: Do not generate the shell completion options
    """

    def __init__(
        self,
        name: str,
        short_help: str,
        help: str,
        options: Options,
        *,
        silence_usage: bool = True,
        silence_errors: bool = True,
        disable_autogen_tag: bool = True,
    ):
        self.name = name
        self.options = options
        self.silence_usage = silence_usage
        self.silence_errors = silence_errors
        self.disable_autogen_tag = disable_autogen_tag
        self.state = DispatchState.ASSEMBLED

        self._initializers: list[Callable[[], Any]] = []
        self._initialized = False
        self._names: set[str] = set()

        self.app = typer.Typer(
            name=name,
            help=help,
            short_help=short_help,
            add_completion=not disable_autogen_tag,
            pretty_exceptions_enable=not silence_errors,
            rich_markup_mode="rich",
            context_settings={"help_option_names": ["-h", "--help"]},
        )
        self._install_root_callback(help)

    def _install_root_callback(self, help: str) -> None:
        options = self.options
        default_paths = f"configs/{self.name}.toml or ~/.{self.name}.toml"

        def root(
            ctx: typer.Context,
            config: Path | None = typer.Option(
                None,
                "--config",
                help=f"Config file (default: {default_paths})",
                dir_okay=False,
            ),
        ) -> None:
            if config is not None:
                options.config_file = config
            if ctx.invoked_subcommand is None:
                show_help(ctx)

        self.app.callback(invoke_without_command=True, help=help)(root)

    # Tree assembly

    @property
    def command_names(self) -> list[str]:
        """Names attached to the root, sorted."""
        return sorted(self._names)

    def has_command(self, name: str) -> bool:
        return name in self._names

    def _claim(self, name: str) -> None:
        if self.state is not DispatchState.ASSEMBLED:
            raise DispatchError("command tree cannot change once dispatch has started")
        if name in self._names:
            raise CommandRegistrationError(name)
        self._names.add(name)

    def add_command(
        self, func: Callable[..., Any], name: str | None = None, help: str | None = None
    ) -> None:
        """Attach a leaf command to the root.

        Raises:
            CommandRegistrationError: If ``name`` is already taken
        """
        name = name or func.__name__.lower().replace("_", "-")
        self._claim(name)
        self.app.command(name=name, help=help)(func)

    def add_typer(self, app: typer.Typer, name: str, help: str | None = None) -> None:
        """Attach a command group to the root.

        Raises:
            CommandRegistrationError: If ``name`` is already taken
        """
        self._claim(name)
        kwargs: dict[str, Any] = {"name": name}
        if help is not None:
            kwargs["help"] = help
        self.app.add_typer(app, **kwargs)

    def on_initialize(self, *hooks: Callable[[], Any]) -> None:
        """Register callbacks fired once, right before the selected command runs."""
        self._initializers.extend(hooks)

    # Dispatch

    def _initialize(self) -> None:
        if self._initialized:
            return
        self._initialized = True
        for hook in self._initializers:
            logger.debug("running initializer", hook=getattr(hook, "__qualname__", repr(hook)))
            hook()

    def _guarded(self, callback: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(callback)
        def invoke(*args: Any, **kwargs: Any) -> None:
            self._initialize()
            self.state = DispatchState.RUNNING
            # Return values of commands are not exit statuses
            callback(*args, **kwargs)

        return invoke

    def _guard_leaves(self, group: Any) -> None:
        # Groups are namespaces; only leaf commands trigger initialization
        for command in group.commands.values():
            if is_group(command):
                self._guard_leaves(command)
            elif command.callback is not None:
                command.callback = self._guarded(command.callback)

    def _finish(self, code: int) -> int:
        self.state = DispatchState.SUCCEEDED if code == EXIT_SUCCESS else DispatchState.FAILED
        return code

    def report_error(self, error: BaseException | str) -> int:
        """Print an error to standard error and return the failure status."""
        if isinstance(error, str):
            message = error
        else:
            message = str(error) or error.__class__.__name__
        logger.debug("command failed", error=message)
        print_plain(message, err=True, style="red")
        return self._finish(EXIT_FAILURE)

    def _report_click_error(self, error: Exception) -> int:
        if not self.silence_errors:
            error.show()
            return self._finish(EXIT_FAILURE)

        ctx = getattr(error, "ctx", None)
        if not self.silence_usage and ctx is not None:
            print_plain(ctx.get_usage(), err=True)
        return self.report_error(error.format_message())

    def execute(self, args: Sequence[str] | None = None) -> int:
        """Parse ``args`` (default: ``sys.argv[1:]``) and run the selected command.

        Returns:
            Process exit status: 0 on success, 1 on any error, 130 on interrupt

        Raises:
            DispatchError: If this dispatcher has already executed
        """
        if self.state is not DispatchState.ASSEMBLED:
            raise DispatchError("command tree has already been dispatched")

        command = typer.main.get_command(self.app)
        if is_group(command):
            self._guard_leaves(command)

        self.state = DispatchState.DISPATCHING
        logger.debug("dispatching", args=list(args) if args is not None else None)

        try:
            result = command.main(
                args=list(args) if args is not None else None,
                prog_name=self.name,
                standalone_mode=False,
            )
        except click_exceptions.ClickException as e:
            return self._report_click_error(e)
        except click_exceptions.Abort as e:
            if isinstance(e.__cause__, KeyboardInterrupt):
                print_plain("Interrupted", err=True, style="yellow")
                return self._finish(EXIT_INTERRUPTED)
            return self.report_error("Aborted!")
        except KeyboardInterrupt:
            print_plain("Interrupted", err=True, style="yellow")
            return self._finish(EXIT_INTERRUPTED)
        except Exception as e:
            return self.report_error(e)

        # Guarded commands return None, so an int here is the code of typer.Exit
        if isinstance(result, int) and not isinstance(result, bool):
            return self._finish(result)
        return self._finish(EXIT_SUCCESS)


def is_group(command: Any) -> bool:
    """Whether a click command has sub-commands."""
    return isinstance(getattr(command, "commands", None), dict)
