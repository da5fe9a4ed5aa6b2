"""
Exceptions raised by the immuadmin bootstrap layer.
"""


class ImmuadminError(Exception):
    """Base exception for all immuadmin errors."""

    pass


class ConfigError(ImmuadminError):
    """Raised when the configuration cannot be loaded or is invalid."""

    def __init__(self, message: str, source: str | None = None):
        self.source = source

        if source:
            message = f"{message} ({source})"

        super().__init__(message)


class CommandRegistrationError(ImmuadminError):
    """Raised when a command is attached under a name that is already taken."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"command {name!r} is already registered")


class DispatchError(ImmuadminError):
    """Raised when the command tree is used outside its lifecycle."""

    pass
