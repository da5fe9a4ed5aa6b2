"""Version command reporting the build identity."""

from collections.abc import Callable
from datetime import datetime, timezone

from immuadmin.identity import AppIdentity
from immuadmin.utils.common import print_plain

PLACEHOLDER = "unknown"


def format_built_at(built_at: str) -> str:
    """Render the build timestamp.

    Release builds stamp a Unix timestamp; anything else is shown as is.
    """
    if not built_at:
        return PLACEHOLDER
    if built_at.isdigit():
        try:
            stamp = datetime.fromtimestamp(int(built_at), tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            # Outside the platform's time range
            return built_at
        return stamp.strftime("%a, %d %b %Y %H:%M:%S %Z")
    return built_at


def format_version(identity: AppIdentity) -> str:
    """Render the identity in the fixed version layout."""
    lines = [
        f"{identity.name} {identity.version or PLACEHOLDER}",
        f"Commit  : {identity.commit or PLACEHOLDER}",
        f"Built by: {identity.built_by or PLACEHOLDER}",
        f"Built at: {format_built_at(identity.built_at)}",
    ]
    return "\n".join(lines)


def version_command(identity: AppIdentity) -> Callable[[], None]:
    """Build the ``version`` command for ``identity``."""

    def version() -> None:
        print_plain(format_version(identity))

    version.__doc__ = f"Show the {identity.name} version"
    return version
