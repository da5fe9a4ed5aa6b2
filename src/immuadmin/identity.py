"""Build-time identity of the application."""

from dataclasses import dataclass

from immuadmin import APP, __version__, _build


@dataclass(frozen=True)
class AppIdentity:
    """Name and build metadata reported by the version command."""

    name: str
    version: str = ""
    commit: str = ""
    built_by: str = ""
    built_at: str = ""


def build_identity(name: str = APP) -> AppIdentity:
    """Identity of the running build, from stamped values or package metadata."""
    return AppIdentity(
        name=name,
        version=_build.VERSION or __version__,
        commit=_build.COMMIT,
        built_by=_build.BUILT_BY,
        built_at=_build.BUILT_AT,
    )
