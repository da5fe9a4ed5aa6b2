"""
immuadmin: CLI admin client for immudb.

This package provides the bootstrap layer of the admin CLI: the root
command, the configuration hook, the version command and the mapping of
command failures to process exit statuses.
"""

APP = "immuadmin"

# Version is read from package metadata (pyproject.toml is the single source of truth)
try:
    from importlib.metadata import version

    __version__ = version("immuadmin")
except Exception:
    __version__ = ""
