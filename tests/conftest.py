"""Shared fixtures for immuadmin tests."""

import os

import pytest

from immuadmin import log, plugin_manager
from immuadmin.config import Options
from immuadmin.dispatcher import Dispatcher


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Run every test with a clean environment, home and working directory."""
    for name in list(os.environ):
        if name.startswith("IMMUADMIN_"):
            monkeypatch.delenv(name)

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))

    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)

    yield work

    log.reset_config()


@pytest.fixture(autouse=True)
def no_installed_plugins(monkeypatch):
    """Keep plugins installed in the test environment out of the command tree."""
    monkeypatch.setattr(plugin_manager, "entry_points", lambda group: [])


@pytest.fixture
def options():
    return Options()


@pytest.fixture
def dispatcher(options):
    return Dispatcher("immuadmin", "Admin client", "Admin client for tests.", options)
