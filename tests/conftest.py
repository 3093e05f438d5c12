"""Pytest fixtures for lispy tests."""

import pytest

from lispy import config as config_module
from lispy.logging import disable_verbose


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep tests away from the real home directory and config files."""
    home = tmp_path / "home"
    home.mkdir()
    work = tmp_path / "work"
    work.mkdir()
    # A .git marker stops project config discovery at the work directory
    (work / ".git").mkdir()

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setattr(
        config_module, "USER_CONFIG_PATH", home / ".config" / "lispy" / "config.toml"
    )
    monkeypatch.chdir(work)
    yield
    disable_verbose()


@pytest.fixture
def work_dir(tmp_path):
    """The working directory each test runs in."""
    return tmp_path / "work"


@pytest.fixture
def user_config_path():
    """Where the user-level config file lives during the test."""
    return config_module.USER_CONFIG_PATH
