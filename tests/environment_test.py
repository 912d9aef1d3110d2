# File: tests/environment_test.py
"""
Tests for SystemEnvironmentService (Linux/WSL-safe via monkeypatch).

Covers:
- process-scope get/set/delete
- user/machine scope on non-Windows (no store: None + ignored write)
- user/machine scope routed to the registry helpers on Windows
- full-path resolution and invalid input
- config home lookup per platform
- broadcast is a no-op off Windows and swallows failures on Windows
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from uuid import uuid4

import pytest

from path_utils import environment
from path_utils.environment import InvalidPathError, SystemEnvironmentService, default_config_home
from path_utils.models import Target


@pytest.fixture
def service():
    return SystemEnvironmentService()


@pytest.fixture
def var_name(monkeypatch):
    name = f"PATH_UTILS_TEST_{uuid4().hex[:8].upper()}"
    monkeypatch.delenv(name, raising=False)
    yield name
    os.environ.pop(name, None)


def _pretend_windows(monkeypatch, service):
    store = {}
    monkeypatch.setattr(service, "is_windows", lambda: True)
    monkeypatch.setattr(environment, "_read_reg_value", lambda target, name: store.get((target, name)))

    def _write(target, name, value):
        if value:
            store[(target, name)] = value
        else:
            store.pop((target, name), None)

    monkeypatch.setattr(environment, "_write_reg_value", _write)
    return store


# --- Variables ---

def test_process_scope_round_trip(service, var_name):
    assert service.get_variable(var_name, Target.PROCESS) is None
    service.set_variable(var_name, "/a:/b", Target.PROCESS)
    assert os.environ[var_name] == "/a:/b"
    assert service.get_variable(var_name, Target.PROCESS) == "/a:/b"


@pytest.mark.parametrize("empty", [None, ""])
def test_process_scope_empty_value_deletes(service, var_name, empty):
    os.environ[var_name] = "/a"
    service.set_variable(var_name, empty, Target.PROCESS)
    assert var_name not in os.environ


@pytest.mark.parametrize("target", [Target.USER, Target.MACHINE])
def test_persistent_scopes_without_os_store(service, monkeypatch, var_name, target, caplog):
    monkeypatch.setattr(service, "is_windows", lambda: False)

    assert service.get_variable(var_name, target) is None
    with caplog.at_level(logging.WARNING, logger="path_utils.environment"):
        service.set_variable(var_name, "/a", target)
    assert var_name not in os.environ
    assert "change ignored" in caplog.text


@pytest.mark.parametrize("target", [Target.USER, Target.MACHINE])
def test_persistent_scopes_use_registry_on_windows(service, monkeypatch, target):
    store = _pretend_windows(monkeypatch, service)

    service.set_variable("PATH", r"C:\Tools", target)
    assert store[(target, "PATH")] == r"C:\Tools"
    assert service.get_variable("PATH", target) == r"C:\Tools"

    service.set_variable("PATH", "", target)
    assert service.get_variable("PATH", target) is None


def test_registry_permission_error_surfaces(service, monkeypatch):
    _pretend_windows(monkeypatch, service)

    def _denied(target, name, value):
        raise PermissionError(13, "Access is denied")

    monkeypatch.setattr(environment, "_write_reg_value", _denied)
    with pytest.raises(PermissionError):
        service.set_variable("PATH", r"C:\Tools", Target.MACHINE)


# --- Paths ---

def test_resolve_full_path_makes_absolute(service, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert service.resolve_full_path("tool") == os.path.join(str(tmp_path), "tool")


def test_resolve_full_path_expands_user(service, monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    assert service.resolve_full_path("~/bin") == os.path.join(str(tmp_path), "bin")


@pytest.mark.parametrize("bad", ["", "   ", "/tmp/a\0b"])
def test_resolve_full_path_rejects_malformed(service, bad):
    with pytest.raises(InvalidPathError):
        service.resolve_full_path(bad)


def test_invalid_path_error_is_value_error():
    assert issubclass(InvalidPathError, ValueError)


def test_create_directory_is_recursive_and_idempotent(service, tmp_path):
    target = tmp_path / "a" / "b" / "c"
    service.create_directory(str(target))
    service.create_directory(str(target))
    assert target.is_dir()


# --- Application name / config home ---

def test_application_name_from_argv(service, monkeypatch):
    monkeypatch.setattr(sys.modules["__main__"], "__spec__", None, raising=False)
    monkeypatch.setattr(sys, "argv", ["/usr/local/bin/my-tool.py", "--flag"])
    assert service.get_application_name() == "my-tool"


def test_application_name_unknown_for_inline_code(service, monkeypatch):
    monkeypatch.setattr(sys.modules["__main__"], "__spec__", None, raising=False)
    monkeypatch.setattr(sys, "argv", ["-c"])
    assert service.get_application_name() is None


def test_application_name_from_module_run(service, monkeypatch):
    class _Spec:
        name = "mytool.__main__"

    monkeypatch.setattr(sys.modules["__main__"], "__spec__", _Spec(), raising=False)
    assert service.get_application_name() == "mytool"


def test_config_home_prefers_absolute_xdg(monkeypatch, tmp_path):
    monkeypatch.setattr(sys, "platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert default_config_home() == tmp_path


def test_config_home_ignores_relative_xdg(monkeypatch, tmp_path):
    monkeypatch.setattr(sys, "platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", "relative/dir")
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
    assert default_config_home() == tmp_path / ".config"


def test_config_home_windows_uses_appdata(monkeypatch, tmp_path):
    monkeypatch.setattr(sys, "platform", "win32")
    monkeypatch.setenv("APPDATA", str(tmp_path))
    assert default_config_home() == tmp_path


def test_config_home_macos(monkeypatch, tmp_path):
    monkeypatch.setattr(sys, "platform", "darwin")
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
    assert default_config_home() == tmp_path / "Library" / "Application Support"


def test_service_config_home_is_string(service):
    assert isinstance(service.get_config_home(), str)


# --- Broadcast ---

def test_broadcast_noop_off_windows(service, monkeypatch):
    called = []
    monkeypatch.setattr(service, "is_windows", lambda: False)
    monkeypatch.setattr(environment, "_wm_settingchange_broadcast", lambda: called.append(True))
    service.broadcast_environment_change()
    assert called == []


def test_broadcast_failure_is_swallowed_and_logged(service, monkeypatch, caplog):
    monkeypatch.setattr(service, "is_windows", lambda: True)

    def _boom():
        raise OSError("user32 unavailable")

    monkeypatch.setattr(environment, "_wm_settingchange_broadcast", _boom)
    with caplog.at_level(logging.WARNING, logger="path_utils.environment"):
        service.broadcast_environment_change()
    assert "Failed to broadcast environment variable change" in caplog.text
    assert "user32 unavailable" in caplog.text
