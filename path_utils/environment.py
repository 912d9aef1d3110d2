"""
path_utils.environment

The OS-facing side of PATH management: reading and writing scoped environment
variables, resolving paths, creating directories, locating the config home
and telling other Windows processes that the environment changed.

EnvironmentService is the seam the helper depends on; SystemEnvironmentService
is the real implementation. Tests substitute a mock.

Scopes
- Process: os.environ of the running interpreter.
- User:    HKCU\\Environment (Windows only).
- Machine: HKLM\\SYSTEM\\CurrentControlSet\\Control\\Session Manager\\Environment (Windows only).
On other platforms User/Machine have no OS store: reads give None and writes
are ignored with a warning.
"""

from __future__ import annotations

import logging
import os
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from .models import Target

IS_WINDOWS = (os.name == "nt")
if IS_WINDOWS:
    import winreg
    import ctypes
    import ctypes.wintypes as wt

LOGGER = logging.getLogger(__name__)

HKCU_ENV = r"Environment"
HKLM_ENV = r"SYSTEM\CurrentControlSet\Control\Session Manager\Environment"

HWND_BROADCAST = 0xFFFF
WM_SETTINGCHANGE = 0x001A
SMTO_ABORTIFHUNG = 0x0002
SMTO_NOTIMEOUTIFNOTHUNG = 0x0008
BROADCAST_TIMEOUT_MS = 5000


class InvalidPathError(ValueError):
    """Raised when a path string cannot be resolved to a full path."""


class EnvironmentService(ABC):
    """Everything PathEnvironmentHelper needs from the outside world."""

    @abstractmethod
    def get_variable(self, name: str, target: Target) -> Optional[str]:
        ...

    @abstractmethod
    def set_variable(self, name: str, value: Optional[str], target: Target) -> None:
        """Write `value`; None or "" removes the variable. PermissionError when not allowed."""

    @abstractmethod
    def resolve_full_path(self, path: str) -> str:
        """Absolute form of `path`. InvalidPathError for malformed input."""

    @abstractmethod
    def create_directory(self, path: str) -> None:
        ...

    @abstractmethod
    def get_application_name(self) -> Optional[str]:
        ...

    @abstractmethod
    def get_config_home(self) -> str:
        ...

    @abstractmethod
    def is_windows(self) -> bool:
        ...

    @abstractmethod
    def broadcast_environment_change(self) -> None:
        """Best effort; never raises."""


def _registry_location(target: Target):
    if target is Target.USER:
        return winreg.HKEY_CURRENT_USER, HKCU_ENV
    if target is Target.MACHINE:
        return winreg.HKEY_LOCAL_MACHINE, HKLM_ENV
    raise ValueError(f"Invalid scope for registry access: {target}")


def _read_reg_value(target: Target, name: str) -> Optional[str]:
    root, sub = _registry_location(target)
    with winreg.OpenKey(root, sub, 0, winreg.KEY_READ) as k:
        try:
            val, _ = winreg.QueryValueEx(k, name)
            return val
        except FileNotFoundError:
            return None


def _write_reg_value(target: Target, name: str, value: Optional[str]) -> None:
    root, sub = _registry_location(target)
    with winreg.OpenKey(root, sub, 0, winreg.KEY_SET_VALUE) as k:
        if value:
            winreg.SetValueEx(k, name, 0, winreg.REG_EXPAND_SZ, value)
            return
        try:
            winreg.DeleteValue(k, name)
        except FileNotFoundError:
            pass


def _wm_settingchange_broadcast() -> None:
    SendMessageTimeout = ctypes.windll.user32.SendMessageTimeoutW
    SendMessageTimeout.argtypes = [
        wt.HWND, wt.UINT, wt.WPARAM, wt.LPARAM, wt.UINT, wt.UINT, ctypes.POINTER(wt.DWORD)
    ]
    result = wt.DWORD(0)
    area = ctypes.c_wchar_p("Environment")
    SendMessageTimeout(HWND_BROADCAST, WM_SETTINGCHANGE, 0,
                       ctypes.cast(area, ctypes.c_void_p).value,
                       SMTO_ABORTIFHUNG | SMTO_NOTIMEOUTIFNOTHUNG, BROADCAST_TIMEOUT_MS,
                       ctypes.byref(result))


def default_config_home() -> Path:
    r"""
    Platform config base directory.

    - Windows: %APPDATA% or ~/AppData/Roaming
    - macOS:   ~/Library/Application Support
    - Other:   $XDG_CONFIG_HOME (if absolute) or ~/.config
    """
    home = Path.home()
    if sys.platform.startswith("win"):
        appdata = os.environ.get("APPDATA")
        return Path(appdata) if appdata else home / "AppData" / "Roaming"
    if sys.platform == "darwin":
        return home / "Library" / "Application Support"
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg and Path(xdg).is_absolute():
        return Path(xdg)
    return home / ".config"


class SystemEnvironmentService(EnvironmentService):
    """EnvironmentService backed by os.environ, the Windows registry and user32."""

    def get_variable(self, name: str, target: Target) -> Optional[str]:
        if target is Target.PROCESS:
            return os.environ.get(name)
        if not self.is_windows():
            LOGGER.debug("No %s environment store on this platform; treating %s as unset.", target.value, name)
            return None
        return _read_reg_value(target, name)

    def set_variable(self, name: str, value: Optional[str], target: Target) -> None:
        if target is Target.PROCESS:
            if value:
                os.environ[name] = value
            else:
                os.environ.pop(name, None)
            return
        if not self.is_windows():
            LOGGER.warning("Cannot persist %s at %s scope on this platform; change ignored.", name, target.value)
            return
        _write_reg_value(target, name, value)

    def resolve_full_path(self, path: str) -> str:
        if path is None or not path.strip():
            raise InvalidPathError("Path cannot be empty")
        if "\0" in path:
            raise InvalidPathError(f"Path contains a NUL character: {path!r}")
        return os.path.abspath(os.path.expanduser(path))

    def create_directory(self, path: str) -> None:
        Path(path).expanduser().mkdir(parents=True, exist_ok=True)

    def get_application_name(self) -> Optional[str]:
        main = sys.modules.get("__main__")
        spec = getattr(main, "__spec__", None)
        if spec is not None and spec.name:
            name = spec.name
            if name.endswith(".__main__"):
                name = name[: -len(".__main__")]
            return name
        argv0 = sys.argv[0] if sys.argv else ""
        if not argv0 or argv0 == "-c":
            return None
        return Path(argv0).stem or None

    def get_config_home(self) -> str:
        return str(default_config_home())

    def is_windows(self) -> bool:
        return IS_WINDOWS

    def broadcast_environment_change(self) -> None:
        if not self.is_windows():
            return
        try:
            _wm_settingchange_broadcast()
        except Exception as e:  # noqa: BLE001
            LOGGER.warning(
                "Failed to broadcast environment variable change. A restart or re-login might be needed. Error: %s", e
            )
