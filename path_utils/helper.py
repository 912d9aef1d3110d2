"""
path_utils.helper

PathEnvironmentHelper ties the environment service, the name formatter and the
reconciler together into the public ensure/remove operations.

Every call is one linear pass:
    validate -> (create dir, add only) -> read -> decide -> (write + broadcast) -> result
There is no locking; two processes editing the same scope race last-writer-wins.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from .environment import EnvironmentService
from .models import PathRemoveResult, PathUpdateResult, PathUtilsOptions, Target
from .naming import format_directory_name
from .reconciler import decide_add, decide_remove, trim_trailing_separators

LOGGER = logging.getLogger(__name__)

PATH_VARIABLE = "PATH"


class PathEnvironmentHelper:
    """
    Keep a directory present in (or absent from) a PATH-like variable.

    Args:
        service: environment access; SystemEnvironmentService in production.
        variable_name: the managed variable, PATH unless told otherwise.
        logger: where events go; defaults to this module's logger.
        sep: path-list separator, os.pathsep unless told otherwise.
    """

    def __init__(
        self,
        service: EnvironmentService,
        variable_name: str = PATH_VARIABLE,
        logger: Optional[logging.Logger] = None,
        sep: str = os.pathsep,
    ) -> None:
        if service is None:
            raise ValueError("service cannot be None")
        if variable_name is None or not variable_name.strip():
            raise ValueError("variable_name cannot be empty")
        self._service = service
        self._variable_name = variable_name
        self._log = logger or LOGGER
        self._sep = sep

    @property
    def variable_name(self) -> str:
        return self._variable_name

    def _is_reserved_path_variable(self) -> bool:
        return self._variable_name.upper() == PATH_VARIABLE

    def _normalize(self, path: str) -> str:
        return trim_trailing_separators(self._service.resolve_full_path(path))

    def _app_config_path(self, app_name: Optional[str], options: Optional[PathUtilsOptions]) -> Optional[str]:
        raw = app_name if app_name is not None else self._service.get_application_name()
        dir_name = format_directory_name(raw, options)
        if not dir_name:
            self._log.error("Could not determine the application name.")
            return None

        config_home = self._service.get_config_home()
        if config_home is None or not config_home.strip():
            self._log.error("Could not determine the config home directory.")
            return None

        return os.path.join(config_home, dir_name)

    def _write(self, value: str, target: Target) -> None:
        try:
            self._service.set_variable(self._variable_name, value, target)
        except PermissionError as e:
            self._log.error("Exception setting environment variable: %s", e)
            raise PermissionError(
                f"Failed to set {target.value} PATH variable. Administrator privileges may be required."
            ) from e

        if self._service.is_windows():
            self._service.broadcast_environment_change()

    # ------------------------------
    # Add
    # ------------------------------

    def ensure_directory_is_in_path(self, directory_path: str, target: Target = Target.USER) -> PathUpdateResult:
        """
        Create `directory_path` if needed and make sure it is listed in the variable.

        Raises:
            ValueError: blank directory, or Process target for the real PATH.
            PermissionError: the OS refused the write (original error chained).
        """
        if directory_path is None or not directory_path.strip():
            raise ValueError("directory_path cannot be empty")
        if target is Target.PROCESS and self._is_reserved_path_variable():
            raise ValueError(
                "Process target is not supported for persistent PATH changes. Use User or Machine for persistence."
            )

        # The directory created is the one written to the variable
        normalized = self._normalize(directory_path)

        try:
            self._service.create_directory(normalized)
        except Exception as e:  # noqa: BLE001
            self._log.error("Failed to create directory '%s': %s", normalized, e)
            return PathUpdateResult.ERROR

        current = self._service.get_variable(self._variable_name, target)
        decision = decide_add(current, normalized, self._service.resolve_full_path, self._sep)

        if decision.result is PathUpdateResult.PATH_ALREADY_EXISTS:
            self._log.warning("The path '%s' already exists in PATH.", normalized)
            return decision.result

        self._write(decision.new_value, target)
        self._log.info("Path '%s' was added to PATH.", normalized)
        return decision.result

    def ensure_application_xdg_config_directory_is_in_path(
        self,
        target: Target = Target.USER,
        app_name: Optional[str] = None,
        options: Optional[PathUtilsOptions] = None,
    ) -> PathUpdateResult:
        """Add <config home>/<formatted app name> to the variable, creating it first."""
        app_config_path = self._app_config_path(app_name, options)
        if app_config_path is None:
            return PathUpdateResult.ERROR

        self._log.info("Ensuring app config path '%s' is in PATH.", app_config_path)
        return self.ensure_directory_is_in_path(app_config_path, target)

    # ------------------------------
    # Remove
    # ------------------------------

    def remove_directory_from_path(self, directory_path: str, target: Target = Target.USER) -> PathRemoveResult:
        """
        Drop every entry equivalent to `directory_path` from the variable.

        Raises:
            ValueError: blank directory.
            PermissionError: the OS refused the write (original error chained).
        """
        if directory_path is None or not directory_path.strip():
            raise ValueError("directory_path cannot be empty")

        normalized = self._normalize(directory_path)
        self._log.info("Removing path '%s' from PATH.", normalized)

        current = self._service.get_variable(self._variable_name, target)
        decision = decide_remove(current, normalized, self._service.resolve_full_path, self._sep)

        if decision.result is PathRemoveResult.PATH_NOT_FOUND:
            self._log.warning("Path '%s' not found in PATH.", normalized)
            return decision.result

        self._write(decision.new_value, target)
        self._log.info("Path '%s' was removed from PATH.", normalized)
        return decision.result

    def remove_application_xdg_config_directory_from_path(
        self,
        target: Target = Target.USER,
        app_name: Optional[str] = None,
        options: Optional[PathUtilsOptions] = None,
    ) -> PathRemoveResult:
        """Symmetric to ensure_application_xdg_config_directory_is_in_path; never creates anything."""
        app_config_path = self._app_config_path(app_name, options)
        if app_config_path is None:
            return PathRemoveResult.ERROR
        return self.remove_directory_from_path(app_config_path, target)
