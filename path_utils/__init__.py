# __init__.py

"""path_utils - keep directories on PATH-like environment variables, idempotently."""

import logging

__version__ = "0.1.0"

from .models import (
    Target,
    PathUpdateResult,
    PathRemoveResult,
    DirectoryNameCase,
    PathUtilsOptions,
    DEFAULT_OPTIONS,
)
from .naming import format_directory_name
from .reconciler import decide_add, decide_remove, split_path_list
from .environment import EnvironmentService, SystemEnvironmentService, InvalidPathError
from .helper import PathEnvironmentHelper

# Silent unless the application configures logging
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Target",
    "PathUpdateResult",
    "PathRemoveResult",
    "DirectoryNameCase",
    "PathUtilsOptions",
    "DEFAULT_OPTIONS",
    "format_directory_name",
    "decide_add",
    "decide_remove",
    "split_path_list",
    "EnvironmentService",
    "SystemEnvironmentService",
    "InvalidPathError",
    "PathEnvironmentHelper",
]
