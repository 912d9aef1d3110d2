"""
path_utils.models

Scopes, result enums, formatting options and the reconciler's decision records.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Target(Enum):
    """Persistence tier of an environment variable."""
    PROCESS = "Process"
    USER = "User"
    MACHINE = "Machine"


class PathUpdateResult(Enum):
    PATH_ADDED = "PathAdded"
    PATH_ALREADY_EXISTS = "PathAlreadyExists"
    ERROR = "Error"


class PathRemoveResult(Enum):
    PATH_REMOVED = "PathRemoved"
    PATH_NOT_FOUND = "PathNotFound"
    ERROR = "Error"


class DirectoryNameCase(Enum):
    CAMEL_CASE = "CamelCase"


@dataclass(frozen=True)
class PathUtilsOptions:
    """
    How an application name becomes a config directory name.

    prefix_with_period: prepend '.' unless the name already starts with one.
    directory_name_case: case transform applied before the prefix.
    """
    prefix_with_period: bool = True
    directory_name_case: DirectoryNameCase = DirectoryNameCase.CAMEL_CASE


DEFAULT_OPTIONS = PathUtilsOptions()


@dataclass(frozen=True)
class AddDecision:
    """Outcome of decide_add; new_value is None when nothing should be written."""
    result: PathUpdateResult
    new_value: Optional[str] = None


@dataclass(frozen=True)
class RemoveDecision:
    """Outcome of decide_remove; new_value is None when nothing should be written."""
    result: PathRemoveResult
    new_value: Optional[str] = None
    removed: int = 0
