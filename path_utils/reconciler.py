"""
path_utils.reconciler

Pure decision logic for PATH-like variables. No I/O happens here: callers pass
the current value and a `normalize` callable (usually the environment
service's full-path resolver) and get back what, if anything, to write.

Rules
- Entries are split on the path-list separator; blank entries are dropped,
  everything else is kept verbatim and in order.
- Two entries are the same iff their normalized forms, trailing directory
  separators stripped, compare equal case-insensitively.
- An existing entry whose normalization raises never matches. It stays in the
  output untouched.
"""

from __future__ import annotations

import logging
import os
from typing import Callable, List, Optional

from .models import AddDecision, PathRemoveResult, PathUpdateResult, RemoveDecision

LOGGER = logging.getLogger(__name__)

Normalizer = Callable[[str], str]

DIRECTORY_SEPARATORS = os.sep + (os.altsep or "")


def split_path_list(value: Optional[str], sep: str = os.pathsep) -> List[str]:
    """Split a delimited value into its non-blank entries, order preserved."""
    if not value:
        return []
    return [p for p in value.split(sep) if p.strip()]


def join_path_list(entries: List[str], sep: str = os.pathsep) -> str:
    return sep.join(entries)


def trim_trailing_separators(path: str, separators: str = DIRECTORY_SEPARATORS) -> str:
    """
    Strip trailing directory separators.

    A bare root keeps one separator so '/' and 'C:\\' stay meaningful.
    """
    stripped = path.rstrip(separators)
    if len(stripped) == len(path):
        return path
    if not stripped or (len(stripped) == 2 and stripped[1] == ":"):
        return path[: len(stripped) + 1]
    return stripped


def paths_equal(a: str, b: str) -> bool:
    return a.casefold() == b.casefold()


def _matches(entry: str, normalized_target: str, normalize: Normalizer) -> bool:
    try:
        normalized = trim_trailing_separators(normalize(entry))
    except Exception as e:  # noqa: BLE001
        LOGGER.debug("Skipping unresolvable entry %r: %s", entry, e)
        return False
    return paths_equal(normalized, normalized_target)


def decide_add(
    current_value: Optional[str],
    normalized_target: str,
    normalize: Normalizer,
    sep: str = os.pathsep,
) -> AddDecision:
    """
    Decide whether `normalized_target` must be appended to `current_value`.

    Returns PATH_ALREADY_EXISTS (no new value) when an equivalent entry is
    present, otherwise PATH_ADDED with the target appended at the end.
    """
    target = trim_trailing_separators(normalized_target)
    entries = split_path_list(current_value, sep)

    if any(_matches(entry, target, normalize) for entry in entries):
        return AddDecision(PathUpdateResult.PATH_ALREADY_EXISTS)

    entries.append(target)
    return AddDecision(PathUpdateResult.PATH_ADDED, join_path_list(entries, sep))


def decide_remove(
    current_value: Optional[str],
    normalized_target: str,
    normalize: Normalizer,
    sep: str = os.pathsep,
) -> RemoveDecision:
    """
    Decide which entries equivalent to `normalized_target` must be dropped.

    Every matching entry is removed. PATH_NOT_FOUND when the value is empty
    or nothing matched.
    """
    if not current_value:
        return RemoveDecision(PathRemoveResult.PATH_NOT_FOUND)

    target = trim_trailing_separators(normalized_target)
    entries = split_path_list(current_value, sep)
    kept = [entry for entry in entries if not _matches(entry, target, normalize)]

    removed = len(entries) - len(kept)
    if removed == 0:
        return RemoveDecision(PathRemoveResult.PATH_NOT_FOUND)
    return RemoveDecision(PathRemoveResult.PATH_REMOVED, join_path_list(kept, sep), removed)
