"""Application name -> config directory name."""

from __future__ import annotations

from typing import Optional

from .models import DEFAULT_OPTIONS, DirectoryNameCase, PathUtilsOptions


def to_camel_case(s: str) -> str:
    """Lowercase the first character, leave the rest untouched."""
    if not s:
        return s
    return s[0].lower() + s[1:]


def format_directory_name(raw: Optional[str], options: Optional[PathUtilsOptions] = None) -> str:
    """
    Turn an application name into a directory name.

    Returns "" for a missing or blank name so callers can treat it as
    "unknown application".

        >>> format_directory_name("MyCoolApp")
        '.myCoolApp'
        >>> format_directory_name("MyCoolApp", PathUtilsOptions(prefix_with_period=False))
        'myCoolApp'
    """
    if raw is None or not raw.strip():
        return ""
    opts = options or DEFAULT_OPTIONS

    name = raw
    if opts.directory_name_case is DirectoryNameCase.CAMEL_CASE:
        name = to_camel_case(name)

    if opts.prefix_with_period and not name.startswith("."):
        name = "." + name
    return name
