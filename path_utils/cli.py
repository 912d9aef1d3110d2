#!/usr/bin/env python3
"""
path-utils command line.

Add or remove directories (or the app's XDG config directory) in a PATH-like
variable at user, machine or process scope.

Examples:
    path-utils show --scope user
    path-utils add ~/.local/tools
    path-utils remove ~/.local/tools --scope machine
    path-utils add-config --app-name MyCoolApp --no-period-prefix
    path-utils demo
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

from . import __version__
from .environment import EnvironmentService, SystemEnvironmentService
from .helper import PATH_VARIABLE, PathEnvironmentHelper
from .models import DEFAULT_OPTIONS, PathRemoveResult, PathUpdateResult, PathUtilsOptions, Target
from .reconciler import split_path_list

_THEME = Theme(
    {
        "ui.info": "cyan",
        "ui.success": "green bold",
        "ui.warn": "yellow bold",
        "ui.error": "red bold",
        "ui.dim": "dim",
    }
)

console = Console(theme=_THEME, highlight=False)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_PERMISSION = 3

_RESULT_STYLES = {
    PathUpdateResult.PATH_ADDED: "ui.success",
    PathUpdateResult.PATH_ALREADY_EXISTS: "ui.dim",
    PathUpdateResult.ERROR: "ui.error",
    PathRemoveResult.PATH_REMOVED: "ui.success",
    PathRemoveResult.PATH_NOT_FOUND: "ui.dim",
    PathRemoveResult.ERROR: "ui.error",
}


def _parse_scope(value: str) -> Target:
    if not value:
        return Target.USER
    v = value.strip().lower()
    if v in ("u", "user"):
        return Target.USER
    if v in ("m", "machine", "system"):
        return Target.MACHINE
    if v in ("p", "proc", "process"):
        return Target.PROCESS
    raise argparse.ArgumentTypeError(f"Invalid scope: {value}. Use user/machine/process or u/m/p.")


def _options_from_args(args) -> PathUtilsOptions:
    if getattr(args, "no_period_prefix", False):
        return PathUtilsOptions(prefix_with_period=False)
    return DEFAULT_OPTIONS


def _print_result(result) -> int:
    console.print(f"[{_RESULT_STYLES[result]}]{result.value}[/]")
    return EXIT_ERROR if result in (PathUpdateResult.ERROR, PathRemoveResult.ERROR) else EXIT_OK


def print_entries(entries: List[str], title: str) -> None:
    """Numbered entries with an OK/MISS badge for whether the directory exists."""
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("", justify="center")
    table.add_column("Directory")
    for i, entry in enumerate(entries, 1):
        exists = os.path.isdir(os.path.expanduser(os.path.expandvars(entry)))
        badge = "[ui.success]OK[/]" if exists else "[ui.error]MISS[/]"
        table.add_row(str(i), badge, escape(entry))
    if not entries:
        console.print(f"{escape(title)}: [ui.dim]<empty>[/]")
        return
    console.print(table)


# Commands

def cmd_info(args, service: EnvironmentService, helper: PathEnvironmentHelper) -> int:
    console.print("Running on Windows." if service.is_windows() else "Running on non-Windows platform.")
    console.print(f"App name: [ui.info]{escape(str(args.app_name or service.get_application_name()))}[/]")
    console.print(f"XDG Config Home: [ui.info]{escape(service.get_config_home())}[/]")
    value = service.get_variable(helper.variable_name, args.scope)
    console.print(f"{helper.variable_name} ({args.scope.value}): {escape(value or '')}")
    return EXIT_OK


def cmd_show(args, service: EnvironmentService, helper: PathEnvironmentHelper) -> int:
    value = service.get_variable(helper.variable_name, args.scope)
    print_entries(split_path_list(value), f"{args.scope.value} {helper.variable_name}")
    return EXIT_OK


def cmd_add(args, service: EnvironmentService, helper: PathEnvironmentHelper) -> int:
    return _print_result(helper.ensure_directory_is_in_path(args.directory, args.scope))


def cmd_remove(args, service: EnvironmentService, helper: PathEnvironmentHelper) -> int:
    return _print_result(helper.remove_directory_from_path(args.directory, args.scope))


def cmd_add_config(args, service: EnvironmentService, helper: PathEnvironmentHelper) -> int:
    result = helper.ensure_application_xdg_config_directory_is_in_path(
        args.scope, app_name=args.app_name, options=_options_from_args(args)
    )
    return _print_result(result)


def cmd_remove_config(args, service: EnvironmentService, helper: PathEnvironmentHelper) -> int:
    result = helper.remove_application_xdg_config_directory_from_path(
        args.scope, app_name=args.app_name, options=_options_from_args(args)
    )
    return _print_result(result)


def cmd_demo(args, service: EnvironmentService, helper: PathEnvironmentHelper) -> int:
    cmd_info(args, service, helper)
    options = _options_from_args(args)

    added = helper.ensure_application_xdg_config_directory_is_in_path(
        args.scope, app_name=args.app_name, options=options
    )
    console.print(f"EnsureApplicationXdgConfigDirectoryIsInPath result: [{_RESULT_STYLES[added]}]{added.value}[/]")

    removed = helper.remove_application_xdg_config_directory_from_path(
        args.scope, app_name=args.app_name, options=options
    )
    console.print(f"RemoveApplicationXdgConfigDirectoryFromPath result: [{_RESULT_STYLES[removed]}]{removed.value}[/]")
    failed = added is PathUpdateResult.ERROR or removed is PathRemoveResult.ERROR
    return EXIT_ERROR if failed else EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="path-utils",
        description="Keep directories (or your app's config directory) on PATH, idempotently.",
    )
    p.add_argument("-V", "--version", action="version", version=f"path-utils {__version__}")
    p.add_argument("--scope", "-s", type=_parse_scope, default=Target.USER,
                   help="Which variable to read/modify: user/machine/process or u/m/p (default: user).")
    p.add_argument("--var", default=PATH_VARIABLE, metavar="NAME",
                   help="Variable to manage (default: PATH).")
    p.add_argument("-l", "--log-level", choices=["info", "debug", "warning", "error"], default="warning",
                   help="Set logging level (default: warning)")
    sub = p.add_subparsers(dest="cmd", required=True)

    def _add_app_flags(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("--app-name", help="Application name (default: detected from the running program).")
        sp.add_argument("--no-period-prefix", action="store_true",
                        help="Do not prefix the config directory name with '.'.")

    sub_info = sub.add_parser("info", help="Print platform, app name, config home and the current value.")
    sub_info.add_argument("--app-name", help="Application name to report instead of the detected one.")
    sub_info.set_defaults(func=cmd_info)

    sub_show = sub.add_parser("show", help="List the variable's entries.")
    sub_show.set_defaults(func=cmd_show)

    sub_add = sub.add_parser("add", help="Create a directory and make sure it is on PATH.")
    sub_add.add_argument("directory", help="Directory to add (quote it if it has spaces).")
    sub_add.set_defaults(func=cmd_add)

    sub_rm = sub.add_parser("remove", help="Remove a directory from PATH.")
    sub_rm.add_argument("directory", help="Directory to remove (matched case-insensitively).")
    sub_rm.set_defaults(func=cmd_remove)

    sub_addc = sub.add_parser("add-config", help="Add the application's config directory to PATH.")
    _add_app_flags(sub_addc)
    sub_addc.set_defaults(func=cmd_add_config)

    sub_rmc = sub.add_parser("remove-config", help="Remove the application's config directory from PATH.")
    _add_app_flags(sub_rmc)
    sub_rmc.set_defaults(func=cmd_remove_config)

    sub_demo = sub.add_parser("demo", help="Print diagnostics, then add and remove the app config directory once.")
    _add_app_flags(sub_demo)
    sub_demo.set_defaults(func=cmd_demo)

    return p


def main(argv: Optional[List[str]] = None, service: Optional[EnvironmentService] = None) -> int:
    args = build_parser().parse_args(argv)

    log_levels = {
        "info": logging.INFO,
        "debug": logging.DEBUG,
        "warning": logging.WARNING,
        "error": logging.ERROR,
    }
    logging.basicConfig(
        level=log_levels[args.log_level],
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    service = service or SystemEnvironmentService()
    try:
        helper = PathEnvironmentHelper(service, args.var)
        return args.func(args, service, helper)
    except ValueError as e:
        console.print(f"[ui.error]error:[/] {escape(str(e))}")
        return EXIT_USAGE
    except PermissionError as e:
        console.print(f"[ui.error]error:[/] {escape(str(e))}")
        return EXIT_PERMISSION


if __name__ == "__main__":
    sys.exit(main())
