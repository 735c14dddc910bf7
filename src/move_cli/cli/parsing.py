"""Global options shared by every move subcommand."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from move_cli.package import BuildConfig, validate_address, validate_identifier


@dataclass(frozen=True)
class MoveArgs:
    package_path: Path | None = None
    verbose: bool = False
    build_config: BuildConfig = field(default_factory=BuildConfig)


def path_arg(value: str) -> Path:
    if not value or "\x00" in value:
        raise argparse.ArgumentTypeError(f"cannot interpret {value!r} as a path")
    return Path(value)


def named_address_arg(value: str) -> tuple[str, str]:
    name, sep, address = value.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected NAME=ADDRESS, got {value!r}")
    try:
        return validate_identifier(name.strip()), validate_address(address)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _add_global_arguments(parser: argparse.ArgumentParser, *, suppress: bool) -> None:
    def default(value):
        return argparse.SUPPRESS if suppress else value

    parser.add_argument(
        "--path",
        "-p",
        dest="package_path",
        type=path_arg,
        default=default(None),
        help="Path to a package which the command should be run with respect to",
    )
    parser.add_argument(
        "-v",
        dest="verbose",
        action="store_true",
        default=default(False),
        help="Print additional diagnostics if available",
    )
    parser.add_argument(
        "--config",
        dest="config",
        type=path_arg,
        default=default(None),
        help="Path to CLI config TOML (default: ~/.move/config.toml)",
    )

    build = parser.add_argument_group("package build options")
    build.add_argument(
        "--dev",
        "-d",
        dest="dev_mode",
        action="store_true",
        default=default(False),
        help="Compile in dev mode, using dev-addresses and dev-dependencies",
    )
    build.add_argument(
        "--test",
        dest="test_mode",
        action="store_true",
        default=default(False),
        help=argparse.SUPPRESS,
    )
    build.add_argument(
        "--doc",
        dest="generate_docs",
        action="store_true",
        default=default(False),
        help="Generate documentation for packages",
    )
    build.add_argument(
        "--abi",
        dest="generate_abis",
        action="store_true",
        default=default(False),
        help="Generate ABIs for packages",
    )
    build.add_argument(
        "--install-dir",
        dest="install_dir",
        type=path_arg,
        default=default(None),
        help="Installation directory for compiled artifacts (default: <package>/build)",
    )
    build.add_argument(
        "--force",
        dest="force_recompilation",
        action="store_true",
        default=default(False),
        help="Force recompilation of all packages",
    )
    build.add_argument(
        "--named-address",
        dest="named_addresses",
        type=named_address_arg,
        action="append",
        default=default([]),
        metavar="NAME=ADDRESS",
        help="Assign an address to a named address (repeatable)",
    )


_GLOBAL_PARENT = argparse.ArgumentParser(add_help=False)
_add_global_arguments(_GLOBAL_PARENT, suppress=True)


def add_global_arguments(parser: argparse.ArgumentParser) -> None:
    """Declare global options with their real defaults on the top-level parser."""
    _add_global_arguments(parser, suppress=False)


class _SubcommandsAction(argparse._SubParsersAction):
    """Subparsers action that keeps ``--named-address`` values from every level.

    argparse copies each subparser's namespace over the parent's, so without
    this a repeated flag after the subcommand replaces the earlier ones.
    """

    def __call__(self, parser, namespace, values, option_string=None):
        earlier = getattr(namespace, "named_addresses", [])
        super().__call__(parser, namespace, values, option_string)
        later = getattr(namespace, "named_addresses", [])
        if later is not earlier:
            namespace.named_addresses = [*earlier, *later]


def add_subcommands(
    parser: argparse.ArgumentParser, *, dest: str, **kwargs: Any
) -> argparse._SubParsersAction:
    return parser.add_subparsers(dest=dest, required=True, action=_SubcommandsAction, **kwargs)


def add_command_parser(
    sub: argparse._SubParsersAction, name: str, *, help: str | None = None
) -> argparse.ArgumentParser:
    # Subcommand copies only set attributes that were given, so a flag placed
    # after the subcommand overrides the top-level default.
    return sub.add_parser(name, help=help, parents=[_GLOBAL_PARENT])


def build_config_from_args(args: argparse.Namespace) -> BuildConfig:
    return BuildConfig(
        dev_mode=args.dev_mode,
        test_mode=args.test_mode,
        generate_docs=args.generate_docs,
        generate_abis=args.generate_abis,
        install_dir=args.install_dir,
        force_recompilation=args.force_recompilation,
        additional_named_addresses=dict(args.named_addresses),
    )


def move_args_from_namespace(args: argparse.Namespace) -> MoveArgs:
    return MoveArgs(
        package_path=args.package_path,
        verbose=args.verbose,
        build_config=build_config_from_args(args),
    )
