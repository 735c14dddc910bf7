"""Command-line interface for move."""

from __future__ import annotations

import argparse
import contextlib
import logging
import sys
from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version
from pathlib import Path
from typing import Any, Sequence, TextIO, Union

from move_cli.cli.config import CLIConfig, ConfigError, load_cli_config
from move_cli.cli.log import configure_logging
from move_cli.cli.parsing import (
    MoveArgs,
    add_command_parser,
    add_global_arguments,
    add_subcommands,
    move_args_from_namespace,
    path_arg,
)
from move_cli.commands import (
    LEAF_COMMANDS,
    Build,
    Coverage,
    Disassemble,
    Errmap,
    Info,
    New,
    Prove,
    Test,
)
from move_cli.errmap import ErrorMapping
from move_cli.errors import MoveCLIError
from move_cli.experimental.cli import ExperimentalCommand
from move_cli.experimental.cli import command_from_args as experimental_command_from_args
from move_cli.experimental.cli import handle_command as handle_experimental_command
from move_cli.experimental.cli import register_commands as register_experimental_commands
from move_cli.package import DEFAULT_STORAGE_DIR
from move_cli.runtime import CostTable, NativeFunctionTable
from move_cli.sandbox.cli import SandboxCommand
from move_cli.sandbox.cli import command_from_args as sandbox_command_from_args
from move_cli.sandbox.cli import handle_command as handle_sandbox_command
from move_cli.sandbox.cli import register_commands as register_sandbox_commands

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

_STORAGE_DIR_HELP = (
    "Directory storing Move resources, events, and module bytecodes produced by "
    "module publishing and script execution"
)


@dataclass(frozen=True)
class Sandbox:
    NAME = "sandbox"

    cmd: SandboxCommand
    storage_dir: Path = Path(DEFAULT_STORAGE_DIR)


@dataclass(frozen=True)
class Experimental:
    NAME = "experimental"

    cmd: ExperimentalCommand
    storage_dir: Path = Path(DEFAULT_STORAGE_DIR)


Command = Union[
    Build, Coverage, Disassemble, Errmap, Info, New, Prove, Test, Sandbox, Experimental
]


def _cli_version() -> str:
    try:
        return pkg_version("move-cli")
    except PackageNotFoundError:
        return "0.0.0+local"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="move", description="Package-oriented command line for Move"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"move-cli {_cli_version()}",
    )
    add_global_arguments(parser)

    sub = add_subcommands(parser, dest="command", metavar="COMMAND")
    for command_cls in LEAF_COMMANDS:
        command_parser = add_command_parser(sub, command_cls.NAME, help=command_cls.HELP)
        command_cls.add_arguments(command_parser)

    sandbox = add_command_parser(sub, Sandbox.NAME, help="Execute a sandbox command")
    sandbox.add_argument(
        "--storage-dir",
        type=path_arg,
        default=Path(DEFAULT_STORAGE_DIR),
        help=_STORAGE_DIR_HELP,
    )
    register_sandbox_commands(sandbox)

    experimental = add_command_parser(
        sub,
        Experimental.NAME,
        help="(Experimental) Run static analyses on Move source or bytecode",
    )
    experimental.add_argument(
        "--storage-dir",
        type=path_arg,
        default=Path(DEFAULT_STORAGE_DIR),
        help=_STORAGE_DIR_HELP,
    )
    register_experimental_commands(experimental)

    return parser


def _command_from_args(args: argparse.Namespace) -> Command:
    if args.command == Sandbox.NAME:
        return Sandbox(cmd=sandbox_command_from_args(args), storage_dir=args.storage_dir)
    if args.command == Experimental.NAME:
        return Experimental(
            cmd=experimental_command_from_args(args), storage_dir=args.storage_dir
        )
    for command_cls in LEAF_COMMANDS:
        if args.command == command_cls.NAME:
            return command_cls.from_args(args)
    raise ValueError(f"unknown command: {args.command}")


def parse_args(argv: Sequence[str] | None = None) -> tuple[MoveArgs, Command]:
    """Parse ``argv`` into global options and a single command.

    Usage errors are reported by argparse, which exits with status 2.
    """
    args = _build_parser().parse_args(argv)
    return move_args_from_namespace(args), _command_from_args(args)


def run_cli(
    natives: NativeFunctionTable,
    cost_table: CostTable,
    error_descriptions: ErrorMapping,
    move_args: MoveArgs,
    cmd: Command,
) -> Any:
    logger.debug("dispatching %s", type(cmd).__name__)
    if isinstance(cmd, (Build, Coverage, Disassemble, Errmap, Info, Prove)):
        return cmd.execute(move_args.package_path, move_args.build_config)
    if isinstance(cmd, New):
        return cmd.execute_with_defaults(move_args.package_path)
    if isinstance(cmd, Test):
        return cmd.execute(move_args.package_path, move_args.build_config, natives)
    if isinstance(cmd, Sandbox):
        return handle_sandbox_command(
            cmd.cmd,
            natives,
            cost_table,
            error_descriptions,
            move_args,
            cmd.storage_dir,
        )
    if isinstance(cmd, Experimental):
        return handle_experimental_command(cmd.cmd, move_args, cmd.storage_dir)
    raise TypeError(f"unknown command: {cmd!r}")


def _emit_experimental_warning(config: CLIConfig, cmd: Command, stderr: TextIO) -> None:
    if not isinstance(cmd, Experimental):
        return
    if not config.experimental_warning:
        return
    print(
        "[experimental] static analyses are experimental; commands and outputs may change.",
        file=stderr,
    )


def _print_error(stderr: TextIO, prefix: str, message: str, *, code: int) -> int:
    print(f"{prefix}: {message}", file=stderr)
    return code


def move_cli(
    natives: NativeFunctionTable,
    cost_table: CostTable,
    error_descriptions: ErrorMapping,
    argv: Sequence[str] | None = None,
    *,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Run one move command with runtime data supplied by the embedding application."""
    stdout = stdout if stdout is not None else sys.stdout
    stderr = stderr if stderr is not None else sys.stderr

    args = _build_parser().parse_args(argv)
    move_args = move_args_from_namespace(args)
    cmd = _command_from_args(args)

    try:
        config = load_cli_config(args.config)
    except ConfigError as exc:
        return _print_error(stderr, "config error", str(exc), code=EXIT_FAILURE)

    configure_logging(level=config.log_level, verbose=move_args.verbose, stream=stderr)
    _emit_experimental_warning(config, cmd, stderr)

    try:
        with contextlib.redirect_stdout(stdout):
            run_cli(natives, cost_table, error_descriptions, move_args, cmd)
    except MoveCLIError as exc:
        return _print_error(stderr, "error", str(exc), code=EXIT_FAILURE)
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    return move_cli([], CostTable.zero(), ErrorMapping(), argv)


if __name__ == "__main__":
    raise SystemExit(main())
