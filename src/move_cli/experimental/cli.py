"""`move experimental`: static analyses on Move source or bytecode."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, Union

from move_cli.cli.parsing import MoveArgs, add_command_parser, add_subcommands, path_arg
from move_cli.errors import StorageError
from move_cli.toolchain import load_toolchain

logger = logging.getLogger(__name__)

CONCRETIZE_MODES = ("paths", "reads", "writes", "dont")


@dataclass(frozen=True)
class ReadWriteSet:
    """Perform a read/write set analysis and print the results for `function`."""

    NAME: ClassVar[str] = "read-write-set"
    HELP: ClassVar[str] = "Perform a read/write set analysis for a function"

    module_file: Path
    function: str
    signers: tuple[str, ...] = field(default_factory=tuple)
    args: tuple[str, ...] = field(default_factory=tuple)
    type_args: tuple[str, ...] = field(default_factory=tuple)
    concretize: str = "dont"

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("module_file", type=path_arg, help="Path to .mv file to analyze")
        parser.add_argument("function", help="Name of function to analyze")
        parser.add_argument("--signers", nargs="+", default=[], help="Signer addresses")
        parser.add_argument(
            "--args", dest="txn_args", nargs="+", default=[], help="Function arguments"
        )
        parser.add_argument("--type-args", nargs="+", default=[], help="Type arguments")
        parser.add_argument(
            "--concretize",
            choices=CONCRETIZE_MODES,
            default="dont",
            help="Concretize the abstract paths, reads or writes using storage",
        )

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "ReadWriteSet":
        return cls(
            module_file=args.module_file,
            function=args.function,
            signers=tuple(args.signers),
            args=tuple(args.txn_args),
            type_args=tuple(args.type_args),
            concretize=args.concretize,
        )


ExperimentalCommand = Union[ReadWriteSet]

EXPERIMENTAL_COMMANDS = (ReadWriteSet,)


def register_commands(parser: argparse.ArgumentParser) -> None:
    sub = add_subcommands(parser, dest="experimental_command")
    for command_cls in EXPERIMENTAL_COMMANDS:
        command_parser = add_command_parser(sub, command_cls.NAME, help=command_cls.HELP)
        command_cls.add_arguments(command_parser)


def command_from_args(args: argparse.Namespace) -> ExperimentalCommand:
    for command_cls in EXPERIMENTAL_COMMANDS:
        if args.experimental_command == command_cls.NAME:
            return command_cls.from_args(args)
    raise ValueError(f"unknown experimental command: {args.experimental_command}")


def handle_command(cmd: ExperimentalCommand, move_args: MoveArgs, storage_dir: Path) -> None:
    if isinstance(cmd, ReadWriteSet):
        if cmd.concretize != "dont" and not storage_dir.is_dir():
            raise StorageError(
                f"--concretize {cmd.concretize} needs an existing storage directory: {storage_dir}"
            )
        logger.debug("read/write set analysis of %s::%s", cmd.module_file, cmd.function)
        report = load_toolchain().read_write_set(
            storage_dir=storage_dir,
            module_file=cmd.module_file,
            function=cmd.function,
            signers=cmd.signers,
            args=cmd.args,
            type_args=cmd.type_args,
            concretize=cmd.concretize,
            verbose=move_args.verbose,
        )
        print(report)
        return

    raise TypeError(f"unknown experimental command: {cmd!r}")
