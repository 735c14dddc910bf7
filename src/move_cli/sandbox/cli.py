"""`move sandbox`: execute transactions against a local on-disk storage."""

from __future__ import annotations

import argparse
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, Union

from move_cli.cli.parsing import MoveArgs, add_command_parser, add_subcommands, path_arg
from move_cli.errmap import ErrorMapping
from move_cli.errors import StorageError
from move_cli.package import (
    BUILD_OUTPUT_DIR,
    DEFAULT_BUILD_DIR,
    MANIFEST_FILE,
    find_package_root,
)
from move_cli.runtime import CostTable, NativeFunctionTable
from move_cli.toolchain import load_toolchain

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Publish:
    NAME: ClassVar[str] = "publish"
    HELP: ClassVar[str] = "Compile the modules in this package and publish them to storage"

    no_republish: bool = False
    ignore_breaking_changes: bool = False
    with_deps: bool = False
    bundle: bool = False
    override_ordering: tuple[str, ...] | None = None

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--no-republish",
            action="store_true",
            help="Fail if a module with the same name is already published",
        )
        parser.add_argument(
            "--ignore-breaking-changes",
            action="store_true",
            help="Publish even if the new modules break compatibility with published ones",
        )
        parser.add_argument(
            "--with-deps",
            action="store_true",
            help="Also publish modules from dependencies",
        )
        parser.add_argument(
            "--bundle",
            action="store_true",
            help="Publish all modules in a single bundle",
        )
        parser.add_argument(
            "--override-ordering",
            nargs="+",
            default=None,
            metavar="MODULE",
            help="Explicit publishing order for the modules in the bundle",
        )

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "Publish":
        ordering = args.override_ordering
        return cls(
            no_republish=args.no_republish,
            ignore_breaking_changes=args.ignore_breaking_changes,
            with_deps=args.with_deps,
            bundle=args.bundle,
            override_ordering=tuple(ordering) if ordering is not None else None,
        )


@dataclass(frozen=True)
class Run:
    NAME: ClassVar[str] = "run"
    HELP: ClassVar[str] = "Run a Move script that reads/writes resources stored on disk"

    script_file: Path
    script_name: str | None = None
    signers: tuple[str, ...] = field(default_factory=tuple)
    args: tuple[str, ...] = field(default_factory=tuple)
    type_args: tuple[str, ...] = field(default_factory=tuple)
    gas_budget: int | None = None
    dry_run: bool = False

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("script_file", type=path_arg, help="Path to .mv or .move script")
        parser.add_argument(
            "script_name",
            nargs="?",
            default=None,
            help="Name of the script function to run when the file holds several",
        )
        parser.add_argument("--signers", nargs="+", default=[], help="Signer addresses")
        parser.add_argument(
            "--args", dest="txn_args", nargs="+", default=[], help="Transaction arguments"
        )
        parser.add_argument("--type-args", nargs="+", default=[], help="Type arguments")
        parser.add_argument(
            "--gas-budget", type=int, default=None, help="Maximum gas units for execution"
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Run the script without committing changes to storage",
        )

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "Run":
        return cls(
            script_file=args.script_file,
            script_name=args.script_name,
            signers=tuple(args.signers),
            args=tuple(args.txn_args),
            type_args=tuple(args.type_args),
            gas_budget=args.gas_budget,
            dry_run=args.dry_run,
        )


@dataclass(frozen=True)
class SandboxTest:
    __test__ = False  # not a pytest test class

    NAME: ClassVar[str] = "test"
    HELP: ClassVar[str] = "Run expected-output tests for sandbox commands"

    path: Path
    use_temp_dir: bool = False
    track_cov: bool = False
    create_baseline: bool = False

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "test_path", type=path_arg, help="Directory containing args.txt test cases"
        )
        parser.add_argument(
            "--use-temp-dir",
            action="store_true",
            help="Run each test in a fresh temporary directory",
        )
        parser.add_argument("--track-cov", action="store_true", help="Report bytecode coverage")
        parser.add_argument(
            "--create-baseline",
            action="store_true",
            help="Write the current outputs as the new expected outputs",
        )

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "SandboxTest":
        return cls(
            path=args.test_path,
            use_temp_dir=args.use_temp_dir,
            track_cov=args.track_cov,
            create_baseline=args.create_baseline,
        )


@dataclass(frozen=True)
class View:
    NAME: ClassVar[str] = "view"
    HELP: ClassVar[str] = "View Move resources, events files, and modules stored on disk"

    file: Path

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("file", type=path_arg, help="Path to a resource, event or module")

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "View":
        return cls(file=args.file)


@dataclass(frozen=True)
class Clean:
    NAME: ClassVar[str] = "clean"
    HELP: ClassVar[str] = "Delete all resources, events, and modules stored on disk"

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:  # noqa: ARG004
        return

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "Clean":  # noqa: ARG003
        return cls()


@dataclass(frozen=True)
class Doctor:
    NAME: ClassVar[str] = "doctor"
    HELP: ClassVar[str] = "Check storage for consistency (e.g. unlinked modules)"

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:  # noqa: ARG004
        return

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "Doctor":  # noqa: ARG003
        return cls()


@dataclass(frozen=True)
class GenerateStructLayouts:
    NAME: ClassVar[str] = "generate"
    HELP: ClassVar[str] = "Generate struct layout bindings for published modules"

    module: Path
    struct: str | None = None
    type_args: tuple[str, ...] = field(default_factory=tuple)
    shallow: bool = False

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        generators = add_subcommands(parser, dest="generate_command")
        layouts = add_command_parser(
            generators, "struct-layouts", help="Generate YAML layouts for structs"
        )
        layouts.add_argument("--module", type=path_arg, required=True, help="Module file")
        layouts.add_argument("--struct", default=None, help="Only generate this struct")
        layouts.add_argument("--type-args", nargs="+", default=[], help="Struct type arguments")
        layouts.add_argument(
            "--shallow",
            action="store_true",
            help="Do not recurse into the layouts of field types",
        )

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "GenerateStructLayouts":
        return cls(
            module=args.module,
            struct=args.struct,
            type_args=tuple(args.type_args),
            shallow=args.shallow,
        )


SandboxCommand = Union[
    Publish, Run, SandboxTest, View, Clean, Doctor, GenerateStructLayouts
]

SANDBOX_COMMANDS = (Publish, Run, SandboxTest, View, Clean, Doctor, GenerateStructLayouts)


def register_commands(parser: argparse.ArgumentParser) -> None:
    sub = add_subcommands(parser, dest="sandbox_command")
    for command_cls in SANDBOX_COMMANDS:
        command_parser = add_command_parser(sub, command_cls.NAME, help=command_cls.HELP)
        command_cls.add_arguments(command_parser)


def command_from_args(args: argparse.Namespace) -> SandboxCommand:
    for command_cls in SANDBOX_COMMANDS:
        if args.sandbox_command == command_cls.NAME:
            return command_cls.from_args(args)
    raise ValueError(f"unknown sandbox command: {args.sandbox_command}")


def _require_storage_dir(storage_dir: Path) -> None:
    if not storage_dir.exists():
        raise StorageError(f"storage directory does not exist: {storage_dir}")
    if not storage_dir.is_dir():
        raise StorageError(f"storage path is not a directory: {storage_dir}")


def _check_removable(target: Path, protected: list[Path]) -> None:
    if not target.is_dir():
        raise StorageError(f"refusing to remove non-directory: {target}")
    resolved = target.resolve()
    if (resolved / MANIFEST_FILE).exists():
        raise StorageError(f"refusing to remove package directory: {target}")
    for path in protected:
        if path == resolved or resolved in path.parents:
            raise StorageError(f"refusing to remove {target}: it contains {path}")


def _clean(move_args: MoveArgs, storage_dir: Path) -> None:
    base = move_args.build_config.install_dir or move_args.package_path or Path(DEFAULT_BUILD_DIR)
    build_dir = base / BUILD_OUTPUT_DIR
    protected = [Path.cwd().resolve()]
    if move_args.package_path is not None and move_args.package_path.exists():
        protected.append(move_args.package_path.resolve())

    targets = [target for target in (storage_dir, build_dir) if target.exists()]
    for target in targets:
        _check_removable(target, protected)
    for target in targets:
        logger.debug("removing %s", target)
        shutil.rmtree(target)


def handle_command(
    cmd: SandboxCommand,
    natives: NativeFunctionTable,
    cost_table: CostTable,
    error_descriptions: ErrorMapping,
    move_args: MoveArgs,
    storage_dir: Path,
) -> None:
    if isinstance(cmd, Clean):
        _clean(move_args, storage_dir)
        return

    if storage_dir.exists() and not storage_dir.is_dir():
        raise StorageError(f"storage path is not a directory: {storage_dir}")

    toolchain = load_toolchain()
    build_config = move_args.build_config

    if isinstance(cmd, Publish):
        toolchain.sandbox_publish(
            root=find_package_root(move_args.package_path),
            build_config=build_config,
            storage_dir=storage_dir,
            no_republish=cmd.no_republish,
            ignore_breaking_changes=cmd.ignore_breaking_changes,
            with_deps=cmd.with_deps,
            bundle=cmd.bundle,
            override_ordering=cmd.override_ordering,
            verbose=move_args.verbose,
        )
        return

    if isinstance(cmd, Run):
        toolchain.sandbox_run(
            root=find_package_root(move_args.package_path),
            build_config=build_config,
            natives=natives,
            cost_table=cost_table,
            error_descriptions=error_descriptions,
            storage_dir=storage_dir,
            script_file=cmd.script_file,
            script_name=cmd.script_name,
            signers=cmd.signers,
            args=cmd.args,
            type_args=cmd.type_args,
            gas_budget=cmd.gas_budget,
            dry_run=cmd.dry_run,
            verbose=move_args.verbose,
        )
        return

    if isinstance(cmd, SandboxTest):
        toolchain.sandbox_test(
            path=cmd.path,
            build_config=build_config,
            use_temp_dir=cmd.use_temp_dir,
            track_cov=cmd.track_cov,
            create_baseline=cmd.create_baseline,
        )
        return

    if isinstance(cmd, View):
        _require_storage_dir(storage_dir)
        print(toolchain.sandbox_view(storage_dir=storage_dir, file=cmd.file))
        return

    if isinstance(cmd, Doctor):
        _require_storage_dir(storage_dir)
        toolchain.sandbox_doctor(storage_dir=storage_dir)
        return

    if isinstance(cmd, GenerateStructLayouts):
        _require_storage_dir(storage_dir)
        toolchain.sandbox_generate_struct_layouts(
            storage_dir=storage_dir,
            module=cmd.module,
            struct=cmd.struct,
            type_args=cmd.type_args,
            shallow=cmd.shallow,
        )
        return

    raise TypeError(f"unknown sandbox command: {cmd!r}")
