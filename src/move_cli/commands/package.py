"""Leaf commands that operate on an existing package through the toolchain."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar

from move_cli.cli.parsing import add_command_parser, add_subcommands
from move_cli.package import BuildConfig, find_package_root, load_manifest
from move_cli.toolchain import load_toolchain

logger = logging.getLogger(__name__)

COVERAGE_MODES = ("summary", "source", "bytecode")


@dataclass(frozen=True)
class Build:
    NAME: ClassVar[str] = "build"
    HELP: ClassVar[str] = "Build the package at `path`"

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:  # noqa: ARG004
        return

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "Build":  # noqa: ARG003
        return cls()

    def execute(self, path: Path | None, build_config: BuildConfig) -> None:
        root = find_package_root(path)
        logger.debug("building package at %s", root)
        load_toolchain().build_package(root=root, build_config=build_config)


@dataclass(frozen=True)
class Coverage:
    """Inspect test coverage recorded by `move test --coverage`."""

    NAME: ClassVar[str] = "coverage"
    HELP: ClassVar[str] = "Inspect test coverage for this package"

    mode: str = "summary"
    module_name: str | None = None
    summarize_functions: bool = False
    output_csv: bool = False

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        modes = add_subcommands(parser, dest="coverage_command")
        summary = add_command_parser(
            modes, "summary", help="Display a coverage summary for all modules"
        )
        summary.add_argument(
            "--summarize-functions",
            action="store_true",
            help="Include per-function coverage in the summary",
        )
        summary.add_argument(
            "--output-csv",
            action="store_true",
            help="Emit the summary as CSV instead of a table",
        )
        source = add_command_parser(
            modes, "source", help="Display coverage information about a module's source"
        )
        source.add_argument("--module", dest="module_name", required=True)
        bytecode = add_command_parser(
            modes, "bytecode", help="Display coverage information about a module's bytecode"
        )
        bytecode.add_argument("--module", dest="module_name", required=True)

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "Coverage":
        return cls(
            mode=args.coverage_command,
            module_name=getattr(args, "module_name", None),
            summarize_functions=getattr(args, "summarize_functions", False),
            output_csv=getattr(args, "output_csv", False),
        )

    def execute(self, path: Path | None, build_config: BuildConfig) -> None:
        if self.mode not in COVERAGE_MODES:
            raise ValueError(f"unknown coverage mode: {self.mode}")
        root = find_package_root(path)
        load_toolchain().coverage(
            root=root,
            build_config=build_config,
            mode=self.mode,
            module_name=self.module_name,
            summarize_functions=self.summarize_functions,
            output_csv=self.output_csv,
        )


@dataclass(frozen=True)
class Disassemble:
    NAME: ClassVar[str] = "disassemble"
    HELP: ClassVar[str] = "Disassemble the Move bytecode pointed to"

    module_name: str
    package_name: str | None = None
    interactive: bool = False

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--name", dest="module_name", required=True, help="Module or script to disassemble"
        )
        parser.add_argument(
            "--package",
            dest="package_name",
            default=None,
            help="Package containing the module (default: the root package)",
        )
        parser.add_argument(
            "--interactive",
            action="store_true",
            help="Start an interactive source/bytecode explorer",
        )

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "Disassemble":
        return cls(
            module_name=args.module_name,
            package_name=args.package_name,
            interactive=args.interactive,
        )

    def execute(self, path: Path | None, build_config: BuildConfig) -> None:
        root = find_package_root(path)
        text = load_toolchain().disassemble(
            root=root,
            build_config=build_config,
            module_name=self.module_name,
            package_name=self.package_name,
            interactive=self.interactive,
        )
        if text:
            print(text)


@dataclass(frozen=True)
class Info:
    NAME: ClassVar[str] = "info"
    HELP: ClassVar[str] = "Print the package name, version, addresses and dependencies"

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:  # noqa: ARG004
        return

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "Info":  # noqa: ARG003
        return cls()

    def execute(self, path: Path | None, build_config: BuildConfig) -> None:
        root = find_package_root(path)
        manifest = load_manifest(root)
        addresses = dict(manifest.addresses)
        if build_config.dev_mode:
            addresses.update(manifest.dev_addresses)
        addresses.update(build_config.additional_named_addresses)

        print(f"package: {manifest.name}")
        print(f"version: {manifest.version}")
        print(f"root: {root}")
        print("addresses:")
        for name in sorted(addresses):
            print(f"  {name} = {addresses[name] or '_'}")
        dependencies = dict(manifest.dependencies)
        if build_config.dev_mode:
            dependencies.update(manifest.dev_dependencies)
        print("dependencies:")
        for name in sorted(dependencies):
            print(f"  {name}")


@dataclass(frozen=True)
class Prove:
    NAME: ClassVar[str] = "prove"
    HELP: ClassVar[str] = "Run the Move Prover on the package at `path`"

    target_filter: str | None = None
    for_test: bool = False
    options: tuple[str, ...] = field(default_factory=tuple)

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--target",
            "-t",
            dest="target_filter",
            default=None,
            help="Only verify source files whose name contains this string",
        )
        parser.add_argument(
            "--for-test",
            action="store_true",
            help="Use settings suitable for running the prover in tests",
        )
        parser.add_argument(
            "prover_options",
            nargs="*",
            default=[],
            help="Options passed through to the prover (place after `--`)",
        )

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "Prove":
        return cls(
            target_filter=args.target_filter,
            for_test=args.for_test,
            options=tuple(args.prover_options),
        )

    def execute(self, path: Path | None, build_config: BuildConfig) -> None:
        root = find_package_root(path)
        load_toolchain().prove(
            root=root,
            build_config=build_config,
            target_filter=self.target_filter,
            for_test=self.for_test,
            options=self.options,
        )
