"""`move errmap`: generate an error map for the package and its dependencies."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

from move_cli.cli.parsing import path_arg
from move_cli.errmap import ERROR_MAP_EXTENSION
from move_cli.package import BuildConfig, find_package_root
from move_cli.toolchain import load_toolchain

logger = logging.getLogger(__name__)

DEFAULT_ERROR_PREFIX = "E"
DEFAULT_OUTPUT_FILE = "error_map"


@dataclass(frozen=True)
class Errmap:
    NAME: ClassVar[str] = "errmap"
    HELP: ClassVar[str] = "Generate error map for the package and its dependencies"

    error_prefix: str = DEFAULT_ERROR_PREFIX
    output_file: Path = Path(DEFAULT_OUTPUT_FILE)

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--error-prefix",
            default=DEFAULT_ERROR_PREFIX,
            help="Constants with this prefix are treated as abort reasons",
        )
        parser.add_argument(
            "--output-file",
            type=path_arg,
            default=Path(DEFAULT_OUTPUT_FILE),
            help=f"File to write the error map to (the .{ERROR_MAP_EXTENSION} extension is added)",
        )

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "Errmap":
        return cls(error_prefix=args.error_prefix, output_file=args.output_file)

    def execute(self, path: Path | None, build_config: BuildConfig) -> None:
        root = find_package_root(path)
        mapping = load_toolchain().build_error_map(
            root=root,
            build_config=build_config,
            error_prefix=self.error_prefix,
        )
        target = self.output_file.with_suffix(f".{ERROR_MAP_EXTENSION}")
        if not target.is_absolute():
            target = root / target
        mapping.to_file(target)
        logger.info("wrote error map to %s", target)
