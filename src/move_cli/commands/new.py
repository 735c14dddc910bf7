"""`move new`: scaffold a fresh package."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Sequence

from move_cli.errors import ManifestError
from move_cli.package import MANIFEST_FILE, SOURCES_DIR, validate_identifier

logger = logging.getLogger(__name__)

DEFAULT_PACKAGE_VERSION = "0.0.0"
MOVE_STDLIB_PACKAGE_NAME = "MoveStdlib"
MOVE_STDLIB_GIT_URL = "https://github.com/move-language/move.git"
MOVE_STDLIB_SUBDIR = "language/move-stdlib"
MOVE_STDLIB_REV = "main"
MOVE_STDLIB_ADDR_NAME = "std"
MOVE_STDLIB_ADDR_VALUE = "0x1"


def _package_name_arg(value: str) -> str:
    try:
        return validate_identifier(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid package name: {value!r}") from exc


@dataclass(frozen=True)
class New:
    NAME: ClassVar[str] = "new"
    HELP: ClassVar[str] = "Create a new Move package with name `name` at `path`"

    name: str

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("name", type=_package_name_arg, help="The name of the package to create")

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "New":
        return cls(name=args.name)

    def execute_with_defaults(self, path: Path | None) -> Path:
        return self.execute(
            path,
            version=DEFAULT_PACKAGE_VERSION,
            dependencies=[
                (
                    MOVE_STDLIB_PACKAGE_NAME,
                    f'{{ git = "{MOVE_STDLIB_GIT_URL}", '
                    f'subdir = "{MOVE_STDLIB_SUBDIR}", rev = "{MOVE_STDLIB_REV}" }}',
                )
            ],
            addresses=[(MOVE_STDLIB_ADDR_NAME, MOVE_STDLIB_ADDR_VALUE)],
        )

    def execute(
        self,
        path: Path | None,
        *,
        version: str,
        dependencies: Sequence[tuple[str, str]] = (),
        addresses: Sequence[tuple[str, str]] = (),
        custom: str = "",
    ) -> Path:
        """Write ``<path>/<name>/Move.toml`` and an empty ``sources/`` directory.

        ``dependencies`` values are inline TOML tables written verbatim and
        ``custom`` is appended after the generated sections.
        """
        creation_path = (Path(path) if path is not None else Path(".")) / self.name
        manifest_path = creation_path / MANIFEST_FILE
        if manifest_path.exists():
            raise ManifestError(f"package already exists: {manifest_path}")

        lines = [
            "[package]",
            f'name = "{self.name}"',
            f'version = "{version}"',
            "",
            "[addresses]",
        ]
        lines.extend(f'{name} = "{value}"' for name, value in addresses)
        lines.append("")
        lines.append("[dependencies]")
        lines.extend(f"{name} = {source}" for name, source in dependencies)
        content = "\n".join(lines) + "\n"
        if custom:
            content += "\n" + custom.rstrip("\n") + "\n"

        try:
            (creation_path / SOURCES_DIR).mkdir(parents=True, exist_ok=True)
            manifest_path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise ManifestError(f"failed to create package at {creation_path}: {exc}") from exc

        logger.info("created package %s at %s", self.name, creation_path)
        return creation_path
