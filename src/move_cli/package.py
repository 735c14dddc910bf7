"""Package build configuration and on-disk layout helpers."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from move_cli.errors import ManifestError, PackageRootNotFoundError
from move_cli.tomlfile import read_toml

DEFAULT_STORAGE_DIR = "storage"
DEFAULT_BUILD_DIR = "."
BUILD_OUTPUT_DIR = "build"
MANIFEST_FILE = "Move.toml"
SOURCES_DIR = "sources"

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{1,64}$")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def validate_address(value: str) -> str:
    normalized = value.strip()
    if not _ADDRESS_RE.match(normalized):
        raise ValueError(f"invalid account address: {value!r}")
    return normalized.lower()


def validate_identifier(value: str) -> str:
    if not _IDENTIFIER_RE.match(value):
        raise ValueError(f"invalid identifier: {value!r}")
    return value


class BuildConfig(BaseModel):
    """Options forwarded untouched to the package build system."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    dev_mode: bool = False
    test_mode: bool = False
    generate_docs: bool = False
    generate_abis: bool = False
    install_dir: Optional[Path] = None
    force_recompilation: bool = False
    additional_named_addresses: Dict[str, str] = Field(default_factory=dict)

    @field_validator("additional_named_addresses")
    @classmethod
    def _check_named_addresses(cls, value: Dict[str, str]) -> Dict[str, str]:
        return {validate_identifier(k): validate_address(v) for k, v in value.items()}


class PackageManifest(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    addresses: Dict[str, Optional[str]] = Field(default_factory=dict)
    dev_addresses: Dict[str, str] = Field(default_factory=dict)
    dependencies: Dict[str, Any] = Field(default_factory=dict)
    dev_dependencies: Dict[str, Any] = Field(default_factory=dict)


def find_package_root(path: str | Path | None = None) -> Path:
    """Return the nearest directory at or above ``path`` holding a manifest."""
    start = Path(path) if path is not None else Path(".")
    try:
        current = start.resolve(strict=True)
    except FileNotFoundError as exc:
        raise PackageRootNotFoundError(f"path does not exist: {start}") from exc
    if not current.is_dir():
        raise PackageRootNotFoundError(f"package path is not a directory: {start}")

    for candidate in (current, *current.parents):
        if (candidate / MANIFEST_FILE).is_file():
            return candidate
    raise PackageRootNotFoundError(
        f"unable to find package manifest ({MANIFEST_FILE}) in {current} or its parents"
    )


def load_manifest(root: str | Path) -> PackageManifest:
    manifest_path = Path(root) / MANIFEST_FILE
    if not manifest_path.is_file():
        raise ManifestError(f"manifest not found: {manifest_path}")

    parsed = read_toml(manifest_path, ManifestError)
    package = parsed.get("package")
    if not isinstance(package, dict):
        raise ManifestError(f"[package] must be a table in {manifest_path}")

    try:
        return PackageManifest(
            name=package.get("name"),
            version=package.get("version"),
            addresses=parsed.get("addresses", {}),
            dev_addresses=parsed.get("dev-addresses", {}),
            dependencies=parsed.get("dependencies", {}),
            dev_dependencies=parsed.get("dev-dependencies", {}),
        )
    except ValidationError as exc:
        raise ManifestError(f"invalid manifest {manifest_path}: {exc}") from exc


__all__ = [
    "DEFAULT_STORAGE_DIR",
    "DEFAULT_BUILD_DIR",
    "BUILD_OUTPUT_DIR",
    "MANIFEST_FILE",
    "SOURCES_DIR",
    "BuildConfig",
    "PackageManifest",
    "find_package_root",
    "load_manifest",
    "validate_address",
    "validate_identifier",
]
