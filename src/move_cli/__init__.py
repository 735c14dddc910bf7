"""move-cli public surface."""

from move_cli.cli.main import Command, Experimental, Sandbox, move_cli, parse_args, run_cli
from move_cli.cli.parsing import MoveArgs
from move_cli.commands import Build, Coverage, Disassemble, Errmap, Info, New, Prove, Test
from move_cli.errmap import ErrorContext, ErrorDescription, ErrorMapping
from move_cli.errors import (
    ManifestError,
    MoveCLIError,
    PackageRootNotFoundError,
    StorageError,
    ToolchainUnavailableError,
    UnitTestFailureError,
)
from move_cli.package import (
    DEFAULT_BUILD_DIR,
    DEFAULT_STORAGE_DIR,
    BuildConfig,
    PackageManifest,
    find_package_root,
    load_manifest,
)
from move_cli.runtime import CostTable, GasCost, NativeFunctionRecord
from move_cli.toolchain import Toolchain, UnitTestResult, load_toolchain

__all__ = [
    "move_cli",
    "run_cli",
    "parse_args",
    "MoveArgs",
    "Command",
    "Build",
    "Coverage",
    "Disassemble",
    "Errmap",
    "Info",
    "New",
    "Prove",
    "Test",
    "Sandbox",
    "Experimental",
    "BuildConfig",
    "PackageManifest",
    "find_package_root",
    "load_manifest",
    "DEFAULT_STORAGE_DIR",
    "DEFAULT_BUILD_DIR",
    "NativeFunctionRecord",
    "CostTable",
    "GasCost",
    "ErrorMapping",
    "ErrorDescription",
    "ErrorContext",
    "Toolchain",
    "UnitTestResult",
    "load_toolchain",
    "MoveCLIError",
    "PackageRootNotFoundError",
    "ManifestError",
    "ToolchainUnavailableError",
    "UnitTestFailureError",
    "StorageError",
]
