"""Toolchain backend contract for compiler, VM and prover services."""

from __future__ import annotations

import os
from dataclasses import dataclass
from importlib.metadata import entry_points
from pathlib import Path
from typing import Protocol, Sequence

from move_cli.errmap import ErrorMapping
from move_cli.errors import ToolchainUnavailableError
from move_cli.package import BuildConfig
from move_cli.runtime import CostTable, NativeFunctionTable

TOOLCHAIN_ENTRY_POINT_GROUP = "move_cli.toolchain"
TOOLCHAIN_ENV_VAR = "MOVE_CLI_TOOLCHAIN"


@dataclass(frozen=True)
class UnitTestResult:
    passed: int
    failed: int

    @property
    def ok(self) -> bool:
        return self.failed == 0


class Toolchain(Protocol):
    def build_package(self, *, root: Path, build_config: BuildConfig) -> None: ...

    def coverage(
        self,
        *,
        root: Path,
        build_config: BuildConfig,
        mode: str,
        module_name: str | None,
        summarize_functions: bool,
        output_csv: bool,
    ) -> None: ...

    def disassemble(
        self,
        *,
        root: Path,
        build_config: BuildConfig,
        module_name: str,
        package_name: str | None,
        interactive: bool,
    ) -> str: ...

    def build_error_map(
        self, *, root: Path, build_config: BuildConfig, error_prefix: str
    ) -> ErrorMapping: ...

    def prove(
        self,
        *,
        root: Path,
        build_config: BuildConfig,
        target_filter: str | None,
        for_test: bool,
        options: Sequence[str],
    ) -> None: ...

    def run_unit_tests(
        self,
        *,
        root: Path,
        build_config: BuildConfig,
        natives: NativeFunctionTable,
        filter: str | None,
        instruction_execution_bound: int,
        list_tests: bool,
        num_threads: int,
        report_statistics: bool,
        report_storage_on_error: bool,
        compute_coverage: bool,
    ) -> UnitTestResult: ...

    def sandbox_publish(
        self,
        *,
        root: Path,
        build_config: BuildConfig,
        storage_dir: Path,
        no_republish: bool,
        ignore_breaking_changes: bool,
        with_deps: bool,
        bundle: bool,
        override_ordering: Sequence[str] | None,
        verbose: bool,
    ) -> None: ...

    def sandbox_run(
        self,
        *,
        root: Path,
        build_config: BuildConfig,
        natives: NativeFunctionTable,
        cost_table: CostTable,
        error_descriptions: ErrorMapping,
        storage_dir: Path,
        script_file: Path,
        script_name: str | None,
        signers: Sequence[str],
        args: Sequence[str],
        type_args: Sequence[str],
        gas_budget: int | None,
        dry_run: bool,
        verbose: bool,
    ) -> None: ...

    def sandbox_test(
        self,
        *,
        path: Path,
        build_config: BuildConfig,
        use_temp_dir: bool,
        track_cov: bool,
        create_baseline: bool,
    ) -> None: ...

    def sandbox_view(self, *, storage_dir: Path, file: Path) -> str: ...

    def sandbox_doctor(self, *, storage_dir: Path) -> None: ...

    def sandbox_generate_struct_layouts(
        self,
        *,
        storage_dir: Path,
        module: Path,
        struct: str | None,
        type_args: Sequence[str],
        shallow: bool,
    ) -> None: ...

    def read_write_set(
        self,
        *,
        storage_dir: Path,
        module_file: Path,
        function: str,
        signers: Sequence[str],
        args: Sequence[str],
        type_args: Sequence[str],
        concretize: str,
        verbose: bool,
    ) -> str: ...


def load_toolchain() -> Toolchain:
    """Instantiate the installed toolchain backend.

    Backends register a zero-argument factory under the ``move_cli.toolchain``
    entry point group. With several installed, ``MOVE_CLI_TOOLCHAIN`` picks one
    by entry point name.
    """
    candidates = {ep.name: ep for ep in entry_points(group=TOOLCHAIN_ENTRY_POINT_GROUP)}
    if not candidates:
        raise ToolchainUnavailableError(
            "no Move toolchain is installed. Install a package providing the "
            f"`{TOOLCHAIN_ENTRY_POINT_GROUP}` entry point to build, test or run Move code."
        )

    requested = os.getenv(TOOLCHAIN_ENV_VAR)
    if requested:
        selected = candidates.get(requested.strip())
        if selected is None:
            raise ToolchainUnavailableError(
                f"{TOOLCHAIN_ENV_VAR}={requested} does not name an installed toolchain "
                f"(available: {', '.join(sorted(candidates))})"
            )
    elif len(candidates) == 1:
        selected = next(iter(candidates.values()))
    else:
        raise ToolchainUnavailableError(
            f"multiple Move toolchains installed ({', '.join(sorted(candidates))}); "
            f"set {TOOLCHAIN_ENV_VAR} to choose one"
        )

    try:
        factory = selected.load()
        return factory()
    except Exception as exc:
        raise ToolchainUnavailableError(
            f"failed to load Move toolchain {selected.name!r}: {exc}"
        ) from exc


__all__ = [
    "TOOLCHAIN_ENTRY_POINT_GROUP",
    "TOOLCHAIN_ENV_VAR",
    "Toolchain",
    "UnitTestResult",
    "load_toolchain",
]
