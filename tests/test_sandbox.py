from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest

from move_cli.cli.main import move_cli
from move_cli.cli.parsing import MoveArgs
from move_cli.errmap import ErrorMapping
from move_cli.errors import StorageError
from move_cli.experimental.cli import ReadWriteSet
from move_cli.experimental.cli import handle_command as handle_experimental_command
from move_cli.package import BuildConfig
from move_cli.runtime import CostTable, NativeFunctionRecord
from move_cli.sandbox.cli import Clean, Doctor, Publish, Run, View, handle_command


class _Toolchain:
    def __init__(self) -> None:
        self.calls: list[tuple[str, dict]] = []

    def sandbox_publish(self, **kwargs) -> None:
        self.calls.append(("sandbox_publish", kwargs))

    def sandbox_run(self, **kwargs) -> None:
        self.calls.append(("sandbox_run", kwargs))

    def sandbox_view(self, **kwargs) -> str:
        self.calls.append(("sandbox_view", kwargs))
        return "resource 0x1::Coin::Coin { value: 10 }"

    def sandbox_doctor(self, **kwargs) -> None:
        self.calls.append(("sandbox_doctor", kwargs))

    def read_write_set(self, **kwargs) -> str:
        self.calls.append(("read_write_set", kwargs))
        return "0x1::M::f: reads Coin"


@pytest.fixture
def toolchain(monkeypatch) -> _Toolchain:
    fake = _Toolchain()
    monkeypatch.setattr("move_cli.sandbox.cli.load_toolchain", lambda: fake)
    monkeypatch.setattr("move_cli.experimental.cli.load_toolchain", lambda: fake)
    return fake


@pytest.fixture
def package(tmp_path) -> Path:
    root = tmp_path / "pkg"
    root.mkdir()
    (root / "Move.toml").write_text('[package]\nname = "Pkg"\nversion = "0.0.0"\n', encoding="utf-8")
    return root


def test_clean_removes_storage_and_build_dirs(tmp_path, package) -> None:
    storage = tmp_path / "storage"
    (storage / "0x1" / "resources").mkdir(parents=True)
    (package / "build" / "Pkg").mkdir(parents=True)

    handle_command(
        Clean(), [], CostTable.zero(), ErrorMapping(), MoveArgs(package_path=package), storage
    )

    assert not storage.exists()
    assert not (package / "build").exists()
    assert (package / "Move.toml").exists()


def test_clean_removes_build_under_install_dir(tmp_path) -> None:
    install_dir = tmp_path / "out"
    (install_dir / "build" / "Pkg").mkdir(parents=True)
    (install_dir / "keep.txt").write_text("", encoding="utf-8")
    move_args = MoveArgs(build_config=BuildConfig(install_dir=install_dir))

    handle_command(Clean(), [], CostTable.zero(), ErrorMapping(), move_args, tmp_path / "storage")

    assert not (install_dir / "build").exists()
    assert (install_dir / "keep.txt").is_file()


def test_clean_refuses_storage_dir_holding_a_package(tmp_path, package) -> None:
    with pytest.raises(StorageError, match="package directory"):
        handle_command(
            Clean(), [], CostTable.zero(), ErrorMapping(), MoveArgs(package_path=package), package
        )
    assert (package / "Move.toml").is_file()


def test_clean_refuses_current_directory(tmp_path, monkeypatch) -> None:
    (tmp_path / "notes.txt").write_text("", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    with pytest.raises(StorageError, match="refusing to remove"):
        handle_command(Clean(), [], CostTable.zero(), ErrorMapping(), MoveArgs(), Path("."))
    assert (tmp_path / "notes.txt").is_file()


def test_clean_refuses_ancestor_of_package(tmp_path, package) -> None:
    (package / "build").mkdir()
    with pytest.raises(StorageError, match="refusing to remove"):
        handle_command(
            Clean(), [], CostTable.zero(), ErrorMapping(), MoveArgs(package_path=package), tmp_path
        )
    assert (package / "build").is_dir()


def test_clean_is_noop_when_nothing_exists(tmp_path) -> None:
    handle_command(
        Clean(),
        [],
        CostTable.zero(),
        ErrorMapping(),
        MoveArgs(package_path=tmp_path),
        tmp_path / "storage",
    )


def test_clean_refuses_to_remove_file(tmp_path) -> None:
    storage = tmp_path / "storage"
    storage.write_text("not a dir", encoding="utf-8")
    with pytest.raises(StorageError):
        handle_command(
            Clean(), [], CostTable.zero(), ErrorMapping(), MoveArgs(package_path=tmp_path), storage
        )


def test_publish_forwards_storage_dir(toolchain, package, tmp_path) -> None:
    move_args = MoveArgs(package_path=package, verbose=True)

    handle_command(
        Publish(bundle=True),
        [],
        CostTable.zero(),
        ErrorMapping(),
        move_args,
        tmp_path / "storage",
    )

    (name, kwargs), = toolchain.calls
    assert name == "sandbox_publish"
    assert kwargs["root"] == package.resolve()
    assert kwargs["storage_dir"] == tmp_path / "storage"
    assert kwargs["bundle"] is True
    assert kwargs["verbose"] is True


def test_run_forwards_runtime_data(toolchain, package, tmp_path) -> None:
    natives = [NativeFunctionRecord("0x1", "Event", "emit", lambda *args: None)]
    cost_table = CostTable.zero()
    error_descriptions = ErrorMapping()

    handle_command(
        Run(script_file=Path("main.move"), signers=("0xA",)),
        natives,
        cost_table,
        error_descriptions,
        MoveArgs(package_path=package),
        tmp_path / "storage",
    )

    kwargs = toolchain.calls[0][1]
    assert kwargs["natives"] is natives
    assert kwargs["cost_table"] is cost_table
    assert kwargs["error_descriptions"] is error_descriptions
    assert kwargs["signers"] == ("0xA",)


def test_view_requires_existing_storage(toolchain, tmp_path) -> None:
    with pytest.raises(StorageError, match="does not exist"):
        handle_command(
            View(file=Path("x.bcs")), [], CostTable.zero(), ErrorMapping(), MoveArgs(), tmp_path / "s"
        )
    assert toolchain.calls == []


def test_view_prints_toolchain_output(toolchain, tmp_path, capsys) -> None:
    storage = tmp_path / "storage"
    storage.mkdir()

    handle_command(View(file=Path("x.bcs")), [], CostTable.zero(), ErrorMapping(), MoveArgs(), storage)

    assert "0x1::Coin::Coin" in capsys.readouterr().out


def test_doctor_checks_given_storage(toolchain, tmp_path) -> None:
    storage = tmp_path / "storage"
    storage.mkdir()

    handle_command(Doctor(), [], CostTable.zero(), ErrorMapping(), MoveArgs(), storage)

    assert toolchain.calls == [("sandbox_doctor", {"storage_dir": storage})]


def test_storage_path_that_is_a_file_is_rejected(toolchain, tmp_path) -> None:
    storage = tmp_path / "storage"
    storage.write_text("", encoding="utf-8")
    with pytest.raises(StorageError, match="not a directory"):
        handle_command(Publish(), [], CostTable.zero(), ErrorMapping(), MoveArgs(), storage)


def test_read_write_set_prints_report(toolchain, tmp_path, capsys) -> None:
    cmd = ReadWriteSet(module_file=Path("M.mv"), function="f")

    handle_experimental_command(cmd, MoveArgs(), tmp_path / "storage")

    assert "reads Coin" in capsys.readouterr().out
    kwargs = toolchain.calls[0][1]
    assert kwargs["storage_dir"] == tmp_path / "storage"
    assert kwargs["concretize"] == "dont"


def test_read_write_set_concretize_needs_storage(toolchain, tmp_path) -> None:
    cmd = ReadWriteSet(module_file=Path("M.mv"), function="f", concretize="reads")
    with pytest.raises(StorageError):
        handle_experimental_command(cmd, MoveArgs(), tmp_path / "storage")


def test_sandbox_clean_end_to_end(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr("move_cli.cli.config.DEFAULT_CONFIG_PATH", tmp_path / "missing.toml")
    monkeypatch.delenv("MOVE_CLI_LOG_LEVEL", raising=False)
    storage = tmp_path / "state"
    storage.mkdir()

    err = io.StringIO()
    rc = move_cli(
        [],
        CostTable.zero(),
        ErrorMapping(),
        ["-p", str(tmp_path), "sandbox", "--storage-dir", str(storage), "clean"],
        stdout=io.StringIO(),
        stderr=err,
    )
    logging.getLogger("move_cli").handlers.clear()

    assert rc == 0
    assert err.getvalue() == ""
    assert not storage.exists()
