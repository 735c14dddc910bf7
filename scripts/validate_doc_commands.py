#!/usr/bin/env python3
"""Check that every `move ...` line in markdown bash blocks parses."""

from __future__ import annotations

import argparse
import contextlib
import io
import shlex
import sys
from pathlib import Path
from typing import Iterator

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from move_cli.cli.main import _build_parser  # noqa: E402

FENCE = "```"
SHELL_LANGS = {"bash", "sh", "shell", "console"}


def iter_move_commands(text: str) -> Iterator[tuple[int, list[str]]]:
    """Yield ``(line number, argv)`` for each move invocation in a shell fence."""
    in_shell = False
    for lineno, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if stripped.startswith(FENCE):
            in_shell = not in_shell and stripped[len(FENCE) :].strip().lower() in SHELL_LANGS
            continue
        if not in_shell:
            continue
        stripped = stripped.removeprefix("$ ")
        if stripped.startswith("move "):
            yield lineno, shlex.split(stripped, comments=True)[1:]


def check_file(path: Path, parser: argparse.ArgumentParser) -> tuple[int, list[str]]:
    failures: list[str] = []
    checked = 0
    for lineno, argv in iter_move_commands(path.read_text(encoding="utf-8")):
        if any(token.startswith("<") and token.endswith(">") for token in argv):
            continue
        checked += 1
        stderr = io.StringIO()
        try:
            with contextlib.redirect_stdout(io.StringIO()), contextlib.redirect_stderr(stderr):
                parser.parse_args(argv)
        except SystemExit as exc:
            if exc.code not in (0, None):
                reason = stderr.getvalue().strip().splitlines()[-1:] or ["usage error"]
                failures.append(f"{path.name}:{lineno}: move {shlex.join(argv)} ({reason[0]})")
    return checked, failures


def main(argv: list[str] | None = None) -> int:
    cli = argparse.ArgumentParser(description=__doc__)
    cli.add_argument("files", nargs="*", type=Path, default=[ROOT / "README.md"])
    args = cli.parse_args(argv)

    parser = _build_parser()
    total = 0
    failures: list[str] = []
    for path in args.files:
        if not path.is_file():
            failures.append(f"{path}: not found")
            continue
        checked, file_failures = check_file(path, parser)
        total += checked
        failures.extend(file_failures)

    if failures:
        print("doc command validation failed:")
        for failure in failures:
            print(f"  {failure}")
        return 1

    print(f"doc command validation passed ({total} commands)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
