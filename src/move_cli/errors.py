"""move-cli error types."""

from __future__ import annotations


class MoveCLIError(RuntimeError):
    """Base move-cli error."""


class PackageRootNotFoundError(MoveCLIError):
    """No Move.toml found at or above the requested path."""


class ManifestError(MoveCLIError):
    """Package manifest is missing, malformed, or cannot be written."""


class ToolchainUnavailableError(MoveCLIError):
    """No Move toolchain backend is installed."""


class UnitTestFailureError(MoveCLIError):
    """One or more Move unit tests failed."""

    def __init__(self, message: str, *, failed: int | None = None) -> None:
        super().__init__(message)
        self.failed = failed


class StorageError(MoveCLIError):
    """Sandbox storage directory could not be used."""
