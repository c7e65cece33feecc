"""Error taxonomy for the build-and-package pipeline.

Every fatal condition is an ``NgTarBuildError`` subclass so the CLI can map
them all to exit status 1. ``NormalizationWarning`` is reported, never raised.
"""

from __future__ import annotations

from pathlib import Path


class NgTarBuildError(Exception):
    """Base class for fatal pipeline failures."""


class InvalidInputError(NgTarBuildError):
    """Raised for CLI input that cannot name a dist folder safely."""


class BuildFailedError(NgTarBuildError):
    """External build command exited non-zero or could not be started."""

    def __init__(self, command: list[str], returncode: int | None, detail: str = "") -> None:
        self.command = list(command)
        self.returncode = returncode
        self.detail = detail
        if returncode is None:
            message = f"Build command could not be started: {' '.join(command)}"
        else:
            message = f"Build command failed with exit status {returncode}: {' '.join(command)}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class MissingBuildOutputError(NgTarBuildError):
    """Nested build output directory is absent after the build step."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Build output not found at {path}")


class PartialFlattenError(NgTarBuildError):
    """Some build output entries could not be moved into the dist root."""

    def __init__(self, unmoved: list[Path], cause: BaseException) -> None:
        self.unmoved = list(unmoved)
        self.cause = cause
        names = ", ".join(path.name for path in self.unmoved)
        super().__init__(f"Failed to move {len(self.unmoved)} entries ({names}): {cause}")


class EntryDocumentError(NgTarBuildError):
    """Entry document could not be read or written."""

    def __init__(self, entry_path: Path, cause: BaseException) -> None:
        self.entry_path = entry_path
        self.cause = cause
        super().__init__(f"Failed to create {entry_path}: {cause}")


class ArchiveWriteError(NgTarBuildError):
    """Archive could not be written; the partial output has been removed."""

    def __init__(self, output_path: Path, cause: BaseException) -> None:
        self.output_path = output_path
        self.cause = cause
        super().__init__(f"Failed to create archive {output_path}: {cause}")


class NormalizationWarning(UserWarning):
    """Dist tree has no usable entry document; archiving continues anyway."""
