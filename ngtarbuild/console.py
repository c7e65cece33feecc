"""Banner and step-status lines for the terminal.

Purely cosmetic; pipeline correctness never depends on anything here.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import TextIO


@dataclass(frozen=True)
class ConsoleTheme:
    """ANSI palette for status output."""

    reset: str
    banner: str
    step: str
    success: str
    failure: str
    info: str
    warning: str


DEFAULT_THEME = ConsoleTheme(
    reset="\033[0m",
    banner="\033[1;38;5;44m",
    step="\033[38;5;250m",
    success="\033[38;5;42m",
    failure="\033[1;38;5;203m",
    info="\033[38;5;110m",
    warning="\033[38;5;214m",
)

PLAIN_THEME = ConsoleTheme(reset="", banner="", step="", success="", failure="", info="", warning="")

BANNER = "ng-tarbuild :: build, restage and package a dist folder"


def supports_color(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class StatusReporter:
    """Writes one marked line per pipeline event."""

    def __init__(self, stream: TextIO | None = None, color: bool | None = None, quiet: bool = False) -> None:
        self.stream = stream if stream is not None else sys.stdout
        if color is None:
            color = supports_color(self.stream)
        self.theme = DEFAULT_THEME if color else PLAIN_THEME
        self.quiet = quiet

    def _emit(self, style: str, marker: str, message: str, force: bool = False) -> None:
        if self.quiet and not force:
            return
        self.stream.write(f"{style}{marker} {message}{self.theme.reset}\n")
        self.stream.flush()

    def banner(self) -> None:
        if self.quiet:
            return
        self.stream.write(f"{self.theme.banner}{BANNER}{self.theme.reset}\n\n")
        self.stream.flush()

    def step(self, message: str) -> None:
        self._emit(self.theme.step, "..", message)

    def succeed(self, message: str) -> None:
        self._emit(self.theme.success, "ok", message)

    def info(self, message: str) -> None:
        self._emit(self.theme.info, "--", message)

    def warn(self, message: str) -> None:
        self._emit(self.theme.warning, "!!", message, force=True)

    def fail(self, message: str) -> None:
        self._emit(self.theme.failure, "xx", message, force=True)
