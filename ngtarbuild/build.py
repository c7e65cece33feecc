"""External production-build invocation.

The build tool's own stdout/stderr stream straight to the terminal; only the
exit status is consumed here.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path

from .errors import BuildFailedError

logger = logging.getLogger(__name__)

DEFAULT_BUILD_COMMAND = "ng build --configuration production --output-path=dist/{app}"


def build_command_for(app_name: str, template: str = DEFAULT_BUILD_COMMAND) -> list[str]:
    """Split ``template`` into argv and substitute ``{app}`` in each argument."""
    try:
        parts = shlex.split(template)
    except ValueError as exc:
        raise BuildFailedError([template], None, f"unparseable build command: {exc}") from exc
    if not parts:
        raise BuildFailedError([template], None, "empty build command")
    return [part.replace("{app}", app_name) for part in parts]


def run_build(command: list[str], project_root: Path) -> None:
    """Run ``command`` in ``project_root`` and block until it exits.

    Raises ``BuildFailedError`` when the executable cannot be launched or
    exits non-zero. There is no timeout and no retry.
    """
    logger.info("running build: %s (cwd=%s)", shlex.join(command), project_root)
    try:
        proc = subprocess.run(command, cwd=project_root, check=False)
    except OSError as exc:
        raise BuildFailedError(command, None, str(exc)) from exc
    if proc.returncode != 0:
        raise BuildFailedError(command, proc.returncode)
    logger.debug("build finished with exit status 0")
