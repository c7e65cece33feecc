"""Move nested build output up into the dist root.

Collision policy is last-write-wins: an existing entry at the destination is
deleted before the build output entry takes its place, the same outcome a
clean rebuild would produce. A failed move is not rolled back; rerunning the
build and this step converges on the same tree.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from ..errors import MissingBuildOutputError, PartialFlattenError

logger = logging.getLogger(__name__)

STAGING_SUFFIX = ".ngtarbuild-staging"


def _remove_existing(path: Path) -> None:
    """Delete ``path`` whatever it is; missing paths are fine."""
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.is_dir():
        shutil.rmtree(path)
    elif os.path.lexists(path):
        path.unlink()


def _move_entry(source: Path, destination: Path) -> None:
    _remove_existing(destination)
    os.replace(source, destination)


def list_build_output(build_output: Path) -> list[Path]:
    """Return direct children of ``build_output`` in stable name order."""
    with os.scandir(build_output) as entries:
        names = sorted(entry.name for entry in entries)
    return [build_output / name for name in names]


def flatten_build_output(build_output: Path, dist_base: Path | None = None) -> list[Path]:
    """Relocate every child of ``build_output`` into ``dist_base`` and delete it.

    ``dist_base`` defaults to the parent of ``build_output``. Returns the
    destination paths in move order. Raises ``MissingBuildOutputError`` when
    ``build_output`` is not a directory and ``PartialFlattenError`` listing
    the entries still left behind when any move fails.
    """
    if dist_base is None:
        dist_base = build_output.parent
    if build_output.is_symlink() or not build_output.is_dir():
        raise MissingBuildOutputError(build_output)

    children = list_build_output(build_output)
    # A child sharing the build output's own name can only land once its
    # parent is gone, so it goes last through a staging name.
    shadowing = [child for child in children if child.name == build_output.name and dist_base == build_output.parent]
    pending = [child for child in children if child not in shadowing] + shadowing

    moved: list[Path] = []
    for index, source in enumerate(pending):
        try:
            if source in shadowing:
                staging = dist_base / f".{source.name}{STAGING_SUFFIX}"
                _move_entry(source, staging)
                shutil.rmtree(build_output)
                os.replace(staging, dist_base / source.name)
            else:
                _move_entry(source, dist_base / source.name)
        except OSError as exc:
            logger.error("failed moving %s into %s: %s", source, dist_base, exc)
            raise PartialFlattenError(pending[index:], exc) from exc
        moved.append(dist_base / source.name)
        logger.debug("moved %s -> %s", source, dist_base / source.name)

    if not shadowing:
        try:
            shutil.rmtree(build_output)
        except OSError as exc:
            leftover = list_build_output(build_output) if build_output.is_dir() else []
            raise PartialFlattenError(leftover, exc) from exc

    logger.info("flattened %d entries from %s", len(moved), build_output)
    return moved
