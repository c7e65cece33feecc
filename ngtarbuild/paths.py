"""Path resolution for one build-and-package run.

Pure computation: nothing here touches the filesystem beyond ``Path.cwd``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .errors import InvalidInputError

DIST_DIRNAME = "dist"
DEFAULT_BUILD_OUTPUT_DIRNAME = "browser"
ARCHIVE_PREFIX = "dist_"
TAR_SUFFIX = ".tar"
TAR_GZ_SUFFIX = ".tar.gz"


@dataclass(frozen=True)
class BuildPaths:
    """Every filesystem location the pipeline reads or writes."""

    app_name: str
    project_root: Path
    dist_dir: Path
    dist_base: Path
    build_output: Path
    archive_path: Path
    archive_folder_name: str


def validate_segment(value: str | None, label: str) -> str:
    """Return ``value`` when it is usable as a single path segment.

    Rejects empty names, ``.``/``..``, separators, and NUL bytes so a folder
    name can never escape ``dist/``.
    """
    if value is None or not value.strip():
        raise InvalidInputError(f"{label} must be a non-empty name")
    if value != value.strip():
        raise InvalidInputError(f"{label} must not have leading or trailing whitespace: {value!r}")
    if value in {".", ".."}:
        raise InvalidInputError(f"{label} must not be a relative path segment: {value!r}")
    if "/" in value or "\\" in value or "\0" in value:
        raise InvalidInputError(f"{label} must be a single path segment: {value!r}")
    return value


def archive_filename(app_name: str, compress: bool) -> str:
    suffix = TAR_GZ_SUFFIX if compress else TAR_SUFFIX
    return f"{ARCHIVE_PREFIX}{app_name}{suffix}"


def resolve_build_paths(
    app_name: str,
    project_path: str | Path | None = None,
    rename_folder: str | None = None,
    compress: bool = True,
    build_output_dirname: str = DEFAULT_BUILD_OUTPUT_DIRNAME,
    cwd: Path | None = None,
) -> BuildPaths:
    """Derive absolute paths for ``app_name`` under ``project_path``.

    ``project_path`` defaults to the current directory and relative values are
    resolved against ``cwd`` (or the process working directory). The archive's
    top-level folder is ``rename_folder`` when given, else ``app_name``; the
    archive file name always follows ``app_name``.
    """
    app_name = validate_segment(app_name, "App name")
    if rename_folder is not None:
        rename_folder = validate_segment(rename_folder, "Rename folder")
    build_output_dirname = validate_segment(build_output_dirname, "Build output directory")

    base = Path(cwd) if cwd is not None else Path.cwd()
    project_root = Path(project_path) if project_path is not None else base
    if not project_root.is_absolute():
        project_root = base / project_root
    project_root = Path(os.path.normpath(project_root))

    dist_dir = project_root / DIST_DIRNAME
    dist_base = dist_dir / app_name
    return BuildPaths(
        app_name=app_name,
        project_root=project_root,
        dist_dir=dist_dir,
        dist_base=dist_base,
        build_output=dist_base / build_output_dirname,
        archive_path=project_root / archive_filename(app_name, compress),
        archive_folder_name=rename_folder or app_name,
    )

