"""Sequential build -> flatten -> normalize -> archive pipeline.

Each stage only starts after the previous one returned; the first fatal
error propagates and nothing after it runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .archive import create_archive
from .build import DEFAULT_BUILD_COMMAND, build_command_for, run_build
from .console import StatusReporter
from .dist_tree import (
    ALTERNATE_ENTRY_FILENAME,
    ENTRY_FILENAME,
    EntryDocumentResult,
    flatten_build_output,
    normalize_entry_document,
)
from .errors import NgTarBuildError
from .paths import DEFAULT_BUILD_OUTPUT_DIRNAME, BuildPaths, resolve_build_paths

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineOptions:
    app_name: str
    project_path: str | Path | None = None
    rename_folder: str | None = None
    compress: bool = True
    skip_build: bool = False
    build_command: str = DEFAULT_BUILD_COMMAND
    build_output_dir: str = DEFAULT_BUILD_OUTPUT_DIRNAME
    mtime: int | None = None


@dataclass
class PipelineResult:
    paths: BuildPaths
    moved: list[Path] = field(default_factory=list)
    entry_document: EntryDocumentResult | None = None
    members: list[str] = field(default_factory=list)


def run_pipeline(options: PipelineOptions, reporter: StatusReporter | None = None) -> PipelineResult:
    """Run every stage for ``options`` and return what each produced.

    Raises the first ``NgTarBuildError`` encountered after reporting it.
    """
    if reporter is None:
        reporter = StatusReporter(quiet=True)

    paths = resolve_build_paths(
        options.app_name,
        project_path=options.project_path,
        rename_folder=options.rename_folder,
        compress=options.compress,
        build_output_dirname=options.build_output_dir,
    )
    result = PipelineResult(paths=paths)
    logger.debug("resolved paths: %s", paths)

    if options.skip_build:
        reporter.info("Skipping build step")
    else:
        reporter.step("Building the application...")
        try:
            run_build(build_command_for(paths.app_name, options.build_command), paths.project_root)
        except NgTarBuildError:
            reporter.fail("Build failed")
            raise
        reporter.succeed("Build complete")

    reporter.step(f"Moving {paths.build_output.name} contents to dist root...")
    try:
        result.moved = flatten_build_output(paths.build_output, paths.dist_base)
    except NgTarBuildError:
        reporter.fail("Failed to move build output")
        raise
    reporter.succeed(f"Moved {len(result.moved)} entries to {paths.dist_base}")

    reporter.step("Checking entry document...")
    moved_names = {path.name for path in result.moved}
    # A freshly built alternate entry outranks an index.html from a previous run.
    supersede = ALTERNATE_ENTRY_FILENAME in moved_names and ENTRY_FILENAME not in moved_names
    try:
        entry = normalize_entry_document(paths.dist_base, supersede=supersede)
    except NgTarBuildError:
        reporter.fail("Failed to normalize entry document")
        raise
    result.entry_document = entry
    if entry.action == "synthesized":
        reporter.succeed(f"Created index.html from index.csr.html (base href {entry.base_href!r})")
    elif entry.action == "present":
        reporter.info("index.html already present")
    else:
        reporter.warn(str(entry.warning))

    reporter.step(f"Creating archive {paths.archive_path.name}...")
    try:
        result.members = create_archive(
            paths.dist_dir,
            paths.app_name,
            paths.archive_folder_name,
            paths.archive_path,
            compress=options.compress,
            mtime=options.mtime,
        )
    except NgTarBuildError:
        reporter.fail("Failed to create archive")
        raise
    reporter.succeed(f"Archive created at {paths.archive_path}")
    return result
