"""Command-line front door for ngtarbuild.

Parses CLI options, merges them over persisted config defaults, and runs the
build-and-package pipeline. Exit status is 0 on success and 1 on any fatal
stage failure.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from . import __version__
from .archive import REPRODUCIBLE_MTIME
from .config import Settings, load_settings
from .console import StatusReporter
from .errors import InvalidInputError, NgTarBuildError
from .pipeline import PipelineOptions, run_pipeline

EXAMPLES = """\
Examples:
  $ ng-tarbuild --out=my-doctor-app
      Builds the project and creates dist_my-doctor-app.tar.gz

  $ ng-tarbuild --out=clinic --no-compress
      Skips compression; outputs dist_clinic.tar

  $ ng-tarbuild --out=clinic --rename=clinic-v2
      Names the folder inside the archive "clinic-v2"

  $ ng-tarbuild --out=health-app --path=../my-angular-app
      Runs against a project in another directory
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ng-tarbuild",
        description="Build an Angular app and package its dist folder into a tar or tar.gz archive.",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--out", metavar="NAME", help="App name: dist/<NAME> folder and dist_<NAME> archive.")
    parser.add_argument("--rename", metavar="FOLDER", help="Folder name to use inside the archive.")
    parser.add_argument(
        "--no-compress",
        dest="compress",
        action="store_false",
        default=None,
        help="Write .tar instead of .tar.gz.",
    )
    parser.add_argument("--path", default=".", help="Path to the project root (default: current directory).")
    parser.add_argument("--skip-build", action="store_true", help="Package existing build output without building.")
    parser.add_argument(
        "--reproducible",
        action="store_true",
        help="Pin archive timestamps and ownership (SOURCE_DATE_EPOCH or a fixed date).",
    )
    parser.add_argument("--build-output-dir", metavar="NAME", help="Nested build output folder (default: browser).")
    parser.add_argument("--no-color", action="store_true", help="Disable colored status output.")
    parser.add_argument("--quiet", action="store_true", help="Only print warnings and failures.")
    parser.add_argument("-V", "--verbose", action="count", default=0, help="Log details (-VV for debug).")
    parser.add_argument("--examples", action="store_true", help="Show usage examples and exit.")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def resolve_mtime(reproducible: bool, settings: Settings, environ: dict[str, str] | None = None) -> int | None:
    """Pick the archive mtime: configured value, then SOURCE_DATE_EPOCH, then a fixed date."""
    if settings.reproducible_mtime is not None:
        return settings.reproducible_mtime
    if not reproducible:
        return None
    env = os.environ if environ is None else environ
    raw = env.get("SOURCE_DATE_EPOCH", "").strip()
    if not raw:
        return REPRODUCIBLE_MTIME
    try:
        value = int(raw)
    except ValueError as exc:
        raise InvalidInputError(f"SOURCE_DATE_EPOCH must be an integer: {raw!r}") from exc
    if value < 0:
        raise InvalidInputError(f"SOURCE_DATE_EPOCH must be non-negative: {raw!r}")
    return value


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run the pipeline, and return the process exit status."""
    if argv is None:
        argv = sys.argv[1:]
    parser = build_parser()
    if not argv:
        parser.print_help()
        return 0
    args = parser.parse_args(argv)
    if args.examples:
        parser.print_help()
        return 0
    if args.out is None:
        parser.print_usage(sys.stderr)
        sys.stderr.write(f"{parser.prog}: error: the following arguments are required: --out\n")
        return 1

    configure_logging(args.verbose)
    reporter = StatusReporter(color=False if args.no_color else None, quiet=args.quiet)
    reporter.banner()

    settings = load_settings()
    try:
        options = PipelineOptions(
            app_name=args.out,
            project_path=args.path,
            rename_folder=args.rename,
            compress=settings.compress if args.compress is None else args.compress,
            skip_build=args.skip_build,
            build_command=settings.build_command,
            build_output_dir=args.build_output_dir or settings.build_output_dir,
            mtime=resolve_mtime(args.reproducible, settings),
        )
        result = run_pipeline(options, reporter)
    except NgTarBuildError as exc:
        reporter.fail(str(exc))
        return 1
    except KeyboardInterrupt:
        reporter.fail("Interrupted")
        return 130

    if args.quiet:
        print(result.paths.archive_path)
    return 0
