"""ngtarbuild: build an Angular app and ship its dist folder as a tarball.

Stages: resolve paths, run the production build, flatten ``dist/<app>/browser``,
normalize ``index.html``, then write ``dist_<app>.tar[.gz]``. ``main`` is the
``ng-tarbuild`` console script; ``run_pipeline`` in ``ngtarbuild.pipeline``
is the programmatic entry.
"""

from __future__ import annotations

__version__ = "1.0.0"


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return its exit status; imports the CLI on first use."""
    from .cli import main as _main

    return _main(argv)

__all__ = ["__version__", "main"]
