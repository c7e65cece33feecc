"""``python -m ngtarbuild`` runs the ``ng-tarbuild`` CLI and exits with its status."""

from .cli import main


if __name__ == "__main__":
    raise SystemExit(main())
