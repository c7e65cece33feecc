"""Tar packaging of a restaged dist tree.

Member names are ``dist/<folder>/...``. Renaming the top-level folder is a
pure transform on member names while streaming; the tree on disk is only read.
"""

from __future__ import annotations

import gzip
import logging
import os
import tarfile
from collections.abc import Iterator
from pathlib import Path

from .errors import ArchiveWriteError
from .paths import DIST_DIRNAME

logger = logging.getLogger(__name__)

REPRODUCIBLE_MTIME = 1704067200  # 2024-01-01 UTC


def archive_entry_name(source_directory: Path, path: Path) -> str:
    """Logical member name of ``path`` before any folder rename."""
    relative = path.relative_to(source_directory).as_posix()
    return f"{DIST_DIRNAME}/{relative}"


def rewrite_entry_path(name: str, dist_folder_name: str, archive_folder_name: str) -> str:
    """Swap the leading ``dist/<dist_folder_name>`` component for the archive folder.

    Only an anchored, whole-segment prefix is rewritten, so ``dist/app-old/x``
    or ``dist/other/app/x`` pass through untouched.
    """
    prefix = f"{DIST_DIRNAME}/{dist_folder_name}"
    if dist_folder_name == archive_folder_name:
        return name
    if name == prefix:
        return f"{DIST_DIRNAME}/{archive_folder_name}"
    if name.startswith(prefix + "/"):
        return f"{DIST_DIRNAME}/{archive_folder_name}{name[len(prefix):]}"
    return name


def _raise(exc: OSError) -> None:
    raise exc


def iter_tree(root: Path) -> Iterator[Path]:
    """Yield ``root`` and its descendants, directories before their contents.

    Siblings come in sorted name order. Symlinked directories are yielded but
    not descended into. A directory that cannot be listed raises ``OSError``.
    """
    yield root
    for current, dirnames, filenames in os.walk(root, onerror=_raise, followlinks=False):
        dirnames.sort()
        base = Path(current)
        for name in sorted(dirnames + filenames):
            yield base / name


def _normalize_member(info: tarfile.TarInfo, mtime: int) -> tarfile.TarInfo:
    info.mtime = mtime
    info.uid = 0
    info.gid = 0
    info.uname = ""
    info.gname = ""
    return info


def create_archive(
    source_directory: Path,
    dist_folder_name: str,
    archive_folder_name: str,
    output_path: Path,
    compress: bool = True,
    mtime: int | None = None,
) -> list[str]:
    """Write ``source_directory/dist_folder_name`` into a tar at ``output_path``.

    ``compress`` selects gzip. ``mtime`` of ``None`` keeps on-disk timestamps
    and ownership; an integer pins every member (and the gzip header) to that
    epoch with root ownership, for reproducible archives. Returns the member
    names written.

    Any failure removes ``output_path`` before propagating; I/O and tar errors
    surface as ``ArchiveWriteError``.
    """
    tree_root = source_directory / dist_folder_name
    if not tree_root.is_dir():
        raise ArchiveWriteError(output_path, FileNotFoundError(f"Dist tree not found at {tree_root}"))

    written: list[str] = []
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "wb") as raw:
            if compress:
                stream = gzip.GzipFile(filename="", mode="wb", fileobj=raw, mtime=mtime)
            else:
                stream = raw
            try:
                with tarfile.open(fileobj=stream, mode="w") as tar:
                    for path in iter_tree(tree_root):
                        name = rewrite_entry_path(
                            archive_entry_name(source_directory, path),
                            dist_folder_name,
                            archive_folder_name,
                        )
                        info = tar.gettarinfo(str(path), arcname=name)
                        if info is None:
                            logger.debug("skipping unsupported file type %s", path)
                            continue
                        if mtime is not None:
                            _normalize_member(info, mtime)
                        if info.isreg():
                            with open(path, "rb") as fileobj:
                                tar.addfile(info, fileobj)
                        else:
                            tar.addfile(info)
                        written.append(name)
            finally:
                if stream is not raw:
                    stream.close()
    except (OSError, tarfile.TarError) as exc:
        _discard(output_path)
        logger.error("archive write failed for %s: %s", output_path, exc)
        raise ArchiveWriteError(output_path, exc) from exc
    except BaseException:
        _discard(output_path)
        raise

    logger.info("wrote %d members to %s", len(written), output_path)
    return written


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("could not remove partial archive %s: %s", path, exc)
