"""Canonical ``index.html`` for a flattened dist tree.

Server-rendering builds emit ``index.csr.html`` instead of ``index.html``.
When only the alternate file exists it becomes the entry document, with its
``<base href>`` normalized.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path

from ..errors import EntryDocumentError, NormalizationWarning

logger = logging.getLogger(__name__)

ENTRY_FILENAME = "index.html"
ALTERNATE_ENTRY_FILENAME = "index.csr.html"
DEFAULT_BASE_HREF = "/"

_BASE_HREF_RE = re.compile(
    r"""(<base\b[^>]*?(?<![\w-])href\s*=\s*)(?:"([^"]*)"|'([^']*)'|([^\s>"']+))""",
    re.IGNORECASE,
)
_BASE_TAG_RE = re.compile(r"<base\b", re.IGNORECASE)
_UNQUOTED_SAFE_RE = re.compile(r"[^\s>\"'=`<]+")
_HEAD_OPEN_RE = re.compile(r"<head\b[^>]*>", re.IGNORECASE)


@dataclass(frozen=True)
class EntryDocumentResult:
    """Outcome of normalization.

    ``action`` is ``"present"`` (already had ``index.html``), ``"synthesized"``
    (built from the alternate file) or ``"missing"`` (neither file found).
    """

    action: str
    entry_path: Path
    base_href: str | None = None
    warning: NormalizationWarning | None = None


def extract_base_href(html: str) -> str:
    """Return the first ``<base href>`` value, or ``/`` when there is none."""
    match = _BASE_HREF_RE.search(html)
    if match is None:
        return DEFAULT_BASE_HREF
    return next(value for value in match.groups()[1:] if value is not None)


def _quote_for(match: re.Match[str], value: str) -> str:
    """Quote character matching the source attribute, or none if it was bare."""
    if match.group(2) is not None:
        return '"'
    if match.group(3) is not None:
        return "'"
    return "" if _UNQUOTED_SAFE_RE.fullmatch(value) else '"'


def rewrite_base_href(html: str, base_href: str) -> str:
    """Set the first ``<base href>`` to ``base_href``.

    The source quoting style (double, single or bare) is kept. A ``<base>``
    tag without ``href`` gains one; a document with no base tag at all gets
    ``<base href="...">`` right after its opening ``<head>``. Documents
    without a head are returned unchanged.
    """
    match = _BASE_HREF_RE.search(html)
    if match is not None:
        quote = _quote_for(match, base_href)
        return f"{html[:match.start()]}{match.group(1)}{quote}{base_href}{quote}{html[match.end():]}"

    tag = _BASE_TAG_RE.search(html)
    if tag is not None:
        return f'{html[:tag.end()]} href="{base_href}"{html[tag.end():]}'

    head = _HEAD_OPEN_RE.search(html)
    if head is None:
        return html
    return f'{html[:head.end()]}<base href="{base_href}">{html[head.end():]}'


def _write_text_atomic(path: Path, text: str) -> None:
    staging = path.with_name(f".{path.name}.tmp")
    try:
        staging.write_bytes(text.encode("utf-8", errors="surrogateescape"))
        os.replace(staging, path)
    except BaseException:
        staging.unlink(missing_ok=True)
        raise


def normalize_entry_document(dist_base: Path, supersede: bool = False) -> EntryDocumentResult:
    """Ensure ``dist_base/index.html`` exists.

    Existing ``index.html`` is left alone, as is any ``index.csr.html`` next to
    it, unless ``supersede`` is set: then a present alternate file replaces an
    ``index.html`` left over from an earlier run. Otherwise the alternate file
    is rewritten into ``index.html`` and removed. With neither present a
    ``NormalizationWarning`` is returned (and logged) instead of raised.
    """
    entry_path = dist_base / ENTRY_FILENAME
    alternate_path = dist_base / ALTERNATE_ENTRY_FILENAME

    if entry_path.is_file() and not (supersede and alternate_path.is_file()):
        logger.debug("entry document already present at %s", entry_path)
        return EntryDocumentResult("present", entry_path)

    if alternate_path.is_file():
        # Bytes that are not UTF-8 pass through untouched.
        try:
            html = alternate_path.read_bytes().decode("utf-8", errors="surrogateescape")
            base_href = extract_base_href(html)
            _write_text_atomic(entry_path, rewrite_base_href(html, base_href))
            alternate_path.unlink()
        except OSError as exc:
            logger.error("failed writing %s from %s: %s", entry_path, alternate_path, exc)
            raise EntryDocumentError(entry_path, exc) from exc
        logger.info("synthesized %s from %s (base href %r)", entry_path, alternate_path.name, base_href)
        return EntryDocumentResult("synthesized", entry_path, base_href=base_href)

    warning = NormalizationWarning(
        f"No {ENTRY_FILENAME} or {ALTERNATE_ENTRY_FILENAME} in {dist_base}; archiving without an entry document"
    )
    logger.warning("%s", warning)
    return EntryDocumentResult("missing", entry_path, warning=warning)
