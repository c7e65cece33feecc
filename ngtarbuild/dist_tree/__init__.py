"""In-place restaging of a framework's dist tree.

Flattens the nested build output into the dist root, then makes sure the root
has a canonical ``index.html``.
"""

from .entry_document import (
    ALTERNATE_ENTRY_FILENAME,
    ENTRY_FILENAME,
    EntryDocumentResult,
    extract_base_href,
    normalize_entry_document,
    rewrite_base_href,
)
from .flatten import flatten_build_output

__all__ = [
    "ALTERNATE_ENTRY_FILENAME",
    "ENTRY_FILENAME",
    "EntryDocumentResult",
    "extract_base_href",
    "flatten_build_output",
    "normalize_entry_document",
    "rewrite_base_href",
]
