"""
zip_rewriter.utils
===================
Archive path resolution shared by the CSS and markup rewriters, plus the
file helper used when unpacking.

Every reference found inside a document is interpreted relative to the
document's own path inside the archive:

    resolve("package/css/test.css", "../fonts/test%20this.woff?iefix")
        → "package/fonts/test this.woff"
"""

import re
import urllib.parse
from collections.abc import Mapping
from pathlib import Path

# RFC 3986 scheme followed by ':' (http:, mailto:, data:, javascript: …)
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")
_SUFFIX_RE = re.compile(r"[?#]")


def _require_str(name: str, value) -> None:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be str, not {type(value).__name__}")


def is_relative_reference(reference: str) -> bool:
    """
    Return True when *reference* names another member of the same archive.

    Absolute URLs (anything with a scheme), protocol-relative URLs
    (``//host/…``), empty values and fragment-only values (``#top``) are
    not archive references.
    """
    _require_str("reference", reference)
    reference = reference.strip()
    if not reference or reference.startswith(("#", "//")):
        return False
    return not _SCHEME_RE.match(reference)


def clean_reference(reference: str) -> str:
    """
    Strip the query/fragment suffix from *reference* and percent-decode it,
    without resolving it against any base path.

    ``../fonts/test%20this.woff?iefix`` → ``../fonts/test this.woff``
    """
    _require_str("reference", reference)
    path = _SUFFIX_RE.split(reference.strip(), maxsplit=1)[0]
    return urllib.parse.unquote(path)


def resolve(base_path: str, reference: str) -> "str | None":
    """
    Resolve *reference* found in the archive member *base_path* to a
    normalised archive-relative path.

    * The query string and fragment are dropped and %-escapes decoded.
    * ``.`` segments are ignored; ``..`` pops one directory and is a no-op
      at the archive root, so malformed archives never raise.
    * A leading ``/`` resolves from the archive root.
    * Returns ``None`` for absolute and protocol-relative URLs.
    """
    _require_str("base_path", base_path)
    _require_str("reference", reference)
    stripped = reference.strip()
    if stripped.startswith("//") or _SCHEME_RE.match(stripped):
        return None

    path = clean_reference(stripped)
    # The last segment of base_path is the document itself
    segments = [] if path.startswith("/") else base_path.split("/")[:-1]
    return _collapse(segments + path.split("/"))


def _collapse(segments: list) -> str:
    resolved: list[str] = []
    for segment in segments:
        if segment in ("", "."):
            continue
        if segment == "..":
            if resolved:
                resolved.pop()
            continue
        resolved.append(segment)
    return "/".join(resolved)


def safe_member_path(name: str) -> str:
    """
    Return zip member *name* as a relative path that stays inside the
    output directory: ``.``, ``..`` and empty segments are collapsed, but
    the name is otherwise kept literally (``file#1.html`` and ``a%20b.png``
    are real file names).  Backslashes count as separators.  Returns ``""`` when nothing is left.
    """
    _require_str("name", name)
    return _collapse(name.replace("\\", "/").split("/"))


def lookup_replacement(
    reference: str, mapping: Mapping, base_path: str = ""
) -> "str | None":
    """
    Find the replacement token for *reference* in *mapping*.

    Callers key their maps either by the reference as written in the
    document or by its archive path, so three keys are tried in order:
    the raw occurrence, the cleaned relative form (see
    :func:`clean_reference`) and the resolved archive path.
    Returns ``None`` when the reference is not registered.
    """
    if not is_relative_reference(reference):
        return None
    for key in (reference, clean_reference(reference), resolve(base_path, reference)):
        if key in mapping:
            return mapping[key]
    return None


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------

def save_file(local_path: Path, content: bytes) -> None:
    """Write *content* to *local_path*, creating all parent directories."""
    local_path.parent.mkdir(parents=True, exist_ok=True)
    local_path.write_bytes(content)
