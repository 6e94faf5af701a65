"""
zip_rewriter.rewrite.css
=========================
Finds and rewrites ``url()`` references in CSS text.

All three quoting styles are recognised::

    url("../fonts/a.woff")   url('../fonts/a.woff')   url(../fonts/a.woff)

A quoted reference runs to its closing quote and may contain spaces or
parentheses; an unquoted one stops at whitespace, ``)`` or a quote.
Occurrences that do not fit the pattern (unterminated quotes, missing
``)``) are never matched and therefore never touched.
"""

import re
from collections.abc import Mapping

from ..utils import _require_str, is_relative_reference, lookup_replacement

_CSS_URL_RE = re.compile(
    r"""(?<![\w-])url\(\s*(?:"(?P<dq>[^"\n]*)"|'(?P<sq>[^'\n]*)'|(?P<bare>[^\s'"()]+))\s*\)""",
    re.I,
)

# Tokens that can be written inside an unquoted url() as-is
_SAFE_TOKEN_RE = re.compile(r"""[^\s'"()\\]*""")


def _split_match(m: re.Match) -> "tuple[str, str]":
    """Return ``(quote, reference)`` for a ``url()`` match."""
    if m.group("dq") is not None:
        return '"', m.group("dq")
    if m.group("sq") is not None:
        return "'", m.group("sq")
    return "", m.group("bare")


def _format_url(quote: str, token: str) -> str:
    if not quote:
        if _SAFE_TOKEN_RE.fullmatch(token):
            return f"url({token})"
        quote = '"'
    escaped = token.replace("\\", "\\\\").replace(quote, "\\" + quote)
    return f"url({quote}{escaped}{quote})"


def extract_css_references(css_text: str) -> list:
    """
    Return every relative ``url()`` reference in *css_text*, in textual
    order and exactly as written (query strings and %-escapes included).
    Duplicates are kept; absolute and ``data:`` URLs are skipped.
    """
    _require_str("css_text", css_text)
    found: list = []
    for m in _CSS_URL_RE.finditer(css_text):
        _, ref = _split_match(m)
        if is_relative_reference(ref):
            found.append(ref)
    return found


def _replacement(m: re.Match, mapping: Mapping, base_path: str) -> "str | None":
    quote, ref = _split_match(m)
    token = lookup_replacement(ref, mapping, base_path)
    return None if token is None else _format_url(quote, token)


def css_replacements(css_text: str, mapping: Mapping, base_path: str = ""):
    """
    Yield ``(start, end, new_text)`` for every registered ``url()``
    occurrence in *css_text*, in textual order.  Used where the CSS sits
    inside escaped markup and only the occurrences themselves may change.
    """
    _require_str("css_text", css_text)
    _require_str("base_path", base_path)
    for m in _CSS_URL_RE.finditer(css_text):
        new = _replacement(m, mapping, base_path)
        if new is not None:
            yield m.start(), m.end(), new


def rewrite_css_references(
    css_text: str, mapping: Mapping, base_path: str = ""
) -> str:
    """
    Replace each registered ``url()`` reference in *css_text* with its
    token from *mapping*, keeping the original quote character.

    The query string and fragment of a replaced reference are dropped.
    Unregistered references are left byte-for-byte as they were.
    """
    _require_str("css_text", css_text)
    _require_str("base_path", base_path)
    if not mapping:
        return css_text

    def _replace(m: re.Match) -> str:
        new = _replacement(m, mapping, base_path)
        return m.group(0) if new is None else new

    return _CSS_URL_RE.sub(_replace, css_text)
