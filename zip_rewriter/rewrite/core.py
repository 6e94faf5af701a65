"""
zip_rewriter.rewrite.core
==========================
MIME-type dispatcher in front of the css and markup modules.

Public functions
----------------
    extract_references(content, mime_type) -> list[str]
    rewrite_references(content, mapping, mime_type, base_path) -> str
"""

from __future__ import annotations

from collections.abc import Mapping

from ..config import CSS_TYPES, HTML_TYPES, XML_TYPES
from .css import extract_css_references, rewrite_css_references
from .markup import extract_markup_references, rewrite_markup_references


def _decode(content: "bytes | str") -> str:
    if isinstance(content, bytes):
        return content.decode("utf-8", errors="surrogateescape")
    return content


def _content_type(mime_type: str) -> str:
    if not isinstance(mime_type, str):
        raise TypeError(f"mime_type must be str, not {type(mime_type).__name__}")
    return mime_type.split(";")[0].strip().lower()


def is_rewritable(mime_type: str) -> bool:
    """Return True when documents of *mime_type* can hold references."""
    return _content_type(mime_type) in (CSS_TYPES | HTML_TYPES | XML_TYPES)


def extract_references(content: "bytes | str", mime_type: str) -> list:
    """
    Return the relative references in *content*, in document order, parsed
    according to *mime_type*.  Any other MIME type yields ``[]``.
    """
    ct = _content_type(mime_type)
    text = _decode(content)

    if ct in CSS_TYPES:
        return extract_css_references(text)
    if ct in HTML_TYPES or ct in XML_TYPES:
        return extract_markup_references(text, ct)
    return []


def rewrite_references(
    content: "bytes | str",
    mapping: Mapping,
    mime_type: str,
    base_path: str = "",
) -> str:
    """
    Return *content* with every reference registered in *mapping* replaced
    by its token.  Other MIME types are returned unchanged (decoded).
    """
    ct = _content_type(mime_type)
    text = _decode(content)

    if ct in CSS_TYPES:
        return rewrite_css_references(text, mapping, base_path)
    if ct in HTML_TYPES or ct in XML_TYPES:
        return rewrite_markup_references(text, mapping, ct, base_path)
    return text
