"""
zip_rewriter.rewrite.markup
============================
Finds and rewrites resource references in HTML and XML documents.

Handles:
* ``href`` / ``src`` attributes (``xlink:href`` and other prefixed forms too)
* Inline ``style="…"`` attributes (delegated to the css module)
* ``<style>`` blocks (delegated to the css module)

The document is parsed with BeautifulSoup's ``html.parser`` tree builder,
which records where every start tag begins in the source.  Rewriting edits
only the attribute values and ``url()`` occurrences at those positions, so
the rest of the document comes back byte-for-byte as it went in.  XML
dialects must additionally pass lxml's strict parser; documents that do
not are left alone.

Attribute values, and XML ``<style>`` text, are entity-decoded before the
CSS module sees them.  A replaced ``url()`` is escaped back for its context
and every other character keeps its original spelling.  Tags inside HTML
raw-text elements (``<title>``, ``<textarea>``…) are text, not markup, and
are never visited.
"""

import html
import logging
import re
import warnings
from collections.abc import Mapping
from typing import NamedTuple

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning, XMLParsedAsHTMLWarning
from lxml import etree

from ..config import (
    HTML_TYPES,
    LOGGER_NAME,
    RAW_TEXT_ELEMENTS,
    REFERENCE_ATTRS,
    STYLE_ATTR,
    STYLE_ELEMENT,
    XML_TYPES,
)
from ..utils import _require_str, is_relative_reference, lookup_replacement
from .css import css_replacements, extract_css_references, rewrite_css_references

log = logging.getLogger(LOGGER_NAME)

_START_TAG_RE = re.compile(
    r"""<(?P<name>[^\s/>]+)(?P<attrs>(?:"[^"]*"|'[^']*'|[^'">])*)>"""
)
_ATTR_RE = re.compile(
    r"""(?P<name>[^\s/>="']+)"""
    r"""(?:\s*=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\s"'>]+)))?"""
)
_UNQUOTED_SAFE_RE = re.compile(r"""[^\s"'=<>`]+""")

# Same character references html.unescape() recognises
_ENTITY_RE = re.compile(r"&(?:#[0-9]+;?|#[xX][0-9a-fA-F]+;?|[^\t\n\f <&#;]{1,32};?)")
_XML_TEXT_RE = re.compile(
    r"<!\[CDATA\[(?P<cdata>.*?)\]\]>|" + _ENTITY_RE.pattern, re.S
)


class _Target(NamedTuple):
    """A span of the source document that may hold references."""
    kind: str      # "attr" (href/src), "style" (style attribute), "block" or "text"
    start: int
    end: int
    quote: str     # attribute quote character, "" when unquoted


class _Decoded(NamedTuple):
    """Unescaped text plus, per character, where it came from in the source."""
    text: str
    starts: list
    ends: list
    sections: list  # CDATA section number, -1 outside CDATA


def _normalise_mime(mime_type: str) -> str:
    return mime_type.split(";")[0].strip().lower()


def _local_name(name: str) -> str:
    return name.rsplit(":", 1)[-1].lower()


def _is_well_formed(text: str) -> bool:
    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True)
    try:
        etree.fromstring(text.encode("utf-8", "surrogateescape"), parser)
    except etree.XMLSyntaxError as exc:
        log.debug("Document is not well-formed XML, leaving it untouched: %s", exc)
        return False
    return True


def _parse(text: str, mime_type: str) -> "tuple[BeautifulSoup, bool] | None":
    """
    Return ``(tree, is_xml)``, or None when *text* must not be touched.
    """
    mime_type = _normalise_mime(mime_type)
    is_xml = mime_type in XML_TYPES
    if is_xml:
        if not _is_well_formed(text):
            return None
    elif mime_type not in HTML_TYPES:
        return None

    with warnings.catch_warnings():
        warnings.simplefilter("ignore", XMLParsedAsHTMLWarning)
        warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
        return BeautifulSoup(text, "html.parser"), is_xml


def _line_starts(text: str) -> list:
    starts = [0]
    pos = text.find("\n")
    while pos != -1:
        starts.append(pos + 1)
        pos = text.find("\n", pos + 1)
    return starts


def _attr_value_span(m: re.Match) -> "tuple[str, int, int] | None":
    for group, quote in (("dq", '"'), ("sq", "'"), ("bare", "")):
        if m.group(group) is not None:
            return quote, m.start(group), m.end(group)
    return None


def _visit(text: str, tag, m: re.Match, is_xml: bool):
    """
    Yield the reference-bearing spans of one element: reference attributes
    in source order, then the style attribute, then the style block body.
    """
    refs: list = []
    styles: list = []
    for a in _ATTR_RE.finditer(text, m.start("attrs"), m.end("attrs")):
        span = _attr_value_span(a)
        if span is None:
            continue
        name = _local_name(a.group("name"))
        if name in REFERENCE_ATTRS:
            refs.append(_Target("attr", span[1], span[2], span[0]))
        elif name == STYLE_ATTR:
            styles.append(_Target("style", span[1], span[2], span[0]))
    yield from refs
    yield from styles

    if _local_name(m.group("name")) != STYLE_ELEMENT or m.group(0).endswith("/>"):
        return
    if tag.find(True) is not None:
        return
    close_re = re.compile(r"</" + re.escape(m.group("name")) + r"[\s/>]", re.I)
    close = close_re.search(text, m.end())
    end = close.start() if close else len(text)
    yield _Target("text" if is_xml else "block", m.end(), end, "")


def _walk(text: str, soup: BeautifulSoup, is_xml: bool):
    """Yield every reference-bearing span of *text* in document order."""
    line_starts = _line_starts(text)
    positioned = []
    for tag in soup.find_all(True):
        if not is_xml and tag.find_parent(RAW_TEXT_ELEMENTS) is not None:
            continue
        line, col = tag.sourceline, tag.sourcepos
        if isinstance(line, int) and isinstance(col, int):
            positioned.append((line_starts[line - 1] + col, tag))
    positioned.sort(key=lambda item: item[0])

    for offset, tag in positioned:
        m = _START_TAG_RE.match(text, offset)
        if m is None:
            log.debug("Could not locate <%s> at offset %d, skipping", tag.name, offset)
            continue
        yield from _visit(text, tag, m, is_xml)


def _decode(raw: str, pattern: re.Pattern) -> _Decoded:
    chars: list = []
    starts: list = []
    ends: list = []
    sections: list = []

    def copy(lo: int, hi: int, section: int) -> None:
        for i in range(lo, hi):
            chars.append(raw[i])
            starts.append(i)
            ends.append(i + 1)
            sections.append(section)

    cursor = 0
    for number, m in enumerate(pattern.finditer(raw)):
        copy(cursor, m.start(), -1)
        if m.groupdict().get("cdata") is not None:
            copy(m.start("cdata"), m.end("cdata"), number)
        else:
            for ch in html.unescape(m.group(0)):
                chars.append(ch)
                starts.append(m.start())
                ends.append(m.end())
                sections.append(-1)
        cursor = m.end()
    copy(cursor, len(raw), -1)
    return _Decoded("".join(chars), starts, ends, sections)


def _escape_text(value: str, quote: str) -> str:
    value = value.replace("&", "&amp;").replace("<", "&lt;")
    if quote == '"':
        return value.replace('"', "&quot;")
    if quote == "'":
        return value.replace("'", "&#39;")
    return value


def _quote_bare(value: str) -> str:
    """Quote an unquoted attribute value that is no longer safe bare."""
    if _UNQUOTED_SAFE_RE.fullmatch(value):
        return value
    return '"' + value.replace('"', "&quot;") + '"'


def _splice(text: str, edits: list) -> str:
    """Apply sorted ``(start, end, new)`` edits; overlapping ones are dropped."""
    pieces: list = []
    cursor = 0
    for start, end, new in edits:
        if start < cursor:
            continue
        pieces.append(text[cursor:start])
        pieces.append(new)
        cursor = end
    pieces.append(text[cursor:])
    return "".join(pieces)


def _rewrite_escaped_css(
    raw: str, mapping: Mapping, base_path: str, pattern: re.Pattern, quote: str
) -> str:
    decoded = _decode(raw, pattern)
    edits = []
    for start, end, new in css_replacements(decoded.text, mapping, base_path):
        section = decoded.sections[start]
        if section != decoded.sections[end - 1]:
            log.debug("url() straddles a CDATA boundary, leaving it: %r", decoded.text[start:end])
            continue
        if section < 0:
            new = _escape_text(new, quote)
        edits.append((decoded.starts[start], decoded.ends[end - 1], new))
    return _splice(raw, edits)


def extract_markup_references(markup_text: str, mime_type: str) -> list:
    """
    Return the relative references of an HTML or XML document in document
    order: ``href``/``src`` values, then ``url()`` references from inline
    ``style`` attributes and ``<style>`` blocks as they are encountered.

    Unknown MIME types and XML that is not well-formed yield ``[]``.
    """
    _require_str("markup_text", markup_text)
    _require_str("mime_type", mime_type)
    parsed = _parse(markup_text, mime_type)
    if parsed is None:
        return []

    found: list = []
    for target in _walk(markup_text, *parsed):
        raw = markup_text[target.start:target.end]
        if target.kind == "attr":
            value = html.unescape(raw)
            if is_relative_reference(value):
                found.append(value)
        elif target.kind == "style":
            found.extend(extract_css_references(_decode(raw, _ENTITY_RE).text))
        elif target.kind == "text":
            found.extend(extract_css_references(_decode(raw, _XML_TEXT_RE).text))
        else:
            found.extend(extract_css_references(raw))
    return found


def _rewrite_target(
    target: _Target, raw: str, mapping: Mapping, base_path: str
) -> str:
    if target.kind == "attr":
        token = lookup_replacement(html.unescape(raw), mapping, base_path)
        if token is None:
            return raw
        value = _escape_text(token, target.quote)
        return value if target.quote else _quote_bare(value)
    if target.kind == "style":
        new = _rewrite_escaped_css(raw, mapping, base_path, _ENTITY_RE, target.quote)
        return new if target.quote or new == raw else _quote_bare(new)
    if target.kind == "text":
        return _rewrite_escaped_css(raw, mapping, base_path, _XML_TEXT_RE, "")
    return rewrite_css_references(raw, mapping, base_path)


def rewrite_markup_references(
    markup_text: str, mapping: Mapping, mime_type: str, base_path: str = ""
) -> str:
    """
    Replace every registered reference in an HTML or XML document with its
    token from *mapping*.

    Only the attribute values and ``url()`` occurrences holding a registered
    reference change; everything else is returned exactly as given.
    """
    _require_str("markup_text", markup_text)
    _require_str("mime_type", mime_type)
    _require_str("base_path", base_path)
    if not mapping:
        return markup_text
    parsed = _parse(markup_text, mime_type)
    if parsed is None:
        return markup_text

    edits = []
    for target in _walk(markup_text, *parsed):
        raw = markup_text[target.start:target.end]
        new = _rewrite_target(target, raw, mapping, base_path)
        if new != raw:
            edits.append((target.start, target.end, new))
    edits.sort(key=lambda edit: edit[0])
    return _splice(markup_text, edits)
