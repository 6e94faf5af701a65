"""Configuration constants for the zip reference rewriter."""

import os

LOGGER_NAME = "zip-rewriter"

# Token prefix used by ``zip-rewriter unpack`` when --prefix is not given
DEFAULT_PREFIX = os.environ.get("ZIP_REWRITER_PREFIX", "")
DEFAULT_OUTPUT = "unpacked_archive"

CSS_TYPES = frozenset(["text/css"])

# Parsed permissively (BeautifulSoup html.parser)
HTML_TYPES = frozenset(["text/html"])

# Must be well-formed (lxml strict parser) before they are rewritten
XML_TYPES = frozenset([
    "text/xml",
    "application/xml",
    "application/xhtml+xml",
    "image/svg+xml",
    "application/ttml+xml",
])

# Attributes whose value is a resource reference.  Matched on the local
# name so namespaced forms such as ``xlink:href`` count too.
REFERENCE_ATTRS = ("href", "src")
STYLE_ATTR = "style"
STYLE_ELEMENT = "style"

# HTML elements whose content is raw text rather than markup
RAW_TEXT_ELEMENTS = ("title", "textarea", "xmp", "iframe", "noembed", "noframes")

# Member extension → MIME type, used by the archive host
EXT_MIME_MAP = {
    ".css":   "text/css",
    ".html":  "text/html",
    ".htm":   "text/html",
    ".xhtml": "application/xhtml+xml",
    ".xml":   "text/xml",
    ".svg":   "image/svg+xml",
    ".ttml":  "application/ttml+xml",
    ".dfxp":  "application/ttml+xml",
    ".js":    "application/javascript",
    ".json":  "application/json",
    ".png":   "image/png",
    ".jpg":   "image/jpeg",
    ".jpeg":  "image/jpeg",
    ".gif":   "image/gif",
    ".woff":  "font/woff",
    ".woff2": "font/woff2",
    ".mp3":   "audio/mpeg",
    ".mp4":   "video/mp4",
}
DEFAULT_MIME = "application/octet-stream"
