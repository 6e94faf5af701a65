"""
zip_rewriter
============
Discovers and rewrites the relative references made by CSS, HTML and XML
documents packaged inside a zip archive, so that the documents can be
served through an indirection layer (a service worker, a virtual file
server …) instead of from a real directory.

Package structure
-----------------
zip_rewriter/
├── __init__.py       – package init and public API
├── config.py         – configuration constants
├── logging_setup.py  – colorlog logger configuration
├── utils.py          – archive path resolution and file helpers
├── archive.py        – ZipArchive host: member listing, map building
├── cli.py            – argparse CLI (``python -m zip_rewriter``)
└── rewrite/          – sub-package: reference discovery and rewriting
    ├── __init__.py
    ├── core.py       – MIME dispatcher (extract_references / rewrite_references)
    ├── css.py        – CSS url() references
    └── markup.py     – HTML / XML href, src, style attributes and <style> blocks

Quick start
-----------
    from zip_rewriter import extract_references, resolve, rewrite_references

    refs = extract_references(css_text, "text/css")
    mapping = {resolve("package/css/main.css", r): "token" for r in refs}
    css_text = rewrite_references(css_text, mapping, "text/css", "package/css/main.css")
"""

from .archive import ZipArchive, guess_mime_type
from .rewrite import (
    extract_css_references,
    extract_markup_references,
    extract_references,
    rewrite_css_references,
    rewrite_markup_references,
    rewrite_references,
)
from .utils import clean_reference, is_relative_reference, lookup_replacement, resolve

__all__ = [
    "ZipArchive",
    "guess_mime_type",
    "resolve",
    "clean_reference",
    "is_relative_reference",
    "lookup_replacement",
    "extract_references",
    "rewrite_references",
    "extract_css_references",
    "rewrite_css_references",
    "extract_markup_references",
    "rewrite_markup_references",
]
