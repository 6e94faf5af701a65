"""
zip_rewriter.rewrite
=====================
Sub-package for discovering and rewriting archive references inside
CSS, HTML and XML documents.

Public API
----------
    from zip_rewriter.rewrite import extract_references, rewrite_references
"""

from .core import extract_references, rewrite_references
from .css import extract_css_references, rewrite_css_references
from .markup import extract_markup_references, rewrite_markup_references

__all__ = [
    "extract_references",
    "rewrite_references",
    "extract_css_references",
    "rewrite_css_references",
    "extract_markup_references",
    "rewrite_markup_references",
]
