"""
zip_rewriter.archive
=====================
Host side of the rewriter: reads members out of a zip archive, decides
which references point at real members and feeds the resulting map back
into the rewrite functions.

The token scheme is supplied by the caller as ``token_for(document, path)``
where *document* is the member being rewritten and *path* the archive path
one of its references resolves to.
"""

from __future__ import annotations

import logging
import posixpath
import urllib.parse
import zipfile
from collections.abc import Callable
from pathlib import Path, PurePosixPath

from tqdm import tqdm

from .config import DEFAULT_MIME, EXT_MIME_MAP, LOGGER_NAME
from .rewrite import extract_references, rewrite_references
from .rewrite.core import is_rewritable
from .utils import resolve, safe_member_path, save_file

log = logging.getLogger(LOGGER_NAME)

TokenFor = Callable[[str, str], str]


def guess_mime_type(name: str) -> str:
    """Return the MIME type for archive member *name* based on its extension."""
    return EXT_MIME_MAP.get(PurePosixPath(name).suffix.lower(), DEFAULT_MIME)


def relative_token(document: str, path: str) -> str:
    """
    Token scheme for unpacking to disk: the path of *path* relative to the
    directory of *document*, percent-encoded, so the rewritten file works
    from the filesystem.
    """
    return urllib.parse.quote(posixpath.relpath(path, posixpath.dirname(document) or "."))


class ZipArchive:
    """
    Read-only view over a zip archive whose CSS/HTML/XML members get their
    references rewritten on the way out.

        with ZipArchive("book.zip") as archive:
            html = archive.rewrite("index.html", lambda doc, path: "/c/" + path)
    """

    def __init__(self, source: "str | Path | zipfile.ZipFile") -> None:
        if isinstance(source, zipfile.ZipFile):
            self._zip = source
        else:
            self._zip = zipfile.ZipFile(source)
        self._members = frozenset(self.names())

    def __enter__(self) -> "ZipArchive":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self._zip.close()

    def names(self) -> list:
        """Member file names in archive order (directory entries excluded)."""
        return [n for n in self._zip.namelist() if not n.endswith("/")]

    def read(self, name: str) -> bytes:
        return self._zip.read(name)

    def references(self, name: str) -> list:
        """Raw references made by member *name*, in document order."""
        return extract_references(self.read(name), guess_mime_type(name))

    def replacement_map(self, name: str, token_for: TokenFor) -> dict:
        """
        Build the replacement map for member *name*.

        Keys are the references exactly as they occur in the document, so
        that two spellings of the same target (``a%20b.png`` / ``a b.png``)
        both map to the token for the one member.  References that do not
        name a member of the archive are logged and left out.
        """
        mapping: dict = {}
        for ref in self.references(name):
            if ref in mapping:
                continue
            path = resolve(name, ref)
            if path in self._members:
                mapping[ref] = token_for(name, path)
            else:
                log.warning("[MISSING] %s → %r (%s) is not in the archive", name, ref, path)
        return mapping

    def rewrite(self, name: str, token_for: TokenFor) -> bytes:
        """
        Return member *name* with every reference to another member replaced
        by its token.  Members that cannot hold references come back as-is.
        Bytes that are not valid UTF-8 pass through unchanged.
        """
        content = self.read(name)
        mime_type = guess_mime_type(name)
        if not is_rewritable(mime_type):
            return content

        mapping = self.replacement_map(name, token_for)
        if not mapping:
            return content
        log.debug("[REWRITE] %s: %d reference(s)", name, len(mapping))
        return rewrite_references(content, mapping, mime_type, name).encode(
            "utf-8", errors="surrogateescape"
        )

    def unpack(
        self, output_dir: Path, token_for: TokenFor = relative_token, progress: bool = False
    ) -> int:
        """
        Write every member, rewritten, below *output_dir*.  Member names
        are normalised first so that ``../`` entries cannot escape it.
        Returns the number of files written.
        """
        names = self.names()
        iterator = tqdm(names, desc="Unpacking", unit="file") if progress else names
        written = 0
        for name in iterator:
            safe_name = safe_member_path(name)
            if not safe_name:
                log.warning("[SKIP] Unsafe member name %r", name)
                continue
            save_file(output_dir / safe_name, self.rewrite(name, token_for))
            written += 1
        log.info("Unpacked %d file(s) into %s", written, output_dir)
        return written
