"""In-memory store of the editor buffers the client has open."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urlsplit
from urllib.request import url2pathname

from .position import Range, apply_change, compute_input_edit

__all__ = ["CachedParse", "Document", "DocumentStore", "uri_to_path", "path_to_uri"]


@dataclass
class CachedParse:
    """Last syntax tree for a buffer; ``tree`` must offer ``edit(InputEdit)``."""

    language: Any
    tree: Any


@dataclass
class Document:
    """Latest known state of one open buffer."""

    path: Path
    text: str
    version: int
    parse: CachedParse | None = None


class DocumentStore:
    """Documents keyed by their URI."""

    def __init__(self) -> None:
        self._docs: dict[str, Document] = {}

    def set(self, uri: str, text: str, version: int) -> None:
        """Replace the whole buffer for ``uri``."""
        path = uri_to_path(uri) or Path(unquote(urlsplit(uri).path))
        self._docs[uri] = Document(path=path, text=text, version=version)

    def apply_edit(
        self, uri: str, range: Range | None, new_text: str, version: int
    ) -> None:
        """Apply one change; a None range replaces the buffer. Unknown URIs are ignored."""
        doc = self._docs.get(uri)
        if doc is None:
            return
        if range is None:
            doc.text = new_text
            doc.parse = None
        else:
            if doc.parse is not None:
                doc.parse.tree.edit(compute_input_edit(doc.text, range, new_text))
            doc.text = apply_change(doc.text, range, new_text)
        doc.version = version

    def store_parse(self, uri: str, version: int, parse: CachedParse) -> None:
        """Keep ``parse`` only if the buffer is still at ``version``."""
        doc = self._docs.get(uri)
        if doc is not None and doc.version == version:
            doc.parse = parse

    def get(self, uri: str) -> Document | None:
        return self._docs.get(uri)

    def remove(self, uri: str) -> None:
        self._docs.pop(uri, None)

    def __iter__(self) -> Iterator[tuple[str, Document]]:
        return iter(list(self._docs.items()))

    def __len__(self) -> int:
        return len(self._docs)


def uri_to_path(uri: str) -> Path | None:
    """Filesystem path of a ``file:`` URI, or None for other URIs."""
    parts = urlsplit(uri)
    if parts.scheme != "file":
        return None
    if parts.netloc not in ("", "localhost"):
        return None
    return Path(url2pathname(parts.path))


def path_to_uri(path: str | Path) -> str | None:
    """``file:`` URI for an absolute path, or None for a relative one."""
    path = Path(path)
    if not path.is_absolute():
        return None
    return path.as_uri()