"""Lint diagnostics and their conversion to LSP diagnostics."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlsplit

from .position import Range, byte_range_to_range

__all__ = [
    "SOURCE",
    "Severity",
    "Fix",
    "Diagnostic",
    "LspSeverity",
    "LspDiagnostic",
    "to_lsp",
]

SOURCE = "lintropy"
"""Producer name shown by editors next to each diagnostic."""


class Severity(enum.Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Fix:
    """Replacement of a UTF-8 byte range."""

    byte_start: int
    byte_end: int
    replacement: str


@dataclass
class Diagnostic:
    """A single finding produced by a rule."""

    rule_id: str
    severity: Severity
    message: str
    file: Path
    line: int = 1
    column: int = 1
    end_line: int = 1
    end_column: int = 1
    byte_start: int = 0
    byte_end: int = 0
    rule_source: Path = field(default_factory=Path)
    docs_url: str | None = None
    fix: Fix | None = None


class LspSeverity(enum.IntEnum):
    ERROR = 1
    WARNING = 2
    INFORMATION = 3
    HINT = 4


@dataclass
class LspDiagnostic:
    """Diagnostic in the shape the language server protocol expects."""

    range: Range
    message: str
    severity: LspSeverity | None = None
    code: str | None = None
    code_description: str | None = None
    source: str | None = None


_SEVERITY_TO_LSP = {
    Severity.ERROR: LspSeverity.ERROR,
    Severity.WARNING: LspSeverity.WARNING,
    Severity.INFO: LspSeverity.INFORMATION,
}


def _valid_url(url: str) -> str | None:
    try:
        parts = urlsplit(url)
    except ValueError:
        return None
    if not parts.scheme or " " in url:
        return None
    return url


def to_lsp(
    diagnostic: Diagnostic, src: str, docs_url_fallback: str | None = None
) -> LspDiagnostic:
    """Convert ``diagnostic`` against buffer ``src`` into an LspDiagnostic."""
    href = None
    if diagnostic.docs_url is not None:
        href = _valid_url(diagnostic.docs_url)
    if href is None:
        href = docs_url_fallback
    return LspDiagnostic(
        range=byte_range_to_range(src, diagnostic.byte_start, diagnostic.byte_end),
        message=diagnostic.message,
        severity=_SEVERITY_TO_LSP[diagnostic.severity],
        code=diagnostic.rule_id,
        code_description=href,
        source=SOURCE,
    )