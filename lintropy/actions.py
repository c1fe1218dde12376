"""Quick-fix code actions built from diagnostics that carry a fix."""

from __future__ import annotations

from dataclasses import dataclass, field

from .diagnostics import Diagnostic, LspDiagnostic, to_lsp
from .position import Range, byte_range_to_range

__all__ = ["QUICKFIX", "TextEdit", "CodeAction", "quickfix_for", "ranges_intersect"]

QUICKFIX = "quickfix"


@dataclass(frozen=True)
class TextEdit:
    range: Range
    new_text: str


@dataclass
class CodeAction:
    """A code action whose edit maps document URIs to text edits."""

    title: str
    kind: str = QUICKFIX
    diagnostics: list[LspDiagnostic] = field(default_factory=list)
    edit: dict[str, list[TextEdit]] = field(default_factory=dict)
    is_preferred: bool = True


def quickfix_for(uri: str, src: str, diagnostic: Diagnostic) -> CodeAction | None:
    """Build the quick fix for ``diagnostic``, or None when it has no fix."""
    fix = diagnostic.fix
    if fix is None:
        return None
    edit = TextEdit(byte_range_to_range(src, fix.byte_start, fix.byte_end), fix.replacement)
    return CodeAction(
        title=f"Autofix: {diagnostic.rule_id}",
        kind=QUICKFIX,
        diagnostics=[to_lsp(diagnostic, src)],
        edit={uri: [edit]},
        is_preferred=True,
    )


def ranges_intersect(haystack: Range, needle: Range) -> bool:
    """True if the ranges overlap at all, inclusive on both ends."""
    return not (
        haystack.end.line < needle.start.line
        or (
            haystack.end.line == needle.start.line
            and haystack.end.character < needle.start.character
        )
        or haystack.start.line > needle.end.line
        or (
            haystack.start.line == needle.end.line
            and haystack.start.character > needle.end.character
        )
    )