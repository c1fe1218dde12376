"""Human-readable report with source excerpts and caret markers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Sequence

from .diagnostics import Diagnostic, Severity
from .output import ColorChoice

__all__ = ["TextReporter", "render_summary"]

_COLOR_CODES = {
    Severity.ERROR: 31,
    Severity.WARNING: 33,
    Severity.INFO: 36,
}


@dataclass
class TextReporter:
    """Writes diagnostics in a compiler-like text layout."""

    writer: IO[str]
    color: ColorChoice = ColorChoice.NEVER

    def _render_severity(self, severity: Severity) -> str:
        label = severity.value
        if not self.color.is_enabled():
            return label
        return f"\x1b[{_COLOR_CODES[severity]}m{label}\x1b[39m"

    def report(self, diagnostics: Sequence[Diagnostic], summary: Any = None) -> None:
        """Write every diagnostic followed by the summary line."""
        out = self.writer
        for diagnostic in diagnostics:
            severity = self._render_severity(diagnostic.severity)
            source_line = _read_line(diagnostic.file, diagnostic.line)
            caret_start = max(diagnostic.column - 1, 0)
            carets = "^" * _caret_len(diagnostic, source_line)

            out.write(f"{severity}[{diagnostic.rule_id}]: {diagnostic.message}\n")
            out.write(f"  --> {diagnostic.file}:{diagnostic.line}:{diagnostic.column}\n")
            out.write("   |\n")
            out.write(f"{diagnostic.line} | {source_line}\n")
            out.write("   | " + " " * caret_start + carets)
            if diagnostic.fix is not None:
                out.write(f" help: replace with `{diagnostic.fix.replacement}`")
            out.write("\n")
            out.write("   |\n")
            out.write(f"   = rule defined in: {diagnostic.rule_source}\n")
            out.write(f"   = see: lintropy explain {diagnostic.rule_id}\n")
            if diagnostic.docs_url is not None:
                out.write(f"   = docs: {diagnostic.docs_url}\n")
            out.write("\n")
        out.write(render_summary(diagnostics) + "\n")


def _read_line(path: Path, line_number: int) -> str:
    contents = Path(path).read_text(encoding="utf-8")
    lines = contents.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    index = max(line_number - 1, 0)
    if index >= len(lines):
        return ""
    line = lines[index]
    return line[:-1] if line.endswith("\r") else line


def _caret_len(diagnostic: Diagnostic, source_line: str) -> int:
    if diagnostic.end_line == diagnostic.line and diagnostic.end_column > diagnostic.column:
        return diagnostic.end_column - diagnostic.column
    remaining = max(len(source_line) - max(diagnostic.column - 1, 0), 0)
    return max(remaining, 1)


def _pluralize(count: int, singular: str, plural: str) -> str:
    return singular if count == 1 else plural


def render_summary(diagnostics: Sequence[Diagnostic]) -> str:
    """One-line totals by severity, files touched and available autofixes."""
    counts = []
    for severity, singular, plural in (
        (Severity.ERROR, "error", "errors"),
        (Severity.WARNING, "warning", "warnings"),
        (Severity.INFO, "info", "infos"),
    ):
        n = sum(1 for d in diagnostics if d.severity is severity)
        if n > 0:
            counts.append(f"{n} {_pluralize(n, singular, plural)}")
    if not counts:
        counts.append("0 diagnostics")

    files = len({Path(d.file) for d in diagnostics})
    autofixes = sum(1 for d in diagnostics if d.fix is not None)

    summary = (
        f"Summary: {', '.join(counts)} across {files} "
        f"{_pluralize(files, 'file', 'files')}."
    )
    if autofixes > 0:
        summary += (
            f" {autofixes} {_pluralize(autofixes, 'autofix', 'autofixes')}"
            " available — re-run with --fix."
        )
    return summary