import io
from pathlib import Path

import pytest

from lintropy.diagnostics import Diagnostic, Fix, Severity
from lintropy.output import ColorChoice
from lintropy.text import TextReporter, render_summary

SOURCE = "fn main() {\n    let x = foo.unwrap();\n}\n"
LINE = "    let x = foo.unwrap();"


@pytest.fixture
def src_file(tmp_path):
    path = tmp_path / "main.rs"
    path.write_text(SOURCE, encoding="utf-8")
    return path


def make_diag(path, **overrides):
    values = dict(
        rule_id="no-unwrap",
        severity=Severity.WARNING,
        message="avoid unwrap",
        file=path,
        line=2,
        column=13,
        end_line=2,
        end_column=25,
        rule_source=Path(".lintropy/no-unwrap.rule.yaml"),
    )
    values.update(overrides)
    return Diagnostic(**values)


def run_report(diagnostics, color=ColorChoice.NEVER):
    buf = io.StringIO()
    TextReporter(buf, color).report(diagnostics, None)
    return buf.getvalue()


def test_report_layout(src_file):
    diag = make_diag(src_file)
    lines = run_report([diag]).split("\n")
    assert lines[0] == "warning[no-unwrap]: avoid unwrap"
    assert lines[1] == f"  --> {src_file}:2:13"
    assert lines[2] == "   |"
    assert lines[3] == f"2 | {LINE}"
    assert lines[4] == "   | " + " " * 12 + "^" * 12
    assert lines[5] == "   |"
    assert lines[6] == f"   = rule defined in: {diag.rule_source}"
    assert lines[7] == "   = see: lintropy explain no-unwrap"
    assert lines[8] == ""
    assert lines[9] == render_summary([diag])


def test_multiline_caret_runs_to_end_of_line(src_file):
    diag = make_diag(src_file, end_line=3, end_column=2)
    lines = run_report([diag]).split("\n")
    caret_line = lines[4]
    assert caret_line.count("^") == len(LINE) - (diag.column - 1)
    assert len(caret_line) == len("   | ") + len(LINE)


def test_caret_is_at_least_one(src_file):
    diag = make_diag(src_file, column=40, end_line=3, end_column=1)
    lines = run_report([diag]).split("\n")
    assert lines[4].count("^") == 1


def test_fix_and_docs_are_rendered(src_file):
    diag = make_diag(
        src_file,
        fix=Fix(0, 0, 'foo.expect("TODO")'),
        docs_url="https://docs.example.com/no-unwrap",
    )
    out = run_report([diag])
    assert 'help: replace with `foo.expect("TODO")`' in out
    assert "   = docs: https://docs.example.com/no-unwrap\n" in out


def test_no_docs_line_without_url(src_file):
    out = run_report([make_diag(src_file)])
    assert "= docs:" not in out


def test_colored_severity(src_file):
    out = run_report([make_diag(src_file, severity=Severity.ERROR)], ColorChoice.ALWAYS)
    assert out.startswith("\x1b[31merror\x1b[39m[no-unwrap]")


def test_missing_line_renders_empty(src_file):
    diag = make_diag(src_file, line=50, end_line=50)
    lines = run_report([diag]).split("\n")
    assert lines[3] == "50 | "


def test_missing_source_file_raises(tmp_path):
    diag = make_diag(tmp_path / "gone.rs")
    with pytest.raises(FileNotFoundError):
        run_report([diag])


def test_empty_summary():
    assert render_summary([]) == "Summary: 0 diagnostics across 0 files."
    assert run_report([]) == "Summary: 0 diagnostics across 0 files.\n"


def test_summary_counts_severities_files_and_fixes(src_file, tmp_path):
    other = tmp_path / "other.rs"
    diags = [
        make_diag(src_file, severity=Severity.ERROR, fix=Fix(0, 1, "x")),
        make_diag(src_file, severity=Severity.ERROR),
        make_diag(other, severity=Severity.WARNING),
    ]
    summary = render_summary(diags)
    assert summary.startswith("Summary: 2 errors, 1 warning across 2 files.")
    assert summary.endswith("autofix available — re-run with --fix.")


def test_summary_without_fixes_has_no_autofix_text(src_file):
    summary = render_summary([make_diag(src_file, severity=Severity.INFO)])
    assert "info" in summary
    assert "autofix" not in summary
    assert summary.endswith("file.")