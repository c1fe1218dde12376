"""Editor-side helpers for a structural linter: positions, diagnostics, quickfixes, documents, semantic tokens, completion and text reports."""

__version__ = "0.1.0"