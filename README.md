# lintropy

Building blocks for the editor and reporting side of a structural linter.
The linter's rules are tree-sitter queries kept in repo-local YAML files:
`lintropy.yaml`, `*.rule.yaml`/`*.rule.yml` and `*.rules.yaml`/`*.rules.yml`.

## Modules

- `lintropy.position` has the `Position`, `Range`, `Point` and `InputEdit`
  types.
  - `byte_to_position` and `byte_range_to_range` map UTF-8 byte offsets to
    line and UTF-16 column. Offsets past the end are clamped.
  - `position_to_byte` maps back. It clamps to the end of the line or of
    the buffer.
  - `apply_change` returns the text with a range replaced. A `None` range
    replaces the whole text.
  - `compute_input_edit` describes an edit in byte offsets and
    byte-column points, in the form a tree-sitter tree expects.
- `lintropy.diagnostics` has the diagnostic model: `Severity`, `Fix` and
  `Diagnostic`. `to_lsp` converts a diagnostic to an `LspDiagnostic`.
  - The range comes from the diagnostic's byte offsets.
  - The code is the rule id and the source is `"lintropy"`.
  - The code description is the diagnostic's `docs_url` when it is a valid
    URL. Otherwise it is the fallback you pass.
- `lintropy.actions` has two functions.
  - `quickfix_for(uri, src, diagnostic)` builds a `CodeAction` titled
    `Autofix: <rule id>`, with one `TextEdit`. It returns `None` when the
    diagnostic has no fix.
  - `ranges_intersect` tests whether two ranges overlap, inclusive on both
    ends.
- `lintropy.document` has `DocumentStore`, an in-memory store of open
  buffers keyed by URI.
  - It supports `set`, `apply_edit`, `store_parse`, `get`, `remove` and
    iteration.
  - `apply_edit` calls `edit(InputEdit)` on a cached parse tree when one
    is stored.
  - `store_parse` keeps a parse only if the buffer is still at the given
    version.
  - `uri_to_path` and `path_to_uri` convert between `file:` URIs and
    paths.
- `lintropy.semantic_tokens` highlights the query language inside
  `query: |` / `query: >` blocks of a YAML document.
  - It recognises captures, predicates, strings, numbers, comments, node
    kinds, field names, operators and the `_` wildcard.
  - `tokenize` returns `SemanticTokens` in LSP delta encoding, or `None`
    when there are no tokens.
  - `legend()` gives the token type and modifier names, in index order.
- `lintropy.completion` has `complete(path, src, pos)`, which returns
  `CompletionItem`s for rule files only. It offers:
  - language names after `language:`;
  - capture names inside an open `{{`;
  - predicates, node kinds, field names and the rule's `@captures` inside a
    query block.

  Capture names are taken from the rule that holds the cursor. Node kinds
  and field names come from built-in lists for `rust`, `go`, `python` and
  `typescript`.
- `lintropy.output` has `ColorChoice`, `OutputFormat` (with
  `color_choice`), a `Reporter` protocol and `OutputSink`.
  - An `OutputSink` writes to stdout, or to a temporary file that `commit`
    moves over the destination.
  - Used as a context manager, it discards the temporary file if an
    exception is raised.
- `lintropy.text` has `TextReporter`, which writes a compiler-like report
  with source excerpts, carets and fix hints. `render_summary` gives the
  one-line totals.

## Installation

```
pip install .
```

## Example

```python
from lintropy.position import Position, byte_to_position, position_to_byte
from lintropy.semantic_tokens import tokenize

src = "fn main() {\n    let x = 1;\n}\n"
pos = byte_to_position(src, src.find("let"))
assert pos == Position(line=1, character=4)
assert position_to_byte(src, pos) == src.find("let")

tokens = tokenize("query: |\n  (identifier) @name\n")
for token in tokens.data:
    print(token.delta_line, token.delta_start, token.length, token.token_type)
```

## What it does not do

The package does not provide:

- a command-line program;
- a language server that talks over stdio;
- loading of rule configuration;
- parsing of source files or running of queries;
- a JSON reporter.

Diagnostics must be produced elsewhere and passed in.

## Running the tests

```
pip install ".[test]"
pytest
```