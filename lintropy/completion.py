"""Completion items for lintropy rule files.

Three contexts are recognised inside ``lintropy.yaml`` and
``*.rule.yaml`` / ``*.rules.yaml`` buffers:

1. the value of a ``language:`` key, which offers the known languages;
2. the body of a ``query: |`` block, which offers predicates, node kinds,
   field names and the captures already present in the rule;
3. an open ``{{`` interpolation, which offers the rule's capture names.

Detection works line by line on half-typed input and never parses the
YAML document as a whole.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from .position import Position, position_to_byte

__all__ = ["CompletionItemKind", "InsertTextFormat", "CompletionItem", "complete"]


class CompletionItemKind(enum.IntEnum):
    """LSP completion item kinds used by lintropy."""

    FUNCTION = 3
    FIELD = 5
    VARIABLE = 6
    CLASS = 7
    ENUM_MEMBER = 20


class InsertTextFormat(enum.IntEnum):
    PLAIN_TEXT = 1
    SNIPPET = 2


@dataclass(frozen=True)
class CompletionItem:
    """One completion proposal; ``documentation`` is Markdown."""

    label: str
    kind: CompletionItemKind | None = None
    detail: str | None = None
    documentation: str | None = None
    insert_text: str | None = None
    insert_text_format: InsertTextFormat | None = None


@dataclass(frozen=True)
class _Language:
    name: str
    extensions: tuple[str, ...]
    node_kinds: tuple[str, ...]
    field_names: tuple[str, ...]


_RUST = _Language(
    name="rust",
    extensions=("rs",),
    node_kinds=(
        "source_file", "identifier", "field_identifier", "type_identifier",
        "scoped_identifier", "call_expression", "field_expression",
        "macro_invocation", "method_call", "function_item", "function_signature_item",
        "struct_item", "enum_item", "impl_item", "trait_item", "mod_item",
        "use_declaration", "let_declaration", "const_item", "static_item",
        "block", "if_expression", "match_expression", "match_arm",
        "while_expression", "loop_expression", "for_expression",
        "closure_expression", "return_expression", "await_expression",
        "try_expression", "binary_expression", "unary_expression",
        "reference_expression", "index_expression", "assignment_expression",
        "string_literal", "raw_string_literal", "char_literal",
        "integer_literal", "float_literal", "boolean_literal",
        "line_comment", "block_comment", "attribute_item", "attribute",
        "arguments", "parameters", "parameter", "generic_type",
        "reference_type", "unsafe_block", "token_tree",
    ),
    field_names=(
        "alternative", "arguments", "body", "condition", "consequence",
        "field", "function", "left", "macro", "name", "operator",
        "parameters", "pattern", "return_type", "right", "trait", "type",
        "type_arguments", "type_parameters", "value",
    ),
)

_GO = _Language(
    name="go",
    extensions=("go",),
    node_kinds=(
        "source_file", "package_clause", "import_declaration", "import_spec",
        "identifier", "field_identifier", "package_identifier", "type_identifier",
        "function_declaration", "method_declaration", "call_expression",
        "selector_expression", "index_expression", "composite_literal",
        "func_literal", "block", "if_statement", "for_statement",
        "switch_statement", "return_statement", "go_statement", "defer_statement",
        "short_var_declaration", "var_declaration", "const_declaration",
        "type_declaration", "assignment_statement", "binary_expression",
        "unary_expression", "argument_list", "parameter_list",
        "parameter_declaration", "struct_type", "interface_type",
        "interpreted_string_literal", "raw_string_literal", "int_literal",
        "float_literal", "comment", "nil", "true", "false",
    ),
    field_names=(
        "alternative", "arguments", "body", "condition", "consequence",
        "field", "function", "left", "name", "operand", "operator",
        "parameters", "path", "receiver", "result", "right", "type", "value",
    ),
)

_PYTHON = _Language(
    name="python",
    extensions=("py",),
    node_kinds=(
        "module", "identifier", "call", "attribute", "subscript",
        "function_definition", "class_definition", "decorated_definition",
        "decorator", "import_statement", "import_from_statement",
        "expression_statement", "assignment", "augmented_assignment",
        "return_statement", "if_statement", "for_statement", "while_statement",
        "try_statement", "except_clause", "with_statement", "raise_statement",
        "lambda", "block", "argument_list", "parameters", "keyword_argument",
        "binary_operator", "comparison_operator", "boolean_operator",
        "string", "integer", "float", "true", "false", "none", "comment",
        "list", "dictionary", "tuple", "pair",
    ),
    field_names=(
        "alternative", "arguments", "attribute", "body", "condition",
        "consequence", "function", "left", "module_name", "name", "object",
        "operator", "parameters", "return_type", "right", "subscript",
        "superclasses", "type", "value",
    ),
)

_TYPESCRIPT = _Language(
    name="typescript",
    extensions=("ts", "tsx"),
    node_kinds=(
        "program", "identifier", "property_identifier", "type_identifier",
        "call_expression", "member_expression", "new_expression",
        "function_declaration", "arrow_function", "method_definition",
        "class_declaration", "interface_declaration", "type_alias_declaration",
        "enum_declaration", "import_statement", "export_statement",
        "lexical_declaration", "variable_declaration", "variable_declarator",
        "expression_statement", "return_statement", "if_statement",
        "for_statement", "while_statement", "try_statement", "throw_statement",
        "await_expression", "binary_expression", "assignment_expression",
        "statement_block", "arguments", "formal_parameters",
        "required_parameter", "optional_parameter", "type_annotation",
        "string", "template_string", "number", "true", "false", "null",
        "undefined", "comment", "object", "array", "pair",
    ),
    field_names=(
        "alternative", "arguments", "body", "condition", "consequence",
        "constructor", "declaration", "function", "left", "name", "object",
        "operator", "parameters", "property", "return_type", "right",
        "source", "type", "value",
    ),
)

_LANGUAGES: dict[str, _Language] = {
    lang.name: lang for lang in (_RUST, _GO, _PYTHON, _TYPESCRIPT)
}

_RULE_FILE_SUFFIXES = (".rule.yaml", ".rule.yml", ".rules.yaml", ".rules.yml")
_QUERY_OPENERS = frozenset({"|", ">", "|+", "|-", ">+", ">-"})
_CAPTURE_RE = re.compile(r"@([A-Za-z0-9_-]+)")
_NODE_KIND_RE = re.compile(r"[A-Za-z0-9_]+")


@dataclass(frozen=True)
class _Predicate:
    name: str
    doc: str
    snippet: str


_PREDICATES = (
    _Predicate("eq?", "Match if the capture equals the given string.",
               '#eq? @${1:capture} "${2:value}"'),
    _Predicate("not-eq?", "Negation of `#eq?`.",
               '#not-eq? @${1:capture} "${2:value}"'),
    _Predicate("match?", "Match if the capture matches the given regex.",
               '#match? @${1:capture} "${2:regex}"'),
    _Predicate("not-match?", "Negation of `#match?`.",
               '#not-match? @${1:capture} "${2:regex}"'),
    _Predicate("any-of?", "Match if the capture equals any listed string.",
               '#any-of? @${1:capture} "${2:a}" "${3:b}"'),
    _Predicate("not-any-of?", "Negation of `#any-of?`.",
               '#not-any-of? @${1:capture} "${2:a}" "${3:b}"'),
    _Predicate("has-ancestor?",
               "lintropy: capture has an ancestor of one of the given kinds.",
               '#has-ancestor? @${1:capture} "${2:kind}"'),
    _Predicate("not-has-ancestor?", "Negation of `#has-ancestor?`.",
               '#not-has-ancestor? @${1:capture} "${2:kind}"'),
    _Predicate("has-parent?",
               "lintropy: capture's immediate parent is one of the given kinds.",
               '#has-parent? @${1:capture} "${2:kind}"'),
    _Predicate("not-has-parent?", "Negation of `#has-parent?`.",
               '#not-has-parent? @${1:capture} "${2:kind}"'),
    _Predicate("has-sibling?",
               "lintropy: capture has a sibling of one of the given kinds.",
               '#has-sibling? @${1:capture} "${2:kind}"'),
    _Predicate("not-has-sibling?", "Negation of `#has-sibling?`.",
               '#not-has-sibling? @${1:capture} "${2:kind}"'),
    _Predicate("has-preceding-comment?",
               "lintropy: capture is preceded by a comment matching the regex.",
               '#has-preceding-comment? @${1:capture} "${2:regex}"'),
    _Predicate("not-has-preceding-comment?",
               "Negation of `#has-preceding-comment?`.",
               '#not-has-preceding-comment? @${1:capture} "${2:regex}"'),
)


class _Context(enum.Enum):
    NONE = enum.auto()
    LANGUAGE_VALUE = enum.auto()
    TEMPLATE = enum.auto()
    QUERY_BODY = enum.auto()


def complete(path: str | Path, src: str, pos: Position) -> list[CompletionItem]:
    """Completion items for the cursor at ``pos`` in the buffer ``src``."""
    if not _is_rule_file(Path(path)):
        return []
    data = src.encode("utf-8")
    cursor = position_to_byte(src, pos)
    start, end = _rule_range_containing(data, cursor)
    rule_src = data[start:end].decode("utf-8")
    context, language = _detect_context(data, cursor)
    if context is _Context.LANGUAGE_VALUE:
        return _language_items()
    if context is _Context.TEMPLATE:
        return _template_items(rule_src)
    if context is _Context.QUERY_BODY:
        return _query_items(language, rule_src)
    return []


def _is_rule_file(path: Path) -> bool:
    name = path.name
    return name == "lintropy.yaml" or name.endswith(_RULE_FILE_SUFFIXES)


def _lines(text: str) -> list[str]:
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def _indent_bytes(line: str, trimmed: str) -> int:
    return len(line.encode("utf-8")) - len(trimmed.encode("utf-8"))


def _rule_range_containing(data: bytes, cursor: int) -> tuple[int, int]:
    """Byte range of the rule holding ``cursor``.

    A ``rules:`` list splits the buffer at each top-level ``- `` item;
    otherwise the whole buffer is one rule.
    """
    starts: list[int] = []
    list_indent: int | None = None
    offset = 0
    for raw in data.split(b"\n"):
        line = raw.decode("utf-8")
        trimmed = line.lstrip()
        indent = _indent_bytes(line, trimmed)
        if trimmed.startswith("- ") or trimmed == "-":
            if list_indent is None:
                list_indent = indent
                starts.append(offset)
            elif list_indent == indent:
                starts.append(offset)
        offset += len(raw) + 1
    if not starts:
        return 0, len(data)
    start, end = 0, len(data)
    for idx, item_start in enumerate(starts):
        if item_start <= cursor:
            start = item_start
            end = starts[idx + 1] if idx + 1 < len(starts) else len(data)
    return start, end


def _detect_context(data: bytes, cursor: int) -> tuple[_Context, _Language | None]:
    line_start = data.rfind(b"\n", 0, cursor) + 1
    line_prefix = data[line_start:cursor].decode("utf-8")
    if line_prefix.lstrip().startswith("language:"):
        return _Context.LANGUAGE_VALUE, None
    if _inside_open_template(line_prefix):
        return _Context.TEMPLATE, None
    if _cursor_in_query_body(data, cursor):
        return _Context.QUERY_BODY, _nearest_language_before(data, cursor)
    return _Context.NONE, None


def _inside_open_template(region: str) -> bool:
    open_at = region.rfind("{{")
    if open_at < 0:
        return False
    return "}}" not in region[open_at:]


def _nearest_language_before(data: bytes, cursor: int) -> _Language | None:
    for line in reversed(_lines(data[:cursor].decode("utf-8"))):
        trimmed = line.lstrip()
        if trimmed.startswith("- "):
            trimmed = trimmed[2:]
        if not trimmed.startswith("language:"):
            continue
        name = trimmed[len("language:"):].strip().strip("\"'")
        if not name:
            continue
        return _LANGUAGES.get(name)
    return None


def _query_opener_indent(line: str) -> int | None:
    trimmed = line.lstrip()
    if not trimmed.startswith("query:"):
        return None
    if trimmed[len("query:"):].lstrip() not in _QUERY_OPENERS:
        return None
    return _indent_bytes(line, trimmed)


def _cursor_in_query_body(data: bytes, cursor: int) -> bool:
    cursor_line = data[:cursor].count(b"\n")
    in_body = False
    opener_indent = 0
    for idx, line in enumerate(_lines(data.decode("utf-8"))):
        if in_body:
            trimmed = line.lstrip()
            if not trimmed:
                if idx == cursor_line:
                    return True
                continue
            if _indent_bytes(line, trimmed) <= opener_indent:
                in_body = False
            else:
                if idx == cursor_line:
                    return True
                continue
        indent = _query_opener_indent(line)
        if indent is not None:
            if idx == cursor_line:
                return False
            in_body = True
            opener_indent = indent
    return False


def _language_items() -> list[CompletionItem]:
    return [
        CompletionItem(
            label=lang.name,
            kind=CompletionItemKind.ENUM_MEMBER,
            detail=f".{lang.extensions[0]}",
        )
        for lang in _LANGUAGES.values()
    ]


def _query_items(language: _Language | None, src: str) -> list[CompletionItem]:
    items = list(_predicate_items())
    if language is not None:
        items.extend(_node_kind_items(language.name))
        items.extend(_field_name_items(language.name))
    items.extend(_capture_items(src))
    return items


def _collect_capture_names(src: str) -> list[str]:
    return sorted({match.group(1) for match in _CAPTURE_RE.finditer(src)})


def _template_items(src: str) -> list[CompletionItem]:
    return [
        CompletionItem(
            label=name,
            kind=CompletionItemKind.VARIABLE,
            detail="capture",
            insert_text=name,
        )
        for name in _collect_capture_names(src)
    ]


def _capture_items(src: str) -> list[CompletionItem]:
    return [
        CompletionItem(
            label=f"@{name}",
            kind=CompletionItemKind.VARIABLE,
            detail="capture",
            insert_text=f"@{name}",
        )
        for name in _collect_capture_names(src)
    ]


@lru_cache(maxsize=None)
def _predicate_items() -> tuple[CompletionItem, ...]:
    return tuple(
        CompletionItem(
            label=f"#{predicate.name}",
            kind=CompletionItemKind.FUNCTION,
            detail="predicate",
            documentation=predicate.doc,
            insert_text=predicate.snippet,
            insert_text_format=InsertTextFormat.SNIPPET,
        )
        for predicate in _PREDICATES
    )


@lru_cache(maxsize=None)
def _node_kind_items(language_name: str) -> tuple[CompletionItem, ...]:
    lang = _LANGUAGES[language_name]
    kinds = (
        kind
        for kind in dict.fromkeys(lang.node_kinds)
        if kind and kind != "ERROR" and _NODE_KIND_RE.fullmatch(kind)
    )
    return tuple(
        CompletionItem(
            label=kind,
            kind=CompletionItemKind.CLASS,
            detail=f"{lang.name} node",
        )
        for kind in kinds
    )


@lru_cache(maxsize=None)
def _field_name_items(language_name: str) -> tuple[CompletionItem, ...]:
    lang = _LANGUAGES[language_name]
    return tuple(
        CompletionItem(
            label=f"{name}:",
            kind=CompletionItemKind.FIELD,
            detail=f"{lang.name} field",
            insert_text=f"{name}: ",
        )
        for name in dict.fromkeys(lang.field_names)
        if name
    )