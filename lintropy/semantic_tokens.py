"""Semantic tokens for the query language embedded in lintropy rule files.

Rule files carry tree-sitter queries inside ``query: |`` block scalars.
This module finds those blocks, tokenises the query text (captures,
predicates, strings, numbers, comments, node kinds, field names,
operators and the ``_`` wildcard) and returns them in the LSP
delta-encoded form.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

__all__ = [
    "SemanticToken",
    "SemanticTokens",
    "SemanticTokensLegend",
    "legend",
    "tokenize",
    "TOKEN_DECORATOR",
    "TOKEN_MACRO",
    "TOKEN_CLASS",
    "TOKEN_STRING",
    "TOKEN_NUMBER",
    "TOKEN_COMMENT",
    "TOKEN_PROPERTY",
    "TOKEN_OPERATOR",
    "TOKEN_KEYWORD",
    "MOD_DEFINITION",
]

TOKEN_DECORATOR = 0
TOKEN_MACRO = 1
TOKEN_CLASS = 2
TOKEN_STRING = 3
TOKEN_NUMBER = 4
TOKEN_COMMENT = 5
TOKEN_PROPERTY = 6
TOKEN_OPERATOR = 7
TOKEN_KEYWORD = 8

MOD_DEFINITION = 1 << 0

_QUERY_RE = re.compile(r"^(?P<indent>\s*)query:\s*[|>][+\-]?\s*\Z")
_OPERATORS = frozenset("()[]+*?!.")


@dataclass(frozen=True)
class SemanticToken:
    """One delta-encoded token, as sent over the protocol."""

    delta_line: int
    delta_start: int
    length: int
    token_type: int
    token_modifiers_bitset: int = 0


@dataclass
class SemanticTokens:
    """Result of a full semantic-token request."""

    data: list[SemanticToken] = field(default_factory=list)
    result_id: str | None = None


@dataclass(frozen=True)
class SemanticTokensLegend:
    """Token type and modifier names; token indices refer to these lists."""

    token_types: tuple[str, ...]
    token_modifiers: tuple[str, ...]


@dataclass(frozen=True, order=True)
class _AbsToken:
    line: int
    character: int
    length: int
    token_type: int
    token_modifiers: int = 0


def legend() -> SemanticTokensLegend:
    """Legend advertised to the client; the order matches the TOKEN_* indices."""
    return SemanticTokensLegend(
        token_types=(
            "decorator",
            "macro",
            "class",
            "string",
            "number",
            "comment",
            "property",
            "operator",
            "keyword",
        ),
        token_modifiers=("definition",),
    )


def tokenize(src: str) -> SemanticTokens | None:
    """Tokenise every query block in the YAML document ``src``.

    Returns None when no tokens are found.
    """
    tokens = _collect_absolute_tokens(src)
    if not tokens:
        return None
    return SemanticTokens(data=_encode_delta(tokens))


def _lines(src: str) -> list[str]:
    parts = src.split("\n")
    if parts and parts[-1] == "":
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def _query_block_indent(line: str) -> int | None:
    match = _QUERY_RE.match(line)
    if match is None:
        return None
    return len(match.group("indent").encode("utf-8"))


def _leading_spaces(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


def _collect_absolute_tokens(src: str) -> list[_AbsToken]:
    tokens: list[_AbsToken] = []
    lines = _lines(src)
    idx = 0
    while idx < len(lines):
        block_indent = _query_block_indent(lines[idx])
        idx += 1
        if block_indent is None:
            continue
        # The block ends at the first non-blank line indented no deeper
        # than the `query:` key.
        while idx < len(lines):
            body = lines[idx]
            if not body.strip():
                idx += 1
                continue
            if _leading_spaces(body) <= block_indent:
                break
            tokens.extend(_tokenize_query_line(idx, body))
            idx += 1
    return tokens


def _utf16_len(text: str) -> int:
    return sum(2 if ord(ch) > 0xFFFF else 1 for ch in text)


def _is_ident_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch in "_-")


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _consume(body: str, idx: int, accept) -> int:
    while idx < len(body) and accept(body[idx]):
        idx += 1
    return idx


def _string_end(body: str, idx: int) -> int:
    while idx < len(body):
        ch = body[idx]
        if ch == "\\" and idx + 1 < len(body):
            idx += 2
        elif ch == '"':
            return idx + 1
        else:
            idx += 1
    return len(body)


def _tokenize_query_line(line: int, body: str) -> list[_AbsToken]:
    out: list[_AbsToken] = []

    def emit(start: int, end: int, token_type: int, modifiers: int = 0) -> None:
        out.append(
            _AbsToken(
                line,
                _utf16_len(body[:start]),
                _utf16_len(body[start:end]),
                token_type,
                modifiers,
            )
        )

    idx = 0
    while idx < len(body):
        ch = body[idx]

        if ch == ";":
            emit(idx, len(body), TOKEN_COMMENT)
            break

        if ch == '"':
            end = _string_end(body, idx + 1)
            emit(idx, end, TOKEN_STRING)
            idx = end
            continue

        if ch == "@":
            end = _consume(body, idx + 1, _is_ident_char)
            if end > idx + 1:
                emit(idx, end, TOKEN_DECORATOR, MOD_DEFINITION)
                idx = end
                continue

        if ch == "#":
            end = _consume(body, idx + 1, lambda c: _is_ident_char(c) or c in "?!")
            if end > idx + 1:
                emit(idx, end, TOKEN_MACRO)
                idx = end
                continue

        if ch == "-" and idx + 1 < len(body) and _is_digit(body[idx + 1]):
            end = _consume(body, idx + 1, _is_digit)
            emit(idx, end, TOKEN_NUMBER)
            idx = end
            continue

        if _is_digit(ch):
            end = _consume(body, idx, _is_digit)
            emit(idx, end, TOKEN_NUMBER)
            idx = end
            continue

        if ch in _OPERATORS:
            emit(idx, idx + 1, TOKEN_OPERATOR)
            idx += 1
            continue

        following = body[idx + 1] if idx + 1 < len(body) else ""
        if ch == "_" and not (following and _is_ident_char(following)):
            emit(idx, idx + 1, TOKEN_KEYWORD)
            idx += 1
            continue

        if ch == "_" or (ch.isascii() and ch.isalpha()):
            end = _consume(body, idx, _is_ident_char)
            is_field = end < len(body) and body[end] == ":"
            emit(idx, end, TOKEN_PROPERTY if is_field else TOKEN_CLASS)
            idx = end
            continue

        idx += 1

    return out


def _encode_delta(tokens: list[_AbsToken]) -> list[SemanticToken]:
    out: list[SemanticToken] = []
    prev_line = 0
    prev_char = 0
    for tok in sorted(tokens, key=lambda t: (t.line, t.character)):
        delta_line = tok.line - prev_line
        delta_start = tok.character - prev_char if delta_line == 0 else tok.character
        out.append(
            SemanticToken(
                delta_line=delta_line,
                delta_start=delta_start,
                length=tok.length,
                token_type=tok.token_type,
                token_modifiers_bitset=tok.token_modifiers,
            )
        )
        prev_line = tok.line
        prev_char = tok.character
    return out