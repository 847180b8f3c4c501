"""Lightweight rich-text markup for label text.

Supported markers are ``**bold**``, ``__bold__``, ``*italic*`` and
``_italic_``. ``<u>...</u>`` wrappers are accepted and unwrapped; underline is
not rendered. Markers without a closing partner stay literal and there is no
escape syntax.

Bold spans are paired first over the whole string; italic spans are paired
afterwards over what remains, treating bold boundaries as transparent. The
resulting token stream is folded into flat runs, so an italic span that
straddles a bold boundary yields runs carrying both flags.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence

from overlay_types import StyledRun

_UNDERLINE_RE = re.compile(r"<u>(.*?)</u>")

_BOLD_MARKERS = ("**", "__")
_ITALIC_MARKERS = ("*", "_")

# Bold pairs are removed first, then italic pairs. Each pass tries the
# alternatives in marker order at every position, like ``tokenize``.
_STRIP_PATTERNS = (
    re.compile(r"\*\*(.*?)\*\*|__(.*?)__"),
    re.compile(r"\*(.*?)\*|_(.*?)_"),
)


class TokenKind(Enum):
    LITERAL = "literal"
    BOLD_OPEN = "bold_open"
    BOLD_CLOSE = "bold_close"
    ITALIC_OPEN = "italic_open"
    ITALIC_CLOSE = "italic_close"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str = ""


# Intermediate stream: single characters interleaved with marker tokens.
_Item = str | Token


def unwrap_underline(text: str) -> str:
    return _UNDERLINE_RE.sub(r"\1", text)


def _span_content(match: re.Match[str]) -> str:
    return next(group for group in match.groups() if group is not None)


def strip_markup(text: str) -> str:
    """Return ``text`` with underline tags unwrapped and style markers removed."""

    plain = unwrap_underline(text)
    for pattern in _STRIP_PATTERNS:
        plain = pattern.sub(_span_content, plain)
    return plain


def tokenize(text: str) -> list[Token]:
    """Split ``text`` into literal and marker tokens."""

    items: list[_Item] = list(unwrap_underline(text))
    items = _pair_markers(
        items, _BOLD_MARKERS, TokenKind.BOLD_OPEN, TokenKind.BOLD_CLOSE
    )
    items = _pair_markers(
        items, _ITALIC_MARKERS, TokenKind.ITALIC_OPEN, TokenKind.ITALIC_CLOSE
    )
    return list(_merge_literals(items))


def parse_runs(text: str, base_weight: str = "normal") -> list[StyledRun]:
    """Parse ``text`` into styled runs, left to right.

    ``base_weight`` is carried by every run and used as the effective weight
    of runs that are not bold.
    """

    return build_runs(tokenize(text), base_weight=base_weight)


def build_runs(
    tokens: Iterable[Token], base_weight: str = "normal"
) -> list[StyledRun]:
    runs: list[StyledRun] = []
    bold = italic = False
    buffer: list[str] = []
    previous: Token | None = None

    def flush(force: bool = False) -> None:
        if buffer or force:
            runs.append(
                StyledRun(
                    content="".join(buffer),
                    bold=bold,
                    italic=italic,
                    base_weight=base_weight,
                )
            )
            buffer.clear()

    for token in tokens:
        kind = token.kind
        if kind is TokenKind.LITERAL:
            buffer.append(token.text)
        elif kind is TokenKind.BOLD_OPEN:
            flush()
            bold = True
        elif kind is TokenKind.ITALIC_OPEN:
            flush()
            italic = True
        elif kind is TokenKind.BOLD_CLOSE:
            flush(force=_is_open(previous, TokenKind.BOLD_OPEN))
            bold = False
        else:
            flush(force=_is_open(previous, TokenKind.ITALIC_OPEN))
            italic = False
        previous = token

    flush()
    return runs


def _is_open(token: Token | None, kind: TokenKind) -> bool:
    return token is not None and token.kind is kind


def _pair_markers(
    items: Sequence[_Item],
    markers: Sequence[str],
    open_kind: TokenKind,
    close_kind: TokenKind,
) -> list[_Item]:
    """Wrap the shortest ``marker ... marker`` spans in open/close tokens.

    Scans left to right; at each character the markers are tried in order and
    the first one with a closing partner on the same line wins. Content
    between a pair is not rescanned for the same marker set.
    """

    out: list[_Item] = []
    i = 0
    while i < len(items):
        span = _find_span(items, i, markers)
        if span is None:
            out.append(items[i])
            i += 1
            continue
        marker, close = span
        out.append(Token(open_kind))
        out.extend(items[i + len(marker):close])
        out.append(Token(close_kind))
        i = close + len(marker)
    return out


def _find_span(
    items: Sequence[_Item], start: int, markers: Sequence[str]
) -> tuple[str, int] | None:
    for marker in markers:
        if not _starts_with(items, start, marker):
            continue
        close = _find_marker(items, start + len(marker), marker)
        if close is not None:
            return marker, close
    return None


def _starts_with(items: Sequence[_Item], start: int, marker: str) -> bool:
    if start + len(marker) > len(items):
        return False
    return all(items[start + k] == ch for k, ch in enumerate(marker))


def _find_marker(items: Sequence[_Item], start: int, marker: str) -> int | None:
    for j in range(start, len(items)):
        if items[j] == "\n":
            return None
        if _starts_with(items, j, marker):
            return j
    return None


def _merge_literals(items: Iterable[_Item]) -> Iterable[Token]:
    pending: list[str] = []
    for item in items:
        if isinstance(item, Token):
            if pending:
                yield Token(TokenKind.LITERAL, "".join(pending))
                pending = []
            yield item
        else:
            pending.append(item)
    if pending:
        yield Token(TokenKind.LITERAL, "".join(pending))


__all__ = [
    "Token",
    "TokenKind",
    "build_runs",
    "parse_runs",
    "strip_markup",
    "tokenize",
    "unwrap_underline",
]
