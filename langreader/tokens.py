from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Sequence

import regex

from langreader.constants import DASH_CHARS
from langreader.scanner import RawSpan

_LETTER_PATTERN = regex.compile(r"\p{L}")
_SPACE_PATTERN = regex.compile(r"\s+")
_WHITESPACE_RUN_PATTERN = regex.compile(r"\s+|\S+")


class TokenKind(str, Enum):
    WORD = "word"
    PUNCTUATION = "punctuation"
    SPACE = "space"
    OTHER = "other"


def classify(text: str) -> TokenKind:
    """Classify a token by its text.

    Word tokens start with a letter, space tokens are whitespace only and
    punctuation tokens hold no letters at all. Anything else is ``OTHER``.
    """

    if not text:
        return TokenKind.OTHER
    if _LETTER_PATTERN.match(text):
        return TokenKind.WORD
    if _SPACE_PATTERN.fullmatch(text):
        return TokenKind.SPACE
    if not _LETTER_PATTERN.search(text):
        return TokenKind.PUNCTUATION
    return TokenKind.OTHER


def is_word(text: str | None) -> bool:
    return text is not None and classify(text) is TokenKind.WORD


def is_space(text: str | None) -> bool:
    return text is not None and classify(text) is TokenKind.SPACE


def is_dash(text: str | None) -> bool:
    return text in DASH_CHARS


@dataclass(frozen=True)
class Token:
    id: int
    text: str

    @property
    def kind(self) -> TokenKind:
        return classify(self.text)

    @property
    def is_lexical(self) -> bool:
        return self.kind is TokenKind.WORD


def _split_dashes(text: str) -> List[str]:
    pieces: List[str] = []
    current = ""
    for char in text:
        if char in DASH_CHARS:
            if current:
                pieces.append(current)
            pieces.append(char)
            current = ""
        else:
            current += char
    if current:
        pieces.append(current)
    return pieces


def _split_whitespace(text: str) -> List[str]:
    if _SPACE_PATTERN.fullmatch(text):
        return [text]
    return _WHITESPACE_RUN_PATTERN.findall(text)


def split_span(text: str) -> List[str]:
    """Break one scanned span into atomic pieces.

    Letter runs pass through untouched. In a non-letter run every dash is
    split out on its own first, then whitespace is separated from the
    punctuation around it (``" , "`` becomes ``" "``, ``","``, ``" "``).
    """

    if not text:
        return []
    if _LETTER_PATTERN.match(text) or _SPACE_PATTERN.fullmatch(text):
        return [text]

    parts = [text]
    if len(text) > 1 and any(dash in text for dash in DASH_CHARS):
        parts = _split_dashes(text)

    pieces: List[str] = []
    for part in parts:
        pieces.extend(piece for piece in _split_whitespace(part) if piece)
    return pieces


def split_spans(spans: Iterable[RawSpan | str]) -> List[str]:
    pieces: List[str] = []
    for span in spans:
        text = span.text if isinstance(span, RawSpan) else span
        pieces.extend(split_span(text))
    return pieces


def build_tokens(pieces: Sequence[str]) -> List[Token]:
    return [Token(id=index, text=text) for index, text in enumerate(pieces)]
