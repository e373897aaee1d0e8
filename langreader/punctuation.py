from __future__ import annotations

import logging
from typing import Any, List

import regex

from langreader.constants import (
    CLAUSE_DASH_CHARS,
    CLOSING_PUNCTUATION,
    ELLIPSIS,
    OPENING_PUNCTUATION,
    WORD_SPACING_PUNCTUATION,
)
from langreader.scanner import scan
from langreader.spacing import attach_spaces
from langreader.tokens import split_spans

logger = logging.getLogger(__name__)


def _char_class(chars) -> str:
    return "[" + "".join(regex.escape(char) for char in chars) + "]"


_SPACE_BEFORE_CLOSING_RE = regex.compile(r"\s+(?=" + _char_class(CLOSING_PUNCTUATION) + r")")
_SPACE_AFTER_OPENING_RE = regex.compile(r"(?<=" + _char_class(OPENING_PUNCTUATION) + r")\s+")
_GLUED_WORD_RE = regex.compile(r"(?<=" + _char_class(WORD_SPACING_PUNCTUATION) + r")(?=\p{L})")
_CLAUSE_DASH_RE = regex.compile(
    r"(?P<left>\p{L}\p{M}*)\s*(?P<dash>" + _char_class(CLAUSE_DASH_CHARS) + r")\s*(?=\p{L})"
)
# A hyphen glued to both words is a compound; spacing on either side marks a clause dash.
_SPACED_HYPHEN_RE = regex.compile(r"(?P<left>\p{L}\p{M}*)(?:\s+-\s*|-\s+)(?=\p{L})")


def _normalize_text_spacing(text: str, *, expand_ellipsis: bool = True) -> str:
    # Collapse spaces before closing punctuation.
    text = _SPACE_BEFORE_CLOSING_RE.sub("", text)

    # Spaced dots are already joined here.
    if expand_ellipsis:
        text = text.replace("...", ELLIPSIS)

    # Remove spaces directly after opening punctuation/quotes.
    text = _SPACE_AFTER_OPENING_RE.sub("", text)

    # One space between closing punctuation and a word glued to it.
    text = _GLUED_WORD_RE.sub(" ", text)

    # Exactly one space around dashes that separate two words.
    text = _CLAUSE_DASH_RE.sub(r"\g<left> \g<dash> ", text)
    text = _SPACED_HYPHEN_RE.sub(r"\g<left> - ", text)
    return text


def reader_pieces(text: str) -> List[str]:
    """Scan, split and attach ``text`` into display pieces without the text pass."""

    return attach_spaces(split_spans(scan(text)))


def normalize_punctuation_spacing(content: Any, *, expand_ellipsis: bool = True) -> str:
    """Remove extractor whitespace artifacts around punctuation and dashes.

    ``"Hola , mundo !"`` becomes ``"Hola, mundo!"`` and ``"dijo—claro"``
    becomes ``"dijo — claro"``. The result is exactly the text the reader
    tokenizer emits, and normalizing it again returns it unchanged.
    """

    if content is None:
        return ""
    text = content if isinstance(content, str) else str(content)
    if not text:
        return ""

    normalized = "".join(reader_pieces(_normalize_text_spacing(text, expand_ellipsis=expand_ellipsis)))
    if normalized != text:
        logger.debug("Normalized punctuation spacing: %r -> %r", text, normalized)
    return normalized
