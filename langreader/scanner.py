"""Split raw sentence text into letter runs and non-letter runs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

import regex

# Letters keep their trailing combining marks so decomposed diacritics stay in the word.
_SPAN_PATTERN = regex.compile(r"(?:\p{L}\p{M}*)+|\P{L}+")
_LETTER_START_PATTERN = regex.compile(r"\p{L}")


@dataclass(frozen=True)
class RawSpan:
    text: str
    start: int
    end: int

    @property
    def is_letters(self) -> bool:
        return bool(_LETTER_START_PATTERN.match(self.text))


def scan(text: str) -> List[RawSpan]:
    """Return the maximal letter / non-letter runs of ``text`` in order.

    Every character belongs to exactly one span and no span is empty, so
    joining the span texts gives ``text`` back unchanged.
    """

    if not text:
        return []
    return [
        RawSpan(match.group(0), match.start(), match.end())
        for match in _SPAN_PATTERN.finditer(text)
        if match.group(0)
    ]


def scan_texts(text: str) -> List[str]:
    return [span.text for span in scan(text)]
