from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

import regex

from langreader.forms import normalize_form
from langreader.scanner import scan

logger = logging.getLogger(__name__)

LexicalToken = Tuple[int, str]

_LETTER_PATTERN = regex.compile(r"\p{L}")


class PhrasePosition(str, Enum):
    START = "start"
    MIDDLE = "middle"
    END = "end"
    ONLY = "only"


@dataclass(frozen=True)
class Phrase:
    word_id: int
    normalized_parts: Tuple[str, ...]
    original_form: str

    def __len__(self) -> int:
        return len(self.normalized_parts)


@dataclass(frozen=True)
class PhraseMatch:
    word_id: int
    original_form: str


@dataclass(frozen=True)
class PhraseSpan:
    phrase: str
    start_position: int
    end_position: int


def _field(value: Any, name: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(name)
    return getattr(value, name, None)


def coerce_phrase(value: Any) -> Optional[Phrase]:
    if isinstance(value, Phrase):
        return value
    word_id = _field(value, "word_id")
    parts = _field(value, "normalized_parts")
    if word_id is None or parts is None or isinstance(parts, str):
        return None
    original_form = _field(value, "original_form")
    normalized_parts = tuple(str(part) for part in parts)
    return Phrase(
        word_id=word_id,
        normalized_parts=normalized_parts,
        original_form=str(original_form) if original_form is not None else " ".join(normalized_parts),
    )


def build_studied_phrases(words: Iterable[Any]) -> List[Phrase]:
    """Turn studied phrase words into matchable phrases, longest first.

    Each word needs an ``id`` and a ``normalized_form``. The form is split
    into the same word runs the reader produces, so ``"l'amico"`` gives the
    parts ``["l", "amico"]``. Ties keep their input order.
    """

    phrases: List[Phrase] = []
    for word in words or ():
        word_id = _field(word, "id")
        form = _field(word, "normalized_form")
        if word_id is None or not form:
            continue
        parts = tuple(normalize_form(span.text) for span in scan(str(form)) if span.is_letters)
        if not parts:
            continue
        phrases.append(Phrase(word_id=word_id, normalized_parts=parts, original_form=str(form)))
    return sorted(phrases, key=lambda phrase: -len(phrase.normalized_parts))


def find_all_phrase_occurrences(
    lexical_tokens: Sequence[LexicalToken],
    phrase_parts: Sequence[str],
    used: AbstractSet[int],
) -> List[List[int]]:
    """Return the token indices of every unclaimed run matching ``phrase_parts``.

    Windows slide left to right over the lexical tokens. A window matches when
    its forms equal the parts in order and none of its indices has been
    claimed, including by an earlier window of this same scan.
    """

    phrase_len = len(phrase_parts)
    if phrase_len == 0 or phrase_len > len(lexical_tokens):
        return []
    # Words without a form hold an empty slot that no phrase may match.
    if not all(phrase_parts):
        return []

    parts = list(phrase_parts)
    claimed: Set[int] = set()
    matches: List[List[int]] = []
    for start in range(len(lexical_tokens) - phrase_len + 1):
        window = lexical_tokens[start:start + phrase_len]
        indices = [index for index, _ in window]
        if [form for _, form in window] != parts:
            continue
        if any(index in used or index in claimed for index in indices):
            continue
        claimed.update(indices)
        matches.append(indices)
    return matches


def match_phrases(
    lexical_tokens: Sequence[LexicalToken],
    phrases: Iterable[Any],
) -> Dict[int, PhraseMatch]:
    """Map token index -> phrase match, honouring the caller's phrase order.

    Phrases come longest first; once an index is claimed no later phrase can
    take it, so a shorter phrase never splits a longer one.
    """

    matches: Dict[int, PhraseMatch] = {}
    used: Set[int] = set()
    for raw in phrases or ():
        phrase = coerce_phrase(raw)
        if phrase is None:
            logger.debug("Skipping malformed studied phrase: %r", raw)
            continue
        occurrences = find_all_phrase_occurrences(lexical_tokens, phrase.normalized_parts, used)
        if not occurrences:
            continue
        match = PhraseMatch(word_id=phrase.word_id, original_form=phrase.original_form)
        for indices in occurrences:
            used.update(indices)
            for index in indices:
                matches[index] = match
    return matches


def fill_phrase_gaps(
    lexical_flags: Sequence[bool],
    matches: Sequence[Optional[PhraseMatch]],
) -> List[Optional[PhraseMatch]]:
    """Let spaces and punctuation inside a phrase join its highlighted run.

    A non-lexical token inherits a phrase only when the nearest lexical token
    on each side belongs to that same phrase id.
    """

    count = len(matches)
    previous: List[Optional[PhraseMatch]] = [None] * count
    following: List[Optional[PhraseMatch]] = [None] * count

    last_lexical: Optional[PhraseMatch] = None
    for index in range(count):
        previous[index] = last_lexical
        if lexical_flags[index]:
            last_lexical = matches[index]

    next_lexical: Optional[PhraseMatch] = None
    for index in range(count - 1, -1, -1):
        following[index] = next_lexical
        if lexical_flags[index]:
            next_lexical = matches[index]

    filled: List[Optional[PhraseMatch]] = []
    for index, match in enumerate(matches):
        if match is not None or lexical_flags[index]:
            filled.append(match)
            continue
        left, right = previous[index], following[index]
        if left is not None and right is not None and left.word_id == right.word_id:
            filled.append(left)
        else:
            filled.append(None)
    return filled


def phrase_positions(phrase_ids: Sequence[Optional[int]]) -> List[Optional[PhrasePosition]]:
    positions: List[Optional[PhrasePosition]] = []
    last_index = len(phrase_ids) - 1
    for index, phrase_id in enumerate(phrase_ids):
        if phrase_id is None:
            positions.append(None)
            continue
        prev_same = index > 0 and phrase_ids[index - 1] == phrase_id
        next_same = index < last_index and phrase_ids[index + 1] == phrase_id
        if prev_same and next_same:
            positions.append(PhrasePosition.MIDDLE)
        elif prev_same:
            positions.append(PhrasePosition.END)
        elif next_same:
            positions.append(PhrasePosition.START)
        else:
            positions.append(PhrasePosition.ONLY)
    return positions


def _tokens_equal(left: str, right: str) -> bool:
    if _LETTER_PATTERN.match(left) and _LETTER_PATTERN.match(right):
        return left.strip().casefold() == right.strip().casefold()
    return left == right


def find_spans(content: Any, phrases: Iterable[Any]) -> List[PhraseSpan]:
    """Locate plain phrase strings in a sentence by reader token index.

    Positions use the same tokenization as the reader, so a span from
    ``"dar en el clavo."`` for ``"dar en el clavo"`` runs from 0 to 6.
    """

    from langreader.reader import tokenize

    if not isinstance(content, str):
        return []
    tokens = tokenize(content)
    spans: List[PhraseSpan] = []
    seen: Set[Tuple[str, int, int]] = set()
    for phrase in phrases or ():
        if not isinstance(phrase, str) or not phrase.strip():
            continue
        phrase_tokens = tokenize(phrase)
        size = len(phrase_tokens)
        if not size or size > len(tokens):
            continue
        for start in range(len(tokens) - size + 1):
            window = tokens[start:start + size]
            if not all(_tokens_equal(a, b) for a, b in zip(window, phrase_tokens)):
                continue
            key = (phrase, start, start + size - 1)
            if key in seen:
                continue
            seen.add(key)
            spans.append(PhraseSpan(phrase=phrase, start_position=start, end_position=start + size - 1))
    return spans
