from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

from langreader.tokens import Token, TokenKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WordRef:
    id: int
    normalized_form: Optional[str] = None


@dataclass(frozen=True)
class WordOccurrence:
    position: int
    word: Optional[WordRef] = None


def _field(value: Any, name: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(name)
    return getattr(value, name, None)


def _coerce_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def coerce_word(value: Any) -> Optional[WordRef]:
    if value is None or isinstance(value, WordRef):
        return value
    word_id = _coerce_int(_field(value, "id"))
    if word_id is None:
        return None
    normalized = _field(value, "normalized_form")
    return WordRef(id=word_id, normalized_form=str(normalized) if normalized is not None else None)


def coerce_occurrence(value: Any) -> Optional[WordOccurrence]:
    if isinstance(value, WordOccurrence):
        return value
    position = _coerce_int(_field(value, "position"))
    if position is None:
        return None
    return WordOccurrence(position=position, word=coerce_word(_field(value, "word")))


def build_occurrence_map(occurrences: Optional[Iterable[Any]]) -> Dict[int, WordRef]:
    """Map lexical position -> word, skipping entries that carry no word."""

    occurrence_map: Dict[int, WordRef] = {}
    for raw in occurrences or ():
        occurrence = coerce_occurrence(raw)
        if occurrence is None or occurrence.word is None:
            continue
        occurrence_map[occurrence.position] = occurrence.word
    return occurrence_map


def map_occurrences(tokens: Sequence[Token], occurrences: Optional[Iterable[Any]]) -> Dict[int, WordRef]:
    """Attach known words to word tokens.

    Occurrence positions count word tokens only (the first word of the
    sentence is position 0). The result is keyed by token index. Positions
    past the last word are stale offsets from an older copy of the sentence
    and are dropped.
    """

    occurrence_map = build_occurrence_map(occurrences)
    if not occurrence_map:
        return {}

    word_refs: Dict[int, WordRef] = {}
    lexical_position = 0
    for token in tokens:
        if token.kind is not TokenKind.WORD:
            continue
        word = occurrence_map.get(lexical_position)
        if word is not None:
            word_refs[token.id] = word
        lexical_position += 1

    unmapped = sorted(position for position in occurrence_map if not 0 <= position < lexical_position)
    if unmapped:
        logger.debug("Dropping %d occurrence(s) with no matching word token: %s", len(unmapped), unmapped)
    return word_refs
