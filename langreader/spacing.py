from __future__ import annotations

from typing import List, Optional, Sequence

from langreader.constants import CLOSING_PUNCTUATION, HYPHEN_MINUS, OPENING_QUOTES
from langreader.tokens import is_dash, is_space, is_word

SPACE = " "


def is_attaching_punctuation(text: Optional[str]) -> bool:
    return bool(text) and text.startswith(CLOSING_PUNCTUATION)


def is_opening_quote(text: Optional[str]) -> bool:
    return text in OPENING_QUOTES


def is_compound_hyphen(previous: Optional[str], piece: str, following: Optional[str]) -> bool:
    """True for a hyphen-minus glued between two words, as in ``casa-mundo``."""

    return piece == HYPHEN_MINUS and is_word(previous) and is_word(following)


def ensure_spaces_around_dashes(pieces: Sequence[str]) -> List[str]:
    if len(pieces) < 2:
        return list(pieces)

    spaced: List[str] = []
    last_index = len(pieces) - 1
    for index, piece in enumerate(pieces):
        if not is_dash(piece):
            spaced.append(piece)
            continue

        previous = pieces[index - 1] if index > 0 else None
        following = pieces[index + 1] if index < last_index else None
        if is_compound_hyphen(previous, piece, following):
            spaced.append(piece)
            continue

        if is_word(previous):
            spaced.append(SPACE)
        spaced.append(piece)
        if is_word(following) or is_opening_quote(following):
            spaced.append(SPACE)
    return spaced


def collapse_space_before_punctuation(pieces: Sequence[str]) -> List[str]:
    if len(pieces) < 2:
        return list(pieces)

    collapsed: List[str] = []
    last_index = len(pieces) - 1
    for index, piece in enumerate(pieces):
        following = pieces[index + 1] if index < last_index else None
        if not is_attaching_punctuation(following):
            collapsed.append(piece)
            continue
        if is_space(piece):
            continue
        trimmed = piece.rstrip()
        if trimmed:
            collapsed.append(trimmed)
    return collapsed


def attach_spaces(pieces: Sequence[str]) -> List[str]:
    """Fix whitespace between split pieces for display.

    Dashes between words get a space on each side, and whitespace right
    before attaching punctuation is dropped. Only whitespace is ever removed.
    """

    return collapse_space_before_punctuation(ensure_spaces_around_dashes(pieces))
