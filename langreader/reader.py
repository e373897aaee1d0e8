"""Sentence tokenization for the article reader.

Turns a raw sentence plus the caller's word occurrences and studied phrases
into the ordered token descriptors the rendering layer draws, one span per
token. Every function here is pure: nothing is cached or mutated across calls,
so sentences of one article can be tokenized on separate threads.
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from langreader.forms import normalize_form
from langreader.occurrences import WordRef, map_occurrences
from langreader.phrases import (
    Phrase,
    PhraseMatch,
    PhrasePosition,
    coerce_phrase,
    fill_phrase_gaps,
    match_phrases,
    phrase_positions,
)
from langreader.punctuation import normalize_punctuation_spacing, reader_pieces
from langreader.reader_settings import DEFAULT_READER_CONFIG, ReaderConfig, build_reader_config
from langreader.tokens import Token, TokenKind, build_tokens

logger = logging.getLogger(__name__)

FormNormalizer = Callable[[str], Optional[str]]


@dataclass(frozen=True)
class TokenDescriptor:
    id: int
    text: str
    is_lexical: bool
    word: Optional[WordRef] = None
    phrase_word_id: Optional[int] = None
    phrase_text: Optional[str] = None
    phrase_position: Optional[PhrasePosition] = None

    @property
    def word_id(self) -> Optional[int]:
        return self.word.id if self.word is not None else None

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "text": self.text,
            "is_lexical": self.is_lexical,
            "word_id": self.word_id,
            "phrase_word_id": self.phrase_word_id,
            "phrase_text": self.phrase_text,
            "phrase_position": self.phrase_position.value if self.phrase_position else None,
        }


def tokenize(content: Any, *, config: Optional[ReaderConfig] = None) -> List[str]:
    """Return the reader's token strings for ``content``.

    Joining them gives ``normalize_punctuation_spacing(content)`` back.
    """

    cfg = config or DEFAULT_READER_CONFIG
    normalized = normalize_punctuation_spacing(content, expand_ellipsis=cfg.expand_ellipsis)
    if not normalized:
        return []
    return reader_pieces(normalized)


def assemble(
    tokens: Sequence[Token],
    word_refs: Mapping[int, WordRef],
    phrase_matches: Mapping[int, PhraseMatch],
    *,
    space_marker: str = DEFAULT_READER_CONFIG.space_marker,
) -> List[TokenDescriptor]:
    lexical_flags = [token.kind is TokenKind.WORD for token in tokens]
    matches = fill_phrase_gaps(lexical_flags, [phrase_matches.get(token.id) for token in tokens])
    positions = phrase_positions([match.word_id if match else None for match in matches])

    descriptors: List[TokenDescriptor] = []
    for token, is_lexical, match, position in zip(tokens, lexical_flags, matches, positions):
        # Whitespace is drawn as a marker so the renderer cannot collapse it.
        text = space_marker if token.kind is TokenKind.SPACE else token.text
        descriptors.append(
            TokenDescriptor(
                id=token.id,
                text=text,
                is_lexical=is_lexical,
                word=word_refs.get(token.id),
                phrase_word_id=match.word_id if match else None,
                phrase_text=match.original_form if match else None,
                phrase_position=position,
            )
        )
    return descriptors


def lexical_forms(tokens: Sequence[Token], form_normalizer: FormNormalizer = normalize_form) -> List[Tuple[int, str]]:
    forms: List[Tuple[int, str]] = []
    for token in tokens:
        if token.kind is not TokenKind.WORD:
            continue
        # Every word keeps its slot so phrase windows stay contiguous.
        forms.append((token.id, form_normalizer(token.text) or ""))
    return forms


def tokenize_sentence(
    content: Any,
    occurrences: Optional[Iterable[Any]] = (),
    studied_phrases: Optional[Iterable[Any]] = (),
    *,
    form_normalizer: FormNormalizer = normalize_form,
    config: Optional[ReaderConfig] = None,
) -> List[TokenDescriptor]:
    """Tokenize one sentence into renderable token descriptors.

    Args:
        content: Sentence text as stored by the importer.
        occurrences: ``{position, word}`` entries where ``position`` counts
            word tokens from 0. Entries that do not land on a word are ignored.
        studied_phrases: ``{word_id, normalized_parts, original_form}``
            entries sorted longest first.
        form_normalizer: Folds a word token before phrase comparison.
        config: Reader display options; defaults are used when omitted.

    Returns:
        One descriptor per token, in order.
    """

    cfg = config or DEFAULT_READER_CONFIG
    tokens = build_tokens(tokenize(content, config=cfg))
    if not tokens:
        return []

    word_refs = map_occurrences(tokens, occurrences)
    phrase_matches = match_phrases(lexical_forms(tokens, form_normalizer), studied_phrases or ())
    return assemble(tokens, word_refs, phrase_matches, space_marker=cfg.space_marker)


def _sentence_parts(sentence: Any) -> Tuple[Any, Sequence[Any]]:
    if sentence is None or isinstance(sentence, str):
        return sentence, ()
    if isinstance(sentence, Mapping):
        occurrences = sentence.get("word_occurrences")
        if occurrences is None:
            occurrences = sentence.get("occurrences")
        return sentence.get("content"), occurrences or ()
    if isinstance(sentence, (tuple, list)):
        content = sentence[0] if sentence else None
        occurrences = sentence[1] if len(sentence) > 1 else ()
        return content, occurrences or ()
    occurrences = getattr(sentence, "word_occurrences", None)
    if occurrences is None:
        occurrences = getattr(sentence, "occurrences", None)
    return getattr(sentence, "content", None), occurrences or ()


def tokenize_article(
    sentences: Iterable[Any],
    studied_phrases: Optional[Iterable[Any]] = (),
    *,
    form_normalizer: FormNormalizer = normalize_form,
    max_workers: Optional[int] = None,
    config: Optional[ReaderConfig] = None,
) -> List[List[TokenDescriptor]]:
    """Tokenize every sentence of an article, keeping input order.

    Sentences may be strings, ``(content, occurrences)`` pairs, mappings with
    ``content`` and ``word_occurrences`` keys, or objects with those
    attributes. Long articles are spread over a thread pool.
    """

    cfg = config or build_reader_config()
    entries = [_sentence_parts(sentence) for sentence in sentences]
    phrases: List[Phrase] = [phrase for phrase in map(coerce_phrase, studied_phrases or ()) if phrase is not None]

    def _run(entry: Tuple[Any, Sequence[Any]]) -> List[TokenDescriptor]:
        content, occurrences = entry
        return tokenize_sentence(content, occurrences, phrases, form_normalizer=form_normalizer, config=cfg)

    workers = max_workers if max_workers is not None else cfg.max_workers
    if workers <= 1 or len(entries) < cfg.parallel_threshold:
        return [_run(entry) for entry in entries]

    logger.debug("Tokenizing %d sentences on %d worker threads", len(entries), workers)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(_run, entries))


def is_studied_token(
    token: TokenDescriptor,
    studied_word_ids: Iterable[int],
    studied_forms: Iterable[str],
    *,
    form_normalizer: FormNormalizer = normalize_form,
) -> bool:
    if not token.is_lexical:
        return False
    if token.word_id is not None and token.word_id in set(studied_word_ids):
        return True
    form = form_normalizer(token.text)
    return bool(form) and form in set(studied_forms)


def estimate_reading_time(sentences: Iterable[Any], words_per_minute: int = 200) -> Optional[float]:
    """Reading time in minutes, rounded up to one decimal; ``None`` when empty."""

    total_words = 0
    for sentence in sentences:
        content, _ = _sentence_parts(sentence)
        total_words += len(str(content or "").split())
    if words_per_minute <= 0:
        return None
    minutes = math.ceil(total_words * 10 / words_per_minute) / 10
    return minutes if minutes > 0 else None
