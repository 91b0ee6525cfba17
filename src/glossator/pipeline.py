"""Public annotation entry points: build automata once, annotate many texts.

    index = load_dictionary(words, phrases)
    automata = build_automata(index)
    doc = annotate(text, automata.phrase, automata.word)

A failed automaton build degrades to "no annotation for that category";
text is always returned.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeAlias

from glossator.automaton import PatternAutomaton, compile_automaton
from glossator.config import AnnotatorConfig
from glossator.dictionary import DictionaryIndex
from glossator.errors import GlossatorError, ScanInputTooLarge
from glossator.resolver import resolve, resolve_segments
from glossator.splicer import markup_segments, parse_markup, splice_markup, splice_text
from glossator.types import MatchSpan, span_to_dict

log = logging.getLogger(__name__)

Sanitizer: TypeAlias = Callable[[str], str]


@dataclass(frozen=True, slots=True)
class AutomatonPair:
    phrase: PatternAutomaton | None
    word: PatternAutomaton | None


@dataclass(frozen=True, slots=True)
class AnnotatedDocument:
    text: str
    spans: tuple[MatchSpan, ...]
    annotated: str
    phrase_available: bool = True
    word_available: bool = True

    @property
    def phrase_count(self) -> int:
        return sum(1 for s in self.spans if s.category == "phrase")

    @property
    def word_count(self) -> int:
        return sum(1 for s in self.spans if s.category == "word")


def build_phrase_automaton(index: DictionaryIndex) -> PatternAutomaton:
    return compile_automaton(index.phrase_entries(), "phrase")


def build_word_automaton(index: DictionaryIndex) -> PatternAutomaton:
    return compile_automaton(index.word_entries(), "word")


def build_automata(index: DictionaryIndex) -> AutomatonPair:
    """Build both automata; a category whose build fails becomes ``None``."""
    built: dict[str, PatternAutomaton | None] = {}
    for name, builder in (("phrase", build_phrase_automaton), ("word", build_word_automaton)):
        try:
            built[name] = builder(index)
        except GlossatorError as exc:
            log.warning("%s automaton build failed, annotation disabled: %s", name, exc)
            built[name] = None
    return AutomatonPair(phrase=built["phrase"], word=built["word"])


def _check_length(text: str, config: AnnotatorConfig) -> None:
    if config.max_text_length is not None and len(text) > config.max_text_length:
        raise ScanInputTooLarge(len(text), config.max_text_length)


def _active(
    phrase_automaton: PatternAutomaton | None,
    word_automaton: PatternAutomaton | None,
    config: AnnotatorConfig,
) -> tuple[PatternAutomaton | None, PatternAutomaton | None]:
    return (
        phrase_automaton if config.apply_phrases else None,
        word_automaton if config.apply_words else None,
    )


def annotate(
    text: str,
    phrase_automaton: PatternAutomaton | None,
    word_automaton: PatternAutomaton | None,
    *,
    config: AnnotatorConfig | None = None,
    sanitizer: Sanitizer | None = None,
) -> AnnotatedDocument:
    """Resolve spans over flat *text* and splice markers into it.

    Raises:
        ScanInputTooLarge: *text* exceeds ``config.max_text_length``.
    """
    config = config or AnnotatorConfig()
    _check_length(text, config)
    phrases, words = _active(phrase_automaton, word_automaton, config)
    spans = resolve(text, phrases, words)
    annotated = splice_text(
        text, spans, style=config.marker_style(), homonyms=config.homonym_mode,
    )
    if sanitizer is not None:
        annotated = sanitizer(annotated)
    return AnnotatedDocument(
        text=text,
        spans=tuple(spans),
        annotated=annotated,
        phrase_available=phrases is not None,
        word_available=words is not None,
    )


def annotate_markup(
    markup: str,
    phrase_automaton: PatternAutomaton | None,
    word_automaton: PatternAutomaton | None,
    *,
    config: AnnotatorConfig | None = None,
    sanitizer: Sanitizer | None = None,
) -> AnnotatedDocument:
    """Annotate the text nodes of *markup*, leaving its elements intact.

    Each text node is resolved on its own, so adjacent elements stay
    separate words and no span crosses an element boundary; every span in
    the result is spliced. ``AnnotatedDocument.text`` holds the extracted
    text the spans index.
    """
    config = config or AnnotatorConfig()
    soup = parse_markup(markup)
    segments = markup_segments(soup)
    text = "".join(segments)
    _check_length(text, config)
    phrases, words = _active(phrase_automaton, word_automaton, config)
    spans = resolve_segments(segments, phrases, words)
    annotated = splice_markup(
        soup, spans, style=config.marker_style(), homonyms=config.homonym_mode,
    )
    if sanitizer is not None:
        annotated = sanitizer(annotated)
    return AnnotatedDocument(
        text=text,
        spans=tuple(spans),
        annotated=annotated,
        phrase_available=phrases is not None,
        word_available=words is not None,
    )


def spans_to_records(spans: tuple[MatchSpan, ...] | list[MatchSpan]) -> list[dict[str, Any]]:
    """Renderer payload: one JSON-ready dict per span."""
    return [span_to_dict(s) for s in spans]
