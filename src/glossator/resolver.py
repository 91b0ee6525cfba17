"""Turn raw automaton hits into the final, renderable span list.

Resolution order:
1. Phrase hits, boundary-filtered, reduced to a non-overlapping set.
2. Word hits from the text left uncovered by phrases. Each uncovered
   sub-range is scanned on its own with its global offset, so no word span
   can touch a phrase span.
3. Homonym fan-out: one span per sense, all at the same offsets.
4. Ordering: ascending start, longer first, phrase before word.

Markup text is resolved per text node (``resolve_segments``).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from glossator.automaton import PatternAutomaton
from glossator.boundaries import has_word_boundaries
from glossator.types import Category, MatchSpan

_CATEGORY_RANK: dict[Category, int] = {"phrase": 0, "word": 1}


def span_order_key(span: MatchSpan) -> tuple[int, int, int]:
    return (span.start, -span.length, _CATEGORY_RANK[span.category])


def order_spans(spans: Iterable[MatchSpan]) -> list[MatchSpan]:
    """Sort by start, then longer first, then phrase before word.

    The sort is stable, so senses of a homonym group keep dictionary order.
    """
    return sorted(spans, key=span_order_key)


def filter_boundary_hits(text: str, spans: Iterable[MatchSpan]) -> list[MatchSpan]:
    """Keep hits delimited by boundary characters or the text edges."""
    return [s for s in spans if has_word_boundaries(text, s.start, s.end)]


def select_non_overlapping(spans: Iterable[MatchSpan]) -> list[MatchSpan]:
    """Greedy leftmost-longest selection over unexpanded hits."""
    kept: list[MatchSpan] = []
    last_end = -1
    for span in order_spans(spans):
        if span.start >= last_end:
            kept.append(span)
            last_end = span.end
    return kept


def uncovered_ranges(length: int, covered: Iterable[MatchSpan]) -> list[tuple[int, int]]:
    """Maximal ``[start, end)`` sub-ranges of ``[0, length)`` outside *covered*."""
    ranges: list[tuple[int, int]] = []
    cursor = 0
    for span in sorted(covered, key=lambda s: s.start):
        if span.start > cursor:
            ranges.append((cursor, span.start))
        cursor = max(cursor, span.end)
    if cursor < length:
        ranges.append((cursor, length))
    return ranges


def expand_homonyms(span: MatchSpan) -> list[MatchSpan]:
    """One span per sense, identical offsets, ``group_size`` = sense count."""
    if len(span.payloads) <= 1:
        return [span]
    size = len(span.payloads)
    return [
        MatchSpan(
            start=span.start,
            end=span.end,
            category=span.category,
            payloads=(sense,),
            pattern=span.pattern,
            group_size=size,
        )
        for sense in span.payloads
    ]


def resolve_phrases(text: str, automaton: PatternAutomaton) -> list[MatchSpan]:
    """Boundary-valid, non-overlapping phrase hits (unexpanded)."""
    return select_non_overlapping(filter_boundary_hits(text, automaton.scan(text)))


def resolve_words(
    text: str,
    automaton: PatternAutomaton,
    phrase_spans: Iterable[MatchSpan] = (),
) -> list[MatchSpan]:
    """Boundary-valid, non-overlapping word hits outside phrase spans (unexpanded)."""
    hits: list[MatchSpan] = []
    for start, end in uncovered_ranges(len(text), phrase_spans):
        raw = automaton.scan(text[start:end], offset=start)
        hits.extend(filter_boundary_hits(text, raw))
    return select_non_overlapping(hits)


def resolve(
    text: str,
    phrase_automaton: PatternAutomaton | None,
    word_automaton: PatternAutomaton | None,
) -> list[MatchSpan]:
    """Full resolution; a ``None`` automaton disables that category."""
    phrases = resolve_phrases(text, phrase_automaton) if phrase_automaton is not None else []
    words = (
        resolve_words(text, word_automaton, phrases)
        if word_automaton is not None
        else []
    )
    expanded: list[MatchSpan] = []
    for span in phrases + words:
        expanded.extend(expand_homonyms(span))
    return order_spans(expanded)


def resolve_segments(
    segments: Iterable[str],
    phrase_automaton: PatternAutomaton | None,
    word_automaton: PatternAutomaton | None,
) -> list[MatchSpan]:
    """Resolve each segment on its own, with offsets into their concatenation.

    Segment edges act as text edges: a span never crosses one, and letters
    of neighbouring segments never join into one word.
    """
    spans: list[MatchSpan] = []
    pos = 0
    for segment in segments:
        if segment and not segment.isspace():
            for span in resolve(segment, phrase_automaton, word_automaton):
                spans.append(replace(span, start=span.start + pos, end=span.end + pos))
        pos += len(segment)
    return spans
