"""Tests for glossator.automaton module."""
import pytest

from glossator.automaton import PatternAutomaton, compile_automaton
from glossator.errors import AutomatonSealedError, EmptyPatternError, NotBuiltError
from glossator.normalization import fold_text
from glossator.types import HomonymGroup, Metadata, PatternEntry


def _meta(key: str, **kwargs: str) -> Metadata:
    return Metadata(source_key=key, **kwargs)


def _automaton(*patterns: str, category: str = "word") -> PatternAutomaton:
    automaton = PatternAutomaton(category)  # type: ignore[arg-type]
    for pattern in patterns:
        automaton.add_pattern(pattern, _meta(pattern))
    return automaton.build()


def _hits(automaton: PatternAutomaton, text: str) -> list[tuple[str, int, int]]:
    return [(s.pattern, s.start, s.end) for s in automaton.scan(text)]


class TestScan:
    def test_classic_overlapping_patterns(self) -> None:
        automaton = _automaton("he", "she", "his", "hers")
        assert _hits(automaton, "ushers") == [
            ("she", 1, 4),
            ("he", 2, 4),
            ("hers", 2, 6),
        ]

    def test_nested_match_surfaces(self) -> None:
        automaton = _automaton("cat")
        assert _hits(automaton, "concatenate") == [("cat", 3, 6)]

    def test_suffix_pattern_not_dropped(self) -> None:
        automaton = _automaton("ba", "a")
        assert _hits(automaton, "xba y") == [("ba", 1, 3), ("a", 2, 3)]

    def test_case_insensitive_keeps_display_case(self) -> None:
        automaton = _automaton("Paris")
        spans = automaton.scan("I love PARIS and paris")
        assert [(s.start, s.end) for s in spans] == [(7, 12), (17, 22)]
        assert all(s.pattern == "Paris" for s in spans)

    def test_every_occurrence_reported(self) -> None:
        automaton = _automaton("aa")
        assert _hits(automaton, "aaaa") == [("aa", 0, 2), ("aa", 1, 3), ("aa", 2, 4)]

    def test_fail_link_recovers_after_mismatch(self) -> None:
        automaton = _automaton("abcd", "bcx")
        assert _hits(automaton, "abcx") == [("bcx", 1, 4)]

    def test_empty_text(self) -> None:
        assert _automaton("a").scan("") == []

    def test_no_patterns(self) -> None:
        automaton = PatternAutomaton("word").build()
        assert automaton.scan("anything at all") == []

    def test_offset_shifts_positions(self) -> None:
        automaton = _automaton("dog")
        spans = automaton.scan("a dog", offset=100)
        assert (spans[0].start, spans[0].end) == (102, 105)

    def test_span_category_follows_automaton(self) -> None:
        automaton = _automaton("good day", category="phrase")
        assert automaton.scan("good day")[0].category == "phrase"

    def test_length_changing_lowercase_is_matched(self) -> None:
        automaton = _automaton("İzmir")
        spans = automaton.scan("to İzmir")
        assert [(s.start, s.end) for s in spans] == [(3, 8)]

    def test_scan_twice_identical(self) -> None:
        automaton = _automaton("he", "she", "hers")
        text = "she sells shells to hers"
        assert automaton.scan(text) == automaton.scan(text)


class TestConstruction:
    def test_empty_pattern_rejected(self) -> None:
        automaton = PatternAutomaton()
        with pytest.raises(EmptyPatternError):
            automaton.add_pattern("", _meta("x"))

    def test_scan_before_build_raises(self) -> None:
        automaton = PatternAutomaton()
        automaton.add_pattern("cat", _meta("cat"))
        with pytest.raises(NotBuiltError):
            automaton.scan("cat")

    def test_add_after_build_raises(self) -> None:
        automaton = _automaton("cat")
        with pytest.raises(AutomatonSealedError):
            automaton.add_pattern("dog", _meta("dog"))

    def test_build_is_idempotent(self) -> None:
        automaton = _automaton("cat", "at")
        first = automaton.scan("the cat")
        assert automaton.build() is automaton
        assert automaton.scan("the cat") == first

    def test_duplicate_pattern_merges_payloads(self) -> None:
        automaton = PatternAutomaton()
        first = _meta("bank_noun", translation="bankas")
        second = _meta("bank_verb", translation="pasitikėti")
        automaton.add_pattern("bank", first)
        automaton.add_pattern("BANK", second)
        automaton.add_pattern("bank", first)
        automaton.build()
        assert automaton.pattern_count == 1
        spans = automaton.scan("bank")
        assert len(spans) == 1
        assert spans[0].payloads == (first, second)
        assert spans[0].group_size == 2

    def test_homonym_group_payload(self) -> None:
        group = HomonymGroup(spelling="bat", senses=(_meta("bat_animal"), _meta("bat_club")))
        automaton = PatternAutomaton()
        automaton.add_pattern("bat", group)
        automaton.build()
        assert automaton.scan("bat")[0].payloads == group.senses

    def test_node_count(self) -> None:
        automaton = _automaton("ab", "ac")
        assert automaton.node_count == 4
        assert automaton.pattern_count == 2
        assert automaton.is_built

    def test_fold_text_preserves_length(self) -> None:
        for text in ("İstanbul", "STRASSE", "Straße", "ÅÄÖ"):
            assert len(fold_text(text)) == len(text)


class TestCompileAutomaton:
    def test_filters_by_category(self) -> None:
        group = HomonymGroup(spelling="cat", senses=(_meta("cat"),))
        phrase_group = HomonymGroup(spelling="a cat", senses=(_meta("a cat"),))
        entries = [
            PatternEntry(pattern="cat", normalized="cat", category="word", payload=group),
            PatternEntry(
                pattern="a cat", normalized="a cat", category="phrase", payload=phrase_group,
            ),
        ]
        automaton = compile_automaton(entries, "word")
        assert automaton.is_built
        assert automaton.pattern_count == 1
        assert [s.pattern for s in automaton.scan("a cat")] == ["cat"]
