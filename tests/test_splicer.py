"""Tests for glossator.splicer module."""
import pytest
from bs4 import BeautifulSoup

from glossator.splicer import (
    MarkerStyle,
    group_spans,
    markup_segments,
    markup_text,
    splice_markup,
    splice_text,
    strip_markers,
    strip_markup_markers,
)
from glossator.types import MatchSpan, Metadata


def _span(
    start: int,
    end: int,
    pattern: str,
    *senses: Metadata,
    category: str = "word",
) -> MatchSpan:
    payloads = senses or (Metadata(source_key=pattern),)
    return MatchSpan(
        start=start,
        end=end,
        category=category,  # type: ignore[arg-type]
        payloads=payloads,
        pattern=pattern,
        group_size=len(payloads),
    )


def _homonym_spans(start: int, end: int, pattern: str, *senses: Metadata) -> list[MatchSpan]:
    return [
        MatchSpan(
            start=start,
            end=end,
            category="word",
            payloads=(sense,),
            pattern=pattern,
            group_size=len(senses),
        )
        for sense in senses
    ]


READ = Metadata(source_key="read", translation="skaityti")
BOOKS = Metadata(source_key="books", cefr="A1")

OPEN_READ = '<span class="gloss-word" data-gloss="word" data-translation="skaityti">'
OPEN_BOOKS = '<span class="gloss-word" data-gloss="word" data-cefr="A1">'


class TestSpliceText:
    def test_wraps_spans_and_preserves_gaps(self) -> None:
        text = "I read books daily"
        spans = [_span(2, 6, "read", READ), _span(7, 12, "books", BOOKS)]
        result = splice_text(text, spans)
        assert result == (
            f"I {OPEN_READ}read</span> {OPEN_BOOKS}books</span> daily"
        )

    def test_input_order_does_not_matter(self) -> None:
        text = "I read books daily"
        forward = [_span(2, 6, "read", READ), _span(7, 12, "books", BOOKS)]
        assert splice_text(text, forward) == splice_text(text, list(reversed(forward)))

    def test_round_trip(self) -> None:
        text = "I read books daily"
        spans = [_span(2, 6, "read", READ), _span(7, 12, "books", BOOKS)]
        assert strip_markers(splice_text(text, spans)) == text

    def test_round_trip_keeps_existing_markup(self) -> None:
        text = '<p><span class="x">I read</span> books</p>'
        start = text.index("read")
        books = text.index("books")
        spans = [_span(start, start + 4, "read", READ), _span(books, books + 5, "books")]
        annotated = splice_text(text, spans)
        assert '<span class="x">I ' in annotated
        assert strip_markers(annotated) == text

    def test_touching_spans_both_applied(self) -> None:
        result = splice_text("abcdef", [_span(0, 3, "abc"), _span(3, 6, "def")])
        assert result.count('data-gloss="word"') == 2
        assert strip_markers(result) == "abcdef"

    def test_overlapping_span_dropped(self) -> None:
        spans = [_span(0, 6, "abcdef", category="phrase"), _span(3, 6, "def")]
        result = splice_text("abcdef", spans)
        assert result == '<span class="gloss-phrase" data-gloss="phrase">abcdef</span>'

    def test_empty_span_list(self) -> None:
        assert splice_text("nothing here", []) == "nothing here"

    def test_span_beyond_text(self) -> None:
        with pytest.raises(ValueError):
            splice_text("abc", [_span(2, 5, "cde")])

    def test_attribute_values_quoted(self) -> None:
        meta = Metadata(source_key="hi", translation='say "hi" <now>')
        result = splice_text("hi there", [_span(0, 2, "hi", meta)])
        assert 'data-translation="say &quot;hi&quot; &lt;now&gt;"' in result
        assert strip_markers(result) == "hi there"

    def test_text_content_not_escaped(self) -> None:
        result = splice_text("a&b x", [_span(0, 3, "a&b")])
        assert ">a&b</span>" in result


class TestHomonyms:
    NOUN = Metadata(source_key="bank_noun", part_of_speech="noun", translation="bankas")
    VERB = Metadata(source_key="bank_verb", translation="pasitikėti")

    def test_group_spans_collapses_same_offsets(self) -> None:
        groups = group_spans(_homonym_spans(4, 8, "bank", self.NOUN, self.VERB))
        assert len(groups) == 1
        assert groups[0].senses == (self.NOUN, self.VERB)
        assert groups[0].group_size == 2

    def test_nested_markers(self) -> None:
        spans = _homonym_spans(4, 8, "bank", self.NOUN, self.VERB)
        result = splice_text("the bank", spans)
        assert result == (
            'the <span class="gloss-word" data-gloss="word" data-part-of-speech="noun" '
            'data-translation="bankas" data-homonyms="2">'
            '<span class="gloss-word" data-gloss="word" data-translation="pasitikėti" '
            'data-homonyms="2">bank</span></span>'
        )
        assert strip_markers(result) == "the bank"

    def test_richest_marker(self) -> None:
        spans = _homonym_spans(4, 8, "bank", self.VERB, self.NOUN)
        result = splice_text("the bank", spans, homonyms="richest")
        assert result.count("<span") == 1
        assert 'data-translation="bankas"' in result
        assert 'data-homonyms="2"' in result


class TestMarkerStyle:
    def test_custom_style(self) -> None:
        style = MarkerStyle(tag="mark", class_prefix="lex")
        result = splice_text("a cat", [_span(2, 5, "cat")], style=style)
        assert result == 'a <mark class="lex-word" data-lex="word">cat</mark>'
        assert strip_markers(result, style=style) == "a cat"

    def test_invalid_tag(self) -> None:
        with pytest.raises(ValueError):
            MarkerStyle(tag="<script>")


class TestSpliceMarkup:
    HTML = "<p>I read <em>books</em> daily</p>"

    def test_markup_text(self) -> None:
        assert markup_text(self.HTML) == "I read books daily"

    def test_markup_text_skips_comments(self) -> None:
        assert markup_text("<p>a<!-- hidden -->b</p>") == "ab"

    def test_markup_segments_per_text_node(self) -> None:
        assert markup_segments("<ul><li>cat</li><li>dog</li></ul>") == ["cat", "dog"]
        assert markup_segments(self.HTML) == ["I read ", "books", " daily"]

    def test_wraps_inside_text_nodes(self) -> None:
        spans = [_span(2, 6, "read"), _span(7, 12, "books")]
        result = splice_markup(self.HTML, spans)
        assert result == (
            '<p>I <span class="gloss-word" data-gloss="word">read</span> '
            '<em><span class="gloss-word" data-gloss="word">books</span></em> daily</p>'
        )

    def test_two_spans_in_one_node(self) -> None:
        html = "<p>I read books daily</p>"
        spans = [_span(2, 6, "read"), _span(7, 12, "books"), _span(13, 18, "daily")]
        result = splice_markup(html, spans)
        assert result.count('data-gloss="word"') == 3
        assert markup_text(result) == "I read books daily"
        assert result.startswith("<p>I <span")
        assert result.endswith("daily</span></p>")

    def test_crossing_span_skipped(self) -> None:
        html = "<p>good <em>morning</em></p>"
        result = splice_markup(html, [_span(0, 12, "good morning", category="phrase")])
        assert result == html

    def test_round_trip(self) -> None:
        spans = [_span(2, 6, "read", READ), _span(7, 12, "books", BOOKS)]
        annotated = splice_markup(self.HTML, spans)
        restored = strip_markup_markers(annotated)
        assert restored == str(BeautifulSoup(self.HTML, "html.parser"))
        assert markup_text(restored) == markup_text(self.HTML)

    def test_nested_homonym_markers(self) -> None:
        noun = Metadata(source_key="bank_noun", translation="bankas")
        verb = Metadata(source_key="bank_verb", translation="pasitikėti")
        result = splice_markup("<p>the bank</p>", _homonym_spans(4, 8, "bank", noun, verb))
        soup = BeautifulSoup(result, "html.parser")
        markers = soup.find_all("span", attrs={"data-gloss": True})
        assert len(markers) == 2
        assert markers[1].parent is markers[0]
        assert markers[1].get_text() == "bank"
