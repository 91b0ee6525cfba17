"""Insert annotation markers into text or markup without shifting offsets.

Spans are applied from the highest start offset down to the lowest. An
insertion at offset *k* only changes content at or after *k*, so every span
still waiting to be applied (all of which start before *k*) keeps valid
offsets. No second offset-tracking pass is needed.

Two targets are supported:
- ``splice_text`` for flat strings.
- ``splice_markup`` for markup trees (BeautifulSoup). Span offsets index the
  concatenation of the tree's text nodes (``markup_text``); each span is
  applied by splitting the single text node that contains it into three
  siblings. Callers resolve spans per node (``markup_segments``) so that
  adjacent elements never fuse into one word.

Neither target escapes or sanitizes the content. That is the downstream
sanitizer's job. Only the marker's own attribute values are quoted so the
marker is well formed.
"""

from __future__ import annotations

import bisect
import html
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal, TypeAlias

from bs4 import BeautifulSoup
from bs4.element import NavigableString, Tag

from glossator.resolver import order_spans
from glossator.types import METADATA_FIELDS, Category, MatchSpan, Metadata

log = logging.getLogger(__name__)

HomonymMode: TypeAlias = Literal["nested", "richest"]


@dataclass(frozen=True, slots=True)
class MarkerStyle:
    """How an inserted marker looks: ``<span class="gloss-word" data-gloss=...>``."""

    tag: str = "span"
    class_prefix: str = "gloss"

    def __post_init__(self) -> None:
        if not re.fullmatch(r"[a-zA-Z][a-zA-Z0-9-]*", self.tag):
            raise ValueError(f"invalid marker tag {self.tag!r}")
        if not re.fullmatch(r"[a-zA-Z][a-zA-Z0-9-]*", self.class_prefix):
            raise ValueError(f"invalid class prefix {self.class_prefix!r}")

    @property
    def marker_attr(self) -> str:
        """Attribute present on every inserted marker and on nothing else."""
        return f"data-{self.class_prefix}"

    def css_class(self, category: Category) -> str:
        return f"{self.class_prefix}-{category}"


DEFAULT_STYLE = MarkerStyle()


@dataclass(frozen=True, slots=True)
class SpanGroup:
    """All senses to be rendered over one ``[start, end)`` range."""

    start: int
    end: int
    category: Category
    senses: tuple[Metadata, ...]
    group_size: int


def group_spans(spans: Iterable[MatchSpan]) -> list[SpanGroup]:
    """Collapse same-offset, same-category spans (homonym fan-out) into groups.

    Groups come back in resolver order (ascending start).
    """
    groups: list[SpanGroup] = []
    for span in order_spans(spans):
        if groups:
            last = groups[-1]
            if (last.start, last.end, last.category) == (span.start, span.end, span.category):
                senses = last.senses + tuple(p for p in span.payloads if p not in last.senses)
                groups[-1] = SpanGroup(
                    start=last.start,
                    end=last.end,
                    category=last.category,
                    senses=senses,
                    group_size=max(last.group_size, span.group_size, len(senses)),
                )
                continue
        groups.append(SpanGroup(
            start=span.start,
            end=span.end,
            category=span.category,
            senses=span.payloads,
            group_size=max(span.group_size, len(span.payloads)),
        ))
    return groups


def select_spliceable(groups: list[SpanGroup]) -> list[SpanGroup]:
    """Drop groups overlapping an earlier-ranked group; touching is fine."""
    kept: list[SpanGroup] = []
    last_end = -1
    for group in groups:
        if group.start < last_end:
            log.debug(
                "Dropping overlapping %s span [%d, %d)",
                group.category, group.start, group.end,
            )
            continue
        kept.append(group)
        last_end = group.end
    return kept


def _senses_to_render(group: SpanGroup, homonyms: HomonymMode) -> tuple[Metadata, ...]:
    if homonyms == "richest" and len(group.senses) > 1:
        return (max(group.senses, key=lambda s: s.richness),)
    return group.senses


def marker_attributes(
    category: Category,
    sense: Metadata | None,
    group_size: int,
    style: MarkerStyle = DEFAULT_STYLE,
) -> dict[str, str]:
    attrs = {"class": style.css_class(category), style.marker_attr: category}
    if sense is not None:
        for name in METADATA_FIELDS:
            value = getattr(sense, name)
            if value:
                attrs["data-" + name.replace("_", "-")] = value
    if group_size > 1:
        attrs["data-homonyms"] = str(group_size)
    return attrs


def _open_tag(attrs: dict[str, str], style: MarkerStyle) -> str:
    rendered = " ".join(f'{k}="{html.escape(v, quote=True)}"' for k, v in attrs.items())
    return f"<{style.tag} {rendered}>"


def _wrap_text(middle: str, group: SpanGroup, homonyms: HomonymMode, style: MarkerStyle) -> str:
    senses = _senses_to_render(group, homonyms) or (None,)
    opens = "".join(
        _open_tag(marker_attributes(group.category, sense, group.group_size, style), style)
        for sense in senses
    )
    closes = f"</{style.tag}>" * len(senses)
    return f"{opens}{middle}{closes}"


def splice_text(
    text: str,
    spans: Iterable[MatchSpan],
    *,
    style: MarkerStyle = DEFAULT_STYLE,
    homonyms: HomonymMode = "nested",
) -> str:
    """Wrap each span of *text* in category markers.

    Groups are applied in descending start order. Rather than re-slicing the
    growing string for every span, the untouched tail after each span is
    emitted as a piece, which keeps the work linear in the output size.
    """
    groups = select_spliceable(group_spans(spans))
    pieces: list[str] = []
    cursor = len(text)
    for group in reversed(groups):
        if group.end > len(text):
            raise ValueError(
                f"span [{group.start}, {group.end}) exceeds text length {len(text)}",
            )
        pieces.append(text[group.end:cursor])
        pieces.append(_wrap_text(text[group.start:group.end], group, homonyms, style))
        cursor = group.start
    pieces.append(text[:cursor])
    return "".join(reversed(pieces))


_TAG_RE_CACHE: dict[str, re.Pattern[str]] = {}


def _tag_re(tag: str) -> re.Pattern[str]:
    pattern = _TAG_RE_CACHE.get(tag)
    if pattern is None:
        pattern = re.compile(rf"<(/?){re.escape(tag)}(\s[^>]*)?>", re.IGNORECASE)
        _TAG_RE_CACHE[tag] = pattern
    return pattern


def strip_markers(annotated: str, *, style: MarkerStyle = DEFAULT_STYLE) -> str:
    """Remove markers inserted by ``splice_text``; other tags are untouched.

    Open and close tags of the marker's element name are paired with a
    stack, so pre-existing elements of the same name survive.
    """
    marker_re = re.compile(rf'\s{re.escape(style.marker_attr)}="')
    stack: list[bool] = []
    pieces: list[str] = []
    cursor = 0
    for m in _tag_re(style.tag).finditer(annotated):
        closing = m.group(1) == "/"
        if closing:
            if not stack:
                continue
            ours = stack.pop()
        else:
            ours = bool(marker_re.search(m.group(2) or ""))
            stack.append(ours)
        if ours:
            pieces.append(annotated[cursor:m.start()])
            cursor = m.end()
    pieces.append(annotated[cursor:])
    return "".join(pieces)


# ---------------------------------------------------------------------------
# Markup trees
# ---------------------------------------------------------------------------


def parse_markup(markup: str | BeautifulSoup) -> BeautifulSoup:
    if isinstance(markup, BeautifulSoup):
        return markup
    return BeautifulSoup(markup, "html.parser")


def text_nodes(soup: BeautifulSoup | Tag) -> list[NavigableString]:
    """Plain text nodes in document order (comments, scripts, CDATA excluded)."""
    return [node for node in soup.descendants if type(node) is NavigableString]


def markup_segments(markup: str | BeautifulSoup) -> list[str]:
    """Text of each text node, in document order."""
    return [str(node) for node in text_nodes(parse_markup(markup))]


def markup_text(markup: str | BeautifulSoup) -> str:
    """Concatenated text that ``splice_markup`` offsets refer to."""
    return "".join(markup_segments(markup))


def _build_marker(
    soup: BeautifulSoup,
    middle: str,
    group: SpanGroup,
    homonyms: HomonymMode,
    style: MarkerStyle,
) -> Tag:
    first, *rest = _senses_to_render(group, homonyms) or (None,)
    outer = soup.new_tag(
        style.tag,
        attrs=marker_attributes(group.category, first, group.group_size, style),
    )
    inner = outer
    for sense in rest:
        tag = soup.new_tag(
            style.tag,
            attrs=marker_attributes(group.category, sense, group.group_size, style),
        )
        inner.append(tag)
        inner = tag
    inner.append(NavigableString(middle))
    return outer


def splice_markup(
    markup: str | BeautifulSoup,
    spans: Iterable[MatchSpan],
    *,
    style: MarkerStyle = DEFAULT_STYLE,
    homonyms: HomonymMode = "nested",
) -> str:
    """Wrap spans inside a markup tree and return the serialized tree.

    Each span must fall inside a single text node; spans crossing an element
    boundary (``good <em>morning</em>``) are skipped.
    """
    soup = parse_markup(markup)
    nodes = text_nodes(soup)
    starts: list[int] = []
    pos = 0
    for node in nodes:
        starts.append(pos)
        pos += len(node)

    for group in reversed(select_spliceable(group_spans(spans))):
        idx = bisect.bisect_right(starts, group.start) - 1
        if idx < 0:
            continue
        node = nodes[idx]
        content = str(node)
        local_start = group.start - starts[idx]
        local_end = group.end - starts[idx]
        if local_end > len(content):
            log.debug(
                "Skipping %s span [%d, %d): crosses a markup boundary",
                group.category, group.start, group.end,
            )
            continue

        marker = _build_marker(soup, content[local_start:local_end], group, homonyms, style)
        node.replace_with(marker)
        if local_end < len(content):
            marker.insert_after(NavigableString(content[local_end:]))
        if local_start > 0:
            before = NavigableString(content[:local_start])
            marker.insert_before(before)
            # Remaining spans in this node all lie in the leading part.
            nodes[idx] = before
    return str(soup)


def strip_markup_markers(
    markup: str | BeautifulSoup,
    *,
    style: MarkerStyle = DEFAULT_STYLE,
) -> str:
    """Unwrap every marker element inserted by ``splice_markup``."""
    soup = parse_markup(markup)
    for tag in soup.find_all(style.tag, attrs={style.marker_attr: True}):
        tag.unwrap()
    return str(soup)
