"""Aho–Corasick multi-pattern automaton.

A trie of folded pattern characters with failure links and merged output
sets. After ``build()`` a single left-to-right pass over the text reports
every occurrence of every pattern, in time proportional to the text length
plus the number of matches, independent of the number of patterns.

The automaton is sealed by ``build()``: further ``add_pattern`` calls raise,
so a built instance can be shared by concurrent read-only scans. Rebuilding
a dictionary means constructing a new instance.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field

from glossator.errors import AutomatonSealedError, EmptyPatternError, NotBuiltError
from glossator.normalization import fold_char, fold_text
from glossator.types import Category, HomonymGroup, MatchSpan, Metadata, PatternEntry

log = logging.getLogger(__name__)


@dataclass(slots=True)
class _Output:
    """Accepting-state record: display pattern plus its grouped payload."""

    pattern: str
    length: int
    payload: HomonymGroup


@dataclass(slots=True, eq=False)
class AutomatonNode:
    """Trie node. Children are owned; ``fail`` is only a lookup shortcut."""

    children: dict[str, AutomatonNode] = field(default_factory=dict)
    fail: AutomatonNode | None = None
    own: _Output | None = None
    outputs: tuple[_Output, ...] = ()
    depth: int = 0


class PatternAutomaton:
    """Multi-pattern matcher for one category of dictionary spellings."""

    def __init__(self, category: Category = "word") -> None:
        self.category: Category = category
        self._root = AutomatonNode()
        self._node_count = 1
        self._pattern_count = 0
        self._built = False

    # -- construction ------------------------------------------------------

    def add_pattern(self, pattern: str, payload: Metadata | HomonymGroup) -> None:
        """Insert *pattern* and attach *payload* to its accepting state.

        Adding the same folded pattern twice merges the payload senses
        instead of creating a second output.
        """
        if self._built:
            raise AutomatonSealedError(
                f"cannot add {pattern!r}: automaton is already built",
            )
        if not pattern:
            raise EmptyPatternError("pattern must contain at least one character")

        folded = fold_text(pattern)
        group = (
            payload
            if isinstance(payload, HomonymGroup)
            else HomonymGroup(spelling=folded, senses=(payload,))
        )

        node = self._root
        for ch in folded:
            child = node.children.get(ch)
            if child is None:
                child = AutomatonNode(depth=node.depth + 1)
                node.children[ch] = child
                self._node_count += 1
            node = child

        if node.own is None:
            node.own = _Output(pattern=pattern, length=len(pattern), payload=group)
            self._pattern_count += 1
        else:
            node.own.payload = node.own.payload.merge(group)

    def build(self) -> PatternAutomaton:
        """Compute failure links and merged outputs breadth-first.

        Idempotent: a second call returns immediately.
        """
        if self._built:
            return self

        root = self._root
        root.fail = None
        root.outputs = ()
        queue: deque[AutomatonNode] = deque()

        for child in root.children.values():
            child.fail = root
            child.outputs = (child.own,) if child.own is not None else ()
            queue.append(child)

        while queue:
            current = queue.popleft()
            for ch, child in current.children.items():
                queue.append(child)

                fail = current.fail
                while fail is not None and ch not in fail.children:
                    fail = fail.fail
                target = fail.children[ch] if fail is not None else root
                child.fail = target

                own = (child.own,) if child.own is not None else ()
                child.outputs = own + target.outputs

        self._built = True
        log.debug(
            "Built %s automaton: %d patterns, %d nodes",
            self.category, self._pattern_count, self._node_count,
        )
        return self

    # -- scanning ----------------------------------------------------------

    def scan(self, text: str, *, offset: int = 0) -> list[MatchSpan]:
        """Report every pattern occurrence in *text* in one pass.

        Spans are ordered by end offset; for a shared end offset, the
        longest (own) output comes first, then suffix-chained outputs.
        *offset* is added to all reported positions.
        """
        if not self._built:
            raise NotBuiltError(
                f"{self.category} automaton must be built before scanning",
            )

        root = self._root
        node = root
        spans: list[MatchSpan] = []
        category = self.category
        for i, raw in enumerate(text):
            ch = fold_char(raw)
            while node is not root and ch not in node.children:
                node = node.fail  # type: ignore[assignment]
            node = node.children.get(ch, root)
            if not node.outputs:
                continue
            end = offset + i + 1
            for out in node.outputs:
                spans.append(MatchSpan(
                    start=end - out.length,
                    end=end,
                    category=category,
                    payloads=out.payload.senses,
                    pattern=out.pattern,
                    group_size=out.payload.size,
                ))
        return spans

    # -- introspection -----------------------------------------------------

    @property
    def is_built(self) -> bool:
        return self._built

    @property
    def pattern_count(self) -> int:
        return self._pattern_count

    @property
    def node_count(self) -> int:
        return self._node_count

    def __repr__(self) -> str:
        state = "built" if self._built else "open"
        return (
            f"PatternAutomaton(category={self.category!r}, "
            f"patterns={self._pattern_count}, {state})"
        )


def compile_automaton(
    entries: Iterable[PatternEntry],
    category: Category,
) -> PatternAutomaton:
    """Build a sealed automaton from *entries*.

    A single empty pattern is rejected and logged; it does not abort the
    build. Entries of another category are ignored.
    """
    automaton = PatternAutomaton(category)
    rejected = 0
    for entry in entries:
        if entry.category != category:
            continue
        try:
            automaton.add_pattern(entry.pattern, entry.payload)
        except EmptyPatternError:
            rejected += 1
            log.warning("Rejected empty %s pattern %r", category, entry.pattern)
    if rejected:
        log.warning("%d %s patterns rejected", rejected, category)
    return automaton.build()
