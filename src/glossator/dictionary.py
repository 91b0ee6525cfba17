"""Dictionary preprocessing: records → normalized, grouped pattern entries.

Raw dictionaries map a spelling key (optionally suffixed with a type tag,
``"bank_noun"``) to a metadata record. Loading normalizes each spelling,
routes it to the phrase or word collection by token count, and groups
same-spelling senses into a ``HomonymGroup`` so each spelling reaches the
automaton exactly once.

Bad records never abort a load: each is skipped, logged, and kept in
``DictionaryIndex.skipped`` for diagnostics.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TypeAlias

from glossator.errors import MalformedEntry
from glossator.io_utils import load_json
from glossator.normalization import collapse_whitespace, fold_text, split_key_suffix, token_count
from glossator.types import Category, HomonymGroup, Metadata, PatternEntry

log = logging.getLogger(__name__)

# Metadata field → accepted record keys, first match wins. The Lithuanian
# keys are the ones used by the reader's original dictionaries.
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "part_of_speech": ("part_of_speech", "pos", "type", "kalbos dalis"),
    "cefr": ("cefr", "CEFR", "CERF", "level"),
    "translation": ("translation", "vertimas"),
    "base_form": ("base_form", "base_word", "bazinė forma"),
    "base_translation": ("base_translation", "bazė vertimas"),
}

# Keys that carry the spelling in list-shaped dictionaries.
SPELLING_KEYS: tuple[str, ...] = ("word", "phrase", "spelling", "key")


RawRecords: TypeAlias = Mapping[str, Any] | Iterable[Mapping[str, Any]]


@dataclass(frozen=True, slots=True)
class SkippedRecord:
    key: str
    reason: str


@dataclass(slots=True)
class _Pending:
    """Accumulator for one normalized spelling during load."""

    display: str
    normalized: str
    category: Category
    senses: list[Metadata] = field(default_factory=list)


def _field_value(record: Mapping[str, Any], aliases: tuple[str, ...]) -> str | None:
    for alias in aliases:
        value = record.get(alias)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def parse_metadata(source_key: str, record: Mapping[str, Any], type_tag: str | None) -> Metadata:
    """Build a ``Metadata`` from a raw record; the key's type tag backs up POS."""
    values = {name: _field_value(record, aliases) for name, aliases in FIELD_ALIASES.items()}
    if values["part_of_speech"] is None and type_tag:
        values["part_of_speech"] = type_tag
    return Metadata(source_key=source_key, **values)


def _iter_records(records: RawRecords) -> Iterable[tuple[Any, Any]]:
    """Yield ``(key, record)`` pairs from mapping- or list-shaped input."""
    if isinstance(records, Mapping):
        yield from records.items()
        return
    for item in records:
        if not isinstance(item, Mapping):
            yield None, item
            continue
        key = None
        for name in SPELLING_KEYS:
            if item.get(name):
                key = item[name]
                break
        yield key, item


def normalize_record(key: Any, record: Any) -> tuple[str, str, Metadata]:
    """Validate one record and return ``(display, normalized, metadata)``.

    Raises:
        MalformedEntry: missing/non-string key, non-mapping record, or an
            empty spelling after normalization.
    """
    if key is None or not isinstance(key, str):
        raise MalformedEntry(key, "missing spelling key")
    if not isinstance(record, Mapping):
        raise MalformedEntry(key, f"metadata must be a mapping, got {type(record).__name__}")
    spelling, type_tag = split_key_suffix(key)
    display = collapse_whitespace(spelling)
    if not display:
        raise MalformedEntry(key, "empty pattern after normalization")
    return display, fold_text(display), parse_metadata(key, record, type_tag)


class DictionaryIndex:
    """Normalized phrase and word collections with homonym grouping.

    Read-only once loaded. Build a new index to reload a dictionary.
    """

    def __init__(self) -> None:
        self._pending: dict[tuple[Category, str], _Pending] = {}
        self._entries: dict[Category, tuple[PatternEntry, ...]] = {"phrase": (), "word": ()}
        self._lookup: dict[tuple[Category, str], HomonymGroup] = {}
        self.skipped: list[SkippedRecord] = []
        self.record_count = 0
        self._finalized = False

    # -- loading -----------------------------------------------------------

    def add_records(self, records: RawRecords, category: Category) -> None:
        """Add raw records as *category*; may be called once per source."""
        if self._finalized:
            raise RuntimeError("dictionary index is already built")
        for key, record in _iter_records(records):
            self.record_count += 1
            try:
                display, normalized, meta = normalize_record(key, record)
            except MalformedEntry as exc:
                self._skip(str(key), exc.reason)
                continue

            target = category
            tokens = token_count(display)
            if category == "word" and tokens != 1:
                target = "phrase"
            elif category == "phrase" and tokens < 2:
                self._skip(str(key), "phrase must contain at least two words")
                continue

            slot = (target, normalized)
            pending = self._pending.get(slot)
            if pending is None:
                pending = _Pending(display=display, normalized=normalized, category=target)
                self._pending[slot] = pending
            if meta not in pending.senses:
                pending.senses.append(meta)

    def _skip(self, key: str, reason: str) -> None:
        self.skipped.append(SkippedRecord(key=key, reason=reason))
        log.warning("Skipping dictionary record %r: %s", key, reason)

    def build(self) -> DictionaryIndex:
        """Freeze pending records into sorted ``PatternEntry`` tuples."""
        if self._finalized:
            return self
        buckets: dict[Category, list[PatternEntry]] = {"phrase": [], "word": []}
        for (category, normalized), pending in self._pending.items():
            group = HomonymGroup(spelling=normalized, senses=tuple(pending.senses))
            buckets[category].append(PatternEntry(
                pattern=pending.display,
                normalized=normalized,
                category=category,
                payload=group,
            ))
            self._lookup[(category, normalized)] = group
        for category, entries in buckets.items():
            entries.sort(key=lambda e: (-len(e.normalized), e.normalized))
            self._entries[category] = tuple(entries)
        self._pending.clear()
        self._finalized = True
        log.info(
            "Dictionary built: %d records, %d phrases, %d words, %d homonyms, %d skipped",
            self.record_count, self.phrase_count, self.word_count,
            self.homonym_count, len(self.skipped),
        )
        return self

    # -- queries -----------------------------------------------------------

    def phrase_entries(self) -> tuple[PatternEntry, ...]:
        return self._entries["phrase"]

    def word_entries(self) -> tuple[PatternEntry, ...]:
        return self._entries["word"]

    @property
    def phrase_count(self) -> int:
        return len(self._entries["phrase"])

    @property
    def word_count(self) -> int:
        return len(self._entries["word"])

    @property
    def homonym_count(self) -> int:
        """Spellings (either category) with more than one sense."""
        return sum(1 for group in self._lookup.values() if group.is_homonym)

    def lookup(self, spelling: str, category: Category = "word") -> HomonymGroup | None:
        """Find the group for *spelling* (any case, whitespace collapsed)."""
        return self._lookup.get((category, fold_text(collapse_whitespace(spelling))))

    def known_base_forms(self) -> frozenset[str]:
        """Folded base forms plus all indexed single-word spellings."""
        known = {entry.normalized for entry in self._entries["word"]}
        for entries in self._entries.values():
            for entry in entries:
                for sense in entry.payload.senses:
                    if sense.base_form:
                        known.add(fold_text(sense.base_form))
        return frozenset(known)

    def stats(self) -> dict[str, int]:
        return {
            "records": self.record_count,
            "phrases": self.phrase_count,
            "words": self.word_count,
            "homonyms": self.homonym_count,
            "skipped": len(self.skipped),
        }


def load_dictionary(
    word_records: RawRecords | None = None,
    phrase_records: RawRecords | None = None,
) -> DictionaryIndex:
    """Load, normalize and group raw records into a built index."""
    index = DictionaryIndex()
    if word_records is not None:
        index.add_records(word_records, "word")
    if phrase_records is not None:
        index.add_records(phrase_records, "phrase")
    return index.build()


def load_dictionary_files(
    words_path: Path | None = None,
    phrases_path: Path | None = None,
) -> DictionaryIndex:
    """Load JSON dictionaries from disk (either may be omitted)."""
    words = load_json(words_path) if words_path is not None else None
    phrases = load_json(phrases_path) if phrases_path is not None else None
    return load_dictionary(words, phrases)
