"""Core value types shared by the dictionary, automaton, resolver and splicer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, TypeAlias


Category: TypeAlias = Literal["phrase", "word"]

CATEGORIES: tuple[Category, ...] = ("phrase", "word")

# Rendering order of descriptive fields (also the data-* attribute order).
METADATA_FIELDS: tuple[str, ...] = (
    "part_of_speech",
    "cefr",
    "translation",
    "base_form",
    "base_translation",
)


@dataclass(frozen=True, slots=True)
class Metadata:
    """One dictionary sense attached to a pattern."""

    source_key: str
    part_of_speech: str | None = None
    cefr: str | None = None
    translation: str | None = None
    base_form: str | None = None
    base_translation: str | None = None

    @property
    def richness(self) -> int:
        """Number of populated descriptive fields."""
        return sum(1 for name in METADATA_FIELDS if getattr(self, name))

    def to_dict(self) -> dict[str, str]:
        out = {"source_key": self.source_key}
        for name in METADATA_FIELDS:
            value = getattr(self, name)
            if value:
                out[name] = value
        return out


@dataclass(frozen=True, slots=True)
class HomonymGroup:
    """All senses sharing one normalized spelling, in dictionary order."""

    spelling: str
    senses: tuple[Metadata, ...]

    def __post_init__(self) -> None:
        if not self.spelling:
            raise ValueError("spelling cannot be empty")
        if not self.senses:
            raise ValueError(f"homonym group {self.spelling!r} has no senses")

    @property
    def size(self) -> int:
        return len(self.senses)

    @property
    def is_homonym(self) -> bool:
        return len(self.senses) > 1

    def merge(self, other: HomonymGroup | Metadata) -> HomonymGroup:
        """Return a group with the distinct senses of *other* appended."""
        incoming = other.senses if isinstance(other, HomonymGroup) else (other,)
        senses = list(self.senses)
        for sense in incoming:
            if sense not in senses:
                senses.append(sense)
        if len(senses) == len(self.senses):
            return self
        return HomonymGroup(spelling=self.spelling, senses=tuple(senses))


@dataclass(frozen=True, slots=True)
class PatternEntry:
    """A dictionary spelling ready for automaton insertion."""

    pattern: str  # display form, original case
    normalized: str  # case-folded matching form
    category: Category
    payload: HomonymGroup

    def __post_init__(self) -> None:
        if not self.pattern or not self.normalized:
            raise ValueError("pattern cannot be empty")
        if len(self.pattern) != len(self.normalized):
            raise ValueError(
                f"normalized form of {self.pattern!r} must keep its length",
            )
        if self.category not in CATEGORIES:
            raise ValueError(f"unknown category {self.category!r}")


@dataclass(frozen=True, slots=True)
class MatchSpan:
    """A located pattern occurrence with half-open character offsets."""

    start: int
    end: int
    category: Category
    payloads: tuple[Metadata, ...]
    pattern: str
    group_size: int = 1

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"start must be >= 0, got {self.start}")
        if self.end <= self.start:
            raise ValueError(
                f"end must be > start, got {self.end} <= {self.start}",
            )
        if self.end - self.start != len(self.pattern):
            raise ValueError(
                f"span length {self.end - self.start} does not match "
                f"pattern {self.pattern!r}",
            )
        if self.group_size < 1:
            raise ValueError("group_size must be >= 1")

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def is_homonym(self) -> bool:
        return self.group_size > 1


def span_to_dict(span: MatchSpan) -> dict[str, Any]:
    """Serialize a span for renderers and JSON output."""
    return {
        "start": span.start,
        "end": span.end,
        "category": span.category,
        "pattern": span.pattern,
        "group_size": span.group_size,
        "payloads": [p.to_dict() for p in span.payloads],
    }
