"""Word-boundary classification shared by the resolver.

A match is only valid when the characters on both sides of it are boundary
characters or the edges of the text, so ``cat`` never matches inside
``category``.
"""
from __future__ import annotations

# Punctuation that separates words, in addition to any whitespace.
BOUNDARY_PUNCTUATION: frozenset[str] = frozenset(".,!?;:\"'()[]{}<>\\/-—")


def is_boundary(ch: str) -> bool:
    """True for whitespace and separator punctuation."""
    return ch.isspace() or ch in BOUNDARY_PUNCTUATION


def has_word_boundaries(text: str, start: int, end: int) -> bool:
    """Check that ``text[start:end]`` is delimited by boundaries or text edges."""
    if start > 0 and not is_boundary(text[start - 1]):
        return False
    if end < len(text) and not is_boundary(text[end]):
        return False
    return True
