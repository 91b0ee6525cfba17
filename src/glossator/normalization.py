"""Length-preserving case folding and dictionary key normalization.

Matching offsets are character offsets into the caller's text, so folding
must never change a string's length. ``str.lower()`` does for a handful of
characters (``"İ".lower()`` is two code points); those characters are kept
as-is, on both the pattern side and the text side.
"""

from __future__ import annotations

import re

_WS_RE = re.compile(r"\s+")


def fold_char(ch: str) -> str:
    """Lowercase one character, keeping it unchanged if lowering alters length."""
    low = ch.lower()
    return low if len(low) == 1 else ch


def fold_text(text: str) -> str:
    """Fold every character of *text*; ``len(fold_text(s)) == len(s)``."""
    return "".join(fold_char(ch) for ch in text)


def collapse_whitespace(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()


def split_key_suffix(key: str) -> tuple[str, str | None]:
    """Split ``"word_noun"`` into ``("word", "noun")``.

    Only the first underscore separates the type tag; keys without one have
    no tag.
    """
    spelling, sep, tag = key.partition("_")
    tag = tag.strip()
    return spelling, (tag if sep and tag else None)


def token_count(spelling: str) -> int:
    return len(spelling.split())
