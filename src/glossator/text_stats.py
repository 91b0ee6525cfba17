"""Reading-text statistics: word frequencies and unknown-word discovery.

Both work on plain text and a set of known (folded) spellings; neither
depends on the automata.
"""
from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass

DEFAULT_CHUNK_SIZE = 1_000_000

_PUNCT_RE = re.compile(r"[\"“”«»?!….,;:{}=()\[\]/\\@#$%^&*+~`|_\d]")
_WS_RE = re.compile(r"\s+")
_WORD_RE = re.compile(r"^[^\W\d_]+(?:-[^\W\d_]+)*(?:'[^\W\d_]*)*$")

_SENTENCE_RE = re.compile(r"[^.!?]+[.!?]*")
_SENTENCE_NOISE_RE = re.compile(r"[#*_\[\]•]")
_YEAR_RE = re.compile(r"\(\d{4}\)")
_CLAUSE_PUNCT_RE = re.compile(r"[(),:;]")
_SKIP_MARKERS: tuple[str, ...] = ("ISBN", "förlag")


@dataclass(frozen=True, slots=True)
class WordStatistics:
    total_words: int
    unique_words: int
    most_common: tuple[tuple[str, int], ...]


def clean_text(text: str) -> str:
    """Replace punctuation and digits with spaces, collapse, lowercase."""
    return _WS_RE.sub(" ", _PUNCT_RE.sub(" ", text)).strip().lower()


def _words_in(text: str) -> list[str]:
    return [w for w in clean_text(text).split(" ") if w and _WORD_RE.match(w)]


def _chunks(text: str, chunk_size: int) -> Iterable[str]:
    """Split *text* into pieces of about *chunk_size*, cutting only at whitespace."""
    start = 0
    while start < len(text):
        end = min(start + chunk_size, len(text))
        if end < len(text) and not text[end].isspace():
            cut = end
            while cut > start and not text[cut - 1].isspace():
                cut -= 1
            if cut > start:
                end = cut
        yield text[start:end]
        start = end


def extract_words(text: str, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> list[str]:
    """Lowercased words (letters, inner hyphens/apostrophes) in text order."""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    if len(text) <= chunk_size:
        return _words_in(text)
    words: list[str] = []
    for chunk in _chunks(text, chunk_size):
        words.extend(_words_in(chunk))
    return words


def word_statistics(words: Iterable[str], *, top: int | None = 500) -> WordStatistics:
    counts = Counter(words)
    return WordStatistics(
        total_words=sum(counts.values()),
        unique_words=len(counts),
        most_common=tuple(counts.most_common(top)),
    )


# ---------------------------------------------------------------------------
# Unknown words
# ---------------------------------------------------------------------------


def split_sentences(text: str) -> list[str]:
    return [s.strip() for s in _SENTENCE_RE.findall(text) if s.strip()]


def clean_sentence(sentence: str) -> str:
    sentence = sentence.strip()
    sentence = re.sub(r"^[\"']|[\"']$", "", sentence)
    sentence = _SENTENCE_NOISE_RE.sub("", sentence)
    return _WS_RE.sub(" ", sentence).strip()


def clean_word(word: str) -> str:
    """Keep letters only, lowercased."""
    return re.sub(r"[\W\d_]", "", word).lower()


def is_suitable_sentence(sentence: str) -> bool:
    """Reject fragments, bibliography lines, headings and bullet lists."""
    if len(sentence) < 10:
        return False
    if len(sentence.split(" ")) < 4:
        return False
    if any(marker in sentence for marker in _SKIP_MARKERS):
        return False
    if sentence.startswith(("TACK", "Tack")):
        return False
    if _YEAR_RE.search(sentence):
        return False
    if sentence.count("•") >= 2:
        return False
    if _is_all_caps(sentence):
        return False
    return True


def _is_all_caps(sentence: str) -> bool:
    """Headings: only uppercase letters and spaces."""
    return all(ch.isspace() or (ch.isalpha() and ch.isupper()) for ch in sentence)


def rate_sentence(sentence: str) -> int:
    """Higher is a better example: complete, capitalized, short-ish."""
    score = 0
    if sentence.endswith((".", "!", "?")):
        score += 3
    if sentence[:1].isupper():
        score += 2
    count = len(sentence.split(" "))
    if 4 <= count <= 15:
        score += 2
    if 4 <= count <= 10:
        score += 1
    if len(_CLAUSE_PUNCT_RE.findall(sentence)) > 2:
        score -= 1
    return score


def collect_unknown_words(text: str, known_words: Iterable[str]) -> dict[str, str]:
    """Map each word missing from *known_words* to its best example sentence.

    Words are reported in first-seen order. A word whose sentences are all
    unsuitable is left out.
    """
    known = {w.lower() for w in known_words}
    examples: dict[str, list[str]] = {}
    for sentence in split_sentences(text):
        if not is_suitable_sentence(sentence):
            continue
        cleaned = clean_sentence(sentence)
        for raw in cleaned.lower().split():
            word = clean_word(raw)
            if not word or word in known:
                continue
            bucket = examples.setdefault(word, [])
            if cleaned not in bucket:
                bucket.append(cleaned)

    best: dict[str, str] = {}
    for word, sentences in examples.items():
        usable = [s for s in sentences if is_suitable_sentence(s)]
        if usable:
            best[word] = max(usable, key=rate_sentence)
    return best
