#!/usr/bin/env python3
"""Word frequency statistics for a reading text.

Usage:
    python3 scripts/word_stats.py --input chapter.txt --top 100

Outputs JSON to stdout.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import orjson

from glossator.io_utils import read_text
from glossator.text_stats import DEFAULT_CHUNK_SIZE, extract_words, word_statistics


def dump_json(obj: object) -> None:
    sys.stdout.buffer.write(orjson.dumps(obj, option=orjson.OPT_INDENT_2))
    sys.stdout.buffer.write(b"\n")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Count words in a text file.")
    parser.add_argument("--input", type=Path, required=True, help="Text file")
    parser.add_argument("--top", type=int, default=500, help="Most common words to list")
    parser.add_argument(
        "--chunk-size",
        type=int,
        default=DEFAULT_CHUNK_SIZE,
        help="Characters per processing chunk for large inputs",
    )
    args = parser.parse_args(argv)

    try:
        text = read_text(args.input)
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    stats = word_statistics(extract_words(text, chunk_size=args.chunk_size), top=args.top)
    print(
        f"{stats.total_words} words, {stats.unique_words} unique",
        file=sys.stderr,
    )
    dump_json({
        "total_words": stats.total_words,
        "unique_words": stats.unique_words,
        "most_common": [{"word": w, "count": c} for w, c in stats.most_common],
    })
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
