#!/usr/bin/env python3
"""List words of a text that the word dictionary does not know.

Each unknown word is paired with the best example sentence from the text.

Usage:
    python3 scripts/unknown_words.py --words words.json --input chapter.txt
    python3 scripts/unknown_words.py --words words.json --input chapter.txt --tsv

Outputs JSON (or tab-separated ``word<TAB>sentence`` lines) to stdout.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import orjson

from glossator.dictionary import load_dictionary_files
from glossator.errors import GlossatorError
from glossator.io_utils import read_text
from glossator.text_stats import collect_unknown_words

log = logging.getLogger("unknown_words")


def dump_json(obj: object) -> None:
    sys.stdout.buffer.write(orjson.dumps(obj, option=orjson.OPT_INDENT_2))
    sys.stdout.buffer.write(b"\n")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Find words missing from the dictionary.")
    parser.add_argument("--words", type=Path, required=True, help="Word dictionary JSON")
    parser.add_argument("--input", type=Path, required=True, help="Text file")
    parser.add_argument("--tsv", action="store_true", help="Tab-separated output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        index = load_dictionary_files(args.words)
        text = read_text(args.input)
    except (OSError, ValueError, GlossatorError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    unknown = collect_unknown_words(text, index.known_base_forms())
    print(f"Unknown words: {len(unknown)}", file=sys.stderr)
    if args.tsv:
        for word, sentence in unknown.items():
            sys.stdout.write(f"{word}\t{sentence}\n")
    else:
        dump_json([{"word": w, "sentence": s} for w, s in unknown.items()])
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
