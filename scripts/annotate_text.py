#!/usr/bin/env python3
"""Annotate a text or HTML file with dictionary phrases and words.

Usage:
    python3 scripts/annotate_text.py --words words.json --phrases phrases.json \
      --input chapter.txt
    python3 scripts/annotate_text.py --words words.json --input chapter.html \
      --markup --output annotated

Outputs structured JSON to stdout (spans, or annotated markup with
``--output annotated``), human messages to stderr.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import orjson

from glossator.config import load_config
from glossator.dictionary import load_dictionary_files
from glossator.errors import GlossatorError
from glossator.io_utils import read_text
from glossator.pipeline import annotate, annotate_markup, build_automata, spans_to_records

log = logging.getLogger("annotate_text")


def dump_json(obj: object) -> None:
    sys.stdout.buffer.write(orjson.dumps(obj, option=orjson.OPT_INDENT_2))
    sys.stdout.buffer.write(b"\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Annotate text with phrase and word dictionary entries."
    )
    parser.add_argument("--words", type=Path, default=None, help="Word dictionary JSON")
    parser.add_argument("--phrases", type=Path, default=None, help="Phrase dictionary JSON")
    parser.add_argument("--input", type=Path, required=True, help="Text or HTML file")
    parser.add_argument("--config", type=Path, default=None, help="Annotator config JSON")
    parser.add_argument(
        "--markup",
        action="store_true",
        help="Treat input as HTML and annotate its text nodes.",
    )
    parser.add_argument(
        "--output",
        choices=("spans", "annotated"),
        default="spans",
        help="Emit resolved spans (default) or the annotated document.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.words is None and args.phrases is None:
        log.error("At least one of --words / --phrases is required")
        return 2

    try:
        config = load_config(args.config)
        index = load_dictionary_files(args.words, args.phrases)
        text = read_text(args.input)
    except (OSError, ValueError, GlossatorError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    automata = build_automata(index)
    try:
        if args.markup:
            doc = annotate_markup(text, automata.phrase, automata.word, config=config)
        else:
            doc = annotate(text, automata.phrase, automata.word, config=config)
    except GlossatorError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    log.info(
        "Annotated %d characters: %d phrase spans, %d word spans",
        len(doc.text), doc.phrase_count, doc.word_count,
    )
    if args.output == "annotated":
        dump_json({"annotated": doc.annotated, "dictionary": index.stats()})
    else:
        dump_json({
            "spans": spans_to_records(doc.spans),
            "phrase_available": doc.phrase_available,
            "word_available": doc.word_available,
            "dictionary": index.stats(),
        })
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
