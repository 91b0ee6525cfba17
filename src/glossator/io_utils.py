"""I/O utilities for JSON and text file operations.

orjson-backed JSON loading for dictionaries and configs, plus
encoding-safe text reading for the command-line scripts.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson


def load_json(path: Path) -> Any:
    """Load JSON from a file."""
    return orjson.loads(path.read_bytes())


def read_text(fpath: Path) -> str:
    """Read a text file with encoding fallback: UTF-8 -> CP1252 -> replace.

    CP1252 covers e-book exports with Windows smart quotes. Raises OSError
    if the file cannot be opened.
    """
    try:
        return fpath.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        try:
            return fpath.read_text(encoding="cp1252")
        except UnicodeDecodeError:
            with open(fpath, encoding="utf-8", errors="replace") as f:
                return f.read()
