"""Annotator configuration loaded from JSON."""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

from glossator.io_utils import load_json
from glossator.splicer import HomonymMode, MarkerStyle

# Same ceiling the reader's worker applied to incoming text.
DEFAULT_MAX_TEXT_LENGTH = 10 * 1024 * 1024

_HOMONYM_MODES: tuple[HomonymMode, ...] = ("nested", "richest")


@dataclass(frozen=True, slots=True)
class AnnotatorConfig:
    max_text_length: int | None = DEFAULT_MAX_TEXT_LENGTH  # None disables the check
    homonym_mode: HomonymMode = "nested"
    marker_tag: str = "span"
    marker_class_prefix: str = "gloss"
    apply_phrases: bool = True
    apply_words: bool = True

    def __post_init__(self) -> None:
        if self.max_text_length is not None and self.max_text_length <= 0:
            raise ValueError(
                f"max_text_length must be positive, got {self.max_text_length}",
            )
        if self.homonym_mode not in _HOMONYM_MODES:
            raise ValueError(
                f"homonym_mode must be one of {_HOMONYM_MODES}, got {self.homonym_mode!r}",
            )
        # Validates tag/prefix.
        self.marker_style()

    def marker_style(self) -> MarkerStyle:
        return MarkerStyle(tag=self.marker_tag, class_prefix=self.marker_class_prefix)


def config_from_dict(payload: dict[str, Any]) -> AnnotatorConfig:
    """Build a config from a dict, ignoring unknown keys."""
    known = {f.name for f in fields(AnnotatorConfig)}
    return AnnotatorConfig(**{k: v for k, v in payload.items() if k in known})


def config_to_dict(config: AnnotatorConfig) -> dict[str, Any]:
    return asdict(config)


def load_config(path: Path | None) -> AnnotatorConfig:
    """Load a config JSON file; ``None`` yields the defaults."""
    if path is None:
        return AnnotatorConfig()
    payload = load_json(path)
    if not isinstance(payload, dict):
        raise ValueError(f"config {path} must contain a JSON object")
    return config_from_dict(payload)
