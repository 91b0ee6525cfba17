"""Dictionary-driven text annotation for language-learning readers."""

from glossator.automaton import PatternAutomaton, compile_automaton
from glossator.config import AnnotatorConfig, load_config
from glossator.dictionary import DictionaryIndex, load_dictionary, load_dictionary_files
from glossator.errors import (
    AutomatonSealedError,
    EmptyPatternError,
    GlossatorError,
    MalformedEntry,
    NotBuiltError,
    ScanInputTooLarge,
)
from glossator.pipeline import (
    AnnotatedDocument,
    AutomatonPair,
    annotate,
    annotate_markup,
    build_automata,
    build_phrase_automaton,
    build_word_automaton,
    spans_to_records,
)
from glossator.splicer import MarkerStyle, splice_markup, splice_text, strip_markers
from glossator.types import Category, HomonymGroup, MatchSpan, Metadata, PatternEntry

__all__ = [
    "AnnotatedDocument",
    "AnnotatorConfig",
    "AutomatonPair",
    "AutomatonSealedError",
    "Category",
    "DictionaryIndex",
    "EmptyPatternError",
    "GlossatorError",
    "HomonymGroup",
    "MalformedEntry",
    "MarkerStyle",
    "MatchSpan",
    "Metadata",
    "NotBuiltError",
    "PatternAutomaton",
    "PatternEntry",
    "ScanInputTooLarge",
    "annotate",
    "annotate_markup",
    "build_automata",
    "build_phrase_automaton",
    "build_word_automaton",
    "compile_automaton",
    "load_config",
    "load_dictionary",
    "load_dictionary_files",
    "spans_to_records",
    "splice_markup",
    "splice_text",
    "strip_markers",
]
