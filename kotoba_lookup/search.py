"""
Word search for kotoba-lookup.

search_word() is the single query entry point. It trims the input from the
end one character at a time, normalizes each prefix to hiragana, expands it
into deinflected candidates and probes the index with every candidate not
seen before. The longest prefix that matched is reported so a caller can
highlight the consumed part of the input.
"""

import re
from dataclasses import dataclass, replace
from typing import List, Set, Tuple

from kotoba_lookup.deinflect import RuleGroup, deinflect
from kotoba_lookup.dictionary import WordDict, WordEntry, WordIndex
from kotoba_lookup.kana import normalize_key
from kotoba_lookup.pitch import PitchTable


# =============================================================================
# Data Structures
# =============================================================================

@dataclass(frozen=True, slots=True)
class Dictionaries:
    """
    Everything a search reads, loaded once and never modified.

    Attributes:
        word_dict: Packed entry store (word-dict.txt)
        word_index: Sorted key index (word-dict-index.txt)
        reasons: Deinflection reason names
        rule_groups: Deinflection rules grouped by suffix length
        pitch_table: Pitch-accent table (pitch-accents.txt)
    """
    word_dict: WordDict
    word_index: WordIndex
    reasons: Tuple[str, ...]
    rule_groups: Tuple[RuleGroup, ...]
    pitch_table: PitchTable


@dataclass(frozen=True, slots=True)
class WordSearchResult:
    """
    Result of a search.

    Attributes:
        selected_text_length: Length of the longest input prefix that
            matched (1 when nothing matched)
        word_entries: Matched entries, longest prefix first
    """
    selected_text_length: int
    word_entries: List[WordEntry]

    def to_dict(self) -> dict:
        return {
            "selected_text_length": self.selected_text_length,
            "word_entries": [entry.to_dict() for entry in self.word_entries],
        }


# =============================================================================
# Search
# =============================================================================

_WHITESPACE = re.compile(r"\s")


def clean_query(text: str) -> str:
    """Remove all whitespace from raw input."""
    return _WHITESPACE.sub("", text)


def search_word(dictionaries: Dictionaries, text: str) -> WordSearchResult:
    """
    Look up the dictionary entries matching the start of text.

    Args:
        dictionaries: Loaded dictionary bundle
        text: Raw input (kana, kanji or romaji, possibly inflected)

    Returns:
        WordSearchResult with entries in discovery order

    Example:
        >>> result = search_word(dictionaries, "たべなかった")
        >>> result.word_entries[0].headword
        '食べる'
    """
    entries: List[WordEntry] = []
    searched: Set[str] = set()
    selected_text_length = 1

    for length in range(len(text), 0, -1):
        prefix = normalize_key(text[:length])
        candidates = deinflect(dictionaries.reasons, dictionaries.rule_groups, prefix)

        for candidate in candidates:
            if candidate.word in searched:
                continue
            searched.add(candidate.word)

            offsets = dictionaries.word_index.lookup(candidate.word)
            if not offsets:
                continue

            selected_text_length = max(selected_text_length, length)
            for entry in dictionaries.word_dict.entries_at(offsets):
                accents = dictionaries.pitch_table.lookup(entry.headword, entry.reading)
                entries.append(replace(entry, pitch_accents=tuple(accents)))

    return WordSearchResult(selected_text_length=selected_text_length, word_entries=entries)
