"""
Packed word dictionary for kotoba-lookup.

The dictionary is made of two flat text files:

- word-dict.txt: one EDICT-style entry per line
      食べる [たべる] /to eat/
- word-dict-index.txt: sorted lines of the form
      normalizedKey,offset1,offset2,...
  where each offset is the UTF-8 byte position of an entry line in
  word-dict.txt (after CR removal).

WordIndex binary-searches the index lines; WordDict resolves offsets back to
entry lines.
"""

import logging
import re
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from kotoba_lookup.kana import normalize_key

logger = logging.getLogger(__name__)


# ============================================================================
# Entry Schema
# ============================================================================

@dataclass(frozen=True, slots=True)
class WordEntry:
    """
    A dictionary entry.

    Attributes:
        headword: The dictionary form as listed (kanji or kana)
        reading: Kana reading ("" when the headword is its own reading)
        glosses: English glosses in dictionary order
        pitch_accents: Downstep positions, empty when unknown
    """
    headword: str
    reading: str
    glosses: Tuple[str, ...]
    pitch_accents: Tuple[int, ...] = field(default=())

    def to_dict(self) -> dict:
        return {
            "headword": self.headword,
            "reading": self.reading,
            "glosses": list(self.glosses),
            "pitch_accents": list(self.pitch_accents),
        }


# HEADWORD [READING] /gloss1/gloss2/.../
ENTRY_PATTERN = re.compile(r"^(.+?)\s+(?:\[(.*?)\])?\s*/(.+)/")


def parse_entry_line(line: str) -> Optional[WordEntry]:
    """
    Parse one word-dict.txt line.

    Args:
        line: The raw line, without terminator

    Returns:
        WordEntry, or None if the line does not have the expected shape
    """
    match = ENTRY_PATTERN.match(line)
    if match is None:
        return None

    headword, reading, glosses = match.groups()
    if not headword or not glosses:
        return None

    return WordEntry(
        headword=headword,
        reading=reading or "",
        glosses=tuple(glosses.split("/")),
    )


def format_entry_line(entry: WordEntry) -> str:
    """Format an entry as a word-dict.txt line (inverse of parse_entry_line)."""
    glosses = "/".join(entry.glosses)
    if entry.reading:
        return f"{entry.headword} [{entry.reading}] /{glosses}/"
    return f"{entry.headword} /{glosses}/"


# ============================================================================
# Entry Store
# ============================================================================

class WordDict:
    """
    Offset-addressed store over the packed dictionary blob.

    Offsets are byte positions, so the text is kept UTF-8 encoded with line
    endings normalized to a single "\\n".
    """

    __slots__ = ("_blob",)

    def __init__(self, text: str):
        self._blob = text.replace("\r", "").encode("utf-8")

    def __len__(self) -> int:
        return len(self._blob)

    def line_at(self, offset: int) -> Optional[str]:
        """
        Get the line starting at a byte offset.

        Returns:
            The line text, or None if the offset is out of range or does
            not point at decodable text
        """
        if offset < 0 or offset >= len(self._blob):
            return None

        end = self._blob.find(b"\n", offset)
        if end < 0:
            end = len(self._blob)

        try:
            return self._blob[offset:end].decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("Offset %d does not start a UTF-8 line", offset)
            return None

    def entries_at(self, offsets: Iterable[int]) -> List[WordEntry]:
        """Parse the entries at the given offsets, dropping malformed lines."""
        entries = []
        for offset in offsets:
            line = self.line_at(offset)
            entry = parse_entry_line(line) if line is not None else None
            if entry is None:
                logger.debug("Malformed word-dict.txt line at offset %d", offset)
                continue
            entries.append(entry)
        return entries


# ============================================================================
# Index
# ============================================================================

def _parse_index_line(line: str) -> Optional[Tuple[str, List[int]]]:
    key, *offsets = line.split(",")
    if not key:
        return None
    try:
        return key, [int(offset) for offset in offsets]
    except ValueError:
        return None


class WordIndex:
    """
    Sorted index from normalized headword/reading keys to entry offsets.

    Lines are split once at construction; each probe binary-searches the
    line table and parses only the lines it visits.
    """

    __slots__ = ("_lines",)

    def __init__(self, text: str):
        lines = text.replace("\r", "").split("\n")
        if lines and not lines[-1]:
            lines.pop()
        self._lines = tuple(lines)

    def __len__(self) -> int:
        return len(self._lines)

    def lookup(self, word: str) -> List[int]:
        """
        Find the entry offsets stored for a word.

        The word is normalized to hiragana before comparison. A visited line
        that cannot be parsed ends the search as a miss.

        Args:
            word: Candidate word (any mix of romaji, katakana, hiragana, kanji)

        Returns:
            Byte offsets stored for the key, empty when the key is absent
        """
        key = normalize_key(word)
        lo, hi = 0, len(self._lines) - 1

        while lo <= hi:
            mid = (lo + hi) // 2
            parsed = _parse_index_line(self._lines[mid])
            if parsed is None:
                logger.debug("Malformed word-dict-index.txt line #%d: %r", mid, self._lines[mid])
                return []

            mid_key, offsets = parsed
            if mid_key == key:
                return offsets
            if mid_key < key:
                lo = mid + 1
            else:
                hi = mid - 1

        return []


# ============================================================================
# Building
# ============================================================================

def build_word_index(entries: Iterable[WordEntry]) -> Tuple[str, str]:
    """
    Pack entries into word-dict.txt and word-dict-index.txt contents.

    Every entry is indexed under the normalized form of its headword and of
    its reading. Index lines are sorted by key.

    Args:
        entries: Entries in the order they should appear in word-dict.txt

    Returns:
        Tuple of (dictionary text, index text)
    """
    lines: List[str] = []
    keys: Dict[str, List[int]] = defaultdict(list)
    offset = 0

    for entry in entries:
        line = format_entry_line(entry)
        for key in dict.fromkeys(normalize_key(text) for text in (entry.headword, entry.reading) if text):
            keys[key].append(offset)
        lines.append(line)
        offset += len(line.encode("utf-8")) + 1

    dict_text = "".join(line + "\n" for line in lines)
    index_text = "".join(
        ",".join([key, *map(str, offsets)]) + "\n"
        for key, offsets in sorted(keys.items())
    )
    return dict_text, index_text
