"""
Pitch-accent lookup for kotoba-lookup.

pitch-accents.txt holds tab-separated lines sorted by (word, reading):

    話す<TAB>ハナス<TAB>2
    箸<TAB>ハシ<TAB>1

The accent numbers are downstep positions: the mora after which the pitch
drops (0 = no drop, heiban).
"""

import logging
from typing import List, Optional, Tuple

from kotoba_lookup.kana import get_moras, katakana_to_hiragana

logger = logging.getLogger(__name__)

# Marker rendered after the mora where pitch drops
DOWNSTEP_MARK = "ꜜ"


def _parse_pitch_line(line: str) -> Optional[Tuple[str, str, List[int]]]:
    fields = line.split("\t")
    if len(fields) < 3 or not fields[0] or not fields[1]:
        return None
    try:
        accents = [int(accent) for accent in fields[2].split(",")]
    except ValueError:
        return None
    return fields[0], fields[1], accents


class PitchTable:
    """Sorted pitch-accent table searched by (headword, reading)."""

    __slots__ = ("_lines",)

    def __init__(self, text: str):
        lines = text.replace("\r", "").split("\n")
        if lines and not lines[-1]:
            lines.pop()
        self._lines = tuple(lines)

    def __len__(self) -> int:
        return len(self._lines)

    def lookup(self, headword: str, reading: str = "") -> List[int]:
        """
        Get the downstep positions of a word.

        The table stores readings in katakana; a query reading matches when
        it equals either the stored katakana or its hiragana form. An empty
        reading means the headword is written in kana and is used instead.

        Args:
            headword: Dictionary headword
            reading: Kana reading of the headword

        Returns:
            Accent positions, or an empty list when absent or when a visited
            line is malformed
        """
        reading = reading or headword
        lo, hi = 0, len(self._lines) - 1

        while lo <= hi:
            mid = (lo + hi) // 2
            parsed = _parse_pitch_line(self._lines[mid])
            if parsed is None:
                logger.warning("Invalid pitch-accents.txt line #%d: %r", mid, self._lines[mid])
                return []

            word, reading_katakana, accents = parsed
            if headword == word:
                reading_hiragana = katakana_to_hiragana(reading_katakana)
                if reading in (reading_hiragana, reading_katakana):
                    return accents
                if reading < reading_hiragana:
                    hi = mid - 1
                else:
                    lo = mid + 1
            elif headword < word:
                hi = mid - 1
            else:
                lo = mid + 1

        return []


def format_pitch(reading: str, accent: int) -> str:
    """
    Render a reading with a downstep mark.

    Example:
        >>> format_pitch("はなす", 2)
        'はなꜜす'
        >>> format_pitch("さくら", 0)
        'さくら'
    """
    moras = get_moras(reading)
    if accent <= 0 or accent > len(moras):
        return "".join(moras)
    return "".join(moras[:accent]) + DOWNSTEP_MARK + "".join(moras[accent:])
