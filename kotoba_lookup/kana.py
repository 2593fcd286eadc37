"""
Kana normalization for kotoba-lookup.

User input and dictionary keys are brought onto one comparable alphabet
(hiragana) before any comparison happens:

- lowercase romaji chunks are converted to hiragana, other letters are kept
- katakana characters are shifted to their hiragana counterparts

Conversion tables come from jaconv.
"""

import re
from typing import List

import jaconv


# =============================================================================
# Character Sets
# =============================================================================

# Small kana that attach to the preceding kana to form one mora
SMALL_KANA = frozenset([
    'ゃ', 'ゅ', 'ょ', 'ぅ', 'ぃ',
    'ャ', 'ュ', 'ョ', 'ァ', 'ィ', 'ゥ', 'ェ', 'ォ',
])


# =============================================================================
# Conversion
# =============================================================================

# Lowercase Latin runs are the only candidates for romaji conversion
_LATIN_RUN = re.compile(r"[a-z]+")

# One romaji chunk at the start of a position:
#   sokuon   - doubled consonant ahead of a syllable ("tt" in "katta")
#   n        - syllabic n not starting a syllable ("n" in "hon")
#   syllable - consonants plus a vowel, converted by jaconv
_ROMAJI_CHUNK = re.compile(
    r"(?P<sokuon>([bcdfghjkmpqrstvwxz])(?=\2[bcdfghjklmnpqrstvwxyz]{0,2}[aeiou]))"
    r"|(?P<n>nn?)(?![aeiouy])"
    r"|(?P<syllable>[bcdfghjklmnpqrstvwxyz]{0,3}[aeiou])"
)


def _is_plain_hiragana(text: str) -> bool:
    return bool(text) and all('ぁ' <= char <= 'ゖ' and char != 'っ' for char in text)


def _convert_latin_run(run: str) -> str:
    """Convert a run of lowercase letters chunk by chunk; leftovers stay Latin."""
    converted: List[str] = []
    pos = 0
    while pos < len(run):
        match = _ROMAJI_CHUNK.match(run, pos)
        kana = None
        if match is not None:
            if match.group('sokuon'):
                kana = 'っ'
            elif match.group('n'):
                kana = 'ん'
            else:
                kana = jaconv.alphabet2kana(match.group('syllable'))
                if not _is_plain_hiragana(kana):
                    kana = None

        if kana is None:
            converted.append(run[pos])
            pos += 1
        else:
            converted.append(kana)
            pos = match.end()

    return "".join(converted)


def romaji_to_hiragana(text: str) -> str:
    """
    Convert romanized chunks of text to hiragana.

    Only lowercase romaji is converted. A letter that does not belong to a
    complete romaji chunk passes through unchanged, as do kanji, kana,
    punctuation and uppercase Latin.

    Example:
        >>> romaji_to_hiragana("taberu")
        'たべる'
        >>> romaji_to_hiragana("tabet")
        'たべt'
        >>> romaji_to_hiragana("CD")
        'CD'
    """
    if not text:
        return text
    return _LATIN_RUN.sub(lambda m: _convert_latin_run(m.group()), text)


def katakana_to_hiragana(text: str) -> str:
    """
    Shift katakana characters to hiragana; everything else is unchanged.

    Idempotent: hiragana input is a fixed point.
    """
    if not text:
        return text
    return jaconv.kata2hira(text)


def normalize_key(text: str) -> str:
    """Normalize text to the hiragana alphabet used by index keys."""
    return katakana_to_hiragana(romaji_to_hiragana(text))


# =============================================================================
# Morae
# =============================================================================

def get_moras(pronunciation: str) -> List[str]:
    """
    Split a reading into morae.

    Small kana (ゃ, ュ, ...) are merged into the preceding mora.

    Example:
        >>> get_moras("きょうと")
        ['きょ', 'う', 'と']
    """
    moras: List[str] = []
    current = ""
    for char in pronunciation:
        if not current or char in SMALL_KANA:
            current += char
        else:
            moras.append(current)
            current = char
    if current:
        moras.append(current)
    return moras
