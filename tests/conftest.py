"""Test configuration and fixtures."""
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from kotoba_lookup.deinflect import parse_deinflection_data
from kotoba_lookup.dictionary import WordDict, WordEntry, WordIndex, build_word_index
from kotoba_lookup.pitch import PitchTable
from kotoba_lookup.search import Dictionaries

# Word types used by the sample rules
V1 = 0x01
ADJ_I = 0x04

RULES_TEXT = "\n".join([
    "sample rules",
    "negative",
    "past",
    "polite",
    f"かった\tい\t{(ADJ_I << 8) | ADJ_I}\t1",
    f"ない\tる\t{(V1 << 8) | ADJ_I}\t0",
    f"ます\tる\t{(V1 << 8) | 0xFF}\t2",
    f"た\tる\t{(V1 << 8) | 0xFF}\t1",
    "",
])

ENTRIES = [
    WordEntry("食べる", "たべる", ("(v1,vt) to eat",)),
    WordEntry("食べ物", "たべもの", ("food",)),
    WordEntry("話す", "はなす", ("(v5s) to talk", "to speak")),
    WordEntry("見る", "みる", ("to see", "to look")),
    WordEntry("テレビ", "", ("television", "TV")),
]

PITCH_TEXT = "\n".join(sorted([
    "話す\tハナス\t2",
    "食べる\tタベル\t2",
    "見る\tミル\t1",
    "テレビ\tテレビ\t1",
])) + "\n"


def make_dictionaries(entries=ENTRIES, rules_text=RULES_TEXT, pitch_text=PITCH_TEXT):
    dict_text, index_text = build_word_index(entries)
    rules = parse_deinflection_data(rules_text.split("\n"))
    return Dictionaries(
        word_dict=WordDict(dict_text),
        word_index=WordIndex(index_text),
        reasons=rules.reasons,
        rule_groups=rules.rule_groups,
        pitch_table=PitchTable(pitch_text),
    )


@pytest.fixture
def rule_data():
    """Parsed sample deinflection rules."""
    return parse_deinflection_data(RULES_TEXT.split("\n"))


@pytest.fixture
def dictionaries():
    """Sample dictionary bundle."""
    return make_dictionaries()


@pytest.fixture
def assets_dir(tmp_path):
    """Directory holding the sample assets as files."""
    dict_text, index_text = build_word_index(ENTRIES)
    (tmp_path / "word-dict.txt").write_text(dict_text, encoding="utf-8")
    (tmp_path / "word-dict-index.txt").write_text(index_text, encoding="utf-8")
    (tmp_path / "deinflect.txt").write_text(RULES_TEXT, encoding="utf-8")
    (tmp_path / "pitch-accents.txt").write_text(PITCH_TEXT, encoding="utf-8")
    return tmp_path
