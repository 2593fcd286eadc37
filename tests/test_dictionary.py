"""Tests for the packed dictionary and its index."""
import pytest

from kotoba_lookup.dictionary import (
    WordDict,
    WordEntry,
    WordIndex,
    build_word_index,
    format_entry_line,
    parse_entry_line,
)

from tests.conftest import ENTRIES


class TestParseEntryLine:

    def test_full_line(self):
        entry = parse_entry_line("食べる [たべる] /(v1,vt) to eat/")
        assert entry == WordEntry("食べる", "たべる", ("(v1,vt) to eat",))

    def test_without_reading(self):
        entry = parse_entry_line("テレビ /television/TV/")
        assert entry.headword == "テレビ"
        assert entry.reading == ""
        assert entry.glosses == ("television", "TV")

    @pytest.mark.parametrize("line", [
        "",
        "食べる",
        "食べる [たべる]",
        "/gloss/",
        "食べる [たべる] no glosses",
    ])
    def test_malformed(self, line):
        assert parse_entry_line(line) is None

    @pytest.mark.parametrize("entry", ENTRIES)
    def test_format_round_trip(self, entry):
        assert parse_entry_line(format_entry_line(entry)) == entry


class TestWordDict:

    def test_line_at_offsets(self):
        store = WordDict("あ [あ] /a/\n亜 [あ] /sub-/")
        assert store.line_at(0) == "あ [あ] /a/"
        second = len("あ [あ] /a/\n".encode("utf-8"))
        assert store.line_at(second) == "亜 [あ] /sub-/"

    def test_crlf_is_normalized(self):
        store = WordDict("あ [あ] /a/\r\nい [い] /i/\r\n")
        assert store.line_at(len("あ [あ] /a/\n".encode("utf-8"))) == "い [い] /i/"

    def test_out_of_range(self):
        store = WordDict("あ [あ] /a/\n")
        assert store.line_at(-1) is None
        assert store.line_at(len(store)) is None

    def test_offset_inside_character(self):
        store = WordDict("あ [あ] /a/\n")
        assert store.line_at(1) is None

    def test_entries_at_drops_malformed(self):
        store = WordDict("not an entry\nい [い] /i/\n")
        assert store.entries_at([0, 13]) == [WordEntry("い", "い", ("i",))]


class TestWordIndex:

    INDEX = "あ,0\nか,10,20\nさ,30\nた,40\nな,50\n"

    def test_present(self):
        assert WordIndex(self.INDEX).lookup("か") == [10, 20]

    def test_first_and_last(self):
        index = WordIndex(self.INDEX)
        assert index.lookup("あ") == [0]
        assert index.lookup("な") == [50]

    @pytest.mark.parametrize("word", ["い", "ぁ", "ん", "漢字"])
    def test_absent(self, word):
        assert WordIndex(self.INDEX).lookup(word) == []

    def test_probe_is_normalized(self):
        index = WordIndex(self.INDEX)
        assert index.lookup("カ") == [10, 20]
        assert index.lookup("ta") == [40]

    def test_empty_index(self):
        assert WordIndex("").lookup("あ") == []

    def test_malformed_line_aborts_search(self):
        index = WordIndex("あ,0\nか,abc\nさ,5\n")
        assert index.lookup("さ") == []

    def test_missing_key_aborts_search(self):
        index = WordIndex("あ,0\n,7\nさ,5\n")
        assert index.lookup("あ") == []


class TestBuildWordIndex:

    def test_index_sorted_by_key(self):
        _, index_text = build_word_index(ENTRIES)
        keys = [line.split(",")[0] for line in index_text.splitlines()]
        assert keys == sorted(keys)
        assert "てれび" in keys
        assert "たべる" in keys and "食べる" in keys

    def test_offsets_resolve_to_entries(self):
        dict_text, index_text = build_word_index(ENTRIES)
        store = WordDict(dict_text)
        index = WordIndex(index_text)
        for entry in ENTRIES:
            assert entry in store.entries_at(index.lookup(entry.headword))
            if entry.reading:
                assert entry in store.entries_at(index.lookup(entry.reading))

    def test_shared_key_keeps_entry_order(self):
        entries = [
            WordEntry("箸", "はし", ("chopsticks",)),
            WordEntry("橋", "はし", ("bridge",)),
        ]
        dict_text, index_text = build_word_index(entries)
        offsets = WordIndex(index_text).lookup("はし")
        assert [e.headword for e in WordDict(dict_text).entries_at(offsets)] == ["箸", "橋"]

    def test_kana_entry_indexed_once(self):
        _, index_text = build_word_index([WordEntry("すし", "すし", ("sushi",))])
        assert index_text == "すし,0\n"
