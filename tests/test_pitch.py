"""Tests for pitch-accent lookup."""
import pytest

from kotoba_lookup.pitch import PitchTable, format_pitch

from tests.conftest import PITCH_TEXT


class TestPitchTable:

    def test_single_line_table(self):
        table = PitchTable("話す\tハナス\t2")
        assert table.lookup("話す", "はなす") == [2]

    def test_absent_headword(self):
        table = PitchTable("話す\tハナス\t2")
        assert table.lookup("見る", "みる") == []

    def test_katakana_reading_matches(self):
        table = PitchTable(PITCH_TEXT)
        assert table.lookup("話す", "ハナス") == [2]

    def test_wrong_reading(self):
        table = PitchTable(PITCH_TEXT)
        assert table.lookup("話す", "わす") == []

    def test_empty_reading_uses_headword(self):
        table = PitchTable(PITCH_TEXT)
        assert table.lookup("テレビ") == [1]

    def test_same_headword_different_readings(self):
        table = PitchTable("\n".join(sorted([
            "今日\tキョウ\t1",
            "今日\tコンニチ\t1",
            "明日\tアシタ\t3",
            "明日\tアス\t2",
            "明日\tミョウニチ\t1",
        ])))
        assert table.lookup("明日", "あした") == [3]
        assert table.lookup("明日", "あす") == [2]
        assert table.lookup("明日", "みょうにち") == [1]
        assert table.lookup("今日", "きょう") == [1]

    def test_multiple_accents(self):
        table = PitchTable("日本\tニッポン\t3,0\n日本\tニホン\t2\n")
        assert table.lookup("日本", "にっぽん") == [3, 0]

    def test_every_line_of_sorted_table(self):
        table = PitchTable(PITCH_TEXT)
        for line in PITCH_TEXT.splitlines():
            word, reading, accents = line.split("\t")
            assert table.lookup(word, reading) == [int(a) for a in accents.split(",")]

    @pytest.mark.parametrize("bad_line", [
        "",
        "話す\tハナス",
        "話す\tハナス\tx",
        "\tハナス\t2",
    ])
    def test_malformed_line_is_no_match(self, bad_line):
        table = PitchTable(bad_line)
        assert table.lookup("話す", "はなす") == []

    def test_crlf_table(self):
        table = PitchTable("見る\tミル\t1\r\n話す\tハナス\t2\r\n")
        assert table.lookup("話す", "はなす") == [2]


class TestFormatPitch:

    def test_downstep_in_middle(self):
        assert format_pitch("はなす", 2) == "はなꜜす"

    def test_heiban(self):
        assert format_pitch("さくら", 0) == "さくら"

    def test_atamadaka_with_small_kana(self):
        assert format_pitch("きょうと", 1) == "きょꜜうと"

    def test_odaka(self):
        assert format_pitch("いもうと", 4) == "いもうとꜜ"

    def test_out_of_range(self):
        assert format_pitch("みる", 5) == "みる"
