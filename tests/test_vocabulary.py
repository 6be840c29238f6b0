import json

import pytest

from vocabquiz.errors import VocabularyFormatError
from vocabquiz.models import VocabularyEntry, VocabularyList
from vocabquiz.vocabulary import (
    VocabularyManager,
    VocabularyStore,
    parse_vocabulary_text,
    validate_vocabulary_text,
)


class TestVocabularyStore:
    def test_notifies_subscribers(self, eight_words):
        store = VocabularyStore()
        received = []
        store.subscribe(received.append)

        store.set_vocabulary(eight_words)
        store.clear_vocabulary()

        assert received == [eight_words, None]
        assert store.get_vocabulary() is None

    def test_unsubscribe(self, eight_words):
        store = VocabularyStore()
        received = []
        unsubscribe = store.subscribe(received.append)
        unsubscribe()
        store.set_vocabulary(eight_words)
        assert received == []
        store.unsubscribe(received.append)

    def test_failing_listener_does_not_block_others(self, eight_words):
        store = VocabularyStore()
        received = []

        def broken(_):
            raise RuntimeError("boom")

        store.subscribe(broken)
        store.subscribe(received.append)
        store.set_vocabulary(eight_words)
        assert received == [eight_words]


class TestValidateVocabularyText:
    def test_valid(self):
        assert validate_vocabulary_text("fleet, armada\nbrook\tstream\n\n") == (True, [])

    @pytest.mark.parametrize("text", [None, ""])
    def test_empty(self, text):
        is_valid, errors = validate_vocabulary_text(text)
        assert not is_valid
        assert errors == ["Vocabulary is empty or not a string."]

    def test_blank_lines_only(self):
        assert validate_vocabulary_text("\n  \n") == (False, ["No vocabulary entries found."])

    def test_line_errors(self):
        is_valid, errors = validate_vocabulary_text("fleet, armada\nbroken line\na, b, c")
        assert not is_valid
        assert errors == [
            'Line 2 is not a valid word, definition pair: "broken line"',
            'Line 3 is not a valid word, definition pair: "a, b, c"',
        ]

    def test_no_valid_rows(self):
        _, errors = validate_vocabulary_text("nothing here")
        assert errors[-1] == "No valid word-definition pairs found."


class TestParseVocabularyText:
    def test_repeated_words_collect_definitions(self):
        vocabulary = parse_vocabulary_text(
            "fleet, armada\r\nfleet, group of ships\nbrook\tstream\nfleet, armada"
        )
        assert vocabulary.vocabulary == [
            VocabularyEntry(word="fleet", definitions=["armada", "group of ships"]),
            VocabularyEntry(word="brook", definitions=["stream"]),
        ]

    def test_malformed_lines_skipped(self):
        vocabulary = parse_vocabulary_text("fleet, armada\njunk\n, missing word")
        assert [e.word for e in vocabulary.vocabulary] == ["fleet"]

    def test_nothing_usable(self):
        with pytest.raises(VocabularyFormatError) as excinfo:
            parse_vocabulary_text("junk\nmore junk")
        assert len(excinfo.value.errors) == 3


class TestVocabularyManager:
    def test_loads_csv_and_json(self, tmp_path):
        (tmp_path / "ships.csv").write_text(
            "word,definition\nfleet,armada\nfleet,group of ships\nbrook,stream\n,orphan\n",
            encoding="utf-8",
        )
        (tmp_path / "german_basics.csv").write_text(
            "word,translation\nHund,dog\nKatze,cat\n", encoding="utf-8"
        )
        (tmp_path / "extracted.json").write_text(
            json.dumps({"vocabulary": [{"word": "candid", "definitions": ["frank"]}]}),
            encoding="utf-8",
        )

        manager = VocabularyManager(str(tmp_path))

        ships = manager.get_words("ships")
        assert ships.vocabulary == [
            VocabularyEntry(word="fleet", definitions=["armada", "group of ships"]),
            VocabularyEntry(word="brook", definitions=["stream"]),
        ]
        assert manager.get_words("german_basics").vocabulary[1].definitions == ["cat"]
        assert manager.get_words("extracted").vocabulary[0].word == "candid"
        assert manager.get_words("missing") is None
        assert manager.get_topics() == [
            {"id": "extracted", "name": "Extracted", "count": 1},
            {"id": "german_basics", "name": "German Basics", "count": 2},
            {"id": "ships", "name": "Ships", "count": 2},
        ]

    def test_repeated_csv_rows_collapse(self, tmp_path):
        (tmp_path / "ships.csv").write_text(
            "word,definition\nfleet,armada\nfleet,armada\nfleet,navy\n", encoding="utf-8"
        )
        manager = VocabularyManager(str(tmp_path))
        assert manager.get_words("ships").vocabulary == [
            VocabularyEntry(word="fleet", definitions=["armada", "navy"])
        ]

    def test_bad_files_skipped(self, tmp_path):
        (tmp_path / "columns.csv").write_text("term,meaning\na,b\n", encoding="utf-8")
        (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
        (tmp_path / "good.csv").write_text("word,definition\nfrugal,thrifty\n", encoding="utf-8")

        manager = VocabularyManager(str(tmp_path))
        assert list(manager.vocab_sets) == ["good"]

    def test_demo_topic_when_empty(self, tmp_path):
        directory = tmp_path / "vocabulary"
        manager = VocabularyManager(str(directory))
        assert directory.is_dir()
        assert list(manager.vocab_sets) == ["demo"]
        assert isinstance(manager.get_words("demo"), VocabularyList)
