import os
import random
import tempfile

# Keep log files and the vocabulary directory out of the working tree.
os.environ.setdefault("VOCAB_DIR", tempfile.mkdtemp(prefix="vocabquiz-vocab-"))
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="vocabquiz-log-"))

import pytest

from vocabquiz.models import QuestionType, QuizQuestion, VocabularyEntry, VocabularyList
from vocabquiz.vocabulary import VocabularyStore


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def fleet_question() -> QuizQuestion:
    return QuizQuestion(
        id=1,
        type=QuestionType.DEFINITION,
        prompt="fleet",
        answer="armada",
        all_answers=["armada", "group of ships", "collection of naval vessels"],
        word_id="fleet",
    )


@pytest.fixture
def fleet_vocabulary() -> VocabularyList:
    return VocabularyList(
        vocabulary=[
            VocabularyEntry(
                word="fleet",
                definitions=["armada", "group of ships", "collection of naval vessels"],
            )
        ]
    )


@pytest.fixture
def eight_words() -> VocabularyList:
    """Eight words with between one and three definitions each."""
    return VocabularyList(
        vocabulary=[
            VocabularyEntry(word="fleet", definitions=["armada", "group of ships", "navy"]),
            VocabularyEntry(word="ambiguous", definitions=["unclear", "vague"]),
            VocabularyEntry(word="brook", definitions=["stream", "tolerate", "creek"]),
            VocabularyEntry(word="spring", definitions=["jump into action"]),
            VocabularyEntry(word="candid", definitions=["frank", "honest"]),
            VocabularyEntry(word="diligent", definitions=["hardworking"]),
            VocabularyEntry(word="eminent", definitions=["famous", "distinguished"]),
            VocabularyEntry(word="frugal", definitions=["thrifty"]),
        ]
    )


@pytest.fixture
def store(eight_words) -> VocabularyStore:
    return VocabularyStore(eight_words)
