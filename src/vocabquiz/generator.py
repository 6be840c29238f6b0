import logging
import random
from abc import ABC, abstractmethod
from typing import Dict, List, MutableSequence, Optional, TypeVar

from .config import settings as app_settings
from .models import (
    QuestionType,
    QuizQuestion,
    QuizSettings,
    QuizType,
    VocabularyList,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _source(rng: Optional[random.Random]):
    # The random module exposes the same methods as a Random instance.
    return rng if rng is not None else random


# --- Randomness primitives ---
def shuffle(items: MutableSequence[T], rng: Optional[random.Random] = None) -> None:
    """In-place Fisher-Yates shuffle."""
    source = _source(rng)
    for i in range(len(items) - 1, 0, -1):
        j = source.randrange(i + 1)
        items[i], items[j] = items[j], items[i]


def _pop_random(items: List[T], rng: Optional[random.Random] = None) -> T:
    """Removes and returns a uniformly chosen item (swap with last, then pop)."""
    index = _source(rng).randrange(len(items))
    items[index], items[-1] = items[-1], items[index]
    return items.pop()


# --- Question pool ---
def build_pool(vocabulary: VocabularyList, quiz_type: QuizType) -> List[QuizQuestion]:
    """Expands a vocabulary list into every question the quiz type allows."""
    pool: List[QuizQuestion] = []
    for entry in vocabulary.vocabulary:
        if not entry.is_usable:
            logger.debug(f"Skipping unusable vocabulary entry: {entry!r}")
            continue

        if quiz_type in (QuizType.DEFINITION, QuizType.MIXED):
            pool.append(
                QuizQuestion(
                    id=len(pool),
                    type=QuestionType.DEFINITION,
                    prompt=entry.word,
                    answer=entry.definitions[0],
                    all_answers=list(entry.definitions),
                    word_id=entry.word,
                )
            )

        if quiz_type in (QuizType.WORD, QuizType.MIXED):
            for definition in entry.definitions:
                pool.append(
                    QuizQuestion(
                        id=len(pool),
                        type=QuestionType.WORD,
                        prompt=definition,
                        answer=entry.word,
                        word_id=entry.word,
                    )
                )
    return pool


def available_question_count(vocabulary: VocabularyList, quiz_type: QuizType) -> int:
    count = 0
    for entry in vocabulary.usable_entries():
        if quiz_type in (QuizType.DEFINITION, QuizType.MIXED):
            count += 1
        if quiz_type in (QuizType.WORD, QuizType.MIXED):
            count += len(entry.definitions)
    return count


def max_question_count(vocabulary: VocabularyList, quiz_type: QuizType) -> int:
    return min(
        available_question_count(vocabulary, quiz_type),
        app_settings.MAX_QUESTION_COUNT,
    )


# --- Selection ---
def select_distributed(
    questions: List[QuizQuestion], count: int, rng: Optional[random.Random] = None
) -> List[QuizQuestion]:
    """
    Picks ``count`` questions, covering as many distinct words as possible.

    Every word contributes one randomly chosen question (in random word order)
    before any word is allowed a second one. Only then is the selection topped
    up from the shuffled remainder. Words with many definitions therefore do
    not crowd out words with a single definition.
    """
    groups: Dict[str, List[QuizQuestion]] = {}
    for question in questions:
        groups.setdefault(question.group_key, []).append(question)

    word_ids = list(groups)
    shuffle(word_ids, rng)

    selected: List[QuizQuestion] = []
    for word_id in word_ids[: min(len(word_ids), count)]:
        selected.append(_pop_random(groups[word_id], rng))

    if len(selected) < count:
        remaining = [q for word_id in word_ids for q in groups[word_id]]
        shuffle(remaining, rng)
        while len(selected) < count and remaining:
            selected.append(remaining.pop())

    return selected


def select_random(
    questions: List[QuizQuestion], count: int, rng: Optional[random.Random] = None
) -> List[QuizQuestion]:
    """Plain uniform sampling without replacement."""
    pool = list(questions)
    selected: List[QuizQuestion] = []
    while len(selected) < count and pool:
        selected.append(_pop_random(pool, rng))
    return selected


def select_for_quiz_type(
    pool: List[QuizQuestion],
    count: int,
    quiz_type: QuizType,
    rng: Optional[random.Random] = None,
) -> List[QuizQuestion]:
    if count >= len(pool):
        return list(pool)

    if quiz_type == QuizType.MIXED:
        # Even split between directions, the odd question goes to definitions.
        word_questions = [q for q in pool if q.type == QuestionType.WORD]
        definition_questions = [q for q in pool if q.type == QuestionType.DEFINITION]
        word_count = count // 2
        return select_distributed(word_questions, word_count, rng) + select_distributed(
            definition_questions, count - word_count, rng
        )

    return select_distributed(pool, count, rng)


# --- Strategy Pattern: Quiz Generators ---
class QuizGenerator(ABC):
    """Builds the ordered question list for a new quiz."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng

    @abstractmethod
    def select(
        self, pool: List[QuizQuestion], quiz_settings: QuizSettings
    ) -> List[QuizQuestion]:
        pass

    def generate(
        self, vocabulary: VocabularyList, quiz_settings: QuizSettings
    ) -> List[QuizQuestion]:
        pool = build_pool(vocabulary, quiz_settings.quiz_type)
        if quiz_settings.question_count < len(pool):
            questions = self.select(pool, quiz_settings)
        else:
            questions = list(pool)

        if quiz_settings.randomize_order:
            shuffle(questions, self.rng)

        for position, question in enumerate(questions):
            question.id = position

        logger.debug(
            f"{type(self).__name__}: {len(questions)} of {len(pool)} pooled questions "
            f"[{quiz_settings.quiz_type.value}]"
        )
        return questions


class DistributedQuizGenerator(QuizGenerator):
    """Default mode: maximal word coverage, mixed quizzes split by direction."""

    def select(
        self, pool: List[QuizQuestion], quiz_settings: QuizSettings
    ) -> List[QuizQuestion]:
        return select_for_quiz_type(
            pool, quiz_settings.question_count, quiz_settings.quiz_type, self.rng
        )


class RandomQuizGenerator(QuizGenerator):
    """Uniformly samples the pool, ignoring word coverage."""

    def select(
        self, pool: List[QuizQuestion], quiz_settings: QuizSettings
    ) -> List[QuizQuestion]:
        return select_random(pool, quiz_settings.question_count, self.rng)


class QuizFactory:
    """Factory to select the appropriate generator."""

    @staticmethod
    def create(mode: str, rng: Optional[random.Random] = None) -> QuizGenerator:
        if mode == "random":
            return RandomQuizGenerator(rng)
        if mode != "distributed":
            logger.warning(f"Unknown generator mode '{mode}', using distributed")
        return DistributedQuizGenerator(rng)
