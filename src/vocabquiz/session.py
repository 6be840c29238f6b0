"""Quiz lifecycle: generation, answering, navigation, completion and results.

A ``QuizSession`` owns at most one quiz at a time. All writes to a question's
match state and to the quiz score go through the session (and the matcher it
delegates to); callers only read the ``Quiz`` it hands out.
"""

import logging
import random
import time
import uuid
from datetime import datetime, timedelta
from typing import Dict, Optional

from .config import settings as app_settings
from .errors import (
    EmptyVocabularyError,
    NoActiveQuizError,
    QuizCompleteError,
    QuizIncompleteError,
)
from .generator import QuizFactory
from .matcher import check_answer
from .models import AnswerRecord, Quiz, QuizQuestion, QuizResult, QuizSettings
from .vocabulary import VocabularyStore

logger = logging.getLogger(__name__)


class QuizSession:
    def __init__(
        self,
        vocabulary_store: Optional[VocabularyStore] = None,
        rng: Optional[random.Random] = None,
        mode: str = app_settings.DEFAULT_GENERATOR_MODE,
    ):
        self.vocabulary_store = vocabulary_store or VocabularyStore()
        self.rng = rng
        self.mode = mode
        self._quiz: Optional[Quiz] = None

    @property
    def current_quiz(self) -> Optional[Quiz]:
        return self._quiz

    @property
    def current_question(self) -> Optional[QuizQuestion]:
        if self._quiz is None:
            return None
        return self._quiz.current_question

    def generate_quiz(self, quiz_settings: QuizSettings) -> Quiz:
        """Creates a new quiz from the current vocabulary, replacing any prior one."""
        vocabulary = self.vocabulary_store.get_vocabulary()
        if vocabulary is None or not vocabulary.usable_entries():
            raise EmptyVocabularyError()

        generator = QuizFactory.create(self.mode, self.rng)
        questions = generator.generate(vocabulary, quiz_settings)
        if not questions:
            raise EmptyVocabularyError()

        quiz = Quiz(
            id=self._generate_quiz_id(),
            title=f"Vocabulary Quiz ({quiz_settings.quiz_type.value})",
            settings=quiz_settings,
            questions=questions,
            current_question_index=0,
            start_time=datetime.now(),
            is_complete=False,
        )
        if self._quiz is not None and not self._quiz.is_complete:
            logger.info(f"Discarding unfinished quiz {self._quiz.id}")
        self._quiz = quiz

        logger.info(
            f"New quiz: {quiz.id} [Type: {quiz_settings.quiz_type.value}, "
            f"Questions: {quiz.total_questions}, Mode: {self.mode}]"
        )
        return quiz

    def submit_answer(self, answer: str) -> bool:
        """
        Checks an answer for the current question and records it.

        A definition question with several accepted answers keeps every
        submission and stays current, so the user can add further synonyms
        before moving on. Returns whether this submission matched.
        """
        quiz = self._require_quiz()
        if quiz.is_complete:
            raise QuizCompleteError()

        question = quiz.questions[quiz.current_question_index]
        if question.is_multi_answer:
            question.user_answers.append(answer)
            question.user_answer = answer
            return check_answer(question, answer)

        question.user_answer = answer
        question.is_correct = check_answer(question, answer)
        return question.is_correct

    def next_question(self) -> bool:
        if self._quiz is None or self._quiz.is_complete:
            return False
        if self._quiz.current_question_index < len(self._quiz.questions) - 1:
            self._quiz.current_question_index += 1
            return True
        return False

    def complete_quiz(self) -> Quiz:
        quiz = self._require_quiz()
        if quiz.is_complete:
            return quiz

        quiz.is_complete = True
        quiz.end_time = datetime.now()
        quiz.score = 100 * quiz.correct_count / quiz.total_questions

        logger.info(
            f"Quiz {quiz.id} complete: {quiz.correct_count}/{quiz.total_questions} "
            f"({quiz.score:.0f}%)"
        )
        return quiz

    def result(self) -> QuizResult:
        """Read-only summary of the completed quiz for reporting and export."""
        quiz = self._require_quiz()
        if not quiz.is_complete:
            raise QuizIncompleteError()

        duration = None
        if quiz.end_time is not None:
            duration = (quiz.end_time - quiz.start_time).total_seconds()

        return QuizResult(
            quiz_id=quiz.id,
            title=quiz.title,
            correct_count=quiz.correct_count,
            total_questions=quiz.total_questions,
            score=quiz.score,
            duration_seconds=duration,
            answers=[_answer_record(q) for q in quiz.questions],
        )

    def discard(self) -> None:
        self._quiz = None

    def _require_quiz(self) -> Quiz:
        if self._quiz is None:
            raise NoActiveQuizError()
        return self._quiz

    def _generate_quiz_id(self) -> str:
        source = self.rng if self.rng is not None else random
        return f"quiz_{int(time.time() * 1000)}_{source.randrange(1000)}"


def _answer_record(question: QuizQuestion) -> AnswerRecord:
    return AnswerRecord(
        prompt=question.prompt,
        type=question.type,
        user_answer=question.user_answer,
        user_answers=list(question.user_answers),
        correct_answer=question.answer,
        all_answers=list(question.all_answers),
        matched_answers=list(question.matched_answers or []),
        is_correct=bool(question.is_correct),
        completeness=question.completeness,
    )


# --- Per-client sessions ---
class SessionStore:
    """Quiz sessions keyed by client id, dropped after a period of inactivity."""

    def __init__(self, timeout_minutes: int = app_settings.SESSION_TIMEOUT_MINUTES):
        self.timeout = timedelta(minutes=timeout_minutes)
        self._sessions: Dict[str, QuizSession] = {}
        self._last_seen: Dict[str, datetime] = {}

    def create(self) -> str:
        self.purge_expired()
        session_id = str(uuid.uuid4())
        self._sessions[session_id] = QuizSession()
        self._last_seen[session_id] = datetime.now()
        logger.info(f"New session: {session_id}")
        return session_id

    def get(self, session_id: Optional[str]) -> Optional[QuizSession]:
        if not session_id or session_id not in self._sessions:
            return None
        if datetime.now() - self._last_seen[session_id] > self.timeout:
            logger.info(f"Session expired: {session_id}")
            self.remove(session_id)
            return None
        self._last_seen[session_id] = datetime.now()
        return self._sessions[session_id]

    def purge_expired(self) -> int:
        """Drops every session idle for longer than the timeout."""
        now = datetime.now()
        expired = [
            session_id
            for session_id, last_seen in self._last_seen.items()
            if now - last_seen > self.timeout
        ]
        for session_id in expired:
            self.remove(session_id)
        if expired:
            logger.info(f"Expired {len(expired)} idle sessions")
        return len(expired)

    def remove(self, session_id: Optional[str]) -> None:
        if session_id in self._sessions:
            del self._sessions[session_id]
            del self._last_seen[session_id]

    def __len__(self) -> int:
        return len(self._sessions)
