from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .config import settings


# --- Vocabulary ---
class VocabularyEntry(BaseModel):
    word: str = ""
    definitions: List[str] = Field(default_factory=list)

    @property
    def is_usable(self) -> bool:
        return bool(self.word and self.word.strip()) and len(self.definitions) > 0


class VocabularyList(BaseModel):
    """The structured word list handed over by the extraction pipeline."""

    vocabulary: List[VocabularyEntry] = Field(default_factory=list)

    def usable_entries(self) -> List[VocabularyEntry]:
        return [entry for entry in self.vocabulary if entry.is_usable]


# --- Quiz ---
class QuizType(str, Enum):
    WORD = "word"
    DEFINITION = "definition"
    MIXED = "mixed"


class QuestionType(str, Enum):
    # word: the prompt is a definition and the answer is the word
    WORD = "word"
    # definition: the prompt is the word and any of its definitions is accepted
    DEFINITION = "definition"


class QuizSettings(BaseModel):
    quiz_type: QuizType = QuizType.MIXED
    question_count: int = Field(
        default=settings.DEFAULT_QUESTION_COUNT,
        ge=1,
        le=settings.MAX_QUESTION_COUNT,
    )
    randomize_order: bool = True
    # Minutes. Advisory only, the engine never enforces it.
    time_limit: Optional[int] = Field(default=None, ge=1, le=settings.MAX_TIME_LIMIT)


class QuizQuestion(BaseModel):
    id: int
    type: QuestionType
    prompt: str
    answer: str
    all_answers: List[str] = Field(default_factory=list)
    matched_answers: Optional[List[str]] = None
    user_answer: Optional[str] = None
    user_answers: List[str] = Field(default_factory=list)
    is_correct: Optional[bool] = None
    completeness: Optional[int] = None
    word_id: Optional[str] = None

    @property
    def is_multi_answer(self) -> bool:
        return self.type == QuestionType.DEFINITION and len(self.all_answers) > 0

    @property
    def group_key(self) -> str:
        return self.word_id or self.answer


class Quiz(BaseModel):
    id: str
    title: str
    settings: QuizSettings
    questions: List[QuizQuestion] = Field(default_factory=list)
    current_question_index: int = 0
    start_time: datetime = Field(default_factory=datetime.now)
    end_time: Optional[datetime] = None
    score: Optional[float] = None
    is_complete: bool = False

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def correct_count(self) -> int:
        return sum(1 for q in self.questions if q.is_correct)

    @property
    def current_question(self) -> Optional[QuizQuestion]:
        if not (0 <= self.current_question_index < len(self.questions)):
            return None
        return self.questions[self.current_question_index]

    @property
    def is_last_question(self) -> bool:
        return self.current_question_index >= len(self.questions) - 1


# --- Results ---
class AnswerRecord(BaseModel):
    prompt: str
    type: QuestionType
    user_answer: Optional[str] = None
    user_answers: List[str] = Field(default_factory=list)
    correct_answer: str
    all_answers: List[str] = Field(default_factory=list)
    matched_answers: List[str] = Field(default_factory=list)
    is_correct: bool
    completeness: Optional[int] = None


class QuizResult(BaseModel):
    quiz_id: str
    title: str
    correct_count: int
    total_questions: int
    score: float
    duration_seconds: Optional[float] = None
    answers: List[AnswerRecord]
