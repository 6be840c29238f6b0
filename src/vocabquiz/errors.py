from typing import List, Optional


class VocabQuizError(Exception):
    """Base class for quiz engine errors."""


class EmptyVocabularyError(VocabQuizError):
    def __init__(self, message: str = "No vocabulary available to create a quiz"):
        super().__init__(message)


class NoActiveQuizError(VocabQuizError):
    def __init__(self, message: str = "No active quiz"):
        super().__init__(message)


class QuizCompleteError(VocabQuizError):
    def __init__(self, message: str = "Quiz is already complete"):
        super().__init__(message)


class QuizIncompleteError(VocabQuizError):
    def __init__(self, message: str = "Quiz has not been completed yet"):
        super().__init__(message)


class VocabularyFormatError(VocabQuizError, ValueError):
    """Raised when vocabulary input holds no usable word/definition pair."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = list(errors or [])
