"""JSON endpoints relaying user intent to the client's quiz session."""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Cookie, Depends, Form, Response
from fastapi.responses import JSONResponse

from .config import settings
from .errors import NoActiveQuizError
from .generator import available_question_count, max_question_count
from .globals import session_store, vocab_manager
from .models import Quiz, QuizResult, QuizSettings, QuizType, VocabularyList
from .session import QuizSession
from .vocabulary import parse_vocabulary_text, validate_vocabulary_text

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


# --- Dependencies ---
def get_session_id(
    session_id: Optional[str] = Cookie(None, alias=settings.SESSION_COOKIE_NAME)
) -> Optional[str]:
    return session_id


def start_session(
    response: Response, session_id: Optional[str] = Depends(get_session_id)
) -> QuizSession:
    """Session of the client, created (and its cookie set) on first use."""
    session = session_store.get(session_id)
    if session is None:
        session_id = session_store.create()
        session = session_store.get(session_id)
        response.set_cookie(
            key=settings.SESSION_COOKIE_NAME,
            value=session_id,
            httponly=True,
            samesite="lax",
        )
    return session


def find_session(
    session_id: Optional[str] = Depends(get_session_id),
) -> Optional[QuizSession]:
    return session_store.get(session_id)


def get_session(
    session: Optional[QuizSession] = Depends(find_session),
) -> QuizSession:
    if session is None:
        raise NoActiveQuizError()
    return session


def _vocabulary_summary(vocabulary: VocabularyList) -> Dict[str, Any]:
    return {
        "count": len(vocabulary.vocabulary),
        "usable": len(vocabulary.usable_entries()),
    }


# --- Vocabulary ---
@router.get("/topics")
def get_topics():
    return vocab_manager.get_topics()


@router.put("/vocabulary")
def set_vocabulary(vocabulary: VocabularyList, session: QuizSession = Depends(start_session)):
    session.vocabulary_store.set_vocabulary(vocabulary)
    return _vocabulary_summary(vocabulary)


@router.post("/vocabulary/text")
def set_vocabulary_text(text: str = Form(...), session: QuizSession = Depends(start_session)):
    vocabulary = parse_vocabulary_text(text)
    _, errors = validate_vocabulary_text(text)
    session.vocabulary_store.set_vocabulary(vocabulary)
    return {**_vocabulary_summary(vocabulary), "errors": errors}


@router.post("/vocabulary/topic")
def set_vocabulary_topic(topic: str = Form(...), session: QuizSession = Depends(start_session)):
    vocabulary = vocab_manager.get_words(topic)
    if vocabulary is None:
        logger.warning(f"Unknown topic requested: {topic}")
        return JSONResponse({"error": f"Unknown topic: {topic}"}, status_code=404)
    session.vocabulary_store.set_vocabulary(vocabulary.model_copy(deep=True))
    return _vocabulary_summary(vocabulary)


@router.delete("/vocabulary")
def clear_vocabulary(session: Optional[QuizSession] = Depends(find_session)):
    if session is not None:
        session.vocabulary_store.clear_vocabulary()
    return {"status": "success"}


@router.get("/settings/limits")
def get_question_limits(session: Optional[QuizSession] = Depends(find_session)):
    vocabulary = None
    if session is not None:
        vocabulary = session.vocabulary_store.get_vocabulary()
    vocabulary = vocabulary or VocabularyList()
    return {
        quiz_type.value: {
            "available": available_question_count(vocabulary, quiz_type),
            "max": max_question_count(vocabulary, quiz_type),
        }
        for quiz_type in QuizType
    }


# --- Quiz ---
@router.post("/quiz", response_model=Quiz)
def start_quiz(quiz_settings: QuizSettings, session: QuizSession = Depends(start_session)):
    return session.generate_quiz(quiz_settings)


@router.get("/quiz", response_model=Quiz)
def get_quiz(session: QuizSession = Depends(get_session)):
    quiz = session.current_quiz
    if quiz is None:
        return JSONResponse({"error": "No active quiz"}, status_code=404)
    return quiz


@router.post("/quiz/answer")
def submit_answer(answer: str = Form(...), session: QuizSession = Depends(get_session)):
    matched = session.submit_answer(answer.strip())
    quiz = session.current_quiz
    return {
        "matched": matched,
        "current_question_index": quiz.current_question_index,
        "question": session.current_question.model_dump(mode="json"),
    }


@router.post("/quiz/next")
def next_question(session: Optional[QuizSession] = Depends(find_session)):
    if session is None:
        return {"advanced": False, "current_question_index": None}
    advanced = session.next_question()
    quiz = session.current_quiz
    return {
        "advanced": advanced,
        "current_question_index": quiz.current_question_index if quiz else None,
    }


@router.post("/quiz/complete", response_model=Quiz)
def complete_quiz(session: QuizSession = Depends(get_session)):
    return session.complete_quiz()


@router.get("/quiz/result", response_model=QuizResult)
def get_result(session: QuizSession = Depends(get_session)):
    return session.result()


@router.post("/reset")
def reset_session(response: Response, session_id: Optional[str] = Depends(get_session_id)):
    session_store.remove(session_id)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"status": "success"}
