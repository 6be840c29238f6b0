import logging
from typing import List, Optional

from .models import QuizQuestion
from .text import extract_phrases, normalize, phrases_longest_first, text_matches

logger = logging.getLogger(__name__)


def find_matching_definition(definitions: List[str], user_answer: str) -> Optional[str]:
    """
    Finds the definition a free-text answer satisfies.

    The whole answer is compared first. Failing that, the phrases contained in
    the answer are tried longest first, so that "armada group of ships" is
    credited with "group of ships" rather than the shorter "armada".
    """
    for definition in definitions:
        if text_matches(definition, user_answer):
            return definition

    normalized_definitions = [(normalize(d), d) for d in definitions]
    for phrase in phrases_longest_first(extract_phrases(user_answer)):
        candidate = normalize(phrase)
        for normalized, definition in normalized_definitions:
            if normalized and candidate == normalized:
                return definition
    return None


def check_answer(question: QuizQuestion, user_answer: str) -> bool:
    """
    Checks a submitted answer against a question.

    Definition questions with several accepted answers accumulate matches in
    ``matched_answers`` and have ``completeness`` and ``is_correct`` updated.
    Any other question is a plain normalized comparison with ``answer`` and
    is left untouched.
    """
    if not question.is_multi_answer:
        return text_matches(question.answer, user_answer)

    if question.matched_answers is None:
        question.matched_answers = []

    matched_definition = find_matching_definition(question.all_answers, user_answer)
    if matched_definition is not None and not any(
        text_matches(existing, matched_definition)
        for existing in question.matched_answers
    ):
        question.matched_answers.append(matched_definition)
        logger.debug(
            f"Question {question.id}: matched '{matched_definition}' "
            f"({len(question.matched_answers)}/{len(question.all_answers)})"
        )

    question.completeness = _round_percentage(
        len(question.matched_answers), len(question.all_answers)
    )
    # Sticky: one matched definition is enough, later misses never undo it.
    question.is_correct = len(question.matched_answers) > 0

    return matched_definition is not None


def _round_percentage(part: int, whole: int) -> int:
    # Half-up rounding; the builtin round() rounds halves to even.
    return int(100 * part / whole + 0.5)
