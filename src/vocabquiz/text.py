"""Text normalization and phrase extraction for free-text answer matching.

Two answers are considered equal when their normalized forms are identical.
There is no stemming and no edit distance: normalization only removes case,
redundant whitespace, punctuation and the articles ``a``, ``an`` and ``the``.
"""

import re
from typing import Iterable, List, Optional, Set

ARTICLES = frozenset(("a", "an", "the"))
MIN_PHRASE_LENGTH = 2

_WHITESPACE_RE = re.compile(r"\s+")
_PUNCTUATION_RE = re.compile(r"[.,/#!$%^&*;:{}=\-_`~()]")


def normalize(text: Optional[str]) -> str:
    """Canonical form of a phrase used as the equality basis for answers."""
    if not text:
        return ""

    text = text.lower().strip()
    text = _WHITESPACE_RE.sub(" ", text)
    text = _PUNCTUATION_RE.sub("", text)

    # Splitting again drops the gaps left behind by removed punctuation.
    words = text.split()
    if len(words) > 1 and words[0] in ARTICLES:
        words = words[1:]
    words = words[:1] + [w for w in words[1:] if w not in ARTICLES]
    return " ".join(words)


def text_matches(first: Optional[str], second: Optional[str]) -> bool:
    if not first or not second:
        return False
    return normalize(first) == normalize(second)


def extract_phrases(text: Optional[str]) -> Set[str]:
    """
    Candidate phrases contained in a free-text answer.

    Returns the whole (normalized) answer, every word longer than one
    character and every contiguous run of two or more words. The set
    over-generates on purpose; the matcher decides which candidates count.
    """
    normalized = normalize(text)
    if not normalized:
        return set()

    words = normalized.split(" ")
    if len(words) == 1:
        return {normalized}

    phrases = {normalized}
    phrases.update(w for w in words if len(w) > 1)
    for start in range(len(words)):
        for end in range(start + 2, len(words) + 1):
            phrases.add(" ".join(words[start:end]))
    return phrases


def phrases_longest_first(
    phrases: Iterable[str], min_length: int = MIN_PHRASE_LENGTH
) -> List[str]:
    """Orders candidates so that a longer, more specific phrase is tried first."""
    return sorted(
        (p for p in phrases if len(p) >= min_length),
        key=lambda p: (-len(p), p),
    )
