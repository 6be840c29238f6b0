import glob
import logging
import os
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

import pandas as pd

from .errors import VocabularyFormatError
from .models import VocabularyEntry, VocabularyList

logger = logging.getLogger(__name__)

VocabularyListener = Callable[[Optional[VocabularyList]], None]

_SEPARATOR_RE = re.compile(r",|\t")
_LINE_RE = re.compile(r"\r?\n")

DEMO_VOCABULARY = VocabularyList(
    vocabulary=[
        VocabularyEntry(
            word="fleet",
            definitions=["armada", "group of ships", "collection of naval vessels"],
        ),
        VocabularyEntry(
            word="ambiguous",
            definitions=["unclear", "open to multiple interpretations"],
        ),
        VocabularyEntry(word="brook", definitions=["stream", "tolerate"]),
        VocabularyEntry(word="spring", definitions=["jump into action"]),
        VocabularyEntry(word="candid", definitions=["frank", "honest"]),
    ]
)


# --- Current vocabulary snapshot ---
class VocabularyStore:
    """
    Holds the vocabulary the next quiz is generated from.

    Interested parties register with ``subscribe`` and are called with the
    new value (``None`` once cleared) after every change. ``subscribe``
    returns a function that removes the listener again; listeners that are
    never removed live as long as the store.
    """

    def __init__(self, vocabulary: Optional[VocabularyList] = None):
        self._vocabulary = vocabulary
        self._listeners: List[VocabularyListener] = []

    def get_vocabulary(self) -> Optional[VocabularyList]:
        return self._vocabulary

    def set_vocabulary(self, vocabulary: VocabularyList) -> None:
        self._vocabulary = vocabulary
        logger.info(f"Vocabulary set: {len(vocabulary.vocabulary)} entries")
        self._notify()

    def clear_vocabulary(self) -> None:
        self._vocabulary = None
        self._notify()

    def subscribe(self, listener: VocabularyListener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: VocabularyListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._vocabulary)
            except Exception:
                logger.exception(f"Vocabulary listener {listener!r} failed")


# --- Plain text input ---
def _split_line(line: str) -> List[str]:
    return [part.strip() for part in _SEPARATOR_RE.split(line)]


def validate_vocabulary_text(text: Optional[str]) -> Tuple[bool, List[str]]:
    """Checks that text is a list of ``word, definition`` (or tab separated) lines."""
    errors: List[str] = []
    if not text or not isinstance(text, str):
        errors.append("Vocabulary is empty or not a string.")
        return False, errors

    lines = [line for line in _LINE_RE.split(text) if line.strip()]
    if not lines:
        errors.append("No vocabulary entries found.")
        return False, errors

    valid_rows = 0
    for number, line in enumerate(lines, start=1):
        parts = _split_line(line)
        if len(parts) != 2 or not parts[0] or not parts[1]:
            errors.append(f'Line {number} is not a valid word, definition pair: "{line}"')
        else:
            valid_rows += 1

    if valid_rows == 0:
        errors.append("No valid word-definition pairs found.")
    return not errors, errors


def parse_vocabulary_text(text: Optional[str]) -> VocabularyList:
    """
    Parses two-column text into a vocabulary list.

    A word given on several lines collects all of its definitions, in order.
    Malformed lines are skipped; the text is rejected only when no line at
    all holds a valid pair.
    """
    is_valid, errors = validate_vocabulary_text(text)
    definitions_by_word: Dict[str, List[str]] = {}
    if text:
        for line in _LINE_RE.split(text):
            parts = _split_line(line)
            if len(parts) != 2 or not parts[0] or not parts[1]:
                continue
            word, definition = parts
            definitions = definitions_by_word.setdefault(word, [])
            if definition not in definitions:
                definitions.append(definition)

    if not definitions_by_word:
        raise VocabularyFormatError("No valid word-definition pairs found.", errors)
    if not is_valid:
        logger.warning(f"Skipped {len(errors)} malformed vocabulary lines")

    return VocabularyList(
        vocabulary=[
            VocabularyEntry(word=word, definitions=definitions)
            for word, definitions in definitions_by_word.items()
        ]
    )


# --- Service Layer: Vocabulary Management ---
def _load_csv(file_path: str) -> Optional[VocabularyList]:
    df = pd.read_csv(file_path, encoding="utf-8")
    if "definition" not in df.columns and "translation" in df.columns:
        df = df.rename(columns={"translation": "definition"})
    if "word" not in df.columns or "definition" not in df.columns:
        return None

    df = df.dropna(subset=["word", "definition"])
    df["word"] = df["word"].astype(str).str.strip()
    df["definition"] = df["definition"].astype(str).str.strip()
    df = df[(df["word"] != "") & (df["definition"] != "")]

    grouped = df.groupby("word", sort=False)["definition"].apply(
        lambda definitions: list(dict.fromkeys(definitions))
    )
    return VocabularyList(
        vocabulary=[
            VocabularyEntry(word=word, definitions=definitions)
            for word, definitions in grouped.items()
        ]
    )


def _load_json(file_path: str) -> VocabularyList:
    with open(file_path, encoding="utf-8") as f:
        return VocabularyList.model_validate_json(f.read())


class VocabularyManager:
    """Manages loading and accessing vocabulary topics stored on disk."""

    def __init__(self, directory: str):
        self.directory = directory
        self.vocab_sets: Dict[str, VocabularyList] = {}
        self.load_all()

    def load_all(self):
        self.vocab_sets = {}
        if not os.path.exists(self.directory):
            os.makedirs(self.directory, exist_ok=True)
            logger.warning(
                f"Created directory {self.directory}. Please add CSV or JSON files."
            )

        file_paths = sorted(
            glob.glob(os.path.join(self.directory, "*.csv"))
            + glob.glob(os.path.join(self.directory, "*.json"))
        )
        for file_path in file_paths:
            topic = os.path.splitext(os.path.basename(file_path))[0]
            try:
                if file_path.endswith(".csv"):
                    vocabulary = _load_csv(file_path)
                else:
                    vocabulary = _load_json(file_path)
            except Exception as e:
                logger.error(f"Failed to load {file_path}: {e}")
                continue

            if vocabulary is None:
                logger.error(f"Skipping {topic}: Missing columns.")
                continue
            self.vocab_sets[topic] = vocabulary
            logger.info(f"Loaded {len(vocabulary.vocabulary)} words from {topic}")

        if not self.vocab_sets:
            logger.warning("No vocabulary files found. Loading demo data.")
            self.vocab_sets["demo"] = DEMO_VOCABULARY.model_copy(deep=True)

    def get_words(self, topic: str) -> Optional[VocabularyList]:
        return self.vocab_sets.get(topic)

    def get_topics(self) -> List[Dict[str, Any]]:
        topics = []
        for key, vocabulary in self.vocab_sets.items():
            display_name = key.replace("_", " ").title()
            topics.append(
                {"id": key, "name": display_name, "count": len(vocabulary.vocabulary)}
            )
        topics.sort(key=lambda x: x["name"])
        return topics
