from .config import settings
from .session import SessionStore
from .vocabulary import VocabularyManager

vocab_manager = VocabularyManager(f"{settings.VOCAB_DIR}")
session_store = SessionStore(settings.SESSION_TIMEOUT_MINUTES)
