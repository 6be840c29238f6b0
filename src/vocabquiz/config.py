import os


class Settings:
    PROJECT_NAME: str = "vocabquiz"
    DEBUG: bool = os.environ.get("DEBUG", "").lower() in ("1", "true", "yes")
    LOG_DIR: str = os.environ.get("LOG_DIR", "log")
    LOG_FILE: str = "vocabquiz.log"
    VOCAB_DIR: str = os.environ.get("VOCAB_DIR", "vocabulary")
    DEFAULT_QUESTION_COUNT: int = 10
    MAX_QUESTION_COUNT: int = 50
    MAX_TIME_LIMIT: int = 60
    DEFAULT_GENERATOR_MODE: str = "distributed"
    SESSION_COOKIE_NAME: str = "quiz_session_id"
    SESSION_TIMEOUT_MINUTES: int = 120
    ROOT_PATH: str = os.environ.get("ROOT_PATH", "")


settings = Settings()
