import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import settings
from .errors import (
    EmptyVocabularyError,
    NoActiveQuizError,
    QuizCompleteError,
    QuizIncompleteError,
    VocabularyFormatError,
)
from .globals import vocab_manager
from .router import router


# --- Logging Setup ---
def setup_logging():
    logger = logging.getLogger("vocabquiz")
    logger.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)

    if not os.path.exists(settings.LOG_DIR):
        os.makedirs(settings.LOG_DIR, exist_ok=True)
    log_path = os.path.join(settings.LOG_DIR, settings.LOG_FILE)
    if not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        file_handler = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(file_handler)
    # Also configure root logger to see logs from other libraries
    logging.basicConfig(level=logging.INFO)


# --- Error Handlers ---
def _error_handler(status_code: int):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        logging.getLogger("vocabquiz").warning(
            f"{request.method} {request.url.path}: {exc}"
        )
        content = {"error": str(exc)}
        if isinstance(exc, VocabularyFormatError):
            content["details"] = exc.errors
        return JSONResponse(content, status_code=status_code)

    return handler


ERROR_STATUS_CODES = {
    EmptyVocabularyError: 400,
    NoActiveQuizError: 404,
    QuizCompleteError: 409,
    QuizIncompleteError: 409,
    VocabularyFormatError: 422,
}


# --- Lifecycle ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    vocab_manager.load_all()
    yield


# --- App Factory ---
def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(
        title=settings.PROJECT_NAME,
        debug=settings.DEBUG,
        lifespan=lifespan,
        root_path=settings.ROOT_PATH,
    )

    for exc_class, status_code in ERROR_STATUS_CODES.items():
        app.add_exception_handler(exc_class, _error_handler(status_code))

    app.include_router(router)

    return app
