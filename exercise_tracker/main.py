# exercise_tracker/main.py

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from exercise_tracker.api.users import router as users_router
from exercise_tracker.config import Settings, configure_logging
from exercise_tracker.db.engine import create_store_engine
from exercise_tracker.db.schema import metadata
from exercise_tracker.errors import TrackerError

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent
INDEX_HTML = PACKAGE_DIR / "views" / "index.html"
PUBLIC_DIR = PACKAGE_DIR / "public"


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    engine = create_store_engine(settings.database_url)
    metadata.create_all(engine)
    app.state.engine = engine
    logger.info("Store ready at %s", engine.url.render_as_string(hide_password=True))
    try:
        yield
    finally:
        engine.dispose()
        logger.info("Store connections released")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings)

    app = FastAPI(
        title="Exercise Tracker API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    # Unknown zones fail here, not on the first undated exercise
    app.state.tz = ZoneInfo(settings.timezone)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(TrackerError)
    async def tracker_error_handler(request: Request, exc: TrackerError):
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if not errors:
            return _error(400, "Invalid request")
        # e.g. ("query", "limit") -> "Invalid limit"
        return _error(400, f"Invalid {errors[0]['loc'][-1]}")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
        )
        return _error(500, "Server error")

    @app.get("/", include_in_schema=False)
    def index():
        return FileResponse(INDEX_HTML)

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    app.mount("/public", StaticFiles(directory=PUBLIC_DIR), name="public")
    app.include_router(users_router)

    return app


app = create_app()
