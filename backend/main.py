import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, get_settings
from database import Database
from errors import ContentError
from redis_client import ContentCache
from services.partitioner import QuarterPartitioner
from api.admin import router as admin_router
from api.quran import router as quran_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup — fail fast on missing secrets
        if not settings.ADMIN_API_KEY:
            raise RuntimeError("ADMIN_API_KEY is not set. Set it in your .env file.")
        logger.info("Starting Quran content backend...")
        app.state.settings = settings
        app.state.db = Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
        await app.state.db.create_all()
        app.state.cache = ContentCache.from_url(settings.REDIS_URL, default_ttl=settings.CACHE_TTL_SECONDS)
        app.state.partitioner = QuarterPartitioner.from_settings(settings.QUARTER_BOUNDARIES_FILE)
        logger.info(f"Quarter boundaries: {app.state.partitioner.source.name}")
        logger.info("Quran content backend ready")
        yield
        # Shutdown
        await app.state.cache.close()
        await app.state.db.dispose()
        logger.info("Quran content backend shut down")

    app = FastAPI(
        title="Quran Content API",
        description="Quran structure drill-down (Juz → Hizb → Rub' → Ayah) and reading endpoints",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_URL, "http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Error envelope ────────────────────────────────────────────────────────

    @app.exception_handler(ContentError)
    async def content_error_handler(request: Request, exc: ContentError):
        return _failure(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        # Non-integer or out-of-range juz/hizb/quarter etc. are client errors, never coerced.
        fields = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
        message = "Invalid parameters" if not fields else f"Invalid parameters: {', '.join(fields)}"
        return _failure(400, message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _failure(exc.status_code, str(exc.detail))

    # Driver-level connection failures (asyncpg raises plain OSError) are not
    # wrapped by SQLAlchemy.
    @app.exception_handler(SQLAlchemyError)
    @app.exception_handler(OSError)
    async def store_error_handler(request: Request, exc: Exception):
        logger.error(f"Quran content fetch error on {request.url.path}", exc_info=exc)
        return _failure(500, "Failed to fetch Quran content")

    # REST routes
    app.include_router(admin_router)
    app.include_router(quran_router)

    # Health check
    @app.get("/health")
    async def health():
        return {"status": "ok", "service": "quran-content"}

    return app


# uvicorn main:app
app = create_app()
