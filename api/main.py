import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from ai import router as ai_router
from auth import router as auth_router
from chat import router as chat_router
from core import settings
from core.db import Database
from core.errors import register_error_handlers
from core.log import setup_logging
from targets import router as targets_router
from users import router as users_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level(), settings.log_format())
    # One pool per process, injected into handlers through core.db.get_db.
    db = Database.from_env()
    await db.connect()
    app.state.db = db
    logger.info("API started (env=%s)", settings.app_env())
    try:
        yield
    finally:
        logger.info("API shutting down")
        await db.close()
        app.state.db = None


app = FastAPI(title="social-insight-api", lifespan=lifespan)

# Allow the web client to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1024)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = round((time.perf_counter() - started) * 1000, 1)
    # Set by the authenticator on protected routes.
    user_id = getattr(request.state, "user_id", None)
    logger.info(
        "%s %s %s %.1fms",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
            "user_id": user_id,
        },
    )
    return response


register_error_handlers(app)

app.include_router(auth_router.router, tags=["auth"])
app.include_router(users_router.router, tags=["user"])
app.include_router(targets_router.router, tags=["targets"])
app.include_router(chat_router.router, tags=["chat"])
app.include_router(ai_router.router, tags=["ai"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
