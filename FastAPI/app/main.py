import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.config import settings
from app.core.errors import WorkflowError
from app.core.rate_limiter import rate_limiter
from app.database import init_db, engine
from app.logging_config import setup_logging
from app.routers import admin, auth, resume, review

setup_logging()
logger = logging.getLogger(__name__)

PLACEHOLDER_SECRET = "replace-with-a-long-random-secret-key"

app = FastAPI(
    title="Resume Review API",
    description="Candidate resumes, mediator review queue, admin hiring decisions.",
    version="1.0.0",
)

cors_origins = [o.strip() for o in settings.cors_allow_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(resume.router)
app.include_router(review.router)
app.include_router(admin.router)


@app.exception_handler(WorkflowError)
async def workflow_error_handler(request, exc: WorkflowError):
    logger.info("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request, exc: SQLAlchemyError):
    logger.exception("Storage error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=503,
        content={"detail": "Storage unavailable", "error": "PersistenceError", "retryable": True},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request, exc):
    logger.exception("Unhandled server error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def _rate_limit_for(path: str) -> int | None:
    if path in {"/auth/login", "/auth/register"}:
        return settings.rate_limit_auth_per_min
    if path == "/review/rank":
        return settings.rate_limit_rank_per_min
    return None


@app.middleware("http")
async def apply_rate_limits(request, call_next):
    if request.method == "OPTIONS":
        return await call_next(request)

    path = request.url.path
    limit = _rate_limit_for(path)
    if limit is not None and limit > 0:
        client_ip = request.client.host if request.client else "unknown"
        allowed, retry_after = rate_limiter.allow(f"{client_ip}:{path}", limit=limit, window_seconds=60)
        if not allowed:
            return JSONResponse(
                status_code=429,
                content={"detail": "Too many requests. Please retry shortly."},
                headers={"Retry-After": str(retry_after)},
            )

    return await call_next(request)


@app.get("/health/live")
def health_live():
    return {"status": "ok"}


@app.get("/health/ready")
def health_ready():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"status": "ready"}
    except Exception:
        logger.exception("Readiness check failed")
        return JSONResponse(status_code=503, content={"status": "not_ready"})


@app.on_event("startup")
def on_startup():
    logger.info("Starting Resume Review API")
    env = (settings.app_env or "development").lower()
    if settings.secret_key == PLACEHOLDER_SECRET:
        if env in {"production", "prod"}:
            raise RuntimeError("SECRET_KEY placeholder is not allowed in production")
        logger.warning("SECRET_KEY is using placeholder default. Set SECRET_KEY in .env for secure deployments.")
    init_db()


@app.get("/")
def root():
    return {"message": "Resume Review API. See /docs for the candidate, review and admin endpoints."}
