from contextlib import asynccontextmanager
from keyserver.db.Connection import database
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from keyserver.core.config import settings
from keyserver.core.errors import KeyServerError, StoreError, ValidationError
from keyserver.db.Models import models
from keyserver.api import admin, keys
from keyserver.routers import health
from keyserver.core.logging_config import configure_logging
from keyserver.services.auth import AuthService
from keyserver.RateLimitHelper import get_rate_limit_config, get_rate_limit_ip, is_admin_path, check_rate_limit

logger = configure_logging()


def init_db():
    models.Base.metadata.create_all(bind=database.engine)
    logger.info("Database models initialized/checked.")

    if settings.ADMIN_USERNAME and settings.ADMIN_PASSWORD:
        db = database.SessionLocal()
        try:
            AuthService.upsert_admin_user(db, settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)
        finally:
            db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Application '{settings.PROJECT_NAME}' starting up.")
    init_db()
    database.verify_redis_connection()
    yield
    logger.info("Application shutting down.")
    database.engine.dispose()
    database.redis_client.close()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Daily, premium and admin license key service",
    lifespan=lifespan,
)

app.include_router(keys.router)
app.include_router(admin.router)
app.include_router(health.router)

@app.middleware("http")
async def rate_limit_middleware(request: Request, call_next):
    if not settings.RATE_LIMIT_ENABLED or not is_admin_path(request.url.path):
        return await call_next(request)

    limit, window = get_rate_limit_config(database)
    client_ip = get_rate_limit_ip(request)
    key = f"rate_limit:{client_ip}"

    allowed = check_rate_limit(database, key, limit, window)
    if allowed is False:
        logger.warning(f"Rate limit exceeded for {client_ip} on {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            headers={"Retry-After": str(window)},
            content={"error": f"Too many requests. Limit is {limit} per {window} seconds."}
        )

    return await call_next(request)

@app.exception_handler(KeyServerError)
async def key_server_error_handler(request: Request, exc: KeyServerError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    fields = ", ".join(".".join(str(p) for p in e.get("loc", ())[1:]) or "body" for e in errors)
    logger.info(f"Rejected malformed request to {request.url.path}: {fields}")
    return JSONResponse(
        status_code=ValidationError.status_code,
        content={"error": f"Missing or invalid fields: {fields}" if fields else ValidationError.message},
    )

@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Store failure on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(status_code=StoreError.status_code, content={"error": StoreError.message})

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8080)
