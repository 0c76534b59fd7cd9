import time
from contextlib import asynccontextmanager
from typing import Any, Dict, List

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.routes import (
    auth,
    crafted_items,
    dashboard,
    health,
    inventory,
    members,
    orders,
    resources,
    strikes,
    task_completions,
    tasks,
)
from auth.security import hash_password
from fundmanager import repository
from fundmanager.config import settings
from fundmanager.db import dispose_engine, get_db_session, init_db
from fundmanager.errors import FundManagerError, ValidationError
from fundmanager.logger import get_logger, log_request, setup_logging

setup_logging(settings.log_level, settings.log_file or None)
logger = get_logger(__name__)
access_logger = get_logger("fundmanager.access")


def seed_admin_user() -> None:
    """Create the configured admin account if it does not exist yet."""
    if not settings.admin_password:
        logger.warning("ADMIN_PASSWORD not set, skipping admin user seed")
        return

    with get_db_session() as db:
        if repository.find_user(db, settings.admin_username):
            logger.info("Admin user already exists")
            return
        repository.users.create(db, {
            "username": settings.admin_username,
            "password_hash": hash_password(settings.admin_password),
            "display_name": settings.admin_display_name,
            "role": "admin",
        })
        logger.info(f"Seeded admin user '{settings.admin_username}'")


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    logger.info("Starting application...")

    try:
        init_db()
        seed_admin_user()
    except Exception as e:
        logger.error(f"Error during startup: {e}")

    yield

    logger.info("Shutting down application...")
    dispose_engine()
    logger.info("Application shutdown complete")


def _describe_validation_error(errors: List[Dict[str, Any]]) -> str:
    """Turn the first pydantic error into a short client-facing sentence."""
    if not errors:
        return "Invalid request"

    error = errors[0]
    kind = error.get("type", "")
    message = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")
    field = ".".join(
        str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")
    )

    if kind == "json_invalid":
        return "Request body is not valid JSON"
    if not field:
        return "Request body is required" if kind == "missing" else message
    if kind in ("missing", "string_too_short", "blank_string"):
        return f"{field} is required"
    return f"{field}: {message}"


def install_error_handlers(app: FastAPI) -> None:
    """Every failure leaves the API as `{"error": message}`."""

    @app.exception_handler(FundManagerError)
    async def domain_error_handler(request: Request, exc: FundManagerError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        error = ValidationError(_describe_validation_error(exc.errors()))
        return JSONResponse(status_code=error.status_code, content={"error": error.detail})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and request.url.path.startswith("/api"):
            message = "API endpoint not found"
        else:
            message = str(exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=exc.headers)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app() -> FastAPI:
    app = FastAPI(
        title="Ballas Fund Manager",
        description="Roster, inventory, task, strike, crafting and order tracking for one organization",
        version="1.0.0",
        lifespan=app_lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            log_request(access_logger, request.method, request.url.path, status_code, duration_ms)

    install_error_handlers(app)

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(dashboard.router)
    app.include_router(members.router)
    app.include_router(resources.router)
    app.include_router(inventory.router)
    app.include_router(tasks.router)
    app.include_router(task_completions.router)
    app.include_router(strikes.router)
    app.include_router(crafted_items.router)
    app.include_router(orders.router)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.host, port=settings.port)
