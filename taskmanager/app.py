import logging
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .database import Database
from .errors import TaskManagerError, Unauthenticated
from .routes import auth_router, task_router
from .security import PasswordHasher, TokenService, generate_secret
from .services import AuthService, TaskService
from .store import TaskStore, UserStore

logger = logging.getLogger(__name__)


def _error(status_code: int, code: str, message: str, fields=None, headers=None) -> JSONResponse:
    body = {"code": code, "message": message}
    if fields is not None:
        body["fields"] = fields
    return JSONResponse(status_code=status_code, content={"error": body}, headers=headers)


async def handle_app_error(request: Request, exc: TaskManagerError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return _error(exc.status_code, exc.code, exc.message, headers=headers)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Only field locations go back to the client, never the submitted values.
    fields = [".".join(str(part) for part in err.get("loc", ())) for err in exc.errors()]
    return _error(status.HTTP_400_BAD_REQUEST, "validation_error", "Invalid request", fields=fields)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error", "Internal server error")


def _signing_secret(settings: Settings) -> str:
    if settings.jwt_secret is not None and settings.jwt_secret.get_secret_value():
        return settings.jwt_secret.get_secret_value()
    logger.warning(
        "TASKMANAGER_JWT_SECRET is not set; using a random secret. "
        "Tokens will not survive a restart."
    )
    return generate_secret()


def create_app(settings: Optional[Settings] = None, hasher: Optional[PasswordHasher] = None) -> FastAPI:
    """Build the API with its stores and services attached to ``app.state``."""
    settings = settings or get_settings()

    db = Database(settings.database_path)
    db.init_db()

    tokens = TokenService(
        _signing_secret(settings),
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(seconds=settings.token_ttl_seconds),
    )

    app = FastAPI(title="Task Manager API")
    app.state.settings = settings
    app.state.auth_service = AuthService(UserStore(db), hasher or PasswordHasher(), tokens)
    app.state.task_service = TaskService(TaskStore(db))

    app.add_exception_handler(TaskManagerError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    @app.get("/healthz")
    def healthz():
        return {"ok": True}

    app.include_router(auth_router)
    app.include_router(task_router)
    return app
