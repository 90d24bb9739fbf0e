import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from app.auth.errors import AuthenticationError, DependencyError, GatewayError, ValidationError
from app.auth.gateway import build_gateway
from app.auth.validation import iso_timestamp
from app.config import Settings
from app.database import Database
from app.log_config import configure_logging
from routes.auth import router as auth_router
from utils.mailer import Mailer

logger = logging.getLogger("trainfood")


def create_app(
    settings: Optional[Settings] = None,
    db=None,
    mailer: Optional[Mailer] = None,
    clock: Callable[[], datetime] = datetime.utcnow,
) -> FastAPI:
    """
    Build the ASGI app. Run with ``uvicorn app.main:create_app --factory``.

    ``db`` and ``mailer`` replace the MongoDB database and SMTP sender when given.
    """
    configure_logging()
    settings = settings or Settings.from_env()

    database = None
    if db is None:
        database = Database(settings)
        db = database.get_db()

    gateway = build_gateway(settings, db, mailer=mailer, clock=clock)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await gateway.store.ensure_indexes()
        yield
        if database is not None:
            database.close()

    app = FastAPI(title="TrainFood Auth", lifespan=lifespan)
    app.state.gateway = gateway

    # ================= CORS =================
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ================= ROUTERS =================
    app.include_router(auth_router)

    @app.get("/", tags=["health"])
    async def health():
        return {"status": "ok", "service": "trainfood-auth"}

    install_error_handlers(app, settings)
    return app


# ================= ERRORS =================

def _server_error(settings: Settings, detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={
            "message": "Server error",
            "error": detail if settings.is_development else "Internal server error",
        },
    )


def install_error_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(GatewayError)
    async def gateway_error(request: Request, exc: GatewayError):
        if isinstance(exc, DependencyError):
            logger.error("Dependency failure on %s: %s", request.url.path, exc.message)
            return _server_error(settings, exc.message)

        body = {"message": exc.message}
        if isinstance(exc, ValidationError):
            body["field"] = exc.field
            body["timestamp"] = exc.timestamp or iso_timestamp()
        elif isinstance(exc, AuthenticationError) and exc.timestamp:
            body["timestamp"] = exc.timestamp
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        loc = errors[0].get("loc", ()) if errors else ()
        field = loc[-1] if len(loc) > 1 and isinstance(loc[-1], str) else None
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid request body", "field": field, "timestamp": iso_timestamp()},
        )

    @app.exception_handler(PyMongoError)
    async def store_error(request: Request, exc: PyMongoError):
        logger.error("Database error on %s: %s", request.url.path, exc)
        return _server_error(settings, str(exc))

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Server error on %s", request.url.path)
        return _server_error(settings, str(exc))
