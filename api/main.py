from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from auth import router as auth_router
from auth import service as auth_service
from auth.gate import AuthGateMiddleware
from contracts import router as contracts_router
from core import db
from core.errors import GENERIC_MESSAGE, DomainError
from core.log import configure_logging
from core.settings import Settings
from lookups import router as lookups_router

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainError)
    async def domain_error(_: Request, exc: DomainError) -> JSONResponse:
        return _error(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        detail = errors[0].get("msg") if errors else "Invalid request"
        return _error(400, f"Invalid request: {detail}")

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error("unhandled_error method=%s path=%s", request.method, request.url.path, exc_info=exc)
        return _error(500, GENERIC_MESSAGE)


def create_app(settings: Settings | None = None) -> FastAPI:
    if settings is None:
        load_dotenv()
        settings = Settings.from_env()

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        configure_logging(settings.log_level)
        logger.info(
            "startup schema=%s database=%s",
            settings.db_schema,
            db.redact_database_url(settings.database_url),
        )
        # Initialize the DB pool once per process.
        await db.init_pool(settings.database_url, schema=settings.db_schema)
        try:
            yield
        finally:
            await auth_service.drain_activity_refreshes()
            await db.close_pool()

    app = FastAPI(title="Contract Registry API", lifespan=lifespan)
    app.state.settings = settings

    # Added first so CORS wraps it and answers preflights before the gate.
    app.add_middleware(AuthGateMiddleware, session_settings=settings.session)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", settings.session.header_name],
        max_age=600,
    )
    _install_error_handlers(app)

    @app.get("/health")
    def health() -> dict:
        return {"ok": True}

    app.include_router(auth_router.router, tags=["auth"])
    app.include_router(contracts_router.router, tags=["contracts"])
    for router in lookups_router.routers:
        app.include_router(router, tags=["lookups"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.port)
