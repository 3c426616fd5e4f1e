# backend/rentbook/main.py
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from .config import settings
from .db import init_db
from .errors import RentbookError
from .logging_config import configure_logging

from .middleware.request_id import RequestIDMiddleware
from .middleware.structured_logging import StructuredLoggingMiddleware

from .routers.health import router as health_router
from .routers.meta import router as meta_router
from .routers.auth import router as auth_router

from .routers.properties import router as properties_router
from .routers.units import router as units_router
from .routers.rentals import router as rentals_router
from .routers.people import router as people_router

API_PREFIX = "/api"

log = logging.getLogger("rentbook.api")


def _cors_origins() -> list[str]:
    val = getattr(settings, "cors_allow_origins", ["*"])
    if isinstance(val, str):
        v = val.strip()
        return ["*"] if v == "*" else [x.strip() for x in v.split(",") if x.strip()]
    if isinstance(val, list) and val:
        return val
    return ["*"]


def _describe_validation(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()) if x not in ("body", "query", "path"))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "Ungültige Eingabe: " + "; ".join(parts)


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RentbookError)
    async def _rentbook_error(_request: Request, exc: RentbookError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def _request_validation(_request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _describe_validation(exc)})

    @app.exception_handler(IntegrityError)
    async def _integrity(request: Request, exc: IntegrityError):
        # get_db already rolled the session back
        log.warning("integrity_error", extra={"path": request.url.path})
        return JSONResponse(status_code=400, content={"error": "Eintrag existiert bereits"})

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        log.error("unhandled_error", exc_info=exc, extra={"path": request.url.path})
        return JSONResponse(status_code=500, content={"error": "Interner Serverfehler"})


def create_app() -> FastAPI:
    configure_logging()
    init_db()

    app = FastAPI(title="Rentbook", version=settings.app_version)

    app.add_middleware(StructuredLoggingMiddleware)
    # registered after the logging middleware so it runs outside it and the id is set first
    app.add_middleware(RequestIDMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)

    # Core
    app.include_router(health_router, prefix=API_PREFIX)
    app.include_router(meta_router, prefix=API_PREFIX)
    app.include_router(auth_router, prefix=API_PREFIX)

    # Bookkeeping
    app.include_router(properties_router, prefix=API_PREFIX)
    app.include_router(units_router, prefix=API_PREFIX)
    app.include_router(rentals_router, prefix=API_PREFIX)
    app.include_router(people_router, prefix=API_PREFIX)

    return app


app = create_app()
