from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routers.auth import router as auth_router
from app.api.routers.users import router as users_router
from app.api.schemas.envelope import ApiErrorResponse
from app.infrastructure.db.engine import create_schema, get_engine
from app.shared.config import get_settings


settings = get_settings()
logger = logging.getLogger("app.api")
if not logging.getLogger().handlers:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(_app: FastAPI):
    if settings.database_url and settings.db_auto_create_schema:
        create_schema(get_engine(settings.database_url))
        logger.info("startup: schema_ready")
    yield


app = FastAPI(title="Accounts API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(status_code: int, message: str, errors: list | None = None, headers=None) -> JSONResponse:
    body = ApiErrorResponse(status_code=status_code, message=message, errors=errors or [])
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True), headers=headers)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(_request: Request, exc: StarletteHTTPException):
    if isinstance(exc.detail, dict):
        message = str(exc.detail.get("message", ""))
        errors = [exc.detail]
    else:
        message = str(exc.detail)
        errors = []
    return _error_response(exc.status_code, message, errors, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", ""),
        }
        for error in exc.errors()
    ]
    return _error_response(400, "Invalid request.", errors)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled_error: method=%s path=%s", request.method, request.url.path)
    return _error_response(500, "Internal server error.")


app.include_router(auth_router)
app.include_router(users_router)
