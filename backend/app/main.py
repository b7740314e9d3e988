# -*- coding: utf-8 -*-

import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.endpoints.legacy_optimize import (
    CORS_HEADERS as LEGACY_CORS_HEADERS,
    LEGACY_OPTIMIZE_PATH,
    method_not_allowed_response,
    router as legacy_optimize_router,
)
from app.api.endpoints.optimize import router as optimize_router

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

logger = logging.getLogger(__name__)

API_TITLE = "ASCO API"
API_VERSION = "1.0.0"


def _cors_origins() -> list:
    raw_value = os.getenv("CORS_ALLOW_ORIGINS", "*")
    return [origin.strip() for origin in raw_value.split(",") if origin.strip()] or ["*"]


class RouteCORSMiddleware(CORSMiddleware):
    """CORS middleware that leaves some paths to set their own headers."""

    def __init__(self, app, exempt_paths=(), **kwargs):
        super().__init__(app, **kwargs)
        self.exempt_paths = frozenset(exempt_paths)

    async def __call__(self, scope, receive, send):
        if scope["type"] == "http" and scope["path"] in self.exempt_paths:
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)


app = FastAPI(title="ASCO", version=API_VERSION)

# CORS - Next.js frontend; the legacy route answers with its own fixed headers
app.add_middleware(
    RouteCORSMiddleware,
    exempt_paths=(LEGACY_OPTIMIZE_PATH,),
    allow_origins=_cors_origins(),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(optimize_router)
app.include_router(legacy_optimize_router)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render every HTTP error as ``{"error": <message>}``."""

    if exc.status_code == 405 and request.url.path == LEGACY_OPTIMIZE_PATH:
        return method_not_allowed_response()
    if exc.status_code >= 500:
        logger.debug("Request to %s failed: %s", request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report the first invalid field as a 400 ``{"error": <message>}``."""

    errors = exc.errors()
    first_error = errors[0] if errors else {}
    if first_error.get("type") == "json_invalid" or tuple(first_error.get("loc", ())) == ("body",):
        message = "Invalid JSON body"
    else:
        message = first_error.get("msg") or "Invalid request"

    headers = LEGACY_CORS_HEADERS if request.url.path == LEGACY_OPTIMIZE_PATH else None
    return JSONResponse(status_code=400, content={"error": message}, headers=headers)


@app.get("/")
async def root():
    return {"message": API_TITLE, "version": API_VERSION}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
