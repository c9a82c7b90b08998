from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.settings import get_settings
from relay import Relay, RelayError, RelayErrorKind, build_provider


def _resolve_log_level(name: str) -> int:
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


settings = get_settings()

logging.basicConfig(
    level=_resolve_log_level(settings.log_level),
    format="[%(asctime)s] %(levelname)s - %(message)s",
)
logger = logging.getLogger("claude_chat")

HEALTH_ENDPOINT_HINT = 'POST /ask with {"question": "your question"}'

app = FastAPI(title="Claude Chat Relay", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


class AskRequest(BaseModel):
    # Left untyped so the relay decides what counts as a valid question.
    question: Any = Field(default=None, description="The user's question")


class AskResponse(BaseModel):
    answer: str


class HealthResponse(BaseModel):
    status: str
    endpoint: str


@lru_cache(maxsize=1)
def get_relay() -> Relay:
    current = get_settings()
    return Relay(
        build_provider(current),
        model=current.claude_model,
        max_tokens=current.max_tokens,
    )


@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_envelope())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    if any(error.get("type") == "json_invalid" for error in exc.errors()):
        logger.error("Invalid JSON in request body: %s", exc.errors())
        return JSONResponse(status_code=400, content={"error": "Invalid JSON in request body"})

    logger.warning("Rejected request body: %s", exc.errors())
    kind = RelayErrorKind.INVALID_REQUEST
    return JSONResponse(status_code=kind.status_code, content={"error": kind.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # FastAPI raises a bare 400 when the body cannot be read as JSON at all.
    if exc.status_code == 400:
        logger.error("Invalid JSON in request body: %s", exc.detail)
        return JSONResponse(status_code=400, content={"error": "Invalid JSON in request body"})

    logger.warning("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/api/health", response_model=HealthResponse)
def health() -> Dict[str, str]:
    return {"status": "Server is running", "endpoint": HEALTH_ENDPOINT_HINT}


@app.post("/ask", response_model=AskResponse)
async def ask(req: AskRequest, relay: Relay = Depends(get_relay)) -> Dict[str, str]:
    answer = await relay.ask(req.question)
    return {"answer": answer}


def mount_client_build(application: FastAPI, build_dir: Path) -> bool:
    """Serve a built single-page client from ``build_dir``.

    Must run after the API routes are registered, since the catch-all GET
    would otherwise shadow them.
    """
    root = build_dir.resolve()
    index = root / "index.html"
    if not root.is_dir():
        logger.info("Client build not found at %s; static serving disabled", root)
        return False

    @application.get("/{full_path:path}", include_in_schema=False)
    async def serve_client(full_path: str):
        candidate = (root / full_path).resolve()
        if full_path and candidate.is_file() and candidate.is_relative_to(root):
            return FileResponse(candidate)
        if index.is_file():
            return FileResponse(index)
        return JSONResponse(status_code=404, content={"error": "Not found"})

    logger.info("Serving client build from %s", root)
    return True


mount_client_build(app, Path(settings.client_build_dir))
