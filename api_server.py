from __future__ import annotations  # FastAPI server exposing the interview session engine

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import router, scoring_tasks
from config import COMPLETION_KEY, bind_model, is_bound, load_completion_routes, settings
from interview_session.errors import InvalidStateError, NotFoundError
from llm_gateway import LlmGatewayError, completion_from_routes
from response_normalizer import MalformedResponseError
from storage.migrate import migrate


logger = logging.getLogger(__name__)

CONFIG_PATH = Path(__file__).resolve().parent / settings.APP_CONFIG_PATH


def bind_default_completion(config_path: Path = CONFIG_PATH) -> None:
    """Bind the configured failover chain unless a completion is already bound."""

    if is_bound(COMPLETION_KEY):
        return
    try:
        routes = load_completion_routes(config_path)
    except FileNotFoundError:
        logger.warning("AI route config %s not found; completion left unbound", config_path)
        return
    bind_model(COMPLETION_KEY, completion_from_routes(routes))


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    migrate(settings.DB_PATH)
    bind_default_completion()
    yield
    scoring_tasks.drain(timeout=30)
    scoring_tasks.shutdown()


app = FastAPI(title="Interview Session API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"]
)
app.include_router(router)


@app.exception_handler(NotFoundError)
def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(InvalidStateError)
def _invalid_state(request: Request, exc: InvalidStateError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(LlmGatewayError)
def _upstream_unavailable(request: Request, exc: LlmGatewayError) -> JSONResponse:
    logger.error("AI request failed on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": f"AI request failed: {exc}"})


@app.exception_handler(MalformedResponseError)
def _malformed_upstream(request: Request, exc: MalformedResponseError) -> JSONResponse:
    logger.error("Malformed AI reply on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": f"AI reply could not be parsed: {exc}"})


@app.get("/api/health")
def health() -> dict:
    return {"status": "ok", "ai_bound": is_bound(COMPLETION_KEY)}
