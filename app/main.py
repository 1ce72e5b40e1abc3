from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse, Response
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from advisor.core.bulletin import load_bulletin
from advisor.core.models import CategorizeRequest, CategoryResult, ChatRequest
from advisor.relay import ERROR_PREFIX, AdvisorRelay
from advisor.tools import CategoryClassifier
from config.settings import get_settings


logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s - %(message)s")
logger = logging.getLogger("advisor")

app = FastAPI(title="Degree Advisor Relay", version="1.0.0")

# Browser client may be served from anywhere
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

settings = get_settings()
app.state.classifier = CategoryClassifier(load_bulletin(settings.bulletin_path))
app.state.relay = AdvisorRelay.from_settings(settings)
logger.info(
    "Config: model=%s key_set=%s bulletin_chars=%s",
    settings.openai_model,
    bool(settings.openai_api_key),
    len(app.state.classifier.bulletin_text),
)


async def _read_json(request: Request) -> Optional[Dict[str, Any]]:
    """Parse the request body; ``None`` means it was not valid JSON.

    An empty body or a JSON value that is not an object counts as ``{}``.
    """
    body = await request.body()
    if not body.strip():
        return {}
    try:
        payload = json.loads(body)
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else {}


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code in (404, 405):
        return JSONResponse({"error": "Not found"}, status_code=404)
    return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code)


@app.options("/{full_path:path}")
def preflight(full_path: str) -> Response:
    return Response(status_code=204)


def _static_file(filename: str, media_type: str, fallback_dir: Optional[str] = None) -> Response:
    path = os.path.join(settings.static_dir, filename)
    if not os.path.exists(path) and fallback_dir:
        alt = os.path.join(settings.static_dir, fallback_dir, filename)
        if os.path.exists(alt):
            path = alt
    if not os.path.isfile(path):
        return PlainTextResponse("Not found", status_code=404)
    return FileResponse(path, media_type=media_type)


@app.get("/")
@app.get("/index.html")
def index() -> Response:
    return _static_file("index.html", "text/html; charset=utf-8", fallback_dir="public")


@app.get("/styles.css")
def styles() -> Response:
    return _static_file("styles.css", "text/css; charset=utf-8")


@app.post("/api/categorize")
async def categorize(request: Request) -> Dict[str, Any]:
    classifier: CategoryClassifier = request.app.state.classifier
    payload = await _read_json(request)
    try:
        req = CategorizeRequest.model_validate(payload or {})
    except ValidationError as exc:
        logger.warning("Categorize request rejected: %s", exc.errors())
        return CategoryResult(category="breadth", source="error").model_dump()

    result = classifier.classify(req.code, req.name)
    logger.info("Categorized code=%r as %s (%s)", req.code, result.category, result.source)
    return result.model_dump()


@app.post("/api/chat")
async def chat(request: Request) -> Dict[str, Any]:
    relay: AdvisorRelay = request.app.state.relay
    payload = await _read_json(request)
    if payload is None:
        return {"reply": ERROR_PREFIX + "invalid JSON body."}

    try:
        req = ChatRequest.model_validate(payload)
    except ValidationError as exc:
        logger.warning("Chat request rejected: %s", exc.errors())
        req = ChatRequest()

    logger.info(
        "Incoming chat: history_turns=%s checked=%s message_len=%s",
        len(req.history),
        len(req.checked),
        len(req.message or ""),
    )
    # Upstream call is blocking and has no timeout
    reply = await run_in_threadpool(relay.relay, req.message, req.history, req.checked)
    return reply.model_dump()


@app.get("/health")
def health():
    return {"status": "ok"}


def run() -> None:
    import uvicorn

    logger.info("AI proxy listening on http://%s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
