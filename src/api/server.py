# src/api/server.py — v1
"""FastAPI application exposing the analysis pipeline over HTTP.

Routes:
    POST /analyze  multipart upload (image, prompt, systemPrompt, style,
                   needStyle, needEmotion) → answer text, or JSON error
    GET  /health   liveness probe
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from imganalyzer.api.facade import analyze
from imganalyzer.api.models import AnalysisInput, AnalysisResult
from imganalyzer.config.settings import Settings
from imganalyzer.core.models import ErrorKind, Failure
from imganalyzer.llm.transport import ChatTransport
from imganalyzer.version import __version__

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: dict[ErrorKind, int] = {
    ErrorKind.IMAGE_PROCESSING: 422,
    ErrorKind.TRANSPORT: 502,
    ErrorKind.RESPONSE_PARSE: 502,
}


def create_app(
    settings: Settings | None = None,
    transport: ChatTransport | None = None,
) -> FastAPI:
    """Build the app. A shared transport is opened at startup unless one is given."""
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if app.state.transport is not None:
            yield
            return
        app.state.transport = ChatTransport.from_settings(settings)
        try:
            yield
        finally:
            await app.state.transport.close()
            app.state.transport = None

    app = FastAPI(title="imganalyzer", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.transport = transport

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/analyze")
    async def analyze_endpoint(
        request: Request,
        image: UploadFile = File(...),
        prompt: str = Form(...),
        system_prompt: str | None = Form(None, alias="systemPrompt"),
        style: str | None = Form(None),
        need_style: bool = Form(False, alias="needStyle"),
        need_emotion: bool = Form(False, alias="needEmotion"),
    ) -> Response:
        submission = AnalysisInput(
            image=await image.read(),
            prompt=prompt,
            system_prompt=system_prompt,
            style=style,
            need_style=need_style,
            need_emotion=need_emotion,
        )
        result = await analyze(
            submission,
            settings=request.app.state.settings,
            transport=request.app.state.transport,
        )
        return to_response(result)

    return app


def to_response(result: AnalysisResult) -> Response:
    """Map an AnalysisResult to the HTTP response sent to the browser."""
    if isinstance(result.outcome, Failure):
        return JSONResponse(
            status_code=_STATUS_BY_ERROR[result.outcome.error],
            content={
                "error": result.outcome.error.value,
                "detail": result.outcome.detail,
                "request_id": result.request_id,
            },
        )
    media_type = "application/json" if result.json_mode else "text/plain"
    return Response(content=result.outcome.text, media_type=media_type)
