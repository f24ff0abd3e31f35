"""Application factory for the reader API."""

from __future__ import annotations

import os
import re
from typing import List, Optional, Tuple

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from linguamaster import logging_manager as log_mgr
from linguamaster.config import get_settings

from .routes import router

logger = log_mgr.get_logger().getChild("webapi")

CORS_ENV_VAR = "LINGUA_API_CORS_ORIGINS"
# Vite dev server and plain localhost.
LOCAL_ORIGINS = (
    "http://localhost",
    "http://localhost:5173",
    "http://127.0.0.1",
    "http://127.0.0.1:5173",
)


def cors_policy(raw: Optional[str]) -> Tuple[List[str], bool]:
    """Map ``LINGUA_API_CORS_ORIGINS`` to ``(origins, allow_credentials)``.

    Unset means the local dev origins. An empty value disables CORS, and a
    ``*`` anywhere allows every origin without credentials.
    """

    if raw is None:
        return list(LOCAL_ORIGINS), True
    origins = [item for item in re.split(r"[,\s]+", raw) if item]
    if "*" in origins:
        return ["*"], False
    return origins, bool(origins)


def create_app() -> FastAPI:
    settings = get_settings()
    log_mgr.configure_logging_level(debug_enabled=settings.debug)

    app = FastAPI(title="LinguaMaster API", version="0.1.0")
    # Built lazily by dependencies.get_session.
    app.state.reader_session = None

    origins, credentials = cors_policy(os.environ.get(CORS_ENV_VAR))
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=credentials,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    else:
        logger.info("CORS disabled: %s is empty", CORS_ENV_VAR)

    @app.on_event("shutdown")
    async def close_reader_session() -> None:
        session = app.state.reader_session
        if session is not None:
            session.close()
            app.state.reader_session = None

    @app.get("/health", tags=["health"])
    def health() -> dict:
        return {"status": "ok"}

    app.include_router(router)
    return app


__all__ = ["create_app", "cors_policy"]
