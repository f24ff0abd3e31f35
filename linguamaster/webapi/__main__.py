"""Run the reader API under uvicorn: ``python -m linguamaster.webapi``."""

from __future__ import annotations

import argparse
import os
from typing import Sequence

import uvicorn

APP_FACTORY = "linguamaster.webapi.application:create_app"
UVICORN_LOG_LEVELS = ("critical", "error", "warning", "info", "debug", "trace")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="linguamaster-api", description="Serve the LinguaMaster reader API.")
    parser.add_argument("--host", default=os.environ.get("LINGUA_API_HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=int(os.environ.get("LINGUA_API_PORT", "8000")))
    parser.add_argument("--reload", action="store_true", help="restart the server when sources change")
    parser.add_argument("--log-level", default="info", choices=UVICORN_LOG_LEVELS)
    parser.add_argument(
        "--debug",
        action="store_true",
        help="set LINGUA_DEBUG so the application logs at DEBUG level",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    if args.debug:
        # The factory runs in the server process and reads settings from the environment.
        os.environ["LINGUA_DEBUG"] = "1"
    uvicorn.run(
        APP_FACTORY,
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
    )


if __name__ == "__main__":  # pragma: no cover - CLI integration
    main()
