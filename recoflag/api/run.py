"""
Server entry point.

Usage:
    python -m recoflag.api.run
    python -m recoflag.api.run --port 8000

For auto-reload during development, use uvicorn directly:
    uvicorn recoflag.api.app:create_app --factory --reload --port 8000
"""

from __future__ import annotations

import argparse
import os

import uvicorn

from recoflag.api.app import create_app
from recoflag.config import configure_logging


def main():
    parser = argparse.ArgumentParser(description="recoflag landing page server")
    parser.add_argument("--host", default="0.0.0.0", help="Bind address")
    parser.add_argument(
        "--port", type=int,
        default=int(os.getenv("PORT", "8000")),
        help="Port (defaults to PORT env var, then 8000)",
    )
    args = parser.parse_args()

    configure_logging()

    app = create_app()
    # Single worker: the shared flag client and the log sink are per process.
    uvicorn.run(app, host=args.host, port=args.port, log_level="info")


if __name__ == "__main__":
    main()
