"""Entry point for running Infinite XO via ``python -m infinixo``."""

from __future__ import annotations

import logging
import os

import uvicorn


def main() -> None:
    """Start the FastAPI-powered Infinite XO web server."""

    host = os.environ.get("INFINIXO_HOST", "0.0.0.0")
    port = int(os.environ.get("INFINIXO_PORT", "8000"))
    log_level = os.environ.get("INFINIXO_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    uvicorn.run(
        "infinixo.ui:app", host=host, port=port, reload=False, log_level=log_level.lower()
    )


if __name__ == "__main__":
    main()
