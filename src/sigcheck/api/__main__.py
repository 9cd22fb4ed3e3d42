# src/sigcheck/api/__main__.py
from __future__ import annotations

import logging

import uvicorn

from sigcheck.env import load_dotenv_if_present


def main() -> None:
    # Load .env early so SIGCHECK_* vars exist before anything reads them.
    load_dotenv_if_present()

    # Import after dotenv load (prevents "config read before env" surprises)
    from sigcheck.api.app import create_app
    from sigcheck.api.config import load_api_config
    from sigcheck.api.errors import AVAILABLE_ENDPOINTS
    from sigcheck.api.structured_logging import configure_structured_logging, log_event

    configure_structured_logging()
    cfg = load_api_config()

    log_event(
        logging.getLogger("sigcheck.api"),
        "service_start",
        service=cfg.service_name,
        mode=cfg.mode,
        host=cfg.host,
        port=cfg.port,
        endpoints=AVAILABLE_ENDPOINTS,
    )

    uvicorn.run(create_app(cfg), host=cfg.host, port=cfg.port, log_level="info")


if __name__ == "__main__":
    main()
