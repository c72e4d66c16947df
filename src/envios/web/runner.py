"""Uvicorn server runner."""

import copy
from typing import Any

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from envios.app import App
from envios.config import Config
from envios.web.server import create_fastapi_app


def build_log_config(debug: bool) -> dict[str, Any]:
    """Uvicorn logging config with timestamps; access lines only in debug mode.

    Works on a deep copy so uvicorn's module-level defaults stay untouched.
    """
    log_config: dict[str, Any] = copy.deepcopy(LOGGING_CONFIG)
    log_config["formatters"]["access"]["fmt"] = '%(asctime)s - %(client_addr)s - "%(request_line)s" %(status_code)s'
    log_config["formatters"]["default"]["fmt"] = "%(asctime)s - %(levelname)s - %(message)s"
    log_config["loggers"]["uvicorn.access"]["level"] = "INFO" if debug else "WARNING"
    return log_config


def run_server(app: App, config: Config) -> None:
    fastapi_app = create_fastapi_app(app, config)
    uvicorn.run(
        fastapi_app,
        host=config.host,
        port=config.port,
        log_config=build_log_config(config.debug),
        log_level="debug" if config.debug else "info",
        proxy_headers=True,
    )
