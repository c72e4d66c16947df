import logging

import structlog

APP_LOGGER = "envios"


def setup_logging(debug: bool) -> None:
    """Route structlog through stdlib logging.

    Debug mode renders colored console lines and logs envios at DEBUG; otherwise
    one JSON object per line at INFO. pymongo is kept at WARNING either way.
    """
    log_level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(level=logging.INFO, format="%(message)s")
    logging.getLogger(APP_LOGGER).setLevel(log_level)
    logging.getLogger("pymongo").setLevel(logging.WARNING)

    processors: list[structlog.types.Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]
    processors.append(structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
