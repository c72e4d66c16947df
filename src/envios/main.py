"""Application entry point for the Envios backend server."""

from envios.app import App
from envios.config import Config
from envios.logging import setup_logging
from envios.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
