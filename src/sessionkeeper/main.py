"""Application entry point for the sessionkeeper server."""

from sessionkeeper.app import App
from sessionkeeper.config import Config
from sessionkeeper.logging import setup_logging
from sessionkeeper.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
