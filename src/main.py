"""Entry point: wires Config, remote clients, RequestHandlers and the FastAPI app."""
import logging

import uvicorn

from src.config import Config
from src.constants import MSG_SERVER_STARTING
from src.handlers import RequestHandlers
from src.logging_setup import setup_logging
from src.web.server import create_app


def main() -> None:
    config = Config.from_env()
    setup_logging(config.log_level)

    logger = logging.getLogger(__name__)
    logger.info(MSG_SERVER_STARTING, config.host, config.port, config.vision_provider)

    app = create_app(RequestHandlers.from_config(config))
    uvicorn.run(app, host=config.host, port=config.port, log_config=None)


if __name__ == "__main__":
    main()
