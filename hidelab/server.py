"""
Run the Hide Lab HTTP service with uvicorn
"""

import logging

import uvicorn

from hidelab.services.steganography.main import create_app
from hidelab.utility.constants_manager import ConstantsManager

logger = logging.getLogger(__name__)


def run() -> None:
    logging.basicConfig(level=logging.INFO)

    try:
        config = ConstantsManager().load_server_config()
    except ValueError as exc:
        logger.error(f"Failed to load configuration: {exc}")
        raise SystemExit(1) from exc

    logger.info(f"Starting server at http://{config.host}:{config.port}")
    uvicorn.run(create_app(config), host=config.host, port=config.port)


if __name__ == "__main__":
    run()
