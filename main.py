from __future__ import annotations

import logging

from hidelab.services.steganography.main import create_app
from hidelab.utility.constants_manager import ConstantsManager

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


config = ConstantsManager().load_server_config()
app = create_app(config)

logger.info(f"Hide Lab configured: upload_dir={config.upload_dir}, max_image_bytes={config.max_image_bytes}")
