"""
Application factory for the Image Steganography Service

Builds a FastAPI application around the stego router; the configuration
is stored on ``app.state.config`` where the routes pick it up.
"""

import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api.routes import router
from hidelab.utility.constants_manager import ServerConfig


def create_app(config: Optional[ServerConfig] = None) -> FastAPI:
    config = config or ServerConfig()

    # Ensure output directory exists
    os.makedirs(config.upload_dir, exist_ok=True)

    app = FastAPI(title="Hide Lab", version=__version__)
    app.state.config = config
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


__all__ = ["create_app", "router"]
