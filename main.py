from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.services.stego_codec import __version__
from src.services.stego_codec.main import router as stego_router
from src.utility.constants_manager import ConstantsManager

constants = ConstantsManager()

# Configure logging
logging.basicConfig(level=constants.get_log_level())
logger = logging.getLogger(__name__)


app = FastAPI(title="CAPN Stego", version=__version__)

app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(stego_router)


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "service": constants.get_service_name(),
        "version": __version__,
    }


logger.info(f"{constants.get_service_name()} {__version__} ready")
