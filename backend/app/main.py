import logging
import os

from fastapi import FastAPI
from backend.app.api.v1.router import router as v1_router

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

logging.basicConfig(
    level=LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="TIMEWISE AUTOMATED ORDERS", version="0.1.0")
app.include_router(v1_router, prefix="/v1")
