#!/usr/bin/env python3
"""
Counter Device Simulator - FastAPI Edition

A stand-in for the networked counter device, serving the same plain-text
endpoints (/count, /add, /sub) so the client can be developed and tested
without hardware.
"""

import logging
import sys
import threading
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8080

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}


# Pydantic models
class DeviceSettings(BaseModel):
    initial: int = 0
    step: int = 1
    min_count: Optional[int] = 0

class HealthResponse(BaseModel):
    status: str
    count: int


class DeviceCounter:
    """The counter held by the simulated device."""

    def __init__(self, settings: DeviceSettings):
        self.settings = settings
        self._count = settings.initial
        self._lock = threading.Lock()

    @property
    def count(self) -> int:
        with self._lock:
            return self._count

    def add(self) -> int:
        with self._lock:
            self._count += self.settings.step
            return self._count

    def sub(self) -> int:
        with self._lock:
            new_count = self._count - self.settings.step
            if self.settings.min_count is not None:
                new_count = max(new_count, self.settings.min_count)
            self._count = new_count
            return self._count


def create_app(settings: Optional[DeviceSettings] = None) -> FastAPI:
    """Build a simulator app with its own counter."""
    settings = settings or DeviceSettings()
    counter = DeviceCounter(settings)

    app = FastAPI(
        title="Counter Device Simulator",
        description="Simulated networked counter device",
        version="0.1.0"
    )
    app.state.counter = counter

    @app.get("/count", response_class=PlainTextResponse)
    async def get_count():
        """Return the current count as plain text."""
        count = counter.count
        logger.info(f"GET /count request received. Current count: {count}")
        return PlainTextResponse(str(count), headers=CORS_HEADERS)

    @app.post("/add", response_class=PlainTextResponse)
    async def add():
        """Increment the counter by the configured step."""
        count = counter.add()
        logger.info(f"POST /add request received. New count: {count}")
        return PlainTextResponse(f"Added. New count: {count}", headers=CORS_HEADERS)

    @app.post("/sub", response_class=PlainTextResponse)
    async def sub():
        """Decrement the counter by the configured step, never below min_count."""
        count = counter.sub()
        logger.info(f"POST /sub request received. New count: {count}")
        return PlainTextResponse(f"Subtracted. New count: {count}", headers=CORS_HEADERS)

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint."""
        return HealthResponse(status="healthy", count=counter.count)

    return app


app = create_app()


def main():
    """Run the counter device simulator."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    port = int(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_PORT

    logger.info("Counter Device Simulator (FastAPI)")
    logger.info("=" * 50)
    logger.info(f"Starting server at http://localhost:{port}")
    logger.info("Press Ctrl+C to stop the server")

    uvicorn.run(
        "counter_sim.device_server:app",
        host="0.0.0.0",
        port=port,
        log_level="info",
        reload=False
    )

if __name__ == "__main__":
    main()
