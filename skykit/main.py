"""FastAPI status server for monitoring and controlling a game session."""

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Config
from .logger import configure_logging
from .routes import events_router, simulation_router, status_router

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(title="SkyKit Optimizer", version="1.0.0")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(status_router)
app.include_router(events_router)
app.include_router(simulation_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "SkyKit Optimizer", "docs": "/docs"}


def run() -> None:
    """Configure logging and serve the app with uvicorn."""
    import uvicorn

    config = Config()
    configure_logging(config.LOG_LEVEL, config.LOG_FILE)
    logger.info(f"Status server on http://{config.SERVER_HOST}:{config.SERVER_PORT}")
    logger.info("POST /api/game/start to begin a simulation")
    uvicorn.run(app, host=config.SERVER_HOST, port=config.SERVER_PORT)


if __name__ == "__main__":
    run()
