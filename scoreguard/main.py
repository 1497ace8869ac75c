from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.responses import ORJSONResponse
from . import __version__
from .anticheat import AntiCheatService
from .core.events import startup_event, shutdown_event
from .routes import bans, health, leaderboard, score, sessions

@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup_event(app)
    try:
        yield
    finally:
        await shutdown_event(app)

def create_app(service: Optional[AntiCheatService] = None, rate_limiter=None,
               score_store=None) -> FastAPI:
    """
    Build the application.

    Without arguments the lifespan connects PostgreSQL, Kafka and Redis.
    Passing a prebuilt service skips that wiring, which is how tests and
    embedded callers run it.
    """
    app = FastAPI(
        default_response_class=ORJSONResponse,
        title="Score Guard",
        description="Session-tracked score validation for the arcade leaderboard",
        version=__version__,
        lifespan=lifespan if service is None else None
    )
    if service is not None:
        app.state.service = service
        app.state.rate_limiter = rate_limiter
        app.state.score_store = score_store

    app.include_router(sessions.router)
    app.include_router(score.router)
    app.include_router(bans.router)
    app.include_router(leaderboard.router)
    app.include_router(health.router)
    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "scoreguard.main:app",
        host="0.0.0.0",
        port=8000,
        # sessions live in process memory, so one worker per instance
        workers=1,
        loop="uvloop",
        limit_concurrency=1000,
        backlog=1024,
        http="httptools",
        log_level="info"
    )
