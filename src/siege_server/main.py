"""KEEP SIEGE - deterministic siege battles.

Main FastAPI application.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from siege import __version__
from siege.comms import EventBus
from siege.leaderboard import LeaderboardStore
from siege.simulation import SimulationEngine
from siege_server.config import Settings, settings
from siege_server.routers import battle_router, leaderboard_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    cfg = app.state.settings
    logger.info("=" * 60)
    logger.info(f"  {cfg.app_name} v{__version__} - INITIALIZING")
    logger.info("=" * 60)
    logger.info(f"Battle seed: {app.state.engine.seed!r}")
    logger.info(f"Leaderboard: {app.state.leaderboard.root_dir} (post {cfg.post_id})")

    yield

    logger.info("Shutting down...")
    engine = getattr(app.state, "engine", None)
    if engine is not None:
        engine.stop()


def create_app(config: Settings | None = None) -> FastAPI:
    """Build the app with its own engine, event bus, and leaderboard store."""
    cfg = config or settings
    app = FastAPI(
        title=cfg.app_name,
        description="Deterministic, seed-replayable siege battles",
        version=__version__,
        lifespan=lifespan,
    )

    event_bus = EventBus()
    app.state.settings = cfg
    app.state.event_bus = event_bus
    app.state.log_capacity = cfg.log_capacity
    app.state.display_cap = cfg.display_cap
    app.state.post_id = cfg.post_id
    app.state.player_name = cfg.player_name
    app.state.leaderboard = LeaderboardStore(cfg.leaderboard_dir)
    app.state.engine = SimulationEngine(
        cfg.battle_seed, event_bus=event_bus, log_capacity=cfg.log_capacity,
    )
    app.state.submitted = False

    app.include_router(battle_router)
    app.include_router(leaderboard_router)

    @app.get("/health")
    async def health_check():
        engine = app.state.engine
        return {
            "status": "healthy",
            "version": __version__,
            "tick": engine.tick,
            "running": engine.is_running,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "siege_server.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
