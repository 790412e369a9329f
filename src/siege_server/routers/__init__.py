"""API routers."""
from .battle import router as battle_router
from .leaderboard import router as leaderboard_router

__all__ = ["battle_router", "leaderboard_router"]
