"""Leaderboard API — read and reset per-keep records."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from siege.leaderboard import LeaderboardStore

router = APIRouter(prefix="/api/leaderboard", tags=["leaderboard"])


def _get_store(request: Request) -> LeaderboardStore:
    store = getattr(request.app.state, "leaderboard", None)
    if store is None:
        raise HTTPException(503, "Leaderboard not available")
    return store


@router.get("/{post_id}")
async def get_leaderboard(post_id: str, request: Request):
    store = _get_store(request)
    try:
        record = store.get_state(post_id)
    except ValueError as e:
        raise HTTPException(400, str(e))
    return record.to_json_dict()


@router.delete("/{post_id}")
async def clear_leaderboard(post_id: str, request: Request):
    store = _get_store(request)
    try:
        cleared = store.clear(post_id)
    except ValueError as e:
        raise HTTPException(400, str(e))
    return {"post_id": post_id, "cleared": cleared}
