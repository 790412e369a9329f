"""Leaderboard persistence for finished sieges."""
from .store import (
    AttackSubmission,
    KeepRecord,
    LeaderboardEntry,
    LeaderboardStore,
    submission_from_summary,
)

__all__ = [
    "AttackSubmission",
    "KeepRecord",
    "LeaderboardEntry",
    "LeaderboardStore",
    "submission_from_summary",
]
