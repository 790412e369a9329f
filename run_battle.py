#!/usr/bin/env python3
"""Run a headless siege and report how it went.

Usage:
    .venv/bin/python3 run_battle.py [seed ...] [--verify] [--log N]

If no seeds are given, runs a default set.
"""

import argparse
import json
import sys
from pathlib import Path

# Ensure the src/ packages are importable from a checkout
sys.path.insert(0, str(Path(__file__).parent / "src"))

from siege.leaderboard import LeaderboardStore, submission_from_summary
from siege.simulation import composite_seed, run_battle, verify_replay


DEFAULTS = [
    "test-seed-12345",
    "different-seed",
    composite_seed("keep-1", "attacker-1"),
]


def run_one(seed: str, log_lines: int, verify: bool):
    """Run one seed.  Returns (report dict, ReplaySummary or None)."""
    print(f"\n{'='*60}")
    print(f"  BATTLE: {seed}")
    print(f"{'='*60}")

    run = run_battle(seed)
    for line in run.log[-log_lines:] if log_lines > 0 else []:
        print(f"  {line}")

    summary = run.summary
    if summary is None:
        print(f"\n  Unfinished after {run.frames} frames")
        return {"seed": seed, "outcome": None}, None

    print(f"\n  Outcome:  {summary.outcome.upper()}")
    print(f"  Duration: {summary.duration_ticks} ticks ({summary.duration_seconds:.1f}s)")
    print(f"  Keep hp:  {summary.final_keep_hp:.2f}/{summary.keep_max_hp:.0f}")

    result = summary.to_dict()
    if verify:
        check = verify_replay(seed)
        print(f"  Replay:   {'identical' if check.matches else 'DIVERGED'}")
        result["replay_verified"] = check.matches
    return result, summary


def main():
    parser = argparse.ArgumentParser(description="Run headless Keep Siege battles")
    parser.add_argument("seeds", nargs="*", help="battle seeds (default: a built-in set)")
    parser.add_argument("--verify", action="store_true", help="re-run each seed and compare")
    parser.add_argument("--log", type=int, default=10, help="battle log lines to print")
    parser.add_argument("--leaderboard", type=Path, help="record results in this directory")
    parser.add_argument("--post-id", default="local")
    parser.add_argument("--player", default="headless")
    parser.add_argument("--json", action="store_true", help="print summaries as JSON")
    args = parser.parse_args()

    store = LeaderboardStore(args.leaderboard) if args.leaderboard else None
    results = []
    for seed in args.seeds or DEFAULTS:
        result, summary = run_one(seed, args.log, args.verify)
        results.append(result)
        if store is not None and summary is not None:
            store.submit_attack(args.post_id, submission_from_summary(summary, args.player))

    print(f"\n\n{'='*60}")
    print("  SUMMARY")
    print(f"{'='*60}")
    if args.json:
        print(json.dumps(results, indent=2))
    else:
        for r in results:
            outcome = r["outcome"] or "unfinished"
            print(f"  {r['seed']:<30} {outcome:<10} "
                  f"{r.get('duration_ticks', 0):>5} ticks  keep hp {r.get('final_keep_hp', 0):.2f}")

    if args.verify and not all(r.get("replay_verified", True) for r in results):
        sys.exit(1)


if __name__ == "__main__":
    main()
