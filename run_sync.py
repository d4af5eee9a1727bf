#!/usr/bin/env python3
"""Results Sheet Sync — run the game sync by hand or as a standalone poller.

Usage:
    python run_sync.py --phase insert                 # add today's scheduled games
    python run_sync.py --phase update                 # write tonight's final scores
    python run_sync.py --phase both --date 2025-10-03 # both phases for a given day
    python run_sync.py --loop                         # poll forever, windows from config
"""
import argparse
import sys
import time
from datetime import date

from config import POLL_MINUTES, TIMEZONE, TERMINAL_POLICY
from game_sync import TERMINAL_POLICIES, GameSyncEngine
from google_sheets import open_gateway
from hockeytech_client import FeedClient
from models import GatewayError
from scheduler import SyncScheduler
from shared_utils import setup_logger, today_iso

log = setup_logger("run_sync", "sync.log")

PHASES = ("insert", "update", "both")


def _iso_date(value):
    try:
        return date.fromisoformat(value).isoformat()
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a YYYY-MM-DD date: {value!r}")


def build_parser():
    parser = argparse.ArgumentParser(description="WHL Pick'em — Results sheet sync")
    parser.add_argument("--phase", choices=PHASES, default="both",
                        help="Which phase to run (default: both)")
    parser.add_argument("--date", type=_iso_date, default=None,
                        help=f"Game date YYYY-MM-DD (default: today in {TIMEZONE})")
    parser.add_argument("--policy", choices=sorted(TERMINAL_POLICIES), default=TERMINAL_POLICY,
                        help=f"When a game counts as finished (default: {TERMINAL_POLICY})")
    parser.add_argument("--loop", action="store_true",
                        help=f"Poll every {POLL_MINUTES} min and run phases inside their windows")
    return parser


def run_phases(engine, phase, day):
    """Run the requested phase(s) for one day; returns the SyncResults."""
    results = []
    if phase in ("insert", "both"):
        results.append(engine.insert_scheduled(day))
    if phase in ("update", "both"):
        results.append(engine.update_results(day))
    return results


def run_loop(engine):
    scheduler = SyncScheduler(engine.insert_scheduled, engine.update_results)
    print(f"  Polling every {POLL_MINUTES} min ({TIMEZONE}) — Ctrl+C to stop")
    while True:
        scheduler.tick()
        time.sleep(POLL_MINUTES * 60)


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        gateway = open_gateway()
    except GatewayError as e:
        print(f"\n  ERROR: {e}")
        return 1
    engine = GameSyncEngine(gateway, FeedClient(), terminal_policy=args.policy)

    if args.loop:
        try:
            run_loop(engine)
        except KeyboardInterrupt:
            print("\n  Stopped.")
        return 0

    day = args.date or today_iso(TIMEZONE)
    print("=" * 60)
    print(f"  RESULTS SYNC — {day} ({args.phase})")
    print("=" * 60)
    try:
        results = run_phases(engine, args.phase, day)
    except GatewayError as e:
        log.exception("Sync failed")
        print(f"\n  ERROR: {e}")
        return 1

    for r in results:
        print(f"  {r.phase:<7} fetched {r.fetched:>3} game(s), wrote {r.count:>3} row(s)")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
