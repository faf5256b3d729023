#!/usr/bin/env python3
"""
Background job worker.

Runs the due jobs from the scheduled_job table (auto-closing topics,
moved post notifications, emails).

Usage:
    python scripts/run_jobs.py            # run due jobs once
    python scripts/run_jobs.py --loop     # keep polling
"""
import argparse
import sys
import time
from pathlib import Path
import logging

# Add parent directory to path to import forum modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlmodel import Session  # noqa: E402
from forum.core.database import engine, init_db  # noqa: E402
from forum.services.job_service import run_due_jobs  # noqa: E402

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def run_once() -> dict:
    with Session(engine) as session:
        return run_due_jobs(session)


def main():
    parser = argparse.ArgumentParser(description="Run scheduled forum jobs")
    parser.add_argument("--loop", action="store_true", help="Keep polling for due jobs")
    parser.add_argument("--interval", type=float, default=10.0, help="Seconds between polls (with --loop)")
    args = parser.parse_args()

    init_db()

    if not args.loop:
        result = run_once()
        logger.info(f"Finished: {result['done']} done, {result['failed']} failed")
        return 1 if result['failed'] else 0

    logger.info(f"Polling for due jobs every {args.interval} seconds")
    try:
        while True:
            run_once()
            time.sleep(args.interval)
    except KeyboardInterrupt:
        logger.info("Stopped by user")
    return 0


if __name__ == "__main__":
    sys.exit(main())
