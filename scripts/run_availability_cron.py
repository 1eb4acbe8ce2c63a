#!/usr/bin/env python3
# =============================================================================
# scripts/run_availability_cron.py - One-shot Reminder Run
# =============================================================================
# Runs the availability reminder job once, in-process, without Celery.
# Useful from a system crontab or to backfill a missed day.
#
# Usage:
#   python scripts/run_availability_cron.py
#   python scripts/run_availability_cron.py --now 2025-09-01T07:00:00Z
#
# Exit status is 1 when any reminder failed.
# =============================================================================

import argparse
import json
import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

load_dotenv()

from app.config import settings
from core.services.availability_service import AvailabilityService
from lib.utils import parse_timestamp

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Dispatch due availability reminders")
    parser.add_argument(
        "--now",
        help="ISO-8601 timestamp to treat as the current time (default: now)",
    )
    args = parser.parse_args()

    if not settings.resend_configured:
        logger.error("RESEND_API_KEY is not set; no reminders dispatched")
        return 1

    now = parse_timestamp(args.now) if args.now else None
    report = AvailabilityService.dispatch_due_reminders(now)

    print(json.dumps(report.model_dump(), indent=2))
    logger.info(
        f"Processed {report.processed} reminder(s): "
        f"{report.success_count} ok, {report.failure_count} failed"
    )
    return 1 if report.failure_count else 0


if __name__ == "__main__":
    sys.exit(main())
