#!/usr/bin/env python3
# =============================================================================
# scripts/start_worker.py - Celery Worker Entry Point
# =============================================================================
# Starts a Celery worker with an embedded beat scheduler, so one process
# both sends emails and triggers the daily availability reminder run.
#
# Usage:
#   # Start worker + scheduler (development)
#   python scripts/start_worker.py
#
#   # Or use Celery CLI directly (separate processes in production)
#   celery -A workers.celery_app worker --loglevel=info -Q default,email
#   celery -A workers.celery_app beat --loglevel=info
#
# Prerequisites:
#   - Redis must be running
#   - Environment variables must be set (.env file)
# =============================================================================

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from workers.celery_app import celery_app


def main():
    """Start the Celery worker with beat."""
    print("=" * 60)
    print("TalentFlow Celery Worker")
    print("=" * 60)
    print()
    print("Starting worker (queues: default, email) with beat...")
    print("Press Ctrl+C to stop")
    print()

    celery_app.worker_main([
        "worker",
        "--loglevel=info",
        "--concurrency=2",
        "--queues=default,email",
        "--beat",
    ])


if __name__ == "__main__":
    main()
