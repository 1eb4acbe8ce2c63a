# =============================================================================
# workers/ - Celery Background Task Workers
# =============================================================================
# This package contains the Celery configuration and task definitions for
# background email delivery.
#
# Components:
# - celery_app.py: Celery application and beat schedule
# - tasks.py: Task definitions (availability reminders, admin notifications)
# - config.py: Worker-specific settings
#
# Usage:
#   # Start worker (with beat for the daily reminder run)
#   celery -A workers.celery_app worker --beat --loglevel=info
#
#   # Or use the script
#   python scripts/start_worker.py
#
#   # Submit task (from API)
#   from workers.tasks import notify_admins_of_registration
#   result = notify_admins_of_registration.delay(user_id, "professional")
# =============================================================================

from .celery_app import celery_app
from . import tasks

__all__ = [
    "celery_app",
    "tasks",
]
