# =============================================================================
# workers/config.py - Celery Worker Configuration
# =============================================================================
# Two tasks run here, both on the "email" queue:
# - dispatch_availability_reminders: once a day from beat; may send many
#   emails in one run
# - notify_admins_of_registration: one short burst of admin emails per
#   submitted profile
# =============================================================================

from app.config import settings


class CeleryConfig:
    """
    Celery configuration, applied via app.config_from_object().
    """

    # -------------------------------------------------------------------------
    # Broker (Redis)
    # -------------------------------------------------------------------------

    broker_url = settings.REDIS_URL
    result_backend = settings.REDIS_URL
    broker_connection_retry_on_startup = True

    # Dispatch reports stay readable for a day, until the next run
    result_expires = 24 * 3600

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    worker_prefetch_multiplier = 1

    task_serializer = "json"
    result_serializer = "json"
    accept_content = ["json"]

    # -------------------------------------------------------------------------
    # Queues
    # -------------------------------------------------------------------------

    task_queues = {
        "default": {"exchange": "default", "routing_key": "default"},
        "email": {"exchange": "email", "routing_key": "email"},
    }
    task_default_queue = "default"

    task_routes = {
        "workers.tasks.dispatch_availability_reminders": {"queue": "email"},
        "workers.tasks.notify_admins_of_registration": {"queue": "email"},
    }

    # -------------------------------------------------------------------------
    # Per-task limits and retries
    # -------------------------------------------------------------------------

    task_annotations = {
        # Re-running a dispatch is safe: handled rows are no longer pending
        "workers.tasks.dispatch_availability_reminders": {
            "acks_late": True,
            "max_retries": 3,
            "default_retry_delay": 600,
            "time_limit": 900,
            "soft_time_limit": 840,
        },
        # Must not be redelivered: every admin would get the email twice
        "workers.tasks.notify_admins_of_registration": {
            "acks_late": False,
            "max_retries": 3,
            "default_retry_delay": 60,
            "time_limit": 120,
            "soft_time_limit": 100,
        },
    }

    # Beat's crontab hour (AVAILABILITY_CRON_HOUR) is UTC
    timezone = "UTC"
    enable_utc = True
