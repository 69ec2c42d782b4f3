import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("evento")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Drop verification codes whose ten minute window has passed
    "purge-expired-verification-codes": {
        "task": "users.purge_expired_verification_codes",
        "schedule": crontab(minute="*/15"),
    },
}
