from __future__ import annotations

from celery import Celery
from celery.schedules import crontab

from momentum.config import settings


celery_app = Celery(
    "momentum",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=["momentum.celery_tasks"],
)

celery_app.conf.timezone = settings.TIMEZONE
celery_app.conf.task_serializer = "json"
celery_app.conf.result_serializer = "json"
celery_app.conf.accept_content = ["json"]

celery_app.conf.beat_schedule = {
    "run-periodic-work": {
        "task": "momentum.celery_tasks.run_periodic_work",
        "schedule": crontab(minute=5, hour="*"),
    },
}
