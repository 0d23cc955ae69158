from __future__ import annotations

import asyncio

from momentum.celery_app import celery_app
from momentum.jobs.periodic import run_periodic_work as _run_periodic_work


@celery_app.task(name="momentum.celery_tasks.run_periodic_work")
def run_periodic_work() -> dict:
    return asyncio.run(_run_periodic_work())
