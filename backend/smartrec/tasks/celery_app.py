"""Celery application configuration and beat schedule."""

from celery import Celery
from celery.schedules import crontab

from smartrec.config import get_settings

settings = get_settings()

celery_app = Celery(
    "smartrec",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=[
        "smartrec.tasks.recommendation_tasks",
    ],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    task_track_started=True,
    task_time_limit=120,
    task_soft_time_limit=90,
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_always_eager=settings.celery_task_always_eager,
    # Publishing reconnects at most once; a down broker fails the dispatch quickly
    task_publish_retry=False,
    broker_connection_timeout=2,
    broker_transport_options={"max_retries": 1, "interval_start": 0, "interval_step": 0.2, "interval_max": 0.5},
)

celery_app.conf.beat_schedule = {
    "decay-learned-preferences": {
        "task": "smartrec.tasks.recommendation_tasks.decay_learned_preferences",
        "schedule": crontab(minute=0, hour=3),
    },
}
