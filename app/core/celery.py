# app/core/celery.py
from celery import Celery

from app.core.config import settings

# Inbound events (submissions, trust-tier changes) arrive as tasks on this app
celery_app = Celery(
    "moderation_tasks",
    broker=settings.RABBITMQ_URL,
    backend=settings.REDIS_URL,
    include=[
        "app.tasks.moderation_tasks",
    ],
)


def init_celery():
    celery_app.conf.update(
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        timezone="UTC",
        enable_utc=True,
        worker_proc_alive_timeout=30,
        worker_send_task_events=True,
        broker_connection_retry_on_startup=True,
        task_track_started=True,
        task_acks_late=True,
    )

