import ssl

from celery import Celery, signals

from storefront.core.config import settings
from storefront.core.logging import setup_logging

# Task modules to include
TASK_MODULES = [
    "storefront.tasks.erasure",
]

# Dev/eager mode: run tasks synchronously without Redis/Celery worker
# Set CELERY_TASK_ALWAYS_EAGER=true to enable
if settings.CELERY_TASK_ALWAYS_EAGER:
    # Don't connect to Redis in eager mode - use memory backend
    celery_app = Celery(
        "storefront",
        broker="memory://",
        backend="cache+memory://",
        include=TASK_MODULES,
    )
    celery_app.conf.update(
        task_always_eager=True,
        # Retries re-run inline through Retry.sig; failures surface from result.get()
        task_eager_propagates=False,
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        timezone="UTC",
        enable_utc=True,
    )
else:
    # Production mode: use Redis
    celery_app = Celery(
        "storefront",
        broker=settings.REDIS_URL,
        backend=settings.REDIS_URL,
        include=TASK_MODULES,
    )

    celery_app.conf.update(
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        timezone="UTC",
        enable_utc=True,
        task_track_started=True,
        task_time_limit=600,  # 10 minutes max per task
        task_soft_time_limit=540,  # 9 minutes soft limit
        worker_prefetch_multiplier=1,  # Key stretching is CPU bound, take one at a time
        task_acks_late=True,  # Acknowledge after task completes; redelivery is idempotent
        task_reject_on_worker_lost=True,
        task_routes={"storefront.tasks.erasure.*": {"queue": "erasure"}},
    )

    # SSL configuration for rediss:// URLs
    if settings.REDIS_URL.startswith("rediss://"):
        celery_app.conf.update(
            broker_use_ssl={"ssl_cert_reqs": ssl.CERT_REQUIRED},
            redis_backend_use_ssl={"ssl_cert_reqs": ssl.CERT_REQUIRED},
        )


@signals.setup_logging.connect
def configure_worker_logging(**kwargs: object) -> None:
    """Use the application log format in workers instead of Celery's own."""
    setup_logging(
        level=settings.LOG_LEVEL,
        debug=settings.DEBUG,
        json_logs=settings.LOG_JSON_FORMAT,
    )
