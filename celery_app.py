from celery import Celery
from celery.signals import setup_logging
from catalog_api.config import settings
from catalog_api.logging_config import configure_logging

celery_app = Celery(
    "product_catalog",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
)

# Configure Celery
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=3600,  # 1 hour max
)


@setup_logging.connect
def _configure_worker_logging(**kwargs):
    configure_logging(settings.log_level)


# Import tasks after celery_app is created so the task decorator can bind to it
import catalog_api.tasks.import_task  # noqa: E402,F401
