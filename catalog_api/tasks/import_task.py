import json
import asyncio
import logging
import os
import redis
from typing import Dict, List, Optional
from celery import Task
from sqlalchemy import pool, select
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from catalog_api.config import settings
from catalog_api.errors import CatalogError, ParseError, StoreError
from catalog_api.models.import_task import ImportTask
from catalog_api.services.csv_processor import CSVProcessor
from catalog_api.services.product_importer import ProductImporter
from celery_app import celery_app

logger = logging.getLogger(__name__)

PROGRESS_CHANNEL = 'import_progress'


def get_user_friendly_error(error: Exception) -> str:
    """Convert an import failure into a message fit for the task record."""
    if isinstance(error, ParseError):
        return f"Invalid CSV format: {error.message}"
    if isinstance(error, StoreError):
        return "Database error while saving products. No products from this file were saved."
    if isinstance(error, CatalogError):
        return error.message
    if isinstance(error, OSError):
        return "Unable to access the uploaded file. Please try uploading again."
    return "An error occurred while processing your file. Please try again or contact support if the problem persists."


def publish(message: Dict) -> None:
    """Publish a progress message for the API process to relay over WebSocket."""
    try:
        r = redis.Redis.from_url(settings.redis_url)
        r.publish(PROGRESS_CHANNEL, json.dumps(message))
    except redis.RedisError as e:
        # Progress fan-out is advisory; the task record is authoritative
        logger.warning("Could not publish import progress: %s", e)


class ProgressTask(Task):
    """Custom task class that tracks progress."""

    def update_progress(self, processed: int, total: int, task_id: str, errors: Optional[List[Dict]] = None):
        """Update task state and broadcast via Redis."""
        progress = (processed / total) * 100.0 if total > 0 else 100.0
        meta = {
            "progress": progress,
            "processed": processed,
            "total": total,
            "errors": errors or []
        }
        self.update_state(state="PROCESSING", meta=meta)
        publish({"type": "progress", "task_id": task_id, **meta})


async def run_import(task: ProgressTask, file_path: str, task_id: str, mode: str) -> Dict:
    # One engine per run: the worker creates a fresh event loop for every task
    engine = create_async_engine(settings.database_url, poolclass=pool.NullPool)
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    try:
        async with async_session() as session:
            result = await session.execute(
                select(ImportTask).where(ImportTask.task_id == task_id)
            )
            import_task = result.scalar_one_or_none()
            if not import_task:
                import_task = ImportTask(task_id=task_id, mode=mode)
                session.add(import_task)

            import_task.status = "processing"
            await session.commit()

            try:
                with open(file_path, 'rb') as f:
                    content = f.read()

                import_task.total_rows = CSVProcessor.count_rows(content)
                await session.commit()

                importer = ProductImporter(
                    session,
                    on_progress=lambda processed, total: task.update_progress(processed, total, task_id)
                )
                report = await importer.run(content, mode)
            except Exception as e:
                await session.rollback()
                message = get_user_friendly_error(e)
                logger.exception("Import task %s failed", task_id)
                import_task.status = "failed"
                import_task.errors = json.dumps([{"error": message}])
                await session.commit()
                publish({"type": "complete", "task_id": task_id, "success": False, "message": message})
                raise

            import_task.status = "completed"
            import_task.progress = 100.0
            import_task.total_rows = report.rows_seen
            import_task.processed_rows = report.rows_seen
            import_task.committed_rows = report.rows_committed
            import_task.rejected_rows = report.rows_rejected
            import_task.errors = (
                json.dumps([r.model_dump() for r in report.rejections]) if report.rejections else None
            )
            await session.commit()
    finally:
        await engine.dispose()

    publish({
        "type": "complete",
        "task_id": task_id,
        "success": True,
        "message": "Import completed",
        "progress": 100.0,
        "processed": report.rows_seen,
        "total": report.rows_seen,
        "success_count": report.rows_committed,
        "error_count": report.rows_rejected
    })
    return report.model_dump()


@celery_app.task(bind=True, base=ProgressTask, name="catalog_api.tasks.import_task.import_products_task")
def import_products_task(self, file_path: str, task_id: str, mode: str = "add"):
    """
    Celery task importing products from a CSV file saved by the API.
    file_path: Absolute path to the CSV file on disk
    """
    try:
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            report = loop.run_until_complete(run_import(self, file_path, task_id, mode))
        finally:
            loop.close()
    except Exception as e:
        self.update_state(state="FAILURE", meta={"error": get_user_friendly_error(e)})
        raise
    finally:
        try:
            if file_path and os.path.exists(file_path):
                os.remove(file_path)
        except OSError:
            logger.warning("Could not remove uploaded file %s", file_path)

    return report


__all__ = ['import_products_task', 'run_import']
