import uuid
import os
import logging
import aiofiles
from pathlib import Path
from fastapi import APIRouter, Depends, UploadFile, File, Form, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from catalog_api.config import settings
from catalog_api.database import get_db
from catalog_api.models.import_task import ImportTask
from catalog_api.schemas.import_task import ImportReport, ImportTaskResponse
from catalog_api.services.product_importer import ProductImporter
from catalog_api.tasks.import_task import import_products_task

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products/import", tags=["import"])


@router.post("", response_model=ImportReport)
async def import_products(
    file: UploadFile = File(None),
    mode: str = Form(None),
    db: AsyncSession = Depends(get_db)
):
    """Import products from a CSV upload in ``add`` or ``replace`` mode.

    Rows with an unknown category or brand are skipped and listed in the
    report; the rest are committed together.
    """
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded. Please upload a CSV file.")

    # Mode is checked before the file is parsed
    ProductImporter.parse_mode(mode)

    content = await file.read()
    report = await ProductImporter(db).run(content, mode)
    logger.info(
        "Import of %s (%s): %d committed, %d rejected",
        file.filename, mode, report.rows_committed, report.rows_rejected
    )
    return report


@router.post("/async", response_model=ImportTaskResponse, status_code=202)
async def import_products_async(
    file: UploadFile = File(...),
    mode: str = Form("add"),
    db: AsyncSession = Depends(get_db)
):
    """Queue a CSV import on the worker and return its tracking task."""
    ProductImporter.parse_mode(mode)

    if not file.filename or not file.filename.endswith('.csv'):
        raise HTTPException(status_code=400, detail="File must be a CSV file")

    task_id = str(uuid.uuid4())

    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)

    file_path = upload_dir / f"{task_id}_{Path(file.filename).name}"
    content = await file.read()
    if len(content) == 0:
        raise HTTPException(status_code=400, detail="File is empty")
    try:
        async with aiofiles.open(file_path, 'wb') as f:
            await f.write(content)
    except OSError as e:
        raise HTTPException(status_code=400, detail=f"Error saving file: {str(e)}")

    import_task = ImportTask(
        task_id=task_id,
        mode=mode,
        status="pending",
        progress=0.0,
        total_rows=0,
        processed_rows=0,
        committed_rows=0,
        rejected_rows=0
    )
    db.add(import_task)
    await db.commit()
    await db.refresh(import_task)

    try:
        celery_result = import_products_task.delay(str(file_path.absolute()), task_id, mode)
        logger.info("Started Celery task %s for import task %s with file %s", celery_result.id, task_id, file_path)
    except Exception as e:
        logger.exception("Error starting import task %s", task_id)
        import_task.status = "failed"
        import_task.errors = f"Failed to start task: {str(e)}"
        await db.commit()
        try:
            os.unlink(file_path)
        except OSError:
            pass
        raise HTTPException(status_code=500, detail=f"Failed to start import: {str(e)}")

    return ImportTaskResponse.model_validate(import_task)


@router.get("/tasks/{task_id}", response_model=ImportTaskResponse)
async def get_import_status(task_id: str, db: AsyncSession = Depends(get_db)):
    """Get the status of a queued import."""
    result = await db.execute(
        select(ImportTask).where(ImportTask.task_id == task_id)
    )
    import_task = result.scalar_one_or_none()

    if not import_task:
        raise HTTPException(status_code=404, detail="Task not found")

    return ImportTaskResponse.model_validate(import_task)
