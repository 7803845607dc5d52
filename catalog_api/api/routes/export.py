from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession
from catalog_api.config import settings
from catalog_api.database import get_db
from catalog_api.services.export_service import (
    EXPORT_GROUPS,
    CatalogExporter,
    ExportLabels,
    rows_to_csv,
)

router = APIRouter(prefix="/api/export", tags=["export"])


def exporter_for(request: Request) -> CatalogExporter:
    """Configured labels, overridden by any query parameters."""
    labels = ExportLabels(settings.export_labels).merged(dict(request.query_params))
    return CatalogExporter(labels)


@router.get("")
async def export_catalog(
    exporter: CatalogExporter = Depends(exporter_for),
    db: AsyncSession = Depends(get_db)
):
    """Export every entity group as labelled flat rows."""
    return await exporter.export_all(db)


@router.get("/{group}.csv", response_class=PlainTextResponse)
async def export_group_csv(
    group: str,
    exporter: CatalogExporter = Depends(exporter_for),
    db: AsyncSession = Depends(get_db)
):
    if group not in EXPORT_GROUPS:
        raise HTTPException(status_code=404, detail=f"Unknown export group '{group}'")
    data = await exporter.export_all(db)
    return PlainTextResponse(rows_to_csv(data[group]), media_type="text/csv")
