import asyncio
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from catalog_api.api.routes import brands, categories, export, imports, products
from catalog_api.api.websocket_route import router as websocket_router
from catalog_api.api.redis_progress import redis_progress_subscriber
from catalog_api.config import settings
from catalog_api.database import engine
from catalog_api.errors import CatalogError, ParseError, ReferenceNotFound, StoreError, ValidationError
from catalog_api.logging_config import configure_logging

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Product Catalog API",
    description="Product catalog with bulk CSV import, pricing ledger and export",
    version="1.0.0"
)

# Include routers; import routes first so their static paths win
app.include_router(imports.router)
app.include_router(products.router)
app.include_router(categories.router)
app.include_router(brands.router)
app.include_router(export.router)
app.include_router(websocket_router)

ERROR_STATUS = (
    (ParseError, 400),
    (ValidationError, 400),
    (ReferenceNotFound, 404),
    (StoreError, 500),
)


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError):
    status_code = next((code for kind, code in ERROR_STATUS if isinstance(exc, kind)), 500)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status_code, content={"error": exc.message})


@app.get("/")
async def root():
    return {"message": "Product Catalog API", "docs": "/docs"}


@app.on_event("startup")
async def startup():
    # Schema is managed by Alembic migrations
    try:
        app.state._redis_progress_task = asyncio.create_task(redis_progress_subscriber())
    except RuntimeError:
        logger.exception("Could not start Redis progress subscriber")


@app.on_event("shutdown")
async def shutdown():
    task = getattr(app.state, '_redis_progress_task', None)
    if task:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("Redis progress subscriber exited with an error")

    await engine.dispose()
