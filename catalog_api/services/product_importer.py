import enum
import logging
from typing import Callable, Dict, List, Optional
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from catalog_api.errors import InvalidImportMode, RowRejected, StoreError
from catalog_api.models.product import Product
from catalog_api.schemas.import_task import ImportReport, RowRejection
from catalog_api.schemas.product import ProductRecord
from catalog_api.services.csv_processor import CSVProcessor, Source
from catalog_api.services.reference_resolver import ReferenceResolver
from catalog_api.services.row_transformer import RowTransformer

logger = logging.getLogger(__name__)

# Called with (processed_rows, total_rows)
ProgressCallback = Callable[[int, int], None]


class ImportMode(str, enum.Enum):
    ADD = "add"
    REPLACE = "replace"


class ProductImporter:
    """Bulk product import from an uploaded CSV file.

    Rows are processed sequentially. A row that cannot be transformed is
    reported and skipped; every valid row is written in one bulk insert at
    the end. Replace mode deletes all products first and does not restore
    them if the import later fails.
    """

    PROGRESS_EVERY = 500

    def __init__(
        self,
        session: AsyncSession,
        resolver: Optional[ReferenceResolver] = None,
        on_progress: Optional[ProgressCallback] = None
    ):
        self.session = session
        self.resolver = resolver or ReferenceResolver(session)
        self.transformer = RowTransformer(self.resolver)
        self.on_progress = on_progress

    @staticmethod
    def parse_mode(mode) -> ImportMode:
        try:
            return ImportMode(mode)
        except ValueError:
            raise InvalidImportMode(mode) from None

    async def run(self, source: Source, mode) -> ImportReport:
        """Dispatch on ``mode``; an unknown mode fails before parsing."""
        if self.parse_mode(mode) is ImportMode.REPLACE:
            return await self.import_replace(source)
        return await self.import_additive(source)

    async def import_additive(self, source: Source) -> ImportReport:
        rows = CSVProcessor.parse_rows(source)
        return await self._import_rows(rows, ImportMode.ADD)

    async def import_replace(self, source: Source) -> ImportReport:
        rows = CSVProcessor.parse_rows(source)
        await self.clear_products()
        return await self._import_rows(rows, ImportMode.REPLACE)

    async def clear_products(self) -> int:
        try:
            result = await self.session.execute(delete(Product))
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StoreError(f"Failed to clear existing products: {e}") from e
        deleted_count = result.rowcount or 0
        logger.info("All existing products deleted (%d).", deleted_count)
        return deleted_count

    async def _import_rows(self, rows: List[Dict[str, Optional[str]]], mode: ImportMode) -> ImportReport:
        report = ImportReport(mode=mode.value, rows_seen=len(rows))
        batch: List[ProductRecord] = []

        try:
            for row_number, row in enumerate(rows, start=1):
                try:
                    batch.append(await self.transformer.transform(row))
                except RowRejected as e:
                    e.row_number = row_number
                    report.rejections.append(
                        RowRejection(row_number=row_number, row_label=e.row_label, reason=e.reason)
                    )
                    logger.error("Skipping product: %s (row %d): %s", e.row_label, row_number, e.reason)

                if self.on_progress and row_number % self.PROGRESS_EVERY == 0:
                    self.on_progress(row_number, len(rows))
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StoreError(f"Reference lookup failed: {e}") from e

        report.rows_rejected = len(report.rejections)

        if batch:
            await self._insert_batch(batch)
            report.rows_committed = len(batch)
            logger.info("%d products added successfully.", len(batch))
        else:
            logger.warning("No valid products to add.")

        logger.info(
            "Import (%s) finished: seen=%d committed=%d rejected=%d",
            mode.value, report.rows_seen, report.rows_committed, report.rows_rejected
        )
        if self.on_progress:
            self.on_progress(len(rows), len(rows))
        return report

    async def _insert_batch(self, batch: List[ProductRecord]) -> None:
        try:
            self.session.add_all([Product(**record.model_dump()) for record in batch])
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StoreError(
                f"Bulk insert of {len(batch)} validated products failed; none were committed: {e}"
            ) from e
