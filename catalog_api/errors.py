"""Error kinds raised by the catalog import and ledger services.

Row-scoped errors (``ReferenceNotFound``, ``RowRejected``) are collected by the
importer and reported; they never escape an import call. Call-scoped errors
(``ParseError``, ``ValidationError``, ``StoreError``) propagate to the caller.
"""
from typing import Optional, Sequence


class CatalogError(Exception):
    """Base class for all catalog service failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ParseError(CatalogError):
    """The import source could not be read or parsed as delimited text."""


class ReferenceNotFound(CatalogError):
    """A category and/or brand display name does not exist in the store."""

    def __init__(self, category_name: Optional[str], brand_name: Optional[str],
                 missing_category: bool, missing_brand: bool):
        if missing_category and missing_brand:
            message = f"Unknown category '{category_name}' and brand '{brand_name}'"
        elif missing_category:
            message = f"Unknown category '{category_name}'"
        else:
            message = f"Unknown brand '{brand_name}'"
        super().__init__(message)
        self.category_name = category_name
        self.brand_name = brand_name
        self.missing_category = missing_category
        self.missing_brand = missing_brand


class RowRejected(CatalogError):
    """A single import row could not be turned into a product record."""

    def __init__(self, reason: str, row_label: Optional[str] = None, row_number: Optional[int] = None):
        super().__init__(reason)
        self.reason = reason
        self.row_label = row_label
        self.row_number = row_number


class ValidationError(CatalogError):
    """A single-record operation is missing required fields."""

    def __init__(self, message: str, missing_fields: Sequence[str] = ()):
        super().__init__(message)
        self.missing_fields = list(missing_fields)


class InvalidImportMode(ValidationError):
    """The import mode selector is neither ``add`` nor ``replace``."""

    def __init__(self, mode):
        super().__init__(f"Invalid mode: {mode}")
        self.mode = mode


class StoreError(CatalogError):
    """The underlying persistence layer failed; nothing is retried."""
