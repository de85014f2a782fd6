"""Models module: query and record schemas."""
from .schema import (
    ExtractStats,
    OPTIONAL_FIELDS,
    Query,
    Record,
    REQUIRED_FIELDS,
    is_valid_record,
    normalize_record,
)

__all__ = [
    "ExtractStats",
    "OPTIONAL_FIELDS",
    "Query",
    "Record",
    "REQUIRED_FIELDS",
    "is_valid_record",
    "normalize_record",
]
