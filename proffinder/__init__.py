"""ProfFinder - streams professor records out of an LLM completion as they arrive."""
from .core import (
    FETCH_ERROR_MESSAGE,
    LINK_NOT_WORKING,
    InvalidInputError,
    LineAssembler,
    StreamError,
    extract,
    iter_records,
)
from .models import ExtractStats, Query, Record

__all__ = [
    "extract",
    "iter_records",
    "LineAssembler",
    "Query",
    "Record",
    "ExtractStats",
    "InvalidInputError",
    "StreamError",
    "FETCH_ERROR_MESSAGE",
    "LINK_NOT_WORKING",
]
