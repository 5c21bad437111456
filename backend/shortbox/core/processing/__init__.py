"""File processing: single-file inference, batch runs and path naming."""

from shortbox.core.processing.batch import (
    CANCELLED_LABEL,
    COMPLETE_LABEL,
    get_processing_stats,
    run_batch,
)
from shortbox.core.processing.naming import DEFAULT_TEMPLATE, format_path
from shortbox.core.processing.smart import (
    INSUFFICIENT_INFO_ERROR,
    PARSE_FAILURE_ERROR,
    ProcessingContext,
    process_comic_file,
)

__all__ = [
    "CANCELLED_LABEL",
    "COMPLETE_LABEL",
    "DEFAULT_TEMPLATE",
    "INSUFFICIENT_INFO_ERROR",
    "PARSE_FAILURE_ERROR",
    "ProcessingContext",
    "format_path",
    "get_processing_stats",
    "process_comic_file",
    "run_batch",
]
