"""Services layer for cimetrics - pure Python APIs returning dataclasses.

This module provides stable APIs for the CLI and programmatic access.
"""

from cimetrics.services.reporter import (
    ReportResult,
    build_report,
    parse_run_id,
    report_metrics,
    resolve_mode,
    validate_repository,
)
from cimetrics.services.types import ServiceResult

__all__ = [
    # Types
    "ServiceResult",
    "ReportResult",
    # Reporting
    "build_report",
    "report_metrics",
    "parse_run_id",
    "resolve_mode",
    "validate_repository",
]
