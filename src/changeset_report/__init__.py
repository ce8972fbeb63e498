"""Classify CloudFormation changesets and render impact reports for CI."""

from .classification import Classification, classify
from .models import Category, Changeset, ResourceChange
from .rendering import ReportFormat, render
from .service import ReportResult, ReportService

__all__ = [
    "Category",
    "Changeset",
    "Classification",
    "ReportFormat",
    "ReportResult",
    "ReportService",
    "ResourceChange",
    "classify",
    "render",
]
