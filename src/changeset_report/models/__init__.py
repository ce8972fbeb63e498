"""Data models for CloudFormation changesets and their impact categories."""

from .category import (
    CATEGORY_MARKERS,
    DETAIL_ORDER,
    SUMMARY_ORDER,
    Category,
    CategoryMarker,
    marker_for,
)
from .changeset import (
    ChangeAction,
    Changeset,
    Evaluation,
    PropertyChangeDetail,
    Replacement,
    RequiresRecreation,
    ResourceChange,
)

__all__ = [
    "CATEGORY_MARKERS",
    "DETAIL_ORDER",
    "SUMMARY_ORDER",
    "Category",
    "CategoryMarker",
    "ChangeAction",
    "Changeset",
    "Evaluation",
    "PropertyChangeDetail",
    "Replacement",
    "RequiresRecreation",
    "ResourceChange",
    "marker_for",
]
