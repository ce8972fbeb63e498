"""Classification of resource changes into impact categories."""

from .classifier import (
    Classification,
    ClassifiedChange,
    categorize,
    classify,
    is_replacement_cause,
    replacement_causes,
)

__all__ = [
    "Classification",
    "ClassifiedChange",
    "categorize",
    "classify",
    "is_replacement_cause",
    "replacement_causes",
]
