"""Impact categories and the display markers tied to them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping


class Category(str, Enum):
    """Mutually exclusive impact buckets for resource changes."""

    REMOVED = "Removed"
    REPLACED = "Replaced"
    MODIFIED_IN_PLACE = "ModifiedInPlace"
    NEW = "New"


@dataclass(frozen=True, slots=True)
class CategoryMarker:
    """Rendering metadata for a category: an emoji and an ANSI colour code."""

    emoji: str
    color: str


CATEGORY_MARKERS: Mapping[Category, CategoryMarker] = {
    Category.REMOVED: CategoryMarker(emoji="⛔", color="\x1b[31m"),
    Category.REPLACED: CategoryMarker(emoji="🔴", color="\x1b[91m"),
    Category.MODIFIED_IN_PLACE: CategoryMarker(emoji="🟡", color="\x1b[93m"),
    Category.NEW: CategoryMarker(emoji="🟢", color="\x1b[92m"),
}

# Summary counts list removals first; detail sections lead with replacements.
SUMMARY_ORDER = (
    Category.REMOVED,
    Category.REPLACED,
    Category.MODIFIED_IN_PLACE,
    Category.NEW,
)
DETAIL_ORDER = (
    Category.REPLACED,
    Category.MODIFIED_IN_PLACE,
    Category.NEW,
    Category.REMOVED,
)


def marker_for(category: Category) -> CategoryMarker:
    return CATEGORY_MARKERS[category]
