"""Impact classification of changeset resource changes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, NamedTuple, Sequence, Tuple

from ..models import (
    Category,
    CategoryMarker,
    ChangeAction,
    Evaluation,
    PropertyChangeDetail,
    Replacement,
    RequiresRecreation,
    ResourceChange,
    SUMMARY_ORDER,
    marker_for,
)

_REPLACING = frozenset({Replacement.TRUE, Replacement.CONDITIONAL})
_RECREATING = frozenset({RequiresRecreation.ALWAYS, RequiresRecreation.CONDITIONALLY})


class ClassifiedChange(NamedTuple):
    """A resource change paired with its 0-based position in the changeset."""

    index: int
    change: ResourceChange


@dataclass(frozen=True, slots=True)
class Classification:
    """Result of :func:`classify`.

    ``categories`` is a side table indexed by original position so renderers
    can look up a change's category without touching the change itself.
    """

    groups: Mapping[Category, Tuple[ClassifiedChange, ...]]
    categories: Tuple[Category, ...]

    @property
    def total(self) -> int:
        return len(self.categories)

    def count(self, category: Category) -> int:
        return len(self.groups[category])

    def category_of(self, index: int) -> Category:
        return self.categories[index]

    def marker_of(self, index: int) -> CategoryMarker:
        return marker_for(self.categories[index])


def categorize(change: ResourceChange) -> Category:
    """Return the single category for ``change``; the first matching rule wins."""

    if change.action is ChangeAction.REMOVE:
        return Category.REMOVED
    if change.replacement in _REPLACING:
        return Category.REPLACED
    if change.action is ChangeAction.ADD:
        return Category.NEW
    return Category.MODIFIED_IN_PLACE


def classify(changes: Sequence[ResourceChange] | None) -> Classification:
    """Partition ``changes`` into categories, preserving relative order."""

    buckets: dict[Category, list[ClassifiedChange]] = {category: [] for category in SUMMARY_ORDER}
    categories: list[Category] = []
    for index, change in enumerate(changes or ()):
        category = categorize(change)
        categories.append(category)
        buckets[category].append(ClassifiedChange(index, change))

    return Classification(
        groups={category: tuple(items) for category, items in buckets.items()},
        categories=tuple(categories),
    )


def is_replacement_cause(detail: PropertyChangeDetail) -> bool:
    """Return ``True`` when ``detail`` can force the resource to be recreated."""

    return detail.evaluation is Evaluation.DYNAMIC or detail.requires_recreation in _RECREATING


def replacement_causes(change: ResourceChange) -> Tuple[PropertyChangeDetail, ...]:
    return tuple(detail for detail in change.details if is_replacement_cause(detail))
