"""Format-independent report structure shared by every formatter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from ..classification import Classification, is_replacement_cause, replacement_causes
from ..models import (
    DETAIL_ORDER,
    SUMMARY_ORDER,
    Category,
    ChangeAction,
    Changeset,
    Evaluation,
    PropertyChangeDetail,
    Replacement,
    RequiresRecreation,
    ResourceChange,
    marker_for,
)

NOT_AVAILABLE = "N/A"
COLUMN_PADDING = 2
TABLE_HEADERS = ("#", "Resource", "Type", "Action", "Replacement")

SUMMARY_LABELS = {
    Category.REMOVED: "Resources to be removed",
    Category.REPLACED: "Resources requiring replacement",
    Category.MODIFIED_IN_PLACE: "Resources modified in-place",
    Category.NEW: "New resources to be created",
}
SECTION_TITLES = {
    Category.REPLACED: "Resources Requiring Replacement",
    Category.MODIFIED_IN_PLACE: "Resources Modified In-Place",
    Category.NEW: "New Resources",
    Category.REMOVED: "Resources Being Removed",
}
PROPERTY_LIST_LABELS = {
    Category.REPLACED: "All Property Changes",
    Category.MODIFIED_IN_PLACE: "Property Changes",
    Category.NEW: "Property Details",
    Category.REMOVED: "Resource Details",
}


@dataclass(frozen=True, slots=True)
class SummaryLine:
    category: Category
    count: int

    @property
    def label(self) -> str:
        return SUMMARY_LABELS[self.category]


@dataclass(frozen=True, slots=True)
class TableRow:
    """One overview table row; ``position`` is the 1-based changeset position."""

    position: int
    category: Category
    logical_id: str
    resource_type: str
    action: str
    replacement: str

    @property
    def resource_cell(self) -> str:
        return f"{marker_for(self.category).emoji} {self.logical_id}"


@dataclass(frozen=True, slots=True)
class PropertyLine:
    detail: PropertyChangeDetail
    is_replacement_cause: bool


@dataclass(frozen=True, slots=True)
class DetailBlock:
    """Per-resource explanation inside a detail section.

    ``replacement_reasons`` is ``None`` outside the Replaced section. An empty
    tuple means the replacement has no explicit property cause.
    """

    position: int
    change: ResourceChange
    show_replacement: bool
    replacement_reasons: Tuple[PropertyChangeDetail, ...] | None
    properties: Tuple[PropertyLine, ...]
    deletion_warning: bool


@dataclass(frozen=True, slots=True)
class DetailSection:
    category: Category
    blocks: Tuple[DetailBlock, ...]

    @property
    def title(self) -> str:
        return SECTION_TITLES[self.category]

    @property
    def property_label(self) -> str:
        return PROPERTY_LIST_LABELS[self.category]


@dataclass(frozen=True, slots=True)
class ColumnWidths:
    index: int
    resource: int
    type: int
    action: int
    replacement: int

    def as_tuple(self) -> Tuple[int, int, int, int, int]:
        return (self.index, self.resource, self.type, self.action, self.replacement)


@dataclass(frozen=True, slots=True)
class ReportPlan:
    changeset: Changeset
    summary: Tuple[SummaryLine, ...]
    rows: Tuple[TableRow, ...]
    sections: Tuple[DetailSection, ...]

    @property
    def total(self) -> int:
        return len(self.rows)

    @property
    def widths(self) -> ColumnWidths:
        return column_widths(self.rows)


def build_report_plan(changeset: Changeset, classification: Classification) -> ReportPlan:
    """Assemble summary, table rows, and detail sections for ``changeset``."""

    summary = tuple(
        SummaryLine(category, classification.count(category)) for category in SUMMARY_ORDER
    )

    rows = tuple(
        TableRow(
            position=index + 1,
            category=classification.category_of(index),
            logical_id=change.logical_id,
            resource_type=change.resource_type,
            action=display_action(change.action),
            replacement=display_replacement(change.replacement),
        )
        for index, change in enumerate(changeset.changes)
    )

    sections: list[DetailSection] = []
    for category in DETAIL_ORDER:
        members = classification.groups[category]
        if not members:
            continue
        blocks = tuple(
            _build_block(category, position, member.change)
            for position, member in enumerate(members, start=1)
        )
        sections.append(DetailSection(category=category, blocks=blocks))

    return ReportPlan(changeset=changeset, summary=summary, rows=rows, sections=tuple(sections))


def _build_block(category: Category, position: int, change: ResourceChange) -> DetailBlock:
    replaced = category is Category.REPLACED
    reasons = replacement_causes(change) if replaced else None
    return DetailBlock(
        position=position,
        change=change,
        show_replacement=category in (Category.REPLACED, Category.MODIFIED_IN_PLACE),
        replacement_reasons=reasons,
        # Only replaced resources highlight the properties that force recreation.
        properties=tuple(
            PropertyLine(detail, replaced and is_replacement_cause(detail))
            for detail in change.details
        ),
        deletion_warning=category is Category.REMOVED,
    )


def column_widths(rows: Sequence[TableRow]) -> ColumnWidths:
    """Size each column to its longest cell (header included) plus padding."""

    cells = [TABLE_HEADERS]
    for row in rows:
        cells.append(
            (str(row.position), row.resource_cell, row.resource_type, row.action, row.replacement)
        )

    widths = [
        max(len(cell[column]) for cell in cells) + COLUMN_PADDING
        for column in range(len(TABLE_HEADERS))
    ]
    return ColumnWidths(*widths)


def display_action(action: ChangeAction) -> str:
    return NOT_AVAILABLE if action is ChangeAction.UNKNOWN else action.value


def display_replacement(replacement: Replacement) -> str:
    return replacement.value or NOT_AVAILABLE


def extract_stack_name(stack_name_or_arn: str | None) -> str:
    """Return the stack name from a stack ARN, or the input when it is not an ARN."""

    if not stack_name_or_arn:
        return ""
    if stack_name_or_arn.startswith("arn:") and ":stack/" in stack_name_or_arn:
        stack_part = stack_name_or_arn.split(":stack/", 1)[1]
        if stack_part:
            return stack_part.split("/", 1)[0]
    return stack_name_or_arn


def recreation_label(detail: PropertyChangeDetail) -> str:
    """Describe why ``detail`` counts as a replacement cause."""

    if detail.requires_recreation in (RequiresRecreation.ALWAYS, RequiresRecreation.CONDITIONALLY):
        return detail.requires_recreation.value
    if detail.evaluation is Evaluation.DYNAMIC:
        return "Dynamic evaluation"
    return detail.requires_recreation.value or NOT_AVAILABLE
