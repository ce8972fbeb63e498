"""Markdown rendering of a report plan for pull-request comments and job summaries."""

from __future__ import annotations

from typing import Iterable, List

from ..models import marker_for
from .plan import (
    NOT_AVAILABLE,
    TABLE_HEADERS,
    DetailBlock,
    DetailSection,
    ReportPlan,
    display_action,
    display_replacement,
    extract_stack_name,
    recreation_label,
)

REPORT_TITLE = "# CloudFormation Changeset Report"


class MarkdownFormatter:
    """Render report plans as GitHub-flavoured Markdown."""

    def render(self, plan: ReportPlan, *, include_title: bool = True) -> str:
        changeset = plan.changeset
        lines: List[str] = [REPORT_TITLE, ""] if include_title else []
        lines.extend(
            [
                f"## Stack: `{extract_stack_name(changeset.stack_name)}`",
                "",
                f"> **Changeset:** `{changeset.changeset_name}`  ",
                f"> **Status:** `{changeset.status or NOT_AVAILABLE}`  ",
                f"> **Execution Status:** `{changeset.execution_status or NOT_AVAILABLE}`",
                "",
                f"### Changes Summary ({plan.total})",
                "",
            ]
        )
        for line in plan.summary:
            lines.append(f"- {marker_for(line.category).emoji} **{line.label}:** {line.count}")
        lines.append("")

        if not plan.rows:
            lines.append("No changes detected.")
            return _finish(lines)

        lines.extend(["### All Changes", ""])
        lines.extend(self._table(plan))

        for section in plan.sections:
            lines.extend(self._section(section))

        return _finish(lines)

    def render_no_changeset(self, stack_name: str, *, include_title: bool = True) -> str:
        lines: List[str] = [REPORT_TITLE, ""] if include_title else []
        lines.extend(
            [
                f"## Stack: `{extract_stack_name(stack_name)}`",
                "",
                f"> No changesets found for stack `{stack_name}`.",
                "> Ensure the stack exists and has at least one changeset created.",
            ]
        )
        return _finish(lines)

    # ------------------------------------------------------------------
    def _table(self, plan: ReportPlan) -> List[str]:
        widths = plan.widths.as_tuple()

        def format_row(values: Iterable[str]) -> str:
            cells = [_escape_cell(value).ljust(width) for value, width in zip(values, widths)]
            return "| " + " | ".join(cells) + " |"

        lines = [format_row(TABLE_HEADERS), format_row("-" * width for width in widths)]
        for row in plan.rows:
            lines.append(
                format_row(
                    (
                        str(row.position),
                        row.resource_cell,
                        row.resource_type,
                        row.action,
                        row.replacement,
                    )
                )
            )
        return lines

    def _section(self, section: DetailSection) -> List[str]:
        marker = marker_for(section.category)
        lines = ["", f"#### {marker.emoji} {section.title} ({len(section.blocks)})", ""]
        for block in section.blocks:
            lines.extend(self._block(section, block))
            lines.append("")
        return lines

    def _block(self, section: DetailSection, block: DetailBlock) -> Iterable[str]:
        change = block.change
        yield f"**{block.position}. {change.logical_id} ({change.resource_type})**"
        yield f"- **Action:** {display_action(change.action)}"
        if block.show_replacement:
            yield f"- **Replacement:** {display_replacement(change.replacement)}"

        if block.replacement_reasons is not None:
            yield "- **⚠️ Replacement Reason:**"
            if block.replacement_reasons:
                for detail in block.replacement_reasons:
                    yield (
                        f"  - Property `{detail.display_name}` requires recreation "
                        f"({recreation_label(detail)})"
                    )
            else:
                yield "  - Implicit replacement due to dependent resource changes"

        if block.properties:
            yield f"- **{section.property_label}:**"
            for line in block.properties:
                detail = line.detail
                prefix = "⚠️ " if line.is_replacement_cause else ""
                source = detail.change_source or NOT_AVAILABLE
                yield f"  - {prefix}{detail.display_name}: {source} ({detail.attribute})"

        if block.deletion_warning:
            yield "- **⚠️ Warning:** This resource will be **PERMANENTLY DELETED**"


def _escape_cell(value: str) -> str:
    return value.replace("|", "\\|")


def _finish(lines: List[str]) -> str:
    return "\n".join(lines) + "\n"
