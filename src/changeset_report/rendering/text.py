"""Console renderings of a report plan, with or without ANSI colours."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from ..models import Category, marker_for
from .plan import (
    NOT_AVAILABLE,
    TABLE_HEADERS,
    DetailBlock,
    DetailSection,
    ReportPlan,
    TableRow,
    display_action,
    display_replacement,
    recreation_label,
)

RESET = "\x1b[0m"
BOLD = "\x1b[1m"
WHITE = "\x1b[97m"
GREY = "\x1b[90m"
YELLOW = "\x1b[93m"

# Length of a two-digit colour code plus RESET: escape bytes a padded cell
# carries beyond its visual width.
ANSI_COLOR_OVERHEAD = 9

REPORT_TITLE = "Cloudformation Changeset Report"


class TextFormatter:
    """Render report plans as plain or ANSI-coloured console text."""

    def __init__(self, *, color: bool = True) -> None:
        self.color = color

    def render(self, plan: ReportPlan) -> str:
        lines: List[str] = [self._banner(REPORT_TITLE), ""]
        lines.append(self._banner(f"Changes Summary ({plan.total})"))
        lines.append("")
        for line in plan.summary:
            marker = marker_for(line.category)
            label = self._paint(f"{line.label}:", marker.color)
            lines.append(f"{marker.emoji} {label} {line.count}")
        lines.append("")

        if not plan.rows:
            lines.append("No changes detected.")
            return _finish(lines)

        lines.extend([self._banner("All Changes"), ""])
        lines.extend(self._table(plan))

        for section in plan.sections:
            lines.extend(self._section(section))

        return _finish(lines)

    def render_no_changeset(self, stack_name: str) -> str:
        lines = [
            self._banner(REPORT_TITLE),
            "",
            self._paint(f"No changesets found for stack {stack_name}.", YELLOW),
            self._paint("Ensure the stack exists and has at least one changeset created.", YELLOW),
        ]
        return _finish(lines)

    # ------------------------------------------------------------------
    def _table(self, plan: ReportPlan) -> List[str]:
        widths = plan.widths.as_tuple()
        header = [title.ljust(width) for title, width in zip(TABLE_HEADERS, widths, strict=True)]
        separator = ["-" * width for width in widths]

        lines = [
            self._paint(_join_cells(header, "|"), WHITE),
            self._paint(_join_cells(separator, "|"), WHITE),
        ]
        lines.extend(self._row(row, widths) for row in plan.rows)
        return lines

    def _row(self, row: TableRow, widths: Sequence[int]) -> str:
        if not self.color:
            cells = (
                str(row.position),
                row.resource_cell,
                row.resource_type,
                row.action,
                row.replacement,
            )
            padded = [cell.ljust(width) for cell, width in zip(cells, widths, strict=True)]
            return _join_cells(padded, "|")

        marker = marker_for(row.category)
        index_width, resource_width, type_width, action_width, replacement_width = widths
        cells = [
            str(row.position).ljust(index_width),
            f"{marker.emoji} {marker.color}{row.logical_id}{RESET}".ljust(
                resource_width + ANSI_COLOR_OVERHEAD
            ),
            row.resource_type.ljust(type_width),
            f"{marker.color}{row.action}{RESET}".ljust(action_width + ANSI_COLOR_OVERHEAD),
            f"{marker.color}{row.replacement}{RESET}".ljust(
                replacement_width + ANSI_COLOR_OVERHEAD
            ),
        ]
        return _join_cells(cells, f"{WHITE}|{RESET}")

    def _section(self, section: DetailSection) -> List[str]:
        marker = marker_for(section.category)
        heading = self._paint(f"{marker.emoji} {section.title}", marker.color, BOLD)
        lines = ["", "", f"{heading} ({len(section.blocks)})", ""]
        for block in section.blocks:
            lines.extend(self._block(section, block))
            lines.append("")
        return lines

    def _block(self, section: DetailSection, block: DetailBlock) -> Iterable[str]:
        color = marker_for(section.category).color
        change = block.change

        number = self._paint(f"{block.position}.", BOLD)
        yield (
            f"   {number} {self._paint(change.logical_id, color)} "
            f"({self._paint(change.resource_type, GREY)})"
        )
        action = self._paint(display_action(change.action), color)
        yield f"     • {self._label('Action:')} {action}"
        if block.show_replacement:
            replacement = display_replacement(change.replacement)
            if section.category is Category.REPLACED:
                replacement = self._paint(replacement, color)
            yield f"     • {self._label('Replacement:')} {replacement}"

        if block.replacement_reasons is not None:
            yield f"     • {self._paint('⚠️ Replacement Reason:', BOLD, WHITE)}"
            if block.replacement_reasons:
                for detail in block.replacement_reasons:
                    name = self._paint(f"`{detail.display_name}`", WHITE)
                    label = self._paint(f"({recreation_label(detail)})", color)
                    yield f"       - Property {name} requires recreation {label}"
            else:
                yield "       - " + self._paint(
                    "Implicit replacement due to dependent resource changes", color
                )

        if block.properties:
            yield f"     • {self._label(section.property_label + ':')}"
            replaced_color = marker_for(Category.REPLACED).color
            for line in block.properties:
                detail = line.detail
                prefix = "⚠️ " if line.is_replacement_cause else ""
                name_color = replaced_color if line.is_replacement_cause else color
                name = self._paint(f"{detail.display_name}:", name_color)
                attribute = self._paint(detail.attribute, GREY)
                source = detail.change_source or NOT_AVAILABLE
                yield f"       - {prefix}{name} {source} ({attribute})"

        if block.deletion_warning:
            yield (
                f"     • {self._paint('⚠️ Warning:', WHITE, BOLD)} This resource will be "
                f"{self._paint('PERMANENTLY DELETED', color)}"
            )

    # ------------------------------------------------------------------
    def _banner(self, text: str) -> str:
        return self._paint(f"── {text} ──", WHITE, BOLD)

    def _label(self, text: str) -> str:
        return self._paint(text, WHITE)

    def _paint(self, text: str, *codes: str) -> str:
        if not self.color:
            return text
        return f"{''.join(codes)}{text}{RESET}"


def _join_cells(cells: Sequence[str], pipe: str) -> str:
    return f"{pipe} " + f" {pipe} ".join(cells) + f" {pipe}"


def _finish(lines: List[str]) -> str:
    return "\n".join(lines) + "\n"
