"""Report rendering: a shared plan and per-format formatters."""

from .markdown import MarkdownFormatter
from .plan import (
    COLUMN_PADDING,
    ColumnWidths,
    DetailBlock,
    DetailSection,
    ReportPlan,
    SummaryLine,
    TableRow,
    build_report_plan,
    column_widths,
    extract_stack_name,
)
from .renderer import ReportFormat, render, render_no_changeset
from .text import ANSI_COLOR_OVERHEAD, TextFormatter

__all__ = [
    "ANSI_COLOR_OVERHEAD",
    "COLUMN_PADDING",
    "ColumnWidths",
    "DetailBlock",
    "DetailSection",
    "MarkdownFormatter",
    "ReportFormat",
    "ReportPlan",
    "SummaryLine",
    "TableRow",
    "TextFormatter",
    "build_report_plan",
    "column_widths",
    "extract_stack_name",
    "render",
    "render_no_changeset",
]
