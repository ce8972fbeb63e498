"""Report format selection and dispatch to the individual formatters."""

from __future__ import annotations

import logging
from enum import Enum

from ..classification import Classification
from ..models import Changeset
from .markdown import MarkdownFormatter
from .plan import build_report_plan
from .text import TextFormatter

logger = logging.getLogger(__name__)


class ReportFormat(str, Enum):
    """Supported report renderings."""

    PLAIN = "plain"
    ANSI = "ansi"
    MARKDOWN = "markdown"

    @classmethod
    def parse(cls, value: "str | ReportFormat | None") -> "ReportFormat":
        """Resolve ``value`` to a format, falling back to Markdown when unsupported."""

        if isinstance(value, ReportFormat):
            return value

        key = (value or "").strip().lower()
        resolved = _ALIASES.get(key)
        if resolved is None:
            logger.warning("Unsupported report format '%s'; using markdown", value)
            return cls.MARKDOWN
        return resolved


_ALIASES = {
    "plain": ReportFormat.PLAIN,
    "text": ReportFormat.PLAIN,
    "ansi": ReportFormat.ANSI,
    "console": ReportFormat.ANSI,
    "markdown": ReportFormat.MARKDOWN,
    "md": ReportFormat.MARKDOWN,
}


def render(
    changeset: Changeset,
    classification: Classification,
    fmt: "ReportFormat | str" = ReportFormat.MARKDOWN,
    *,
    include_title: bool = True,
) -> str:
    """Render ``changeset`` in the requested format.

    ``include_title`` only affects Markdown, where pull-request comments embed
    the untitled stack section under their own heading.
    """

    plan = build_report_plan(changeset, classification)
    report_format = ReportFormat.parse(fmt)

    if report_format is ReportFormat.MARKDOWN:
        return MarkdownFormatter().render(plan, include_title=include_title)
    return TextFormatter(color=report_format is ReportFormat.ANSI).render(plan)


def render_no_changeset(
    stack_name: str,
    fmt: "ReportFormat | str" = ReportFormat.MARKDOWN,
    *,
    include_title: bool = True,
) -> str:
    """Render the informational report used when a stack has no changesets."""

    report_format = ReportFormat.parse(fmt)
    if report_format is ReportFormat.MARKDOWN:
        return MarkdownFormatter().render_no_changeset(stack_name, include_title=include_title)
    return TextFormatter(color=report_format is ReportFormat.ANSI).render_no_changeset(stack_name)
