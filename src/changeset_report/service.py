"""Orchestration layer used by the CLI to produce changeset reports."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .adapters import ChangesetLoaderError, ChangesetSource
from .classification import Classification, classify
from .models import Changeset
from .normalization import ChangesetNormalizer, MalformedChangesetError
from .rendering import ReportFormat, render, render_no_changeset

logger = logging.getLogger(__name__)

NO_CHANGESET_NAME = "NO_CHANGESETS"
NO_CHANGESET_STATUS = "NONE"


class NoChangesetAvailableError(RuntimeError):
    """Raised when a stack has no changeset and the policy says to fail."""


class MissingChangesetPolicy(str, Enum):
    """What to do when the stack has no changeset to report on."""

    REPORT = "report"
    FAIL = "fail"


@dataclass(slots=True)
class ReportResult:
    """The three published outputs plus the data they were rendered from."""

    report: str
    changeset_name: str
    changeset_status: str
    found: bool = True
    stack_name: str = ""
    changeset: Optional[Changeset] = None
    classification: Optional[Classification] = None

    def outputs(self) -> dict[str, str]:
        return {
            "report": self.report,
            "changeset-name": self.changeset_name,
            "changeset-status": self.changeset_status,
        }

    def rerender(self, fmt: ReportFormat | str, *, include_title: bool = True) -> str:
        """Render the same result in another format without fetching again."""

        if self.changeset is None or self.classification is None:
            return render_no_changeset(self.stack_name, fmt, include_title=include_title)
        return render(self.changeset, self.classification, fmt, include_title=include_title)


class ReportService:
    """High level service responsible for fetching, classifying, and rendering."""

    def __init__(
        self,
        source: ChangesetSource,
        *,
        normalizer: ChangesetNormalizer | None = None,
        missing_changeset: MissingChangesetPolicy = MissingChangesetPolicy.REPORT,
    ) -> None:
        self._source = source
        self._normalizer = normalizer or ChangesetNormalizer()
        self._missing_changeset = MissingChangesetPolicy(missing_changeset)

    # ------------------------------------------------------------------
    def generate(
        self,
        stack_name: str,
        changeset_name: str | None = None,
        *,
        fmt: ReportFormat | str = ReportFormat.ANSI,
    ) -> ReportResult:
        """Build the report for ``stack_name`` in the requested format."""

        resolved = self._source.resolve_changeset_name(stack_name, changeset_name)
        if not resolved:
            return self._no_changeset(stack_name, fmt)

        raw = self._source.describe(stack_name, resolved)
        changeset = self._normalizer.normalize(raw, stack_name=stack_name)
        classification = classify(changeset.changes)
        logger.debug(
            "Classified %d changes for changeset %s",
            classification.total,
            changeset.changeset_name,
        )

        return ReportResult(
            report=render(changeset, classification, fmt),
            changeset_name=changeset.changeset_name,
            changeset_status=changeset.status,
            stack_name=changeset.stack_name,
            changeset=changeset,
            classification=classification,
        )

    def delete(self, stack_name: str, changeset_name: str) -> None:
        self._source.delete(stack_name, changeset_name)

    def _no_changeset(self, stack_name: str, fmt: ReportFormat | str) -> ReportResult:
        if self._missing_changeset is MissingChangesetPolicy.FAIL:
            raise NoChangesetAvailableError(f"No changesets found for stack {stack_name}")

        logger.info("No changesets found for stack %s. Continuing execution.", stack_name)
        return ReportResult(
            report=render_no_changeset(stack_name, fmt),
            changeset_name=NO_CHANGESET_NAME,
            changeset_status=NO_CHANGESET_STATUS,
            found=False,
            stack_name=stack_name,
        )


__all__ = [
    "ChangesetLoaderError",
    "MalformedChangesetError",
    "MissingChangesetPolicy",
    "NoChangesetAvailableError",
    "ReportResult",
    "ReportService",
]
