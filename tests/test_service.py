from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

import pytest

from changeset_report.adapters import ChangesetSource
from changeset_report.models import Category
from changeset_report.rendering import ReportFormat
from changeset_report.service import (
    MissingChangesetPolicy,
    NoChangesetAvailableError,
    ReportService,
)

FIXTURES = Path(__file__).resolve().parent / "fixtures"


class DummySource(ChangesetSource):
    def __init__(self, description: Mapping[str, Any] | None) -> None:
        self.description = description
        self.requested: list[tuple[str, str | None]] = []
        self.deleted: list[tuple[str, str]] = []

    def resolve_changeset_name(self, stack_name: str, changeset_name: str | None) -> str | None:
        self.requested.append((stack_name, changeset_name))
        if self.description is None:
            return None
        return changeset_name or self.description.get("ChangeSetName")

    def describe(self, stack_name: str, changeset_name: str) -> Mapping[str, Any]:
        assert self.description is not None
        return self.description

    def delete(self, stack_name: str, changeset_name: str) -> None:
        self.deleted.append((stack_name, changeset_name))


def _fixture(name: str) -> dict[str, Any]:
    return json.loads((FIXTURES / name).read_text(encoding="utf-8"))


def test_generate_produces_report_and_outputs() -> None:
    source = DummySource(_fixture("changeset-mixed.json"))
    service = ReportService(source)

    result = service.generate("test-stack", fmt=ReportFormat.PLAIN)

    assert source.requested == [("test-stack", None)]
    assert result.found
    assert result.outputs()["changeset-name"] == "test-changeset"
    assert result.outputs()["changeset-status"] == "CREATE_COMPLETE"
    assert result.report.startswith("── Cloudformation Changeset Report ──")
    assert result.classification is not None
    assert result.classification.count(Category.REPLACED) == 1


def test_rerender_reuses_the_fetched_changeset() -> None:
    service = ReportService(DummySource(_fixture("changeset-mixed.json")))
    result = service.generate("test-stack", "test-changeset")

    markdown = result.rerender(ReportFormat.MARKDOWN, include_title=False)

    assert markdown.startswith("## Stack: `test-stack`")
    assert "\x1b[" in result.report


def test_stack_arn_is_shortened_in_reports() -> None:
    service = ReportService(DummySource(_fixture("changeset-empty.json")))

    result = service.generate("empty-stack", fmt="markdown")

    assert "## Stack: `empty-stack`" in result.report
    assert "No changes detected." in result.report


def test_missing_changeset_reports_placeholder_outputs() -> None:
    service = ReportService(DummySource(None))

    result = service.generate("ghost", fmt="plain")

    assert not result.found
    assert result.outputs() == {
        "report": result.report,
        "changeset-name": "NO_CHANGESETS",
        "changeset-status": "NONE",
    }
    assert "No changesets found for stack ghost." in result.report
    assert "# CloudFormation Changeset Report" in result.rerender(ReportFormat.MARKDOWN)


def test_missing_changeset_fail_policy_raises() -> None:
    service = ReportService(DummySource(None), missing_changeset=MissingChangesetPolicy.FAIL)

    with pytest.raises(NoChangesetAvailableError, match="ghost"):
        service.generate("ghost")


def test_delete_is_forwarded_to_source() -> None:
    source = DummySource(_fixture("changeset-mixed.json"))

    ReportService(source).delete("test-stack", "test-changeset")

    assert source.deleted == [("test-stack", "test-changeset")]
