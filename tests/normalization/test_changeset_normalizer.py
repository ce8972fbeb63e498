from __future__ import annotations

import pytest

from changeset_report.models import (
    ChangeAction,
    Evaluation,
    Replacement,
    RequiresRecreation,
)
from changeset_report.normalization import ChangesetNormalizer, MalformedChangesetError


def build_description(*changes: dict) -> dict:
    return {
        "StackName": "network-stack",
        "ChangeSetName": "pr-42",
        "Status": "CREATE_COMPLETE",
        "ExecutionStatus": "AVAILABLE",
        "CreationTime": "2024-05-01T10:00:00Z",
        "Changes": list(changes),
    }


def test_normalize_full_resource_change():
    normalizer = ChangesetNormalizer()
    description = build_description(
        {
            "Type": "Resource",
            "ResourceChange": {
                "LogicalResourceId": "AppFunction",
                "PhysicalResourceId": "app-function-123",
                "ResourceType": "AWS::Lambda::Function",
                "Action": "Modify",
                "Replacement": "Conditional",
                "Details": [
                    {
                        "Target": {
                            "Name": "Code",
                            "Attribute": "Properties",
                            "RequiresRecreation": "Never",
                        },
                        "ChangeSource": "ParameterReference",
                        "Evaluation": "Dynamic",
                        "CausingEntity": "CodeVersion",
                    }
                ],
            },
        }
    )

    changeset = normalizer.normalize(description)

    assert changeset.stack_name == "network-stack"
    assert changeset.changeset_name == "pr-42"
    assert changeset.status == "CREATE_COMPLETE"
    assert changeset.creation_time == "2024-05-01T10:00:00Z"

    (change,) = changeset.changes
    assert change.logical_id == "AppFunction"
    assert change.physical_id == "app-function-123"
    assert change.action is ChangeAction.MODIFY
    assert change.replacement is Replacement.CONDITIONAL

    (detail,) = change.details
    assert detail.property_name == "Code"
    assert detail.requires_recreation is RequiresRecreation.NEVER
    assert detail.evaluation is Evaluation.DYNAMIC
    assert detail.change_source == "ParameterReference"
    assert detail.causing_entity == "CodeVersion"


def test_normalize_applies_defaults_for_missing_fields():
    normalizer = ChangesetNormalizer()
    description = build_description(
        {"ResourceChange": {"LogicalResourceId": "OldTable", "Action": "Remove"}},
        {"ResourceChange": {"LogicalResourceId": "Odd", "Action": "Teleport", "Details": None}},
        {"ResourceChange": {"LogicalResourceId": "Tagged", "Details": [{"Target": {}}]}},
    )

    removed, odd, tagged = normalizer.normalize(description).changes

    assert removed.replacement is Replacement.UNSET
    assert removed.details == ()
    assert removed.resource_type == ""
    assert odd.action is ChangeAction.UNKNOWN
    assert odd.details == ()
    assert tagged.action is ChangeAction.UNKNOWN
    assert tagged.details[0].property_name is None
    assert tagged.details[0].requires_recreation is RequiresRecreation.UNSET


def test_normalize_accepts_boolean_replacement_flags():
    description = build_description(
        {"ResourceChange": {"LogicalResourceId": "Db", "Action": "Modify", "Replacement": True}}
    )

    (change,) = ChangesetNormalizer().normalize(description).changes

    assert change.replacement is Replacement.TRUE


@pytest.mark.parametrize("changes", [None, []])
def test_missing_changes_become_empty(changes):
    description = build_description()
    description["Changes"] = changes

    assert ChangesetNormalizer().normalize(description).changes == ()


def test_entries_without_resource_change_are_skipped():
    description = build_description(
        {"Type": "HookInvocation"},
        {"ResourceChange": {"LogicalResourceId": "Kept", "Action": "Add"}},
    )

    changes = ChangesetNormalizer().normalize(description).changes

    assert [change.logical_id for change in changes] == ["Kept"]


def test_stack_name_fallback_is_used_when_payload_lacks_it():
    description = build_description()
    del description["StackName"]

    changeset = ChangesetNormalizer().normalize(description, stack_name="fallback-stack")

    assert changeset.stack_name == "fallback-stack"


@pytest.mark.parametrize(
    ("mutate", "message"),
    [
        (lambda d: d.pop("ChangeSetName"), "ChangeSetName"),
        (lambda d: d.pop("StackName"), "StackName"),
        (
            lambda d: d["Changes"].append({"ResourceChange": {"Action": "Add"}}),
            "Resource change #1 is missing 'LogicalResourceId'",
        ),
    ],
)
def test_missing_identity_fields_raise(mutate, message):
    description = build_description()
    mutate(description)

    with pytest.raises(MalformedChangesetError, match=message):
        ChangesetNormalizer().normalize(description)


def test_non_mapping_payload_raises():
    with pytest.raises(MalformedChangesetError):
        ChangesetNormalizer().normalize(["not", "a", "changeset"])  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("changes", "message"),
    [
        (5, "'Changes' must be a list"),
        (["not-an-entry"], "Change entry #1 must be an object"),
        ([{"ResourceChange": "oops"}], "Change entry #1 has a non-object 'ResourceChange'"),
        (
            [{"ResourceChange": {"LogicalResourceId": "A", "Details": "Tags"}}],
            "Resource change #1 \\('A'\\) has non-list 'Details'",
        ),
        (
            [{"ResourceChange": {"LogicalResourceId": "A", "Details": [None]}}],
            "Resource change #1 detail #1 must be an object",
        ),
        (
            [
                {"ResourceChange": {"LogicalResourceId": "A", "Action": "Add"}},
                {"ResourceChange": {"LogicalResourceId": "B", "Details": [{}, {"Target": "x"}]}},
            ],
            "Resource change #2 detail #2 has a non-object 'Target'",
        ),
    ],
)
def test_mis_shaped_changes_raise(changes, message):
    description = build_description()
    description["Changes"] = changes

    with pytest.raises(MalformedChangesetError, match=message):
        ChangesetNormalizer().normalize(description)
