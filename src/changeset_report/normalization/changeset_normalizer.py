"""Conversion helpers that turn raw ``DescribeChangeSet`` responses into models."""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Mapping, Type, TypeVar

from ..models import (
    ChangeAction,
    Changeset,
    Evaluation,
    PropertyChangeDetail,
    Replacement,
    RequiresRecreation,
    ResourceChange,
)

_EnumT = TypeVar("_EnumT", bound=Enum)


class MalformedChangesetError(ValueError):
    """Raised when a changeset description is missing identifying fields or is mis-shaped."""


class ChangesetNormalizer:
    """Normalize ``DescribeChangeSet`` payloads into :class:`Changeset` instances."""

    def normalize(self, raw: Mapping[str, Any], *, stack_name: str | None = None) -> Changeset:
        """Return a changeset model for the supplied response.

        ``stack_name`` is used when the payload does not carry ``StackName``.
        """

        if not isinstance(raw, Mapping):
            raise MalformedChangesetError("Changeset description must be an object")

        changeset_name = raw.get("ChangeSetName")
        if not changeset_name:
            raise MalformedChangesetError("Changeset description is missing 'ChangeSetName'")

        resolved_stack = raw.get("StackName") or stack_name
        if not resolved_stack:
            raise MalformedChangesetError("Changeset description is missing 'StackName'")

        raw_changes = raw.get("Changes") or []
        if not isinstance(raw_changes, (list, tuple)):
            raise MalformedChangesetError("'Changes' must be a list of change entries")

        changes: List[ResourceChange] = []
        for position, change in enumerate(raw_changes, start=1):
            if not isinstance(change, Mapping):
                raise MalformedChangesetError(f"Change entry #{position} must be an object")
            resource = change.get("ResourceChange")
            if not resource:
                continue
            if not isinstance(resource, Mapping):
                raise MalformedChangesetError(
                    f"Change entry #{position} has a non-object 'ResourceChange'"
                )
            changes.append(self._normalize_resource(resource, position))

        return Changeset(
            stack_name=str(resolved_stack),
            changeset_name=str(changeset_name),
            status=str(raw.get("Status") or ""),
            execution_status=str(raw.get("ExecutionStatus") or ""),
            creation_time=raw.get("CreationTime"),
            changes=tuple(changes),
            status_reason=raw.get("StatusReason"),
            changeset_id=raw.get("ChangeSetId"),
            description=raw.get("Description"),
        )

    # ------------------------------------------------------------------
    def _normalize_resource(self, resource: Mapping[str, Any], position: int) -> ResourceChange:
        logical_id = resource.get("LogicalResourceId")
        if not logical_id:
            raise MalformedChangesetError(
                f"Resource change #{position} is missing 'LogicalResourceId'"
            )

        details = resource.get("Details") or []
        if not isinstance(details, (list, tuple)):
            raise MalformedChangesetError(
                f"Resource change #{position} ('{logical_id}') has non-list 'Details'"
            )
        return ResourceChange(
            logical_id=str(logical_id),
            resource_type=str(resource.get("ResourceType") or ""),
            action=_coerce_enum(ChangeAction, resource.get("Action"), ChangeAction.UNKNOWN),
            replacement=_coerce_enum(Replacement, resource.get("Replacement"), Replacement.UNSET),
            details=tuple(
                self._normalize_detail(detail, position, detail_position)
                for detail_position, detail in enumerate(details, start=1)
            ),
            physical_id=resource.get("PhysicalResourceId"),
        )

    def _normalize_detail(
        self, detail: Any, position: int, detail_position: int
    ) -> PropertyChangeDetail:
        if not isinstance(detail, Mapping):
            raise MalformedChangesetError(
                f"Resource change #{position} detail #{detail_position} must be an object"
            )
        target = detail.get("Target") or {}
        if not isinstance(target, Mapping):
            raise MalformedChangesetError(
                f"Resource change #{position} detail #{detail_position} has a non-object "
                "'Target'"
            )
        return PropertyChangeDetail(
            property_name=target.get("Name"),
            attribute=str(target.get("Attribute") or ""),
            requires_recreation=_coerce_enum(
                RequiresRecreation,
                target.get("RequiresRecreation"),
                RequiresRecreation.UNSET,
            ),
            change_source=str(detail.get("ChangeSource") or ""),
            evaluation=_coerce_enum(Evaluation, detail.get("Evaluation"), Evaluation.UNSET),
            causing_entity=detail.get("CausingEntity"),
        )


def _coerce_enum(enum_type: Type[_EnumT], value: Any, default: _EnumT) -> _EnumT:
    # Hand-written fixtures sometimes carry JSON booleans for Replacement.
    if isinstance(value, bool):
        value = "True" if value else "False"
    if value is None:
        return default
    try:
        return enum_type(str(value))
    except ValueError:
        return default
