"""Changeset models produced from CloudFormation ``DescribeChangeSet`` responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


class ChangeAction(str, Enum):
    """Mutation a changeset would perform on a resource."""

    ADD = "Add"
    MODIFY = "Modify"
    REMOVE = "Remove"
    IMPORT = "Import"
    DYNAMIC = "Dynamic"
    UNKNOWN = "Unknown"


class Replacement(str, Enum):
    """Whether applying the change destroys and recreates the resource."""

    TRUE = "True"
    FALSE = "False"
    CONDITIONAL = "Conditional"
    UNSET = ""


class RequiresRecreation(str, Enum):
    """Recreation requirement reported for a single property change."""

    NEVER = "Never"
    ALWAYS = "Always"
    CONDITIONALLY = "Conditionally"
    UNSET = ""


class Evaluation(str, Enum):
    """Whether CloudFormation could determine the property value up front."""

    STATIC = "Static"
    DYNAMIC = "Dynamic"
    UNSET = ""


@dataclass(frozen=True, slots=True)
class PropertyChangeDetail:
    """One property-level contribution to a resource change."""

    property_name: Optional[str] = None
    attribute: str = ""
    requires_recreation: RequiresRecreation = RequiresRecreation.UNSET
    change_source: str = ""
    evaluation: Evaluation = Evaluation.UNSET
    causing_entity: Optional[str] = None

    @property
    def display_name(self) -> str:
        """Return the property name, or the attribute for unnamed targets such as ``Tags``."""

        return self.property_name or self.attribute


@dataclass(frozen=True, slots=True)
class ResourceChange:
    """Proposed change for a single template resource."""

    logical_id: str
    resource_type: str = ""
    action: ChangeAction = ChangeAction.UNKNOWN
    replacement: Replacement = Replacement.UNSET
    details: Tuple[PropertyChangeDetail, ...] = ()
    physical_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Changeset:
    """A described changeset, with resource changes kept in API order."""

    stack_name: str
    changeset_name: str
    status: str = ""
    execution_status: str = ""
    creation_time: datetime | str | None = None
    changes: Tuple[ResourceChange, ...] = field(default_factory=tuple)
    status_reason: Optional[str] = None
    changeset_id: Optional[str] = None
    description: Optional[str] = None
