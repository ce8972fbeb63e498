"""Changeset sources: CloudFormation via boto3, or a saved description on disk."""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import boto3
import yaml
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)


class ChangesetLoaderError(RuntimeError):
    """Raised when a changeset cannot be listed, described, or deleted."""


class ChangesetSource(ABC):
    """Contract for anything that can supply changeset descriptions."""

    @abstractmethod
    def resolve_changeset_name(self, stack_name: str, changeset_name: str | None) -> str | None:
        """Return the changeset to report on, or ``None`` when the stack has none."""

    @abstractmethod
    def describe(self, stack_name: str, changeset_name: str) -> Mapping[str, Any]:
        """Return the raw ``DescribeChangeSet`` payload."""

    def delete(self, stack_name: str, changeset_name: str) -> None:
        """Delete the changeset once reported. Sources without a backend ignore this."""


class CloudFormationChangesetSource(ChangesetSource):
    """Read changesets from the CloudFormation API."""

    def __init__(self, region: str, *, client: Any | None = None) -> None:
        self.region = region
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = boto3.client("cloudformation", region_name=self.region)
        return self._client

    # ------------------------------------------------------------------
    def resolve_changeset_name(self, stack_name: str, changeset_name: str | None) -> str | None:
        if changeset_name:
            return changeset_name

        logger.debug("No changeset name provided, finding the latest one for %s", stack_name)
        summaries: List[Mapping[str, Any]] = []
        next_token: Optional[str] = None
        while True:
            kwargs: Dict[str, Any] = {"StackName": stack_name}
            if next_token:
                kwargs["NextToken"] = next_token
            response = self._call("ListChangeSets", self.client.list_change_sets, **kwargs)
            summaries.extend(response.get("Summaries") or [])
            next_token = response.get("NextToken")
            if not next_token:
                break

        if not summaries:
            logger.warning("No changesets found for stack %s", stack_name)
            return None

        latest = max(summaries, key=lambda item: _creation_sort_key(item.get("CreationTime")))
        name = latest.get("ChangeSetName")
        logger.debug("Using latest changeset: %s", name)
        return name

    def describe(self, stack_name: str, changeset_name: str) -> Mapping[str, Any]:
        description: Dict[str, Any] = {}
        changes: List[Any] = []
        next_token: Optional[str] = None
        while True:
            kwargs: Dict[str, Any] = {"StackName": stack_name, "ChangeSetName": changeset_name}
            if next_token:
                kwargs["NextToken"] = next_token
            page = self._call("DescribeChangeSet", self.client.describe_change_set, **kwargs)
            if not description:
                description = dict(page)
            changes.extend(page.get("Changes") or [])
            next_token = page.get("NextToken")
            if not next_token:
                break

        description.pop("NextToken", None)
        description.pop("ResponseMetadata", None)
        description["Changes"] = changes
        return description

    def delete(self, stack_name: str, changeset_name: str) -> None:
        self._call(
            "DeleteChangeSet",
            self.client.delete_change_set,
            StackName=stack_name,
            ChangeSetName=changeset_name,
        )
        logger.info("Deleted changeset %s for stack %s", changeset_name, stack_name)

    def _call(self, operation: str, method: Any, **kwargs: Any) -> Mapping[str, Any]:
        try:
            return method(**kwargs)
        except (ClientError, BotoCoreError) as exc:
            raise ChangesetLoaderError(f"CloudFormation {operation} failed: {exc}") from exc


class FileChangesetSource(ChangesetSource):
    """Serve a changeset description saved with ``aws cloudformation describe-change-set``.

    JSON is read through the YAML loader, so either format is accepted.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)

    def resolve_changeset_name(self, stack_name: str, changeset_name: str | None) -> str | None:
        if changeset_name:
            return changeset_name
        name = self._load().get("ChangeSetName")
        return str(name) if name else None

    def describe(self, stack_name: str, changeset_name: str) -> Mapping[str, Any]:
        return self._load()

    def _load(self) -> Mapping[str, Any]:
        if not self.path.exists():
            raise ChangesetLoaderError(f"Changeset description not found: {self.path}")

        with self.path.open("r", encoding="utf-8") as handle:
            try:
                data = yaml.safe_load(handle)
            except yaml.YAMLError as exc:
                raise ChangesetLoaderError(
                    f"Invalid changeset description in {self.path}"
                ) from exc

        if data is None:
            return {}
        if not isinstance(data, Mapping):
            raise ChangesetLoaderError(
                f"Changeset description in {self.path} must be an object, "
                f"got {type(data).__name__}"
            )
        return data


def _creation_sort_key(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return datetime.min.replace(tzinfo=timezone.utc)
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return datetime.min.replace(tzinfo=timezone.utc)
