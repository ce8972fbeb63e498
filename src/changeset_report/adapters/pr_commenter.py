"""Publish Markdown changeset reports as pull-request comments."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import requests

logger = logging.getLogger(__name__)

PULL_REQUEST_EVENTS = frozenset({"pull_request", "pull_request_target"})
DEFAULT_API_URL = "https://api.github.com"
REPORT_HEADING = "# CloudFormation Changeset Report"
REQUEST_TIMEOUT = 30


class PullRequestCommentError(RuntimeError):
    """Raised when the report cannot be posted to the pull request."""


@dataclass(frozen=True, slots=True)
class PullRequestContext:
    """Repository and pull-request coordinates taken from the Actions environment."""

    repository: str
    number: int
    api_url: str = DEFAULT_API_URL

    @classmethod
    def from_environment(
        cls, env: Mapping[str, str] | None = None
    ) -> Optional["PullRequestContext"]:
        """Return the context for pull-request events, otherwise ``None``."""

        env = os.environ if env is None else env
        if env.get("GITHUB_EVENT_NAME") not in PULL_REQUEST_EVENTS:
            return None

        repository = env.get("GITHUB_REPOSITORY", "").strip()
        event_path = env.get("GITHUB_EVENT_PATH")
        if not repository or not event_path:
            return None

        number = _pull_request_number(Path(event_path))
        if number is None:
            return None

        api_url = (env.get("GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/")
        return cls(repository=repository, number=number, api_url=api_url)


def stack_marker(stack_name: str) -> str:
    return f"<!-- CloudFormation Changeset Report: {stack_name} -->"


class PullRequestCommenter:
    """Create or refresh one report comment per stack on a pull request."""

    def __init__(
        self,
        token: str,
        context: PullRequestContext,
        *,
        session: requests.Session | None = None,
    ) -> None:
        if not token:
            raise PullRequestCommentError(
                "GitHub token not found. Make sure to provide the 'github-token' input."
            )
        self.context = context
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }
        )

    def publish(self, stack_name: str, markdown_section: str) -> str:
        """Post ``markdown_section`` for ``stack_name``; return ``"created"`` or ``"updated"``."""

        repo_url = f"{self.context.api_url}/repos/{self.context.repository}"
        try:
            self._request("GET", f"{repo_url}/pulls/{self.context.number}")
        except PullRequestCommentError as exc:
            raise PullRequestCommentError(
                f"Insufficient permissions to access PR data: {exc}. "
                "Make sure your workflow has 'pull-requests: write' permission."
            ) from exc

        marker = stack_marker(stack_name)
        body = f"{marker}\n{REPORT_HEADING}\n\n{markdown_section}"

        existing = self._find_comment(f"{repo_url}/issues/{self.context.number}/comments", marker)
        if existing is not None:
            logger.debug("Updating existing report comment %s", existing["id"])
            self._request("PATCH", f"{repo_url}/issues/comments/{existing['id']}", {"body": body})
            return "updated"

        logger.debug("Creating report comment for stack %s", stack_name)
        self._request("POST", f"{repo_url}/issues/{self.context.number}/comments", {"body": body})
        return "created"

    # ------------------------------------------------------------------
    def _find_comment(self, url: str, marker: str) -> Optional[Dict[str, Any]]:
        page = 1
        while True:
            comments: List[Dict[str, Any]] = self._request(
                "GET", url, params={"per_page": 100, "page": page}
            )
            logger.debug("Fetched %d comments from page %d", len(comments), page)
            for comment in comments:
                if marker in (comment.get("body") or ""):
                    return comment
            if len(comments) < 100:
                return None
            page += 1

    def _request(
        self,
        method: str,
        url: str,
        payload: Mapping[str, Any] | None = None,
        *,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        try:
            response = self.session.request(
                method, url, json=payload, params=params, timeout=REQUEST_TIMEOUT
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise PullRequestCommentError(f"{method} {url} failed: {exc}") from exc

        if not response.content:
            return None
        return response.json()


def _pull_request_number(event_path: Path) -> int | None:
    try:
        payload = json.loads(event_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.debug("Could not read event payload %s: %s", event_path, exc)
        return None

    pull_request = payload.get("pull_request") if isinstance(payload, Mapping) else None
    if not isinstance(pull_request, Mapping):
        return None
    number = pull_request.get("number")
    return number if isinstance(number, int) else None
