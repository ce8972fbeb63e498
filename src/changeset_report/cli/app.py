"""Command-line interface implementation for the changeset reporter."""

from __future__ import annotations

import argparse
import logging
import os
from typing import Mapping, Sequence

from ..adapters import (
    ChangesetLoaderError,
    ChangesetSource,
    CloudFormationChangesetSource,
    FileChangesetSource,
    PullRequestCommenter,
    PullRequestCommentError,
    PullRequestContext,
)
from ..normalization import MalformedChangesetError
from ..rendering import ReportFormat
from ..service import NoChangesetAvailableError, ReportResult, ReportService
from .github_actions import configure_logging, log_report, write_outputs, write_step_summary
from .settings import ReporterSettings, SettingsError, settings_from_args

logger = logging.getLogger(__name__)

PERMISSION_HINTS = (
    "To fix this, ensure your workflow has the necessary permissions:",
    "1. Add 'permissions: { pull-requests: write }' to your workflow",
    "2. If running on PR from a fork, use 'pull_request_target' event instead of 'pull_request'",
    "3. Ensure GITHUB_TOKEN is passed to the action with 'github-token: ${{ github.token }}'",
)


def build_parser() -> argparse.ArgumentParser:
    """Construct the CLI argument parser.

    Every option falls back to the matching ``INPUT_*`` variable so the same
    entry point serves local runs and GitHub Actions steps.
    """

    parser = argparse.ArgumentParser(
        prog="cfn-changeset-report",
        description="Report the impact of a CloudFormation changeset.",
    )
    parser.add_argument("--stack-name", default=None, help="Name or ARN of the stack.")
    parser.add_argument(
        "--aws-region",
        default=None,
        help="AWS region to connect to (default: us-east-2).",
    )
    parser.add_argument(
        "--changeset-name",
        default=None,
        help="Changeset to report on. Defaults to the most recently created one.",
    )
    parser.add_argument(
        "--changeset-file",
        default=None,
        help="Read a saved describe-change-set output (JSON or YAML) instead of calling AWS.",
    )
    parser.add_argument(
        "--format",
        default=None,
        help="Report format: ansi, plain or markdown. Unknown values fall back to markdown.",
    )
    parser.add_argument(
        "--comment-on-pr",
        dest="comment_on_pr",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Post the Markdown report as a pull-request comment (default: on).",
    )
    parser.add_argument(
        "--delete-changeset",
        dest="delete_changeset",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Delete the changeset after reporting (default: on).",
    )
    parser.add_argument(
        "--github-token",
        default=None,
        help="Token used for pull-request comments. Falls back to GITHUB_TOKEN.",
    )
    parser.add_argument(
        "--missing-changeset",
        default=None,
        help="What to do when the stack has no changeset: report (default) or fail.",
    )
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR.")
    return parser


def create_source(settings: ReporterSettings) -> ChangesetSource:
    """Create the changeset source for the run."""

    if settings.changeset_file is not None:
        return FileChangesetSource(settings.changeset_file)
    return CloudFormationChangesetSource(settings.aws_region)


def _publish_comment(
    settings: ReporterSettings, result: ReportResult, env: Mapping[str, str]
) -> None:
    context = PullRequestContext.from_environment(env)
    if context is None:
        logger.debug("Not a pull request event; skipping PR comment")
        return

    section = result.rerender(ReportFormat.MARKDOWN, include_title=False)
    try:
        commenter = PullRequestCommenter(settings.github_token or "", context)
        outcome = commenter.publish(result.stack_name, section)
    except PullRequestCommentError as exc:
        logger.warning("Failed to comment on PR: %s", exc)
        for hint in PERMISSION_HINTS:
            logger.warning(hint)
        return

    logger.info("Changeset report comment %s on PR #%d", outcome, context.number)


def _delete_changeset(service: ReportService, settings: ReporterSettings, name: str) -> None:
    try:
        service.delete(settings.stack_name, name)
    except ChangesetLoaderError as exc:
        logger.warning("Failed to delete changeset %s: %s", name, exc)


def main(argv: Sequence[str] | None = None, env: Mapping[str, str] | None = None) -> int:
    """Entry point used by tests and the ``python -m`` invocation."""

    env = os.environ if env is None else env
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = settings_from_args(args, env)
    except SettingsError as exc:
        print(f"Error: {exc}")
        return 2

    configure_logging(settings.log_level)

    service = ReportService(
        create_source(settings), missing_changeset=settings.missing_changeset
    )
    try:
        result = service.generate(
            settings.stack_name, settings.changeset_name, fmt=settings.output_format
        )
    except (ChangesetLoaderError, MalformedChangesetError, NoChangesetAvailableError) as exc:
        logger.error("Action failed: %s", exc)
        return 2

    write_outputs(result.outputs(), settings.output_path)
    log_report(result.report)

    if not result.found:
        return 0

    write_step_summary(result.rerender(ReportFormat.MARKDOWN), settings.summary_path)

    if settings.comment_on_pr:
        _publish_comment(settings, result, env)

    if settings.delete_changeset and settings.changeset_file is None:
        _delete_changeset(service, settings, result.changeset_name)

    return 0


def run() -> None:  # pragma: no cover - thin wrapper for module execution
    """Execute the CLI and exit with the produced status code."""

    raise SystemExit(main())


if __name__ == "__main__":  # pragma: no cover - module execution guard
    run()
