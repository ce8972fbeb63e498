"""Run configuration assembled from CLI flags and GitHub Actions inputs."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from ..rendering import ReportFormat
from ..service import MissingChangesetPolicy

DEFAULT_REGION = "us-east-2"
TRUE_VALUES = frozenset({"true", "yes", "1", "on"})
FALSE_VALUES = frozenset({"false", "no", "0", "off"})
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class SettingsError(ValueError):
    """Raised when supplied configuration values cannot be used."""


@dataclass(slots=True)
class ReporterSettings:
    """Resolved configuration for a single reporting run."""

    stack_name: str
    aws_region: str = DEFAULT_REGION
    changeset_name: str | None = None
    changeset_file: Path | None = None
    output_format: str = ReportFormat.ANSI.value
    comment_on_pr: bool = True
    delete_changeset: bool = True
    github_token: str | None = None
    missing_changeset: MissingChangesetPolicy = MissingChangesetPolicy.REPORT
    log_level: str = "INFO"
    output_path: Path | None = None
    summary_path: Path | None = None


def action_input(env: Mapping[str, str], name: str) -> str | None:
    """Return the GitHub Actions input ``name`` (``INPUT_STACK-NAME`` or ``INPUT_STACK_NAME``)."""

    for key in (f"INPUT_{name.upper()}", f"INPUT_{name.upper().replace('-', '_')}"):
        value = env.get(key)
        if value is not None and value.strip():
            return value.strip()
    return None


def parse_bool(value: str | bool | None, *, name: str, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value

    normalized = value.strip().lower()
    if not normalized:
        return default
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise SettingsError(f"{name} must be a boolean value (true/false), got '{value}'")


def settings_from_args(
    args: argparse.Namespace, env: Mapping[str, str] | None = None
) -> ReporterSettings:
    """Merge parsed flags with ``INPUT_*`` variables; explicit flags win."""

    env = os.environ if env is None else env

    def pick(flag_value: str | None, input_name: str) -> str | None:
        if flag_value is not None and str(flag_value).strip():
            return str(flag_value).strip()
        return action_input(env, input_name)

    stack_name = pick(args.stack_name, "stack-name")
    if not stack_name:
        raise SettingsError("stack-name is required (pass --stack-name or set INPUT_STACK-NAME)")

    try:
        missing_changeset = MissingChangesetPolicy(
            (pick(args.missing_changeset, "missing-changeset") or "report").lower()
        )
    except ValueError as exc:
        raise SettingsError(
            "missing-changeset must be one of: "
            + ", ".join(policy.value for policy in MissingChangesetPolicy)
        ) from exc

    log_level = (pick(args.log_level, "log-level") or _default_log_level(env)).upper()
    if log_level not in LOG_LEVELS:
        raise SettingsError(f"log-level must be one of: {', '.join(LOG_LEVELS)}")

    changeset_file = pick(args.changeset_file, "changeset-file")
    output_path = env.get("GITHUB_OUTPUT")
    summary_path = env.get("GITHUB_STEP_SUMMARY")

    return ReporterSettings(
        stack_name=stack_name,
        aws_region=pick(args.aws_region, "aws-region") or DEFAULT_REGION,
        changeset_name=pick(args.changeset_name, "changeset-name"),
        changeset_file=Path(changeset_file) if changeset_file else None,
        output_format=pick(args.format, "format") or ReportFormat.ANSI.value,
        comment_on_pr=_flag(args.comment_on_pr, env, "comment-on-pr"),
        delete_changeset=_flag(args.delete_changeset, env, "delete-changeset"),
        github_token=pick(args.github_token, "github-token") or env.get("GITHUB_TOKEN") or None,
        missing_changeset=missing_changeset,
        log_level=log_level,
        output_path=Path(output_path) if output_path else None,
        summary_path=Path(summary_path) if summary_path else None,
    )


def _flag(flag_value: bool | None, env: Mapping[str, str], input_name: str) -> bool:
    if flag_value is not None:
        return flag_value
    return parse_bool(action_input(env, input_name), name=input_name, default=True)


def _default_log_level(env: Mapping[str, str]) -> str:
    # Workflow ``::debug::`` lines stay hidden unless step debugging is enabled.
    return "DEBUG" if env.get("GITHUB_ACTIONS") == "true" else "INFO"
