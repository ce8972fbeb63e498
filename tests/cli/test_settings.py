"""Tests for resolving run settings from flags and action inputs."""

from __future__ import annotations

from pathlib import Path

import pytest

from changeset_report.cli import SettingsError, build_parser, settings_from_args
from changeset_report.cli.settings import parse_bool
from changeset_report.service import MissingChangesetPolicy


def _settings(argv: list[str], env: dict[str, str]):
    return settings_from_args(build_parser().parse_args(argv), env)


def test_action_inputs_populate_settings() -> None:
    env = {
        "INPUT_STACK-NAME": "network",
        "INPUT_AWS-REGION": "eu-central-1",
        "INPUT_CHANGESET-NAME": "pr-9",
        "INPUT_FORMAT": "markdown",
        "INPUT_COMMENT-ON-PR": "false",
        "INPUT_DELETE-CHANGESET": "no",
        "INPUT_GITHUB-TOKEN": "ghs_input",
        "GITHUB_OUTPUT": "/tmp/out",
        "GITHUB_STEP_SUMMARY": "/tmp/summary",
        "GITHUB_ACTIONS": "true",
    }

    settings = _settings([], env)

    assert settings.stack_name == "network"
    assert settings.aws_region == "eu-central-1"
    assert settings.changeset_name == "pr-9"
    assert settings.output_format == "markdown"
    assert settings.comment_on_pr is False
    assert settings.delete_changeset is False
    assert settings.github_token == "ghs_input"
    assert settings.output_path == Path("/tmp/out")
    assert settings.summary_path == Path("/tmp/summary")
    assert settings.log_level == "DEBUG"


def test_defaults_apply_when_only_stack_is_given() -> None:
    settings = _settings(["--stack-name", "network"], {})

    assert settings.aws_region == "us-east-2"
    assert settings.changeset_name is None
    assert settings.changeset_file is None
    assert settings.output_format == "ansi"
    assert settings.comment_on_pr is True
    assert settings.delete_changeset is True
    assert settings.github_token is None
    assert settings.missing_changeset is MissingChangesetPolicy.REPORT
    assert settings.log_level == "INFO"
    assert settings.output_path is None


def test_flags_override_inputs() -> None:
    env = {
        "INPUT_STACK_NAME": "from-input",
        "INPUT_DELETE_CHANGESET": "true",
        "GITHUB_TOKEN": "ghs_env",
    }

    settings = _settings(
        [
            "--stack-name",
            "from-flag",
            "--no-delete-changeset",
            "--changeset-file",
            "saved.json",
            "--missing-changeset",
            "FAIL",
        ],
        env,
    )

    assert settings.stack_name == "from-flag"
    assert settings.delete_changeset is False
    assert settings.changeset_file == Path("saved.json")
    assert settings.github_token == "ghs_env"
    assert settings.missing_changeset is MissingChangesetPolicy.FAIL


def test_blank_changeset_name_means_latest() -> None:
    settings = _settings([], {"INPUT_STACK-NAME": "network", "INPUT_CHANGESET-NAME": "  "})

    assert settings.changeset_name is None


@pytest.mark.parametrize(
    ("argv", "env", "message"),
    [
        ([], {}, "stack-name is required"),
        (["--stack-name", "s", "--missing-changeset", "ignore"], {}, "missing-changeset"),
        (["--stack-name", "s", "--log-level", "verbose"], {}, "log-level"),
        (["--stack-name", "s"], {"INPUT_COMMENT-ON-PR": "maybe"}, "comment-on-pr"),
    ],
)
def test_invalid_settings_raise(argv: list[str], env: dict[str, str], message: str) -> None:
    with pytest.raises(SettingsError, match=message):
        _settings(argv, env)


@pytest.mark.parametrize(
    ("value", "expected"),
    [("true", True), ("YES", True), ("0", False), ("off", False), ("", True), (None, True)],
)
def test_parse_bool(value: str | None, expected: bool) -> None:
    assert parse_bool(value, name="flag", default=True) is expected
