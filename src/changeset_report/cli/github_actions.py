"""Helpers for publishing changeset reports to GitHub Actions surfaces."""

from __future__ import annotations

import logging
import sys
import uuid
from pathlib import Path
from typing import Mapping

COMMAND_LEVELS = {
    logging.DEBUG: "debug",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}


def escape_data(value: str) -> str:
    """Escape a workflow command message."""

    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def workflow_command(level: str, message: str) -> str:
    return f"::{level}::{escape_data(message)}"


class GitHubActionsHandler(logging.Handler):
    """Log handler that emits records as workflow commands on stdout.

    INFO records are printed as plain log lines; other levels map onto the
    ``::debug::``, ``::warning::`` and ``::error::`` commands.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            command = COMMAND_LEVELS.get(record.levelno)
            if command is None and record.levelno > logging.WARNING:
                command = "error"
            line = workflow_command(command, message) if command else message
            sys.stdout.write(line + "\n")
            sys.stdout.flush()
        except Exception:  # pragma: no cover - mirrors logging.StreamHandler
            self.handleError(record)


def configure_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Route the package loggers through a single :class:`GitHubActionsHandler`."""

    package_logger = logging.getLogger("changeset_report")
    for handler in list(package_logger.handlers):
        if isinstance(handler, GitHubActionsHandler):
            package_logger.removeHandler(handler)

    handler = GitHubActionsHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return package_logger


def write_outputs(outputs: Mapping[str, str], destination: Path | None) -> None:
    """Append step outputs to the ``GITHUB_OUTPUT`` file.

    Every value is written with the heredoc form so multi-line reports survive.
    """

    if destination is None:
        logging.getLogger(__name__).debug("GITHUB_OUTPUT not set; skipping step outputs")
        return

    destination.parent.mkdir(parents=True, exist_ok=True)
    with destination.open("a", encoding="utf-8") as handle:
        for name, value in outputs.items():
            delimiter = f"ghadelimiter_{uuid.uuid4().hex}"
            handle.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")


def write_step_summary(markdown: str, destination: Path | None) -> None:
    if destination is None:
        return

    destination.parent.mkdir(parents=True, exist_ok=True)
    with destination.open("a", encoding="utf-8") as handle:
        handle.write(markdown)


def log_report(report: str) -> None:
    """Print the report line by line so every line shows up in the job log."""

    for line in report.splitlines():
        print(line)
