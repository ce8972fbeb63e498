"""Adapter layer for CloudFormation access and pull-request publishing."""

from .changeset_loader import (
    ChangesetLoaderError,
    ChangesetSource,
    CloudFormationChangesetSource,
    FileChangesetSource,
)
from .pr_commenter import PullRequestCommenter, PullRequestCommentError, PullRequestContext

__all__ = [
    "ChangesetLoaderError",
    "ChangesetSource",
    "CloudFormationChangesetSource",
    "FileChangesetSource",
    "PullRequestCommentError",
    "PullRequestCommenter",
    "PullRequestContext",
]
