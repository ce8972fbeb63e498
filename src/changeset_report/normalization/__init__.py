"""Normalization of raw CloudFormation responses."""

from .changeset_normalizer import ChangesetNormalizer, MalformedChangesetError

__all__ = ["ChangesetNormalizer", "MalformedChangesetError"]
