"""Formatting utilities for git-dep-keeper output."""

from .status import (
    format_change,
    format_missing,
    format_operation,
    format_orphan,
    format_repo_status,
    format_summary,
)

__all__ = [
    "format_change",
    "format_missing",
    "format_operation",
    "format_orphan",
    "format_repo_status",
    "format_summary",
]
