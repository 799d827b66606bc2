"""Scan target identity keys.

Keys come in three forms: ``owner/repo``, ``owner/repo:subpath`` and
``local:<absolute path>``. The git ref is not part of the key, so scans of
different refs of the same repository share one history.
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Optional

from common_lib.errors import TargetValidationError

_NAME = r"\w(?:[-.\w])*"
GITHUB_URL_PATTERN = re.compile(rf"github\.com[/:]({_NAME})/({_NAME})")
GITHUB_NAME_PATTERN = re.compile(rf"^{_NAME}$")
LOCAL_PREFIX = "local:"


@dataclass(frozen=True)
class RepoRef:
    owner: str
    repo: str

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"


def parse_github_repo(value: str) -> RepoRef:
    """
    Parse "owner/repo" or any github.com URL into a RepoRef.

    Raises:
        TargetValidationError: If the value cannot be read as a repository
    """
    if not isinstance(value, str) or not value.strip():
        raise TargetValidationError("github_repo", "a repository is required, e.g. \"owner/repo\".")

    trimmed = value.strip()
    if trimmed.endswith(".git"):
        trimmed = trimmed[: -len(".git")]

    if "github.com" in trimmed:
        match = GITHUB_URL_PATTERN.search(trimmed)
        if not match:
            raise TargetValidationError("github_repo", f"Invalid GitHub URL: {value}")
        owner, repo = match.group(1), match.group(2)
        if repo.endswith(".git"):
            repo = repo[: -len(".git")]
        return RepoRef(owner=owner, repo=repo)

    parts = [part.strip() for part in trimmed.split("/")]
    if len(parts) != 2 or not all(GITHUB_NAME_PATTERN.match(part) for part in parts):
        raise TargetValidationError(
            "github_repo",
            f'use "owner/repo" or a full GitHub URL. Got: {value}',
        )
    return RepoRef(owner=parts[0], repo=parts[1])


def normalize_subpath(subpath: Optional[str]) -> Optional[str]:
    """Trim leading and trailing separators; empty becomes None."""
    if not subpath:
        return None
    trimmed = subpath.strip().strip("/\\")
    return trimmed or None


def resolve_local_path(local_path: Optional[str] = None, cwd: Optional[str] = None) -> str:
    base = cwd or os.getcwd()
    if not local_path:
        return os.path.abspath(base)
    expanded = os.path.expanduser(local_path)
    return os.path.abspath(os.path.join(base, expanded))


def build_target_key(
    local_path: Optional[str] = None,
    github_repo: Optional[str] = None,
    subpath: Optional[str] = None,
    cwd: Optional[str] = None,
) -> str:
    """
    Build the history identity key for a scan target.

    A remote repository wins over a local path when both are given.

    Args:
        local_path: Local project directory, relative paths resolve against cwd
        github_repo: "owner/repo" or GitHub URL
        subpath: Subdirectory inside the repository
        cwd: Working directory override (defaults to the process cwd)

    Returns:
        Identity key string
    """
    if github_repo:
        ref = parse_github_repo(github_repo)
        sub = normalize_subpath(subpath)
        return f"{ref.slug}:{sub}" if sub else ref.slug
    return f"{LOCAL_PREFIX}{resolve_local_path(local_path, cwd)}"
