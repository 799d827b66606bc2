"""스캔 대상 디렉터리 준비(Materialize scan targets as local directories)."""
from __future__ import annotations

import shutil
import tempfile
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import AsyncIterator, Callable, Optional

from common_lib.errors import EcosystemUnsupportedError, ScannerExecutionError
from common_lib.github_client import GitHubClient
from common_lib.logger import get_logger
from src.core.targets import RepoRef, build_target_key, normalize_subpath, parse_github_repo, resolve_local_path

from .models import ScanTarget
from .runners import NpmAuditRunner

logger = get_logger(__name__)

NODE_LOCKFILES = ("package-lock.json", "npm-shrinkwrap.json")
PYTHON_MANIFESTS = ("requirements.txt", "pyproject.toml")


def _noop() -> None:
    return None


@dataclass
class ResolvedProject:
    """준비된 프로젝트 루트(Resolved project root).

    ``release`` must be called once the scan is done; ``ProjectResolver.open``
    does this on every exit path.
    """

    path: Path
    target_key: str
    ref: Optional[str] = None
    subpath: Optional[str] = None
    _cleanup: Callable[[], None] = field(default=_noop, repr=False)
    _released: bool = field(default=False, repr=False)

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._cleanup()


def _temp_dir_cleanup(path: Path) -> Callable[[], None]:
    def cleanup() -> None:
        shutil.rmtree(path, ignore_errors=True)
        logger.debug("Removed temporary project directory %s", path)

    return cleanup


class ProjectResolver:
    """로컬 경로 또는 GitHub 저장소를 스캔 가능한 디렉터리로 변환."""

    def __init__(
        self,
        github: Optional[GitHubClient] = None,
        npm_runner: Optional[NpmAuditRunner] = None,
        temp_root: Optional[str] = None,
    ) -> None:
        self._github = github or GitHubClient()
        self._npm = npm_runner or NpmAuditRunner()
        self._temp_root = temp_root

    async def resolve(self, target: ScanTarget) -> ResolvedProject:
        """
        Resolve a scan target to a directory.

        A GitHub repository wins over a local path. Remote targets are
        materialized into a temporary directory that ``release`` removes.

        Raises:
            TargetValidationError: Malformed repository reference
            RemoteAccessError: Repository missing, private, or rate limited
            EcosystemUnsupportedError: No supported manifest in the repository
        """
        target_key = build_target_key(
            local_path=target.project_path,
            github_repo=target.github_repo,
            subpath=target.subpath,
        )
        if not target.github_repo:
            return ResolvedProject(path=Path(resolve_local_path(target.project_path)), target_key=target_key)

        repo = parse_github_repo(target.github_repo)
        subpath = normalize_subpath(target.subpath)
        await self._github.check_repo_access(repo.owner, repo.repo)

        tmp_dir = Path(tempfile.mkdtemp(prefix=f"risklens-{repo.owner}-{repo.repo}-", dir=self._temp_root))
        cleanup = _temp_dir_cleanup(tmp_dir)
        try:
            await self._materialize(repo, tmp_dir, target.ref, subpath)
        except BaseException:
            cleanup()
            raise

        logger.info("원격 프로젝트 준비 완료(Materialized %s at %s)", target_key, tmp_dir)
        return ResolvedProject(
            path=tmp_dir,
            target_key=target_key,
            ref=target.ref,
            subpath=subpath,
            _cleanup=cleanup,
        )

    @asynccontextmanager
    async def open(self, target: ScanTarget) -> AsyncIterator[ResolvedProject]:
        """resolve() with a guaranteed release."""

        project = await self.resolve(target)
        try:
            yield project
        finally:
            project.release()

    async def _materialize(self, repo: RepoRef, tmp_dir: Path, ref: Optional[str], subpath: Optional[str]) -> None:
        prefix = f"{subpath}/" if subpath else ""
        location = prefix or "root"

        package_json = await self._github.fetch_file(repo.owner, repo.repo, f"{prefix}package.json", ref)
        if package_json is not None:
            (tmp_dir / "package.json").write_text(package_json, encoding="utf-8")
            await self._materialize_lockfile(repo, tmp_dir, ref, prefix, location)
            return

        for manifest in PYTHON_MANIFESTS:
            content = await self._github.fetch_file(repo.owner, repo.repo, f"{prefix}{manifest}", ref)
            if content is not None:
                (tmp_dir / manifest).write_text(content, encoding="utf-8")
                return

        hint = f'Check subpath "{subpath}".' if subpath else 'Use "subpath" if the project is in a subdirectory.'
        raise EcosystemUnsupportedError(repo.slug, location, hint)

    async def _materialize_lockfile(
        self, repo: RepoRef, tmp_dir: Path, ref: Optional[str], prefix: str, location: str
    ) -> None:
        for lockfile in NODE_LOCKFILES:
            content = await self._github.fetch_file(repo.owner, repo.repo, f"{prefix}{lockfile}", ref)
            if content is not None:
                (tmp_dir / "package-lock.json").write_text(content, encoding="utf-8")
                return

        logger.info("lockfile 없음, 생성 시도(No lockfile in %s; generating one)", repo.slug)
        if not await self._npm.generate_lockfile(tmp_dir):
            raise ScannerExecutionError(
                "node",
                f"no package-lock.json or npm-shrinkwrap.json at {location} of {repo.slug} and generating one failed.",
                "Add a lockfile to the repo or use a branch that has one.",
            )
