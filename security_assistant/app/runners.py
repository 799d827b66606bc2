"""감사 도구 실행기(Audit tool runners).

Each runner returns the tool's raw stdout, or None when the tool could not be
run at all. Interpreting the output is left to the ecosystem adapters.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from common_lib.config import get_settings
from common_lib.logger import get_logger

logger = get_logger(__name__)

MAX_OUTPUT_BYTES = 10 * 1024 * 1024


@dataclass
class CommandResult:
    returncode: int
    stdout: str
    stderr: str


async def run_command(
    args: Sequence[str],
    cwd: Union[str, Path],
    timeout: float,
) -> Optional[CommandResult]:
    """
    외부 명령 실행(Run an external command and capture its output).

    Args:
        args: Program and arguments
        cwd: Working directory
        timeout: Seconds before the process is killed

    Returns:
        CommandResult, or None if the program is missing or timed out
    """
    try:
        process = await asyncio.create_subprocess_exec(
            *args,
            cwd=str(cwd),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except (FileNotFoundError, PermissionError) as exc:
        logger.info("명령 실행 불가(Cannot run %s): %s", args[0], exc)
        return None

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("명령 시간 초과(%s timed out after %.0fs); killing process.", args[0], timeout)
        process.kill()
        await process.wait()
        return None

    return CommandResult(
        returncode=process.returncode if process.returncode is not None else -1,
        stdout=stdout[:MAX_OUTPUT_BYTES].decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )


def _stdout_or_none(result: Optional[CommandResult], tool: str) -> Optional[str]:
    if result is None:
        return None
    # audit tools exit non-zero when they find vulnerabilities
    if result.stdout.strip():
        return result.stdout
    logger.info(
        "%s 출력 없음(%s produced no output, exit=%d): %s",
        tool,
        tool,
        result.returncode,
        result.stderr.strip()[:500],
    )
    return None


class NpmAuditRunner:
    """Runs ``npm audit --json`` in a project root."""

    ecosystem = "node"

    def __init__(self, npm_command: Optional[str] = None, timeout: Optional[float] = None) -> None:
        settings = get_settings()
        self._npm = npm_command or settings.npm_command
        self._timeout = timeout if timeout is not None else settings.scanner_timeout_seconds

    async def run(self, project_root: Union[str, Path]) -> Optional[str]:
        root = Path(project_root)
        if not (root / "package.json").is_file():
            return None
        result = await run_command([self._npm, "audit", "--json"], root, self._timeout)
        return _stdout_or_none(result, "npm audit")

    async def generate_lockfile(self, project_root: Union[str, Path], timeout: Optional[float] = None) -> bool:
        """package-lock.json 생성(Generate a lockfile without installing modules)."""

        limit = timeout if timeout is not None else get_settings().lockfile_timeout_seconds
        result = await run_command(
            [self._npm, "install", "--package-lock-only", "--no-audit", "--no-fund"],
            project_root,
            limit,
        )
        return result is not None and result.returncode == 0


class PipAuditRunner:
    """Runs pip-audit, falling back to ``python -m pip_audit``."""

    ecosystem = "python"

    def __init__(
        self,
        pip_audit_command: Optional[str] = None,
        python_command: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        settings = get_settings()
        self._pip_audit = pip_audit_command or settings.pip_audit_command
        self._python = python_command or settings.python_command
        self._timeout = timeout if timeout is not None else settings.scanner_timeout_seconds

    @staticmethod
    def audit_args(project_root: Path) -> Optional[List[str]]:
        if (project_root / "requirements.txt").is_file():
            return ["-r", "requirements.txt", "--format", "json"]
        if (project_root / "pyproject.toml").is_file():
            return [".", "--format", "json"]
        return None

    async def run(self, project_root: Union[str, Path]) -> Optional[str]:
        root = Path(project_root)
        args = self.audit_args(root)
        if args is None:
            return None

        output = _stdout_or_none(
            await run_command([self._pip_audit, *args], root, self._timeout),
            "pip-audit",
        )
        if output is not None:
            return output

        logger.info("pip-audit 대체 실행(Retrying as %s -m pip_audit)", self._python)
        return _stdout_or_none(
            await run_command([self._python, "-m", "pip_audit", *args], root, self._timeout),
            "python -m pip_audit",
        )


def default_runners() -> Dict[str, Union[NpmAuditRunner, PipAuditRunner]]:
    return {runner.ecosystem: runner for runner in (NpmAuditRunner(), PipAuditRunner())}
