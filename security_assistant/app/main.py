"""SecurityAssistant MCP 서버 엔트리포인트(MCP server entrypoint)."""

from typing import Annotated, Any, Awaitable, Callable, Dict, Optional

from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import BaseModel, Field

from common_lib.config import get_settings, load_environment
from common_lib.errors import AppException
from common_lib.logger import get_logger

from .models import ScanTarget
from .service import SecurityAssistantService

logger = get_logger(__name__)

ProjectPath = Annotated[
    Optional[str],
    Field(description="Local path to the project root (package.json, requirements.txt or pyproject.toml). Ignored if github_repo is set."),
]
GithubRepo = Annotated[
    Optional[str],
    Field(description='GitHub repo to scan: "owner/repo" or full URL.'),
]
Ref = Annotated[
    Optional[str],
    Field(description="Branch, tag, or commit SHA when scanning a GitHub repo. Defaults to the default branch."),
]
Subpath = Annotated[
    Optional[str],
    Field(description='Subdirectory inside the repo (e.g. "frontend") when the manifest is not at the repo root.'),
]


async def _run_tool(
    name: str,
    target: ScanTarget,
    call: Callable[[ScanTarget], Awaitable[BaseModel]],
) -> Dict[str, Any]:
    logger.info(
        "도구 실행(%s: project_path=%s github_repo=%s ref=%s subpath=%s)",
        name,
        target.project_path,
        target.github_repo,
        target.ref,
        target.subpath,
    )
    try:
        result = await call(target)
    except AppException as exc:
        logger.warning("%s 실패(%s failed): %s", name, name, exc.message)
        raise ToolError(exc.message) from exc
    return result.model_dump(mode="json")


def create_server(service: Optional[SecurityAssistantService] = None) -> FastMCP:
    """MCP 서버 생성(Build the MCP server around one service instance)."""

    assistant = service or SecurityAssistantService()
    mcp: FastMCP = FastMCP(get_settings().app_name)

    @mcp.tool
    async def is_app_safe_to_ship(
        project_path: ProjectPath = None,
        github_repo: GithubRepo = None,
        ref: Ref = None,
        subpath: Subpath = None,
    ) -> Dict[str, Any]:
        """Answer whether the application is safe to ship based on dependency vulnerabilities.

        Default policy: safe only when there are no critical or high severity issues.
        """
        target = ScanTarget(project_path=project_path, github_repo=github_repo, ref=ref, subpath=subpath)
        return await _run_tool("is_app_safe_to_ship", target, assistant.ship_readiness_for_target)

    @mcp.tool
    async def get_highest_risk_dependency(
        project_path: ProjectPath = None,
        github_repo: GithubRepo = None,
        ref: Ref = None,
        subpath: Subpath = None,
    ) -> Dict[str, Any]:
        """Identify the single dependency with the highest risk, plus all findings sorted by severity."""
        target = ScanTarget(project_path=project_path, github_repo=github_repo, ref=ref, subpath=subpath)
        return await _run_tool("get_highest_risk_dependency", target, assistant.highest_risk_for_target)

    @mcp.tool
    async def summarize_vulnerabilities(
        project_path: ProjectPath = None,
        github_repo: GithubRepo = None,
        ref: Ref = None,
        subpath: Subpath = None,
    ) -> Dict[str, Any]:
        """Translate dependency audit output into a plain-language summary grouped by severity."""
        target = ScanTarget(project_path=project_path, github_repo=github_repo, ref=ref, subpath=subpath)
        return await _run_tool("summarize_vulnerabilities", target, assistant.summary_for_target)

    @mcp.tool
    async def suggest_upgrades(
        project_path: ProjectPath = None,
        github_repo: GithubRepo = None,
        ref: Ref = None,
        subpath: Subpath = None,
    ) -> Dict[str, Any]:
        """Return concrete upgrade steps with exact npm/pip install commands, critical/high first."""
        target = ScanTarget(project_path=project_path, github_repo=github_repo, ref=ref, subpath=subpath)
        return await _run_tool("suggest_upgrades", target, assistant.upgrades_for_target)

    @mcp.tool
    async def compare_scans_over_time(
        project_path: ProjectPath = None,
        github_repo: GithubRepo = None,
        ref: Ref = None,
        subpath: Subpath = None,
    ) -> Dict[str, Any]:
        """Scan the target, save the scan, and compare it with the previous saved scan.

        Use the same github_repo (or project_path) each time to build history. The first
        run saves a baseline; later runs show what was fixed or introduced.
        """
        target = ScanTarget(project_path=project_path, github_repo=github_repo, ref=ref, subpath=subpath)
        return await _run_tool("compare_scans_over_time", target, assistant.compare_for_target)

    return mcp


def main() -> None:
    """동기 진입점(Synchronous entrypoint)."""

    load_dotenv()
    load_environment()
    server = create_server()
    logger.info("RiskLens MCP server starting")
    server.run()


if __name__ == "__main__":
    main()
