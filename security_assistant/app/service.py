"""SecurityAssistant 비즈니스 로직(Business logic)."""
from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Awaitable, Callable, Dict, Optional, Protocol, TypeVar, Union

from common_lib.config import Settings, get_settings
from common_lib.errors import ScannerExecutionError
from common_lib.logger import get_logger
from src.core.comparison import ScanComparator
from src.core.data.audit import AuditSummary
from src.core.data.decisions import HighestRiskResult, ShipReadiness, UpgradePlan, VulnerabilitySummary
from src.core.data.history import CompareScansResult
from src.core.decisions import (
    assess_ship_readiness,
    find_highest_risk,
    suggest_upgrades,
    summarize_vulnerabilities,
)
from src.core.normalizers import AdapterRegistry, EcosystemAdapter, NpmAuditAdapter, default_registry

from .models import ScanTarget
from .repository import ScanHistoryRepository
from .runners import default_runners
from .workspace import ProjectResolver, ResolvedProject

logger = get_logger(__name__)

PathLike = Union[str, Path]
T = TypeVar("T")


class ScannerRunner(Protocol):
    ecosystem: str

    async def run(self, project_root: PathLike) -> Optional[str]:
        ...


@dataclass
class ScanOutcome:
    summary: AuditSummary
    adapter: Optional[EcosystemAdapter]

    @property
    def ecosystem(self) -> Optional[str]:
        return self.adapter.ecosystem if self.adapter else None


class SecurityAssistantService:
    """의존성 취약점 질의 서비스(Dependency vulnerability assistant service).

    Owns the scan history repository; one instance should serve the whole
    process so comparisons accumulate history.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        registry: Optional[AdapterRegistry] = None,
        runners: Optional[Dict[str, ScannerRunner]] = None,
        repository: Optional[ScanHistoryRepository] = None,
        resolver: Optional[ProjectResolver] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._registry = registry or default_registry()
        self._runners: Dict[str, ScannerRunner] = runners if runners is not None else default_runners()
        self._repository = repository or ScanHistoryRepository(max_scans=self._settings.history_max_scans)
        self._comparator = ScanComparator(self._repository)
        self._resolver = resolver or ProjectResolver()

    @property
    def repository(self) -> ScanHistoryRepository:
        return self._repository

    def detect_ecosystem(self, project_root: PathLike) -> Optional[EcosystemAdapter]:
        """프로젝트 생태계 감지(Detect ecosystem from manifest files)."""

        return self._registry.detect(project_root)

    async def scan(self, project_root: PathLike) -> ScanOutcome:
        """
        Run the ecosystem's audit tool and normalize its output.

        Returns an empty summary when no supported manifest exists.

        Raises:
            ScannerExecutionError: The project was recognized but its audit
                tool could not run or produced unusable output
        """
        root = Path(project_root)
        adapter = self.detect_ecosystem(root)
        if adapter is None:
            logger.info(
                "지원 매니페스트 없음(No supported manifest in %s; expected one of %s)",
                root,
                ", ".join(self._registry.manifest_files),
            )
            return ScanOutcome(summary=AuditSummary.empty(), adapter=None)

        runner = self._runners.get(adapter.ecosystem)
        if runner is None:
            raise ScannerExecutionError(
                adapter.ecosystem,
                f"no audit runner is configured for {root}.",
                adapter.remediation,
            )

        logger.info("감사 실행(Running %s audit in %s)", adapter.ecosystem, root)
        raw = await runner.run(root)
        if raw is None:
            raise ScannerExecutionError(
                adapter.ecosystem,
                f"{adapter.ecosystem.capitalize()} project detected at {root} but the audit tool could not be run.",
                adapter.remediation,
                details={"ecosystem": adapter.ecosystem, "project_root": str(root)},
            )
        try:
            summary = adapter.normalize(raw)
        except ScannerExecutionError as exc:
            raise exc.with_context(project_root=str(root)) from exc
        return ScanOutcome(summary=summary, adapter=adapter)

    async def get_audit_summary(self, project_root: PathLike) -> AuditSummary:
        return (await self.scan(project_root)).summary

    async def get_ship_readiness(self, project_root: PathLike) -> ShipReadiness:
        """Is this app safe to ship today? Safe only without critical/high findings."""

        return assess_ship_readiness(await self.get_audit_summary(project_root))

    async def get_highest_risk_dependency(self, project_root: PathLike) -> HighestRiskResult:
        return find_highest_risk(await self.get_audit_summary(project_root))

    async def get_vulnerabilities_summary(self, project_root: PathLike) -> VulnerabilitySummary:
        summary = await self.get_audit_summary(project_root)
        return summarize_vulnerabilities(summary, max_lines=self._settings.summary_max_lines)

    async def get_upgrade_suggestions(self, project_root: PathLike) -> UpgradePlan:
        outcome = await self.scan(project_root)
        # with no detected project there are no findings; npm phrasing is the default
        adapter = outcome.adapter or self._registry.get(NpmAuditAdapter.ecosystem) or NpmAuditAdapter()
        return suggest_upgrades(outcome.summary, adapter.install_template)

    async def compare_scans_over_time(
        self,
        repo_id: str,
        project_root: PathLike,
        ref: Optional[str] = None,
        subpath: Optional[str] = None,
    ) -> CompareScansResult:
        """Scan, save the scan under ``repo_id``, and diff with the previous scan."""

        outcome = await self.scan(project_root)
        return await self._comparator.compare(
            repo_id,
            outcome.summary,
            ref=ref,
            subpath=subpath,
            ecosystem=outcome.ecosystem,
        )

    @asynccontextmanager
    async def open_target(self, target: ScanTarget) -> AsyncIterator[ResolvedProject]:
        async with self._resolver.open(target) as project:
            yield project

    async def _with_target(self, target: ScanTarget, fn: Callable[[Path], Awaitable[T]]) -> T:
        async with self.open_target(target) as project:
            try:
                return await fn(project.path)
            except ScannerExecutionError as exc:
                raise exc.with_context(target=project.target_key) from exc

    async def ship_readiness_for_target(self, target: ScanTarget) -> ShipReadiness:
        return await self._with_target(target, self.get_ship_readiness)

    async def highest_risk_for_target(self, target: ScanTarget) -> HighestRiskResult:
        return await self._with_target(target, self.get_highest_risk_dependency)

    async def summary_for_target(self, target: ScanTarget) -> VulnerabilitySummary:
        return await self._with_target(target, self.get_vulnerabilities_summary)

    async def upgrades_for_target(self, target: ScanTarget) -> UpgradePlan:
        return await self._with_target(target, self.get_upgrade_suggestions)

    async def compare_for_target(self, target: ScanTarget) -> CompareScansResult:
        async with self.open_target(target) as project:
            try:
                return await self.compare_scans_over_time(
                    project.target_key,
                    project.path,
                    ref=project.ref,
                    subpath=project.subpath,
                )
            except ScannerExecutionError as exc:
                raise exc.with_context(target=project.target_key) from exc
