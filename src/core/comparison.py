"""Compare successive scans of the same target."""
from __future__ import annotations

import asyncio
import uuid
from datetime import datetime
from typing import Callable, List, Optional, Protocol, Tuple

from common_lib.logger import get_logger
from src.core.data.audit import AuditSummary, Vulnerability
from src.core.data.history import CompareScansResult, SavedScan, ScanSnapshot
from src.core.utils.timestamps import normalize_timestamp, utcnow

logger = get_logger(__name__)


class ScanHistoryStore(Protocol):
    """스캔 이력 저장소 인터페이스(Scan history store used by the comparator)."""

    def lock(self, repo_id: str) -> asyncio.Lock:
        ...

    async def latest(self, repo_id: str) -> Optional[SavedScan]:
        ...

    async def append(self, scan: SavedScan) -> None:
        ...


def diff_vulnerabilities(
    baseline: List[Vulnerability], current: List[Vulnerability]
) -> Tuple[List[Vulnerability], List[Vulnerability]]:
    """
    Split findings into fixed and introduced.

    Findings match on (package name, severity) only. Advisory id, title and
    the number of findings per key are ignored.

    Returns:
        (fixed, introduced): baseline entries missing from current, and
        current entries missing from baseline
    """
    current_keys = {v.diff_key for v in current}
    baseline_keys = {v.diff_key for v in baseline}
    fixed = [v for v in baseline if v.diff_key not in current_keys]
    introduced = [v for v in current if v.diff_key not in baseline_keys]
    return fixed, introduced


def _new_scan_id() -> str:
    return f"scan-{uuid.uuid4().hex[:12]}"


class ScanComparator:
    """스캔 저장 후 직전 스캔과 비교(Save a scan and diff it against the previous one)."""

    def __init__(
        self,
        repository: ScanHistoryStore,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._repository = repository
        self._clock = clock

    async def compare(
        self,
        repo_id: str,
        summary: AuditSummary,
        ref: Optional[str] = None,
        subpath: Optional[str] = None,
        ecosystem: Optional[str] = None,
    ) -> CompareScansResult:
        """
        Append the current scan to history and compare with the previous one.

        The read of the previous scan and the append happen under the
        repository's per-target lock.

        Args:
            repo_id: Target identity key
            summary: Current normalized audit summary
            ref: Git ref scanned, if any
            subpath: Repository subdirectory scanned, if any
            ecosystem: Detected ecosystem tag

        Returns:
            CompareScansResult; ``is_first_scan`` is set when no history existed
        """
        async with self._repository.lock(repo_id):
            previous = await self._repository.latest(repo_id)
            scan = SavedScan(
                id=_new_scan_id(),
                repo_id=repo_id,
                ref=ref,
                subpath=subpath,
                scanned_at=self._clock(),
                summary=summary,
                ecosystem=ecosystem,
            )
            await self._repository.append(scan)

        current = ScanSnapshot.from_scan(scan)
        if previous is None:
            logger.info("첫 스캔 저장(First scan saved for %s)", repo_id)
            return CompareScansResult(
                repo_id=repo_id,
                baseline=current,
                current=current,
                fixed=[],
                introduced=[],
                summary=(
                    f"First scan saved for **{repo_id}**. Total: {summary.total_vulnerabilities} "
                    "vulnerability(ies). Run this tool again after making changes to compare over time."
                ),
                is_first_scan=True,
            )

        fixed, introduced = diff_vulnerabilities(previous.summary.vulnerabilities, summary.vulnerabilities)
        delta = summary.total_vulnerabilities - previous.summary.total_vulnerabilities
        text = (
            f"Compared **{repo_id}**: baseline {normalize_timestamp(previous.scanned_at)} "
            f"→ current {normalize_timestamp(scan.scanned_at)}. "
        )
        if fixed:
            text += f"**{len(fixed)}** fixed. "
        if introduced:
            text += f"**{len(introduced)}** new or reintroduced. "
        text += f"Total change: {delta:+d} vulnerability(ies)."

        logger.info(
            "스캔 비교 완료(Compared %s: fixed=%d introduced=%d delta=%+d)",
            repo_id,
            len(fixed),
            len(introduced),
            delta,
        )
        return CompareScansResult(
            repo_id=repo_id,
            baseline=ScanSnapshot.from_scan(previous),
            current=current,
            fixed=fixed,
            introduced=introduced,
            summary=text,
        )
