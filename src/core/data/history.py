"""스캔 이력 모델(Scan history models)."""
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.core.data.audit import AuditSummary, Vulnerability
from src.core.severity import SeverityLevel, empty_counts


class SavedScan(BaseModel):
    """저장된 스캔 스냅샷(One stored scan). Never mutated after creation."""

    model_config = ConfigDict(frozen=True)

    id: str
    repo_id: str
    ref: Optional[str] = None
    subpath: Optional[str] = None
    scanned_at: datetime
    summary: AuditSummary
    ecosystem: Optional[str] = None


class ScanSnapshot(BaseModel):
    scanned_at: datetime
    counts: Dict[SeverityLevel, int] = Field(default_factory=empty_counts)
    total_vulnerabilities: int = 0

    @classmethod
    def from_scan(cls, scan: SavedScan) -> "ScanSnapshot":
        return cls(
            scanned_at=scan.scanned_at,
            counts=dict(scan.summary.counts),
            total_vulnerabilities=scan.summary.total_vulnerabilities,
        )


class CompareScansResult(BaseModel):
    """두 스캔 비교 결과(Baseline vs current comparison)."""

    repo_id: str
    baseline: ScanSnapshot
    current: ScanSnapshot
    fixed: List[Vulnerability] = Field(default_factory=list)
    introduced: List[Vulnerability] = Field(default_factory=list)
    summary: str
    is_first_scan: bool = False
