"""의사결정 결과 모델(Decision result models)."""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from src.core.data.audit import Vulnerability
from src.core.severity import SeverityLevel


class ShipReadiness(BaseModel):
    """배포 가능 여부 판단(Ship-readiness verdict). Computed per request."""

    safe_to_ship: bool
    reason: str
    critical: int
    high: int
    moderate: int
    low: int
    recommendation: Optional[str] = None


class HighestRiskResult(BaseModel):
    highest: Optional[Vulnerability] = None
    summary: str
    all_by_severity: List[Vulnerability] = Field(default_factory=list)


class VulnerabilitySummary(BaseModel):
    summary: str
    by_severity: Dict[SeverityLevel, List[str]]
    total: int


class UpgradeSuggestion(BaseModel):
    """업그레이드 제안(One upgrade per package)."""

    package: str
    current: str
    target: str
    severity: SeverityLevel
    action: str
    # Never computed; kept so callers can rely on the field being present.
    is_semver_compatible: Optional[bool] = None


class UpgradePlan(BaseModel):
    suggestions: List[UpgradeSuggestion] = Field(default_factory=list)
    summary: str
