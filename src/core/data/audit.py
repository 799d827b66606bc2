"""감사 결과 데이터 모델(Normalized audit data models)."""
from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Mapping, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, Field, model_validator

from src.core.severity import SEVERITY_ORDER, SeverityLevel, empty_counts

LATEST = "latest"


class NoFix(BaseModel):
    """The scanner reported nothing about a fix."""

    kind: Literal["none"] = "none"

    @property
    def is_available(self) -> bool:
        return False

    @property
    def target(self) -> Optional[str]:
        return None

    @property
    def label(self) -> Optional[str]:
        return None


class FixFlag(BaseModel):
    """The scanner only said whether a fix exists."""

    kind: Literal["flag"] = "flag"
    available: bool

    @property
    def is_available(self) -> bool:
        return self.available

    @property
    def target(self) -> Optional[str]:
        return LATEST if self.available else None

    @property
    def label(self) -> Optional[str]:
        return "available" if self.available else None


class FixVersion(BaseModel):
    """The scanner named the version that fixes the finding."""

    kind: Literal["version"] = "version"
    version: str

    @property
    def is_available(self) -> bool:
        return True

    @property
    def target(self) -> Optional[str]:
        return self.version

    @property
    def label(self) -> Optional[str]:
        return self.version


FixAvailability = Annotated[Union[NoFix, FixFlag, FixVersion], Field(discriminator="kind")]


class Vulnerability(BaseModel):
    """단일 패키지 취약점(One finding against one package in one scan)."""

    name: str = Field(..., min_length=1, description="패키지 이름(Package name)")
    severity: SeverityLevel
    title: Optional[str] = None
    advisory_id: Optional[str] = Field(default=None, description="CVE 또는 advisory ID(Advisory identifier)")
    affected_range: Optional[str] = Field(default=None, description="영향 버전 범위(Affected version range)")
    fix: FixAvailability = Field(default_factory=NoFix)
    via: Optional[List[str]] = Field(default=None, description="의존성 경로(Dependency chain)")
    is_direct: Optional[bool] = None
    description: Optional[str] = None

    @property
    def diff_key(self) -> Tuple[str, SeverityLevel]:
        return (self.name, self.severity)


class AuditSummary(BaseModel):
    """한 번의 스캔 정규화 결과(Normalized result of one scan).

    ``counts`` may disagree with ``vulnerabilities`` for npm audit, whose
    counts come from the report metadata rather than the enumerated list.
    """

    counts: Dict[SeverityLevel, int] = Field(default_factory=empty_counts)
    total_vulnerabilities: int = 0
    has_critical_or_high: bool = False
    vulnerabilities: List[Vulnerability] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_consistency(self) -> "AuditSummary":
        for level in SEVERITY_ORDER:
            self.counts.setdefault(level, 0)
        if self.total_vulnerabilities != len(self.vulnerabilities):
            raise ValueError("total_vulnerabilities must equal the number of listed vulnerabilities")
        blocking = self.counts[SeverityLevel.CRITICAL] > 0 or self.counts[SeverityLevel.HIGH] > 0
        if self.has_critical_or_high != blocking:
            raise ValueError("has_critical_or_high must reflect the critical and high counts")
        return self

    @classmethod
    def build(
        cls,
        counts: Mapping[SeverityLevel, int],
        vulnerabilities: Sequence[Vulnerability],
    ) -> "AuditSummary":
        """카운트와 목록으로 요약 생성(Derive totals and the blocking flag)."""

        full_counts = empty_counts()
        full_counts.update(counts)
        return cls(
            counts=full_counts,
            total_vulnerabilities=len(vulnerabilities),
            has_critical_or_high=full_counts[SeverityLevel.CRITICAL] > 0 or full_counts[SeverityLevel.HIGH] > 0,
            vulnerabilities=list(vulnerabilities),
        )

    @classmethod
    def empty(cls) -> "AuditSummary":
        return cls.build(empty_counts(), [])
