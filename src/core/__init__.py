"""Core scan normalization, decision and comparison logic."""

# Severity model
from src.core.severity import SEVERITY_ORDER, SEVERITY_SCORE, SeverityLevel, empty_counts

# Data models
from src.core.data import (
    AuditSummary,
    CompareScansResult,
    FixFlag,
    FixVersion,
    HighestRiskResult,
    NoFix,
    SavedScan,
    ScanSnapshot,
    ShipReadiness,
    UpgradePlan,
    UpgradeSuggestion,
    Vulnerability,
    VulnerabilitySummary,
)

# Scanner output adapters
from src.core.normalizers import (
    AdapterRegistry,
    EcosystemAdapter,
    NpmAuditAdapter,
    PipAuditAdapter,
    default_registry,
)

# Decisions
from src.core.decisions import (
    assess_ship_readiness,
    find_highest_risk,
    suggest_upgrades,
    summarize_vulnerabilities,
)

# Targets and comparison
from src.core.targets import RepoRef, build_target_key, normalize_subpath, parse_github_repo
from src.core.comparison import ScanComparator, ScanHistoryStore, diff_vulnerabilities

__all__ = [
    # Severity
    "SEVERITY_ORDER",
    "SEVERITY_SCORE",
    "SeverityLevel",
    "empty_counts",
    # Data
    "AuditSummary",
    "CompareScansResult",
    "FixFlag",
    "FixVersion",
    "HighestRiskResult",
    "NoFix",
    "SavedScan",
    "ScanSnapshot",
    "ShipReadiness",
    "UpgradePlan",
    "UpgradeSuggestion",
    "Vulnerability",
    "VulnerabilitySummary",
    # Adapters
    "AdapterRegistry",
    "EcosystemAdapter",
    "NpmAuditAdapter",
    "PipAuditAdapter",
    "default_registry",
    # Decisions
    "assess_ship_readiness",
    "find_highest_risk",
    "suggest_upgrades",
    "summarize_vulnerabilities",
    # Targets and comparison
    "RepoRef",
    "build_target_key",
    "normalize_subpath",
    "parse_github_repo",
    "ScanComparator",
    "ScanHistoryStore",
    "diff_vulnerabilities",
]
