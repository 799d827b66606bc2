"""Data models for normalized scans, decisions and scan history."""

from src.core.data.audit import (
    AuditSummary,
    FixAvailability,
    FixFlag,
    FixVersion,
    NoFix,
    Vulnerability,
)
from src.core.data.decisions import (
    HighestRiskResult,
    ShipReadiness,
    UpgradePlan,
    UpgradeSuggestion,
    VulnerabilitySummary,
)
from src.core.data.history import CompareScansResult, SavedScan, ScanSnapshot

__all__ = [
    "AuditSummary",
    "FixAvailability",
    "FixFlag",
    "FixVersion",
    "NoFix",
    "Vulnerability",
    "HighestRiskResult",
    "ShipReadiness",
    "UpgradePlan",
    "UpgradeSuggestion",
    "VulnerabilitySummary",
    "CompareScansResult",
    "SavedScan",
    "ScanSnapshot",
]
