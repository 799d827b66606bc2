"""pip-audit --format json 정규화(pip-audit report normalizer)."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from common_lib.errors import ScannerExecutionError
from common_lib.logger import get_logger
from src.core.data.audit import AuditSummary, FixFlag, FixVersion, Vulnerability
from src.core.normalizers.base import EcosystemAdapter
from src.core.severity import SeverityLevel, empty_counts

logger = get_logger(__name__)

SEVERITY_ALIASES: Dict[str, SeverityLevel] = {
    "critical": SeverityLevel.CRITICAL,
    "high": SeverityLevel.HIGH,
    "medium": SeverityLevel.MODERATE,
    "moderate": SeverityLevel.MODERATE,
    "low": SeverityLevel.LOW,
    "info": SeverityLevel.INFO,
}

# pip-audit reports no severity; anything unrecognized is treated as high.
FALLBACK_SEVERITY = SeverityLevel.HIGH
TITLE_MAX_LENGTH = 80


def translate_severity(raw: Any) -> SeverityLevel:
    if isinstance(raw, str):
        return SEVERITY_ALIASES.get(raw.strip().lower(), FALLBACK_SEVERITY)
    return FALLBACK_SEVERITY


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _dependencies(report: Any) -> Optional[List[Any]]:
    if isinstance(report, list):
        return report
    if isinstance(report, dict):
        for key in ("dependencies", "vulnerabilities"):
            deps = report.get(key)
            if isinstance(deps, list):
                return deps
        return []
    return None


class PipAuditAdapter(EcosystemAdapter):
    """Python projects audited with ``pip-audit --format json``.

    Counts are computed from the findings since pip-audit has no summary
    block. Every finding is reported as a direct dependency.
    """

    ecosystem = "python"
    manifest_files = ("requirements.txt", "pyproject.toml", "Pipfile")
    install_template = "pip install {name}=={target}"
    remediation = (
        "Install pip-audit (pip install pip-audit) and ensure Python is on PATH. "
        "Try: pip-audit -r requirements.txt or pip-audit . in the project directory."
    )

    def normalize(self, raw: str) -> AuditSummary:
        report = self._load_json(raw)
        deps = _dependencies(report)
        if deps is None:
            raise ScannerExecutionError(
                self.ecosystem, "pip-audit output is neither a list nor an object.", self.remediation
            )

        counts = empty_counts()
        vulnerabilities: List[Vulnerability] = []
        for dep in deps:
            if not isinstance(dep, dict) or not dep.get("name"):
                continue
            name = str(dep["name"])
            version = dep.get("version")
            findings = dep.get("vulns") or []
            if not isinstance(findings, list):
                raise ScannerExecutionError(
                    self.ecosystem, f"pip-audit 'vulns' for {name} is not a list.", self.remediation
                )
            for finding in findings:
                if not isinstance(finding, dict):
                    continue
                fix_versions = finding.get("fix_versions") or []
                if not isinstance(fix_versions, list):
                    raise ScannerExecutionError(
                        self.ecosystem, f"pip-audit 'fix_versions' for {name} is not a list.", self.remediation
                    )
                severity = translate_severity(finding.get("known_severity"))
                counts[severity] += 1

                advisory_id = _text(finding.get("id"))
                description = _text(finding.get("description"))
                vulnerabilities.append(
                    Vulnerability(
                        name=name,
                        severity=severity,
                        title=advisory_id or (description[:TITLE_MAX_LENGTH] if description else None),
                        advisory_id=advisory_id,
                        affected_range=str(version) if version is not None else None,
                        fix=FixVersion(version=str(fix_versions[0])) if fix_versions else FixFlag(available=False),
                        is_direct=True,
                        description=description,
                    )
                )

        logger.info(
            "pip-audit 정규화 완료(Normalized pip-audit: %d findings across %d dependencies)",
            len(vulnerabilities),
            len(deps),
        )
        return AuditSummary.build(counts, vulnerabilities)
