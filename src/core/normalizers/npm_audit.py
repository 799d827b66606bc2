"""npm audit --json 정규화(npm audit report normalizer)."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from common_lib.errors import ScannerExecutionError
from common_lib.logger import get_logger
from src.core.data.audit import AuditSummary, FixAvailability, FixFlag, FixVersion, NoFix, Vulnerability
from src.core.normalizers.base import EcosystemAdapter
from src.core.severity import SEVERITY_ORDER, SeverityLevel, empty_counts

logger = get_logger(__name__)


def _via_title(entry: Any) -> Optional[str]:
    if isinstance(entry, str):
        return entry
    if isinstance(entry, dict):
        title = entry.get("title")
        return title if isinstance(title, str) else None
    return None


def _normalize_fix(raw: Any) -> FixAvailability:
    # npm reports fixAvailable as absent, a bool, or {name, version, isSemVerMajor}
    if isinstance(raw, bool):
        return FixFlag(available=raw)
    if isinstance(raw, str) and raw:
        return FixVersion(version=raw)
    if isinstance(raw, dict) and raw.get("version"):
        return FixVersion(version=str(raw["version"]))
    return NoFix()


def _metadata_counts(report: Dict[str, Any]) -> Dict[SeverityLevel, int]:
    counts = empty_counts()
    metadata = report.get("metadata")
    meta = metadata.get("vulnerabilities") if isinstance(metadata, dict) else None
    if not isinstance(meta, dict):
        return counts
    for level in SEVERITY_ORDER:
        value = meta.get(level.value)
        if isinstance(value, int) and not isinstance(value, bool):
            counts[level] = value
    return counts


class NpmAuditAdapter(EcosystemAdapter):
    """Node.js projects audited with ``npm audit --json``.

    Severity counts are taken from ``metadata.vulnerabilities`` as reported;
    they are not recomputed from the per-package map. Findings with a
    severity outside the five known levels are dropped.
    """

    ecosystem = "node"
    manifest_files = ("package.json",)
    install_template = "npm install {name}@{target}"
    remediation = (
        "Make sure Node.js and npm are installed and a package-lock.json exists, "
        "then run `npm audit --json` in the project directory to see the raw error."
    )

    def normalize(self, raw: str) -> AuditSummary:
        report = self._load_json(raw)
        if not isinstance(report, dict):
            raise ScannerExecutionError(self.ecosystem, "npm audit output is not a JSON object.", self.remediation)
        if "error" in report and "vulnerabilities" not in report:
            error = report["error"]
            summary = error.get("summary") if isinstance(error, dict) else error
            raise ScannerExecutionError(self.ecosystem, f"npm audit reported an error: {summary}", self.remediation)

        entries = report.get("vulnerabilities")
        if entries is None:
            return AuditSummary.empty()
        if not isinstance(entries, dict):
            raise ScannerExecutionError(
                self.ecosystem, "npm audit 'vulnerabilities' is not an object.", self.remediation
            )

        counts = _metadata_counts(report)
        vulnerabilities: List[Vulnerability] = []
        for name, entry in entries.items():
            if not isinstance(entry, dict) or not name:
                continue
            raw_severity = entry.get("severity")
            severity = SeverityLevel.MODERATE if raw_severity is None else SeverityLevel.parse(raw_severity)
            if severity is None:
                logger.debug("Dropping %s with unrecognized severity %r", name, raw_severity)
                continue

            raw_via = entry.get("via")
            via_list = raw_via if isinstance(raw_via, list) else ([raw_via] if raw_via else [])
            title = _via_title(via_list[0]) if via_list else None
            via_strings = None
            if isinstance(raw_via, list):
                via_strings = [_via_title(item) or "" for item in raw_via] or None

            is_direct = entry.get("isDirect")
            vulnerabilities.append(
                Vulnerability(
                    name=name,
                    severity=severity,
                    title=title,
                    affected_range=entry.get("range") if isinstance(entry.get("range"), str) else None,
                    fix=_normalize_fix(entry.get("fixAvailable")),
                    via=via_strings,
                    is_direct=is_direct if isinstance(is_direct, bool) else None,
                    description=f"{name}: {title}" if title else None,
                )
            )

        logger.info(
            "npm audit 정규화 완료(Normalized npm audit: %d listed, metadata counts=%s)",
            len(vulnerabilities),
            {level.value: count for level, count in counts.items()},
        )
        return AuditSummary.build(counts, vulnerabilities)
