"""Pytest configuration and shared fixtures."""
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from common_lib.logger import get_logger
from src.core.data.audit import AuditSummary, FixVersion, NoFix, Vulnerability
from src.core.severity import SeverityLevel, empty_counts

logger = get_logger(__name__)


class FakeRunner:
    """Scanner runner returning canned output and recording calls."""

    def __init__(self, ecosystem: str, output: Optional[str]) -> None:
        self.ecosystem = ecosystem
        self.output = output
        self.calls: List[Path] = []

    async def run(self, project_root: Any) -> Optional[str]:
        self.calls.append(Path(project_root))
        return self.output


def make_vuln(
    name: str,
    severity: SeverityLevel,
    fix_version: Optional[str] = None,
    **kwargs: Any,
) -> Vulnerability:
    """Build a Vulnerability with an optional concrete fix version."""
    fix = FixVersion(version=fix_version) if fix_version else kwargs.pop("fix", NoFix())
    return Vulnerability(name=name, severity=severity, fix=fix, **kwargs)


def make_summary(vulnerabilities: List[Vulnerability]) -> AuditSummary:
    """Build a summary whose counts are derived from the list."""
    counts = empty_counts()
    for vulnerability in vulnerabilities:
        counts[vulnerability.severity] += 1
    return AuditSummary.build(counts, vulnerabilities)


@pytest.fixture
def npm_report() -> Dict[str, Any]:
    """
    Sample npm audit --json report.
    Metadata counts intentionally differ from the per-package map.
    """
    return {
        "auditReportVersion": 2,
        "vulnerabilities": {
            "lodash": {
                "name": "lodash",
                "severity": "high",
                "isDirect": True,
                "via": ["lodash: Prototype Pollution"],
                "effects": [],
                "range": "<4.17.21",
                "fixAvailable": {"name": "lodash", "version": "4.17.21", "isSemVerMajor": False},
            },
        },
        "metadata": {
            "vulnerabilities": {"info": 0, "low": 1, "moderate": 3, "high": 2, "critical": 1, "total": 7},
        },
    }


@pytest.fixture
def npm_report_text(npm_report: Dict[str, Any]) -> str:
    return json.dumps(npm_report)


@pytest.fixture
def pip_report() -> Dict[str, Any]:
    """Sample pip-audit --format json report."""
    return {
        "dependencies": [
            {
                "name": "requests",
                "version": "2.19.0",
                "vulns": [
                    {
                        "id": "PYSEC-2018-28",
                        "fix_versions": ["2.20.0"],
                        "aliases": ["CVE-2018-18074"],
                        "description": "The Requests package sends an HTTP Authorization header to an http URI upon redirect.",
                    }
                ],
            },
            {"name": "flask", "version": "2.3.3", "vulns": []},
        ],
        "fixes": [],
    }


@pytest.fixture
def pip_report_text(pip_report: Dict[str, Any]) -> str:
    return json.dumps(pip_report)


@pytest.fixture
def node_project(tmp_path: Path) -> Path:
    """Directory with a package.json manifest."""
    (tmp_path / "package.json").write_text('{"name": "demo", "version": "1.0.0"}', encoding="utf-8")
    return tmp_path


@pytest.fixture
def python_project(tmp_path: Path) -> Path:
    """Directory with a requirements.txt manifest."""
    (tmp_path / "requirements.txt").write_text("requests==2.19.0\n", encoding="utf-8")
    return tmp_path
