"""Unit tests for the severity model and AuditSummary invariants."""

import pytest
from pydantic import ValidationError

from src.core.data.audit import AuditSummary, FixFlag, FixVersion, NoFix
from src.core.severity import SEVERITY_ORDER, SEVERITY_SCORE, SeverityLevel, empty_counts

from .conftest import make_summary, make_vuln


class TestSeverityLevel:
    """Test the severity enumeration."""

    def test_order_is_highest_first(self):
        """Test that display order runs critical to info."""
        assert [level.value for level in SEVERITY_ORDER] == ["critical", "high", "moderate", "low", "info"]

    def test_scores_are_strictly_decreasing(self):
        """Test that scores follow the display order."""
        scores = [SEVERITY_SCORE[level] for level in SEVERITY_ORDER]
        assert scores == [100, 80, 50, 20, 5]
        assert SeverityLevel.HIGH.score == 80

    def test_parse_recognized_value(self):
        """Test parsing a known level."""
        assert SeverityLevel.parse("moderate") is SeverityLevel.MODERATE

    @pytest.mark.parametrize("value", ["medium", "HIGH", "", None, 3])
    def test_parse_rejects_unknown_values(self, value):
        """Test that parse never coerces unknown values."""
        assert SeverityLevel.parse(value) is None

    def test_empty_counts_covers_every_level(self):
        """Test that empty_counts has a zero for each level."""
        assert empty_counts() == {level: 0 for level in SEVERITY_ORDER}


class TestFixAvailability:
    """Test the three fix variants."""

    def test_no_fix(self):
        fix = NoFix()
        assert not fix.is_available
        assert fix.target is None

    def test_fix_flag_true_targets_latest(self):
        fix = FixFlag(available=True)
        assert fix.is_available
        assert fix.target == "latest"

    def test_fix_flag_false_is_unavailable(self):
        fix = FixFlag(available=False)
        assert not fix.is_available
        assert fix.target is None

    def test_fix_version_targets_version(self):
        fix = FixVersion(version="4.17.21")
        assert fix.is_available
        assert fix.target == "4.17.21"
        assert fix.label == "4.17.21"


class TestAuditSummary:
    """Test AuditSummary invariants."""

    def test_build_derives_total_and_flag(self):
        """Test that build computes total and the blocking flag."""
        summary = make_summary([make_vuln("a", SeverityLevel.HIGH), make_vuln("b", SeverityLevel.LOW)])
        assert summary.total_vulnerabilities == len(summary.vulnerabilities) == 2
        assert summary.has_critical_or_high is True

    def test_build_without_blocking_severity(self):
        summary = make_summary([make_vuln("a", SeverityLevel.MODERATE)])
        assert summary.has_critical_or_high is False

    def test_counts_may_differ_from_list(self):
        """Test that metadata-style counts are kept even when they disagree with the list."""
        counts = empty_counts()
        counts[SeverityLevel.CRITICAL] = 3
        summary = AuditSummary.build(counts, [])
        assert summary.total_vulnerabilities == 0
        assert summary.counts[SeverityLevel.CRITICAL] == 3
        assert summary.has_critical_or_high is True

    def test_rejects_inconsistent_total(self):
        """Test that a wrong total is rejected."""
        with pytest.raises(ValidationError):
            AuditSummary(counts=empty_counts(), total_vulnerabilities=2, has_critical_or_high=False, vulnerabilities=[])

    def test_rejects_inconsistent_flag(self):
        with pytest.raises(ValidationError):
            AuditSummary(counts=empty_counts(), total_vulnerabilities=0, has_critical_or_high=True, vulnerabilities=[])

    def test_empty_summary(self):
        summary = AuditSummary.empty()
        assert summary.total_vulnerabilities == 0
        assert summary.has_critical_or_high is False
        assert all(count == 0 for count in summary.counts.values())
