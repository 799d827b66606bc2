"""Unit tests for ship readiness, highest risk, summaries and upgrades."""

from src.core.data.audit import AuditSummary, FixFlag, FixVersion
from src.core.decisions import (
    assess_ship_readiness,
    find_highest_risk,
    suggest_upgrades,
    summarize_vulnerabilities,
)
from src.core.normalizers import NpmAuditAdapter, PipAuditAdapter
from src.core.severity import SeverityLevel, empty_counts

from .conftest import make_summary, make_vuln

NPM_TEMPLATE = NpmAuditAdapter.install_template
PIP_TEMPLATE = PipAuditAdapter.install_template


class TestShipReadiness:
    """Test assess_ship_readiness."""

    def test_clean_project_is_safe(self):
        readiness = assess_ship_readiness(AuditSummary.empty())

        assert readiness.safe_to_ship is True
        assert readiness.reason.startswith("No known vulnerabilities")
        assert readiness.recommendation == "Keep running security checks regularly."

    def test_only_moderate_and_low_is_safe(self):
        """Test that moderate and low findings do not block shipping."""
        summary = make_summary(
            [make_vuln("a", SeverityLevel.MODERATE), make_vuln("b", SeverityLevel.LOW), make_vuln("c", SeverityLevel.LOW)]
        )
        readiness = assess_ship_readiness(summary)

        assert readiness.safe_to_ship is True
        assert "1 moderate and 2 low" in readiness.reason
        assert "suggest_upgrades" in readiness.recommendation

    def test_high_blocks_shipping(self):
        summary = make_summary([make_vuln("a", SeverityLevel.HIGH), make_vuln("b", SeverityLevel.CRITICAL)])
        readiness = assess_ship_readiness(summary)

        assert readiness.safe_to_ship is False
        assert "1 critical and 1 high" in readiness.reason
        assert "Do not ship" in readiness.reason
        assert "is_app_safe_to_ship" in readiness.recommendation
        assert (readiness.critical, readiness.high, readiness.moderate, readiness.low) == (1, 1, 0, 0)

    def test_verdict_follows_counts_not_list(self):
        """Test that metadata-style counts drive the verdict."""
        counts = empty_counts()
        counts[SeverityLevel.CRITICAL] = 1
        readiness = assess_ship_readiness(AuditSummary.build(counts, []))

        assert readiness.safe_to_ship is False
        assert readiness.critical == 1


class TestHighestRisk:
    """Test find_highest_risk."""

    def test_no_findings(self):
        result = find_highest_risk(AuditSummary.empty())

        assert result.highest is None
        assert result.summary == "No vulnerabilities found in this codebase."
        assert result.all_by_severity == []

    def test_picks_highest_severity(self):
        summary = make_summary(
            [
                make_vuln("low-pkg", SeverityLevel.LOW),
                make_vuln("crit-pkg", SeverityLevel.CRITICAL, "2.0.0", title="RCE"),
                make_vuln("mod-pkg", SeverityLevel.MODERATE),
            ]
        )
        result = find_highest_risk(summary)

        assert result.highest.name == "crit-pkg"
        assert result.summary == "Highest risk: **crit-pkg** (critical). RCE Fix available: 2.0.0."
        assert [v.name for v in result.all_by_severity] == ["crit-pkg", "mod-pkg", "low-pkg"]

    def test_ties_keep_report_order(self):
        """Test that equal severities stay in report order."""
        summary = make_summary(
            [
                make_vuln("first", SeverityLevel.HIGH),
                make_vuln("second", SeverityLevel.HIGH),
                make_vuln("third", SeverityLevel.HIGH),
            ]
        )
        result = find_highest_risk(summary)

        assert result.highest.name == "first"
        assert [v.name for v in result.all_by_severity] == ["first", "second", "third"]

    def test_without_title_or_fix(self):
        result = find_highest_risk(make_summary([make_vuln("pkg", SeverityLevel.LOW)]))
        assert result.summary == "Highest risk: **pkg** (low). No description."

    def test_boolean_fix_label(self):
        result = find_highest_risk(
            make_summary([make_vuln("pkg", SeverityLevel.HIGH, fix=FixFlag(available=True), description="desc")])
        )
        assert result.summary == "Highest risk: **pkg** (high). desc Fix available: available."


class TestSummarizeVulnerabilities:
    """Test summarize_vulnerabilities."""

    def test_no_findings(self):
        result = summarize_vulnerabilities(AuditSummary.empty())

        assert result.summary == "No vulnerabilities were found in your dependencies."
        assert result.total == 0
        assert all(lines == [] for lines in result.by_severity.values())

    def test_groups_by_severity_in_order(self):
        summary = make_summary(
            [
                make_vuln("low-pkg", SeverityLevel.LOW, title="Minor"),
                make_vuln("lodash", SeverityLevel.HIGH, "4.17.21", title="Prototype Pollution", is_direct=True),
                make_vuln("qs", SeverityLevel.HIGH, fix=FixFlag(available=True), title="DoS", is_direct=False),
            ]
        )
        result = summarize_vulnerabilities(summary)
        lines = result.summary.split("\n")

        assert lines[0] == "Your project has **3** vulnerability findings."
        assert lines[1] == "**HIGH** (2):"
        assert lines[2] == "- lodash: Prototype Pollution (direct dependency). Fix: upgrade to 4.17.21."
        assert lines[3] == "- qs: DoS (transitive). Fix: available."
        assert lines[4] == "**LOW** (1):"
        assert lines[5] == "- low-pkg: Minor (transitive)."
        assert lines[-1] == 'Use "suggest_upgrades" to get exact commands to fix them.'
        assert result.total == 3

    def test_direct_boolean_fix_upgrades_to_latest(self):
        summary = make_summary(
            [make_vuln("pkg", SeverityLevel.MODERATE, fix=FixFlag(available=True), is_direct=True)]
        )
        result = summarize_vulnerabilities(summary)

        assert result.by_severity[SeverityLevel.MODERATE] == [
            "pkg: Vulnerability (direct dependency). Fix: upgrade to latest."
        ]

    def test_overflow_line(self):
        """Test that groups beyond max_lines end with an overflow line."""
        summary = make_summary([make_vuln(f"pkg{i}", SeverityLevel.LOW) for i in range(13)])
        result = summarize_vulnerabilities(summary, max_lines=10)
        lines = result.summary.split("\n")

        assert sum(1 for line in lines if line.startswith("- pkg")) == 10
        assert "- … and 3 more." in lines
        assert len(result.by_severity[SeverityLevel.LOW]) == 13


class TestSuggestUpgrades:
    """Test suggest_upgrades."""

    def test_no_fixes(self):
        plan = suggest_upgrades(make_summary([make_vuln("pkg", SeverityLevel.HIGH)]), NPM_TEMPLATE)

        assert plan.suggestions == []
        assert plan.summary.startswith("No upgrade fixes available")

    def test_orders_by_severity_with_npm_commands(self):
        summary = make_summary(
            [
                make_vuln("low-pkg", SeverityLevel.LOW, "1.2.3", affected_range="<1.2.3"),
                make_vuln("lodash", SeverityLevel.CRITICAL, "4.17.21", affected_range="<4.17.21"),
            ]
        )
        plan = suggest_upgrades(summary, NPM_TEMPLATE)

        assert [s.package for s in plan.suggestions] == ["lodash", "low-pkg"]
        assert plan.suggestions[0].action == "npm install lodash@4.17.21"
        assert plan.suggestions[0].current == "<4.17.21"
        assert plan.suggestions[0].is_semver_compatible is None
        assert plan.summary == "Apply these 2 upgrade(s) in order of priority (critical/high first):"

    def test_first_fix_per_package_wins(self):
        """Test that later findings for a package never replace the first fix."""
        summary = make_summary(
            [
                make_vuln("requests", SeverityLevel.LOW, "2.20.0"),
                make_vuln("requests", SeverityLevel.CRITICAL, "2.31.0"),
            ]
        )
        plan = suggest_upgrades(summary, PIP_TEMPLATE)

        assert len(plan.suggestions) == 1
        assert plan.suggestions[0].target == "2.20.0"
        assert plan.suggestions[0].severity is SeverityLevel.LOW
        assert plan.suggestions[0].action == "pip install requests==2.20.0"

    def test_boolean_fix_targets_latest_and_unknown_current(self):
        summary = make_summary([make_vuln("qs", SeverityLevel.HIGH, fix=FixFlag(available=True))])
        suggestion = suggest_upgrades(summary, NPM_TEMPLATE).suggestions[0]

        assert suggestion.target == "latest"
        assert suggestion.current == "unknown"
        assert suggestion.action == "npm install qs@latest"

    def test_unavailable_fixes_are_skipped(self):
        summary = make_summary(
            [
                make_vuln("a", SeverityLevel.HIGH, fix=FixFlag(available=False)),
                make_vuln("b", SeverityLevel.HIGH, fix=FixVersion(version="1.0.1")),
            ]
        )
        assert [s.package for s in suggest_upgrades(summary, NPM_TEMPLATE).suggestions] == ["b"]
