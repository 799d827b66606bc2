"""Decision functions derived from a normalized AuditSummary.

All functions here are pure: they never run scanners or touch history, so
the same summary always yields the same answer.
"""

from typing import Dict, List, Set

from src.core.data.audit import AuditSummary, Vulnerability
from src.core.data.decisions import (
    HighestRiskResult,
    ShipReadiness,
    UpgradePlan,
    UpgradeSuggestion,
    VulnerabilitySummary,
)
from src.core.severity import SEVERITY_ORDER, SeverityLevel

SUGGEST_UPGRADES_TOOL = "suggest_upgrades"
SHIP_READINESS_TOOL = "is_app_safe_to_ship"
DEFAULT_MAX_LINES = 10


def _by_score(vulnerabilities: List[Vulnerability]) -> List[Vulnerability]:
    # sorted() is stable, so equal scores keep their report order
    return sorted(vulnerabilities, key=lambda v: v.severity.score, reverse=True)


def assess_ship_readiness(summary: AuditSummary) -> ShipReadiness:
    """
    Answer "is this app safe to ship today?".

    Policy: safe only when there are no critical or high findings.

    Args:
        summary: Normalized audit summary

    Returns:
        ShipReadiness with the verdict, counts and a human reason
    """
    counts = summary.counts
    critical = counts[SeverityLevel.CRITICAL]
    high = counts[SeverityLevel.HIGH]
    moderate = counts[SeverityLevel.MODERATE]
    low = counts[SeverityLevel.LOW]

    safe_to_ship = not summary.has_critical_or_high
    if safe_to_ship and summary.total_vulnerabilities == 0:
        reason = "No known vulnerabilities were found in your dependencies. It is reasonable to ship."
        recommendation = "Keep running security checks regularly."
    elif safe_to_ship:
        reason = (
            f"There are no critical or high severity issues. You have {moderate} moderate and {low} low "
            "severity findings. Shipping is acceptable from a severity standpoint, but consider scheduling fixes."
        )
        recommendation = (
            f'Run the "{SUGGEST_UPGRADES_TOOL}" tool to get concrete upgrade steps for moderate/low issues.'
        )
    else:
        reason = (
            f"There are {critical} critical and {high} high severity vulnerabilities. "
            "Do not ship until these are addressed."
        )
        recommendation = (
            f'Use "{SUGGEST_UPGRADES_TOOL}" to get exact upgrade commands, then run them and re-check '
            f'with "{SHIP_READINESS_TOOL}".'
        )

    return ShipReadiness(
        safe_to_ship=safe_to_ship,
        reason=reason,
        critical=critical,
        high=high,
        moderate=moderate,
        low=low,
        recommendation=recommendation,
    )


def find_highest_risk(summary: AuditSummary) -> HighestRiskResult:
    """Pick the single highest-severity finding; ties keep report order."""
    ranked = _by_score(summary.vulnerabilities)
    highest = ranked[0] if ranked else None

    if highest is None:
        text = "No vulnerabilities found in this codebase."
    else:
        detail = highest.title or highest.description or "No description."
        text = f"Highest risk: **{highest.name}** ({highest.severity.value}). {detail}"
        if highest.fix.is_available:
            text += f" Fix available: {highest.fix.label}."

    return HighestRiskResult(highest=highest, summary=text, all_by_severity=ranked)


def _summary_line(vulnerability: Vulnerability) -> str:
    title = vulnerability.title or "Vulnerability"
    fix = vulnerability.fix
    if vulnerability.is_direct:
        hint = f" Fix: upgrade to {fix.target}." if fix.is_available else ""
        return f"{vulnerability.name}: {title} (direct dependency).{hint}"
    hint = f" Fix: {fix.label}." if fix.is_available else ""
    return f"{vulnerability.name}: {title} (transitive).{hint}"


def summarize_vulnerabilities(summary: AuditSummary, max_lines: int = DEFAULT_MAX_LINES) -> VulnerabilitySummary:
    """
    Translate a summary into plain language for non-experts.

    Args:
        summary: Normalized audit summary
        max_lines: Lines rendered per severity group before "and N more"

    Returns:
        VulnerabilitySummary with the rendered text and per-severity lines
    """
    by_severity: Dict[SeverityLevel, List[str]] = {level: [] for level in SEVERITY_ORDER}
    for vulnerability in summary.vulnerabilities:
        by_severity[vulnerability.severity].append(_summary_line(vulnerability))

    parts: List[str] = []
    if summary.total_vulnerabilities == 0:
        parts.append("No vulnerabilities were found in your dependencies.")
    else:
        parts.append(f"Your project has **{summary.total_vulnerabilities}** vulnerability findings.")
        for level in SEVERITY_ORDER:
            lines = by_severity[level]
            if not lines:
                continue
            parts.append(f"**{level.value.upper()}** ({len(lines)}):")
            parts.extend(f"- {line}" for line in lines[:max_lines])
            if len(lines) > max_lines:
                parts.append(f"- … and {len(lines) - max_lines} more.")
        parts.append(f'Use "{SUGGEST_UPGRADES_TOOL}" to get exact commands to fix them.')

    return VulnerabilitySummary(
        summary="\n".join(parts),
        by_severity=by_severity,
        total=summary.total_vulnerabilities,
    )


def suggest_upgrades(summary: AuditSummary, install_template: str) -> UpgradePlan:
    """
    Build one upgrade per package, highest severity first.

    The first finding with a fix wins for each package; later findings for
    the same package are ignored even if their severity is higher.

    Args:
        summary: Normalized audit summary
        install_template: Ecosystem command template with ``{name}`` and ``{target}``

    Returns:
        UpgradePlan with ordered suggestions and a summary line
    """
    suggestions: List[UpgradeSuggestion] = []
    seen: Set[str] = set()
    for vulnerability in summary.vulnerabilities:
        if not vulnerability.fix.is_available or vulnerability.name in seen:
            continue
        target = vulnerability.fix.target
        suggestions.append(
            UpgradeSuggestion(
                package=vulnerability.name,
                current=vulnerability.affected_range or "unknown",
                target=target,
                severity=vulnerability.severity,
                action=install_template.format(name=vulnerability.name, target=target),
            )
        )
        seen.add(vulnerability.name)

    suggestions.sort(key=lambda s: s.severity.score, reverse=True)

    if suggestions:
        text = f"Apply these {len(suggestions)} upgrade(s) in order of priority (critical/high first):"
    else:
        text = (
            "No upgrade fixes available from the audit (or no vulnerabilities). "
            "Consider updating packages manually or checking for major-version upgrades."
        )
    return UpgradePlan(suggestions=suggestions, summary=text)
