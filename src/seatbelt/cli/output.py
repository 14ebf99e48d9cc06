"""Rich output formatting for the seatbelt CLI.

Renders a ``HealthReport`` as:

- the full sectioned report (``print_report``),
- a one-line summary for pre-commit hooks (``quick_summary``),
- two CI status lines (``ci_lines``),
- a JSON-serializable dict (``report_to_dict``).

Score colour bands: green >= 80, yellow >= 60, red below.
Dynamic values are wrapped in ``Text`` so paths or names containing
brackets are never parsed as markup.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from seatbelt.config import DEFAULT_CONFIG, McpCostModel
from seatbelt.core.recommend import Optimization, Priority
from seatbelt.core.report import HealthReport
from seatbelt.core.scoring import Category, HealthResult, Verdict
from seatbelt.keys import KeyOutcome, KeyResult
from seatbelt.probes.models import (
    CORE_SERVICES,
    OPTIONAL_SERVICES,
    LockfileState,
    ServiceState,
    ServiceStatus,
)
from seatbelt.probes.services import VERCEL_NEEDS_LOGIN

OVERALL_BAR_WIDTH = 30
CATEGORY_BAR_WIDTH = 15
TOP_RECOMMENDATIONS = 5

_SERVICE_LABELS: dict[str, str] = {
    "github": "GitHub CLI",
    "supabase": "Supabase",
    "git": "Git",
    "vercel": "Vercel",
    "aws": "AWS",
}

_PRIORITY_STYLES: dict[Priority, str] = {
    Priority.HIGH: "bold red",
    Priority.MEDIUM: "bold yellow",
    Priority.LOW: "bold green",
}

_VERDICT_STYLES: dict[Verdict, str] = {
    Verdict.READY: "green",
    Verdict.WARNING: "yellow",
    Verdict.BLOCKED: "red",
}

_VERDICT_TITLES: dict[Verdict, str] = {
    Verdict.READY: "VERDICT: Ready to Develop",
    Verdict.WARNING: "VERDICT: Proceed with Caution",
    Verdict.BLOCKED: "VERDICT: Development Blocked",
}

_QUICK_LABELS: dict[Verdict, str] = {
    Verdict.READY: "Ready",
    Verdict.WARNING: "Warnings",
    Verdict.BLOCKED: "BLOCKED",
}

_CI_STATUS: dict[Verdict, str] = {
    Verdict.READY: "OK",
    Verdict.WARNING: "WARNING",
    Verdict.BLOCKED: "BLOCKED",
}

_KEY_MARKERS: dict[KeyOutcome, tuple[str, str]] = {
    KeyOutcome.PASS: ("✓", "green"),
    KeyOutcome.WARN: ("⚠", "yellow"),
    KeyOutcome.FAIL: ("✗", "red"),
    KeyOutcome.SKIP: ("○", "dim"),
}

console = Console()


# ---------------------------------------------------------------------------
# Small helpers
# ---------------------------------------------------------------------------


def score_style(score: int) -> str:
    """Return the Rich style for a 0-100 score."""
    if score >= 80:
        return "green"
    if score >= 60:
        return "yellow"
    return "red"


def progress_bar(score: int, width: int) -> str:
    """Return a bar of ``width`` cells, filled in proportion to the score."""
    filled = max(0, min(width, round(score * width / 100)))
    return "█" * filled + "░" * (width - filled)


def _row(label: str, value: str, style: str = "", width: int = 18) -> Text:
    return Text.assemble("   ", (f"{label:<{width}}", ""), " ", (value, style))


def _check(marker: str, style: str, label: str, detail: str) -> Text:
    return Text.assemble("   ", (marker, style), " ", (label, "bold"), f": {detail}")


def _section(out: Console, title: str) -> None:
    out.print()
    out.print(Rule(Text(title, style="bold"), style="cyan", align="left"))


def _score_line(label: str, score: int) -> Text:
    style = score_style(score)
    return Text.assemble(
        "   ", (f"{label:<15}", ""), " ",
        (progress_bar(score, CATEGORY_BAR_WIDTH), style), f" {score}/100",
    )


def auth_marker(service: str, state: ServiceState) -> tuple[str, str]:
    """Return the (marker, style) shown for a service's state."""
    if state.status is ServiceStatus.AUTHENTICATED:
        return "✓", "green"
    if service in CORE_SERVICES:
        return "✗", "red"
    if state.detail == VERCEL_NEEDS_LOGIN:
        return "⚠", "yellow"
    return "○", "dim"


# ---------------------------------------------------------------------------
# Full report sections
# ---------------------------------------------------------------------------


def _print_header(out: Console, report: HealthReport) -> None:
    out.print()
    out.print(Panel(
        Text("SEATBELT Intelligence Report\nConfiguration Health Analysis", style="bold"),
        border_style="cyan",
    ))
    out.print(Text(f"   Generated: {report.generated_at:%Y-%m-%d %H:%M:%S}", style="dim"))
    out.print(Text(f"   Project: {report.project_root}", style="dim"))


def _print_system(out: Console, report: HealthReport) -> None:
    facts = report.facts
    system, env, user = facts.system, facts.dev_env, facts.user
    _section(out, "SYSTEM ENVIRONMENT")

    out.print()
    out.print(Text("   Machine:", style="bold"))
    os_display = f"{system.os_name} {system.os_version}".strip()
    if system.os_codename:
        os_display += f" ({system.os_codename})"
    out.print(_row("Operating System:", os_display))
    arch = system.arch + (f" ({system.chip_type})" if system.chip_type else "")
    out.print(_row("Architecture:", arch))
    out.print(_row("CPU:", f"{system.cpu_cores if system.cpu_cores is not None else '?'} cores"))
    out.print(_row("Memory:", f"{system.memory_gb if system.memory_gb is not None else '?'}GB"))
    disk = system.disk_free_gb if system.disk_free_gb is not None else "?"
    out.print(_row("Disk Space:", f"{disk}GB free"))

    out.print()
    out.print(Text("   Development Tools:", style="bold"))
    out.print(_row("Shell:", env.shell or "unknown"))
    out.print(_row("Terminal:", env.terminal))
    if env.node_version:
        suffix = " (via nvm)" if env.nvm_installed else ""
        out.print(_row("Node.js:", f"v{env.node_version}{suffix}"))
    else:
        out.print(_row("Node.js:", "not installed", "red"))
    for label, version in (
        ("npm:", env.npm_version),
        ("Git:", env.git_version),
        ("Python:", env.python_version),
        ("Rust:", env.rust_version),
    ):
        if version:
            out.print(_row(label, f"v{version}"))
    if env.homebrew_installed:
        out.print(_row("Homebrew:", "installed"))
    if env.docker_installed:
        if env.docker_running:
            out.print(_row("Docker:", "running", "green"))
        else:
            out.print(_row("Docker:", "installed, not running", "yellow"))

    out.print()
    out.print(Text("   User Settings:", style="bold"))
    if user.git_identity_configured:
        out.print(_row("Git Identity:", f"{user.git_name} <{user.git_email}>"))
    else:
        out.print(_row("Git Identity:", "not configured", "yellow"))
    out.print(_row("Default Branch:", user.default_branch))
    if user.ssh_keys_count:
        out.print(_row("SSH Keys:", f"{user.ssh_keys_count} key(s)", "green"))
    else:
        out.print(_row("SSH Keys:", "none found", "yellow"))
    if user.signing_configured:
        out.print(_row("GPG Signing:", "configured", "green"))
    else:
        out.print(_row("GPG Signing:", "not configured", "dim"))
    out.print(_row("Editor:", user.editor))
    if user.shell_config:
        out.print(_row("Shell Config:", f"~/{user.shell_config}"))

    out.print()
    out.print(_score_line("Readiness", report.system_score))


def _print_health(out: Console, report: HealthReport) -> None:
    result = report.result
    style = score_style(result.overall_score)
    _section(out, "CONFIGURATION HEALTH")
    out.print()
    out.print(Text.assemble(
        "   ", (f"{result.overall_score}/100", f"bold {style}"),
        (f" ({result.grade})", "dim"), f" - {result.descriptor}",
    ))
    out.print()
    out.print(Text.assemble("   ", (progress_bar(result.overall_score, OVERALL_BAR_WIDTH), style)))
    out.print()
    out.print(Text("   Category Breakdown:", style="dim"))
    for category, score in report.scores:
        out.print(_score_line(category.label, score))


def _print_auth(out: Console, report: HealthReport) -> None:
    auth = report.facts.auth
    _section(out, "AUTHENTICATION STATUS")
    for heading, services in (
        ("Core Services:", CORE_SERVICES),
        ("Optional Services:", OPTIONAL_SERVICES),
    ):
        out.print()
        out.print(Text(f"   {heading}", style="bold"))
        for service in services:
            state = auth.get(service)
            marker, style = auth_marker(service, state)
            detail = state.detail or state.status.value.replace("_", " ")
            out.print(_check(marker, style, _SERVICE_LABELS[service], detail))


def _print_mcp(out: Console, report: HealthReport, model: McpCostModel) -> None:
    mcp = report.facts.mcp
    _section(out, "MCP SERVER ANALYSIS")
    out.print()
    out.print(Text("   Server Distribution:", style="bold"))
    for host in mcp.hosts:
        note = " (malformed config)" if host.malformed else ""
        out.print(_row(f"{host.name}:", f"{host.count} servers{note}",
                       "yellow" if host.malformed else "", width=20))
    out.print(_row("Unique Total:", f"{mcp.unique_servers} servers", width=20))
    out.print()
    out.print(_row("Parity Score:", f"{mcp.parity_score}%", width=20))

    out.print()
    out.print(Text("   Performance Impact:", style="bold"))
    out.print(_row("Memory Overhead:", f"~{mcp.memory_estimate_mb}MB", width=20))
    out.print(_row("Startup Delay:", f"~{mcp.startup_delay_ms}ms", width=20))
    out.print(_row("Failure Risk:", f"~{mcp.failure_probability}%", width=20))

    if mcp.performance_score < model.advisory_threshold:
        out.print()
        out.print(Panel(
            Text(
                f"Running {mcp.peak_count} servers on {mcp.peak_host} impacts startup time.\n"
                f"Consider reducing to {model.soft_limit} or fewer for optimal performance."
            ),
            title="⚠ Performance Advisory",
            title_align="left",
            border_style="yellow",
        ))


def _print_security(out: Console, report: HealthReport) -> None:
    sec = report.facts.security
    _section(out, "SECURITY POSTURE")
    out.print()
    out.print(_score_line("Security Score", report.scores[Category.SECURITY]))
    out.print()
    out.print(Text("   Checks:", style="bold"))
    if not sec.secrets_file_exists:
        out.print(_check("⚠", "yellow", "Env Protection", f"{sec.secrets_file} not found"))
    elif sec.secrets_file_protected:
        out.print(_check("✓", "green", "Env Protection",
                         f"{sec.secrets_file} protected by .gitignore"))
    else:
        out.print(_check("✗", "red", "Env Protection", f"{sec.secrets_file} NOT protected!"))
    if sec.violation_count:
        out.print(_check("✗", "red", "Client Exposure",
                         f"{sec.violation_count} secrets exposed"))
    else:
        out.print(_check("✓", "green", "Client Exposure",
                         "No violations (no server secrets with a public prefix)"))
    out.print(_check("ℹ", "cyan", "Token Count",
                     f"{sec.secrets_count} secrets in {sec.secrets_file}"))


def _print_structure(out: Console, report: HealthReport) -> None:
    st = report.facts.structure
    _section(out, "PROJECT STRUCTURE")
    out.print()
    out.print(_score_line("Structure Score", report.scores[Category.STRUCTURE]))
    out.print(_score_line("Freshness Score", report.scores[Category.FRESHNESS]))
    out.print()
    out.print(_row("SQL Migrations:", f"{st.migrations_count} tracked", width=20))
    if st.has_assistant_settings:
        out.print(_check("✓", "green", "Claude Config",
                         ".claude/settings.local.json present"))
    else:
        out.print(_check("⚠", "yellow", "Claude Config",
                         "Missing .claude/settings.local.json"))
    if st.last_commit_age_days is not None:
        out.print(_row("Last Commit:", f"{st.last_commit_age_days} day(s) ago", width=20))
    if st.lockfile_state is not LockfileState.NO_MANIFEST:
        out.print(_row("Lockfile:", st.lockfile_state.value, width=20))


def _print_recommendations(out: Console, optimizations: tuple[Optimization, ...]) -> None:
    if not optimizations:
        return
    _section(out, "OPTIMIZATION OPPORTUNITIES")
    shown = optimizations[:TOP_RECOMMENDATIONS]
    for opt in shown:
        out.print()
        out.print(Text.assemble(
            "   ", (f"{opt.priority.name} IMPACT:", _PRIORITY_STYLES[opt.priority]),
            " ", (opt.title, "bold"),
        ))
        out.print(Text(f"   {opt.description}", style="dim"))
        out.print(Text.assemble("   → ", ("Benefit:", "green"), f" {opt.benefit}"))
    remaining = len(optimizations) - len(shown)
    if remaining > 0:
        out.print()
        out.print(Text(f"   ... and {remaining} more recommendations", style="dim"))


def _print_verdict(out: Console, result: HealthResult) -> None:
    style = _VERDICT_STYLES[result.verdict]
    out.print()
    out.print(Panel(
        Text.assemble((_VERDICT_TITLES[result.verdict], f"bold {style}"), "\n",
                      (result.verdict_message, style)),
        border_style=style,
    ))


def print_report(
    report: HealthReport,
    mcp: McpCostModel = DEFAULT_CONFIG.mcp,
    out: Console | None = None,
) -> None:
    """Print the full sectioned report.

    Args:
        report: The report to render.
        mcp: MCP cost model; its soft limit and advisory threshold drive
            the performance advisory.
        out: Console to print to. Defaults to the module console.
    """
    out = out or console
    _print_header(out, report)
    _print_system(out, report)
    _print_health(out, report)
    _print_auth(out, report)
    _print_mcp(out, report, mcp)
    _print_security(out, report)
    _print_structure(out, report)
    _print_recommendations(out, report.optimizations)
    _print_verdict(out, report.result)


# ---------------------------------------------------------------------------
# Compact formats
# ---------------------------------------------------------------------------


def quick_summary(result: HealthResult) -> Text:
    """One line: score, grade and verdict, coloured by verdict."""
    return Text(
        f"SEATBELT: {result.overall_score}/100 ({result.grade}) - "
        f"{_QUICK_LABELS[result.verdict]}",
        style=_VERDICT_STYLES[result.verdict],
    )


def ci_lines(result: HealthResult) -> list[str]:
    return [
        f"SEATBELT: {result.overall_score}/100 | Verdict: {result.verdict.value}",
        f"STATUS: {_CI_STATUS[result.verdict]}",
    ]


def report_to_dict(report: HealthReport) -> dict[str, Any]:
    """Convert a report to a JSON-serializable dict.

    Contains no secret values: security facts are reported as counts and
    variable names only.
    """
    result = report.result
    mcp = report.facts.mcp
    sec = report.facts.security
    return {
        "timestamp": report.generated_at.isoformat(timespec="seconds"),
        "project": str(report.project_root),
        "health": {
            "score": result.overall_score,
            "grade": result.grade,
            "descriptor": result.descriptor,
            "verdict": result.verdict.value,
            "message": result.verdict_message,
            "blocking_reasons": list(result.blocking_reasons),
        },
        "categories": report.scores.as_dict(),
        "system_readiness": report.system_score,
        "auth": {
            name: report.facts.auth.get(name).status.value
            for name in CORE_SERVICES + OPTIONAL_SERVICES
        },
        "mcp": {
            "hosts": {h.name: h.count for h in mcp.hosts},
            "unique_servers": mcp.unique_servers,
            "total_servers": mcp.total_servers,
            "parity_score": mcp.parity_score,
            "performance_score": mcp.performance_score,
            "memory_estimate_mb": mcp.memory_estimate_mb,
            "startup_delay_ms": mcp.startup_delay_ms,
            "failure_probability": mcp.failure_probability,
        },
        "security": {
            "secrets_file": sec.secrets_file,
            "secrets_file_exists": sec.secrets_file_exists,
            "secrets_file_protected": sec.secrets_file_protected,
            "secrets_count": sec.secrets_count,
            "exposure_violations": sec.violation_count,
        },
        "recommendations": [
            {
                "priority": opt.priority.name,
                "category": opt.category,
                "title": opt.title,
                "description": opt.description,
                "benefit": opt.benefit,
            }
            for opt in report.optimizations
        ],
    }


# ---------------------------------------------------------------------------
# Key checks
# ---------------------------------------------------------------------------


def print_key_results(results: list[KeyResult], out: Console | None = None) -> None:
    """Print key validation results as a table with a summary line."""
    out = out or console
    table = Table(title="API Key Health", show_header=True, header_style="bold")
    table.add_column("", justify="center")
    table.add_column("Key", style="bold")
    table.add_column("Result")
    for result in results:
        marker, style = _KEY_MARKERS[result.outcome]
        table.add_row(Text(marker, style=style), result.label, Text(result.detail, style=style))
    out.print(table)

    counts = {outcome: 0 for outcome in KeyOutcome}
    for result in results:
        counts[result.outcome] += 1
    out.print(Text.assemble(
        (f"{counts[KeyOutcome.PASS]} passed", "green"), " | ",
        (f"{counts[KeyOutcome.WARN]} warnings", "yellow"), " | ",
        (f"{counts[KeyOutcome.FAIL]} failed", "red"), " | ",
        (f"{counts[KeyOutcome.SKIP]} skipped", "dim"),
    ))


def key_results_to_dict(results: list[KeyResult]) -> list[dict[str, str]]:
    return [
        {"key": r.label, "outcome": r.outcome.value, "detail": r.detail}
        for r in results
    ]
