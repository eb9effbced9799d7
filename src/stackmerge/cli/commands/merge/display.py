"""Dry-run report and end-of-run summary."""

from rich.panel import Panel
from rich.text import Text

from stackmerge.cli.commands.merge.models import DryRunEntry, MergeOutcome, TargetList

AFTER_PROPAGATION_NOTE = "(after sync/submit)"


def build_dry_run_report(targets: TargetList) -> list[DryRunEntry]:
    """One entry per target, in merge order.

    Only the first PR targets trunk right now; every later base shown is the
    one the PR will have once the PRs before it merged and were propagated.
    """
    entries: list[DryRunEntry] = []
    for index, node in enumerate(targets):
        entries.append(
            DryRunEntry(
                pr_number=node.pr_number,
                branch=node.name,
                base_branch=node.parent_name,
                note="" if index == 0 else AFTER_PROPAGATION_NOTE,
            )
        )
    return entries


def format_dry_run_entry(entry: DryRunEntry) -> str:
    pr = f"#{entry.pr_number}" if entry.pr_number is not None else "(no PR)"
    line = f"PR {pr} {entry.branch} → {entry.base_branch or '?'}"
    if entry.note:
        line = f"{line} {entry.note}"
    return line


_OUTCOME_LABELS = {
    "merged": ("✅", "merged", "green"),
    "skipped_already_merged": ("⏭ ", "already merged", "cyan"),
    "stopped_at_frozen": ("🧊", "stopped at frozen branch", "blue"),
    "aborted": ("❌", "aborted", "red"),
}


def format_merge_summary(outcomes: list[MergeOutcome], total_duration: float) -> Panel:
    """Format final summary box with one line per branch.

    Args:
        outcomes: Ordered outcomes of the run
        total_duration: Wall time of the run in seconds

    Returns:
        Rich Panel with formatted summary
    """
    overall_success = all(outcome.is_success for outcome in outcomes)

    lines: list[Text] = []
    for outcome in outcomes:
        icon, label, style = _OUTCOME_LABELS[outcome.kind]
        pr = f"PR #{outcome.pr_number} " if outcome.pr_number is not None else ""
        lines.append(Text(f"{icon} {pr}{outcome.branch}: {label}", style=style))
        if outcome.reason:
            lines.append(Text(f"   {outcome.reason}", style="red"))

    if not lines:
        lines.append(Text("Nothing to merge"))

    minutes, seconds = divmod(int(total_duration), 60)
    lines.append(Text(""))
    lines.append(Text(f"⏱  Duration: {minutes}m {seconds}s" if minutes else f"⏱  Duration: {seconds}s"))

    content = Text("\n").join(lines)
    title = "Merge Complete" if overall_success else "Merge Stopped"
    return Panel(
        content, title=title, border_style="green" if overall_success else "red", padding=(1, 2)
    )
