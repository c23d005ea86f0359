"""Shared Rich display functions for decisions and outcomes.

Provides the outcome line printer used while pruning, plus the tables
and summaries shown by the ``scan`` and ``prune`` commands.
"""

import json

from rich.markup import escape
from rich.table import Table

from kprune.models.decision import OutcomeState, PruneDecision, PruneOutcome, Verdict
from kprune.models.liveness import LivenessSet
from kprune.utils.formatting import console, print_info, print_success, print_warning

_VERDICT_STYLES: dict[Verdict, str] = {
    Verdict.KEEP: "keep",
    Verdict.DELETE: "delete",
    Verdict.SKIP: "skip",
}


def report_outcome(outcome: PruneOutcome) -> None:
    """Print one outcome line, e.g. ``configmap "cm-orphan" deleted``.

    Args:
        outcome: A DELETED, DRY_RUN_REPORTED or DELETION_FAILED outcome.
    """
    if outcome.state == OutcomeState.DELETION_FAILED:
        console.print(f"[error]{escape(outcome.message)}[/]", highlight=False, soft_wrap=True)
    else:
        console.print(escape(outcome.message), highlight=False, soft_wrap=True)


def create_decisions_table(decisions: list[PruneDecision], title: str = "Prune Decisions") -> Table:
    """Create a Rich table displaying one row per classified candidate.

    Args:
        decisions: Decisions to display, in classification order.
        title: Table title.

    Returns:
        Rich Table configured for decision display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Decision", width=8, justify="center")
    table.add_column("Namespace", style="object.namespace")
    table.add_column("Kind")
    table.add_column("Name", no_wrap=True)
    table.add_column("Reason", style="muted")

    for decision in decisions:
        style = _VERDICT_STYLES[decision.verdict]
        c = decision.candidate
        table.add_row(
            f"[{style}]{decision.verdict.value}[/{style}]",
            c.namespace or "-",
            c.kind,
            f"[{style}]{c.name}[/{style}]",
            decision.reason.value,
        )

    return table


def print_decisions_json(decisions: list[PruneDecision]) -> None:
    """Display decisions as JSON."""
    data = [
        {
            "namespace": d.candidate.namespace,
            "kind": d.candidate.kind,
            "name": d.candidate.name,
            "decision": d.verdict.value,
            "reason": d.reason.value,
        }
        for d in decisions
    ]
    console.print_json(json.dumps(data))


def print_liveness_summary(liveness: LivenessSet) -> None:
    """Print how many objects of each kind are referenced by workloads."""
    counts = ", ".join(f"{n} {kind}(s)" for kind, n in liveness.counts().items())
    console.print(f"[dim]Referenced by workloads: {counts}[/dim]")


def print_prune_summary(outcomes: list[PruneOutcome]) -> None:
    """Print a summary of a prune run.

    Args:
        outcomes: Outcomes in processing order.
    """
    deleted = sum(1 for o in outcomes if o.state == OutcomeState.DELETED)
    dry_run = sum(1 for o in outcomes if o.state == OutcomeState.DRY_RUN_REPORTED)
    declined = sum(1 for o in outcomes if o.state == OutcomeState.DECLINED)
    kept = sum(1 for o in outcomes if o.state == OutcomeState.KEPT)
    skipped = sum(1 for o in outcomes if o.state == OutcomeState.SKIPPED)

    if not outcomes:
        print_info("No resources found.")
        return

    if deleted == 0 and dry_run == 0 and declined == 0:
        print_success("Nothing to prune. All resources are in use or protected.")
    elif dry_run:
        print_info(f"Dry-run: {dry_run} resource(s) would be deleted.")
    else:
        print_success(f"Deleted {deleted} resource(s).")

    if declined:
        print_info(f"{declined} deletion(s) declined.")
    if skipped:
        print_warning(f"{skipped} resource(s) of unsupported kinds skipped.")
    console.print(f"[dim]{kept} resource(s) kept.[/dim]")
