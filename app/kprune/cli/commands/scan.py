"""Scan command implementation.

Classifies candidates without deleting anything.
"""

from typing import Annotated

import typer

from kprune.cli import display
from kprune.cli.types import (
    AllNamespacesOpt,
    ContextOpt,
    FieldSelectorOpt,
    IgnoreNamespacesOpt,
    KubeconfigOpt,
    NamespaceOpt,
    OutputFormat,
    ResourcesArg,
    SelectorOpt,
    open_store,
)
from kprune.cluster.query import parse_resource_args
from kprune.core.engine import classify
from kprune.core.errors import PruneError
from kprune.core.liveness import LivenessCollector
from kprune.models.decision import PruneDecision
from kprune.models.options import PruneOptions
from kprune.utils.formatting import console, print_error, print_success


def scan_resources(
    resources: ResourcesArg = None,
    selector: SelectorOpt = None,
    field_selector: FieldSelectorOpt = None,
    ignore_namespaces: IgnoreNamespacesOpt = "",
    all_namespaces: AllNamespacesOpt = False,
    namespace: NamespaceOpt = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
    kubeconfig: KubeconfigOpt = None,
    context: ContextOpt = None,
) -> None:
    """Show which resources would be kept or pruned.

    Runs the same classification as 'prune' and prints one row per
    resource. Nothing is deleted.

    Examples:
        kprune scan configmap,secret -A
        kprune scan secret -n payments --format json
    """
    try:
        queries = parse_resource_args(
            resources or [], has_selector=bool(selector or field_selector)
        )
        store, context_namespace = open_store(kubeconfig, context)
        options = PruneOptions(
            namespace=namespace or context_namespace,
            all_namespaces=all_namespaces,
            label_selector=selector,
            field_selector=field_selector,
            ignore_namespaces=ignore_namespaces,
        )

        liveness = LivenessCollector(store).collect(options)
        candidates = store.list_candidates(
            queries,
            options.scope_namespace,
            options.label_selector,
            options.field_selector,
        )
        decisions: list[PruneDecision] = [
            classify(c, liveness, options.ignore_namespaces) for c in candidates
        ]
    except PruneError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if output_format == OutputFormat.JSON:
        display.print_decisions_json(decisions)
        return

    if not decisions:
        print_success("No resources found.")
        return

    console.print(display.create_decisions_table(decisions))
    display.print_liveness_summary(liveness)
    prunable = sum(1 for d in decisions if d.is_delete)
    console.print(f"\n[dim]{prunable} of {len(decisions)} resource(s) unreferenced[/dim]")
