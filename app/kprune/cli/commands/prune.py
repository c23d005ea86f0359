"""Prune command implementation.

Deletes ConfigMaps and Secrets that no pod in scope references.
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
    ResourcesArg,
    SelectorOpt,
    is_quiet,
    open_store,
)
from kprune.cluster.query import parse_resource_args
from kprune.core.engine import PruneEngine, select_confirmer
from kprune.core.errors import PruneError
from kprune.core.liveness import LivenessCollector
from kprune.models.decision import PruneOutcome
from kprune.models.options import DryRunStrategy, PruneOptions
from kprune.utils.formatting import print_error


def prune_resources(
    ctx: typer.Context,
    resources: ResourcesArg = None,
    selector: SelectorOpt = None,
    field_selector: FieldSelectorOpt = None,
    ignore_namespaces: IgnoreNamespacesOpt = "",
    all_namespaces: AllNamespacesOpt = False,
    namespace: NamespaceOpt = None,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Assume 'yes' as answer to all prompts and run non-interactively.",
        ),
    ] = False,
    grace_period: Annotated[
        int,
        typer.Option(
            "--grace-period",
            help=(
                "Seconds given to the resource to terminate gracefully. Ignored if negative. "
                "Can only be 0 together with --force."
            ),
        ),
    ] = -1,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help="Immediately remove resources from the API, bypassing graceful deletion.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Produce no output."),
    ] = False,
    dry_run: Annotated[
        DryRunStrategy,
        typer.Option(
            "--dry-run",
            help="none: delete; client: only print; server: submit as server-side dry run.",
            case_sensitive=False,
        ),
    ] = DryRunStrategy.NONE,
    kubeconfig: KubeconfigOpt = None,
    context: ContextOpt = None,
) -> None:
    """Remove unused ConfigMaps and Secrets.

    Every pod in scope is scanned first. Objects no pod references are
    then deleted one at a time, after confirmation unless --yes or a
    dry-run mode is given. Secrets managed by the platform (service
    account tokens, registry credentials) and kube-system are never touched.

    Examples:
        kprune prune configmap                       # Prompt per unused ConfigMap
        kprune prune configmap,secret -A --yes       # Whole cluster, no prompts
        kprune prune secret --dry-run client         # Preview only
        kprune prune configmap -l app=web --dry-run server
    """
    quiet = is_quiet(ctx, quiet)
    outcomes: list[PruneOutcome] = []

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
            yes=yes,
            grace_period=grace_period,
            force=force,
            quiet=quiet,
            dry_run=dry_run,
        )

        liveness = LivenessCollector(store).collect(options)
        if not quiet:
            display.print_liveness_summary(liveness)

        engine = PruneEngine(
            store,
            liveness,
            options,
            confirmer=select_confirmer(options),
            reporter=display.report_outcome,
        )
        candidates = store.list_candidates(
            queries,
            options.scope_namespace,
            options.label_selector,
            options.field_selector,
        )
        for outcome in engine.run(candidates):
            outcomes.append(outcome)
    except PruneError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if not quiet:
        display.print_prune_summary(outcomes)
