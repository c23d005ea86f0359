"""Shared types and utilities for CLI commands.

This module provides the option declarations and helpers that the
``prune`` and ``scan`` commands have in common.
"""

from enum import Enum
from typing import Annotated

import typer

from kprune.cluster.base import ObjectStore
from kprune.cluster.config import load_cluster
from kprune.cluster.store import KubernetesStore


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


ResourcesArg = Annotated[
    list[str] | None,
    typer.Argument(
        help="Resource types and names, e.g. 'configmap,secret' or 'secret/app-creds'.",
        show_default=False,
    ),
]
SelectorOpt = Annotated[
    str | None,
    typer.Option(
        "--selector",
        "-l",
        help="Selector (label query) to filter on, e.g. -l key1=value1,key2=value2.",
    ),
]
FieldSelectorOpt = Annotated[
    str | None,
    typer.Option(
        "--field-selector",
        help="Selector (field query) to filter on, e.g. --field-selector key1=value1.",
    ),
]
IgnoreNamespacesOpt = Annotated[
    str,
    typer.Option(
        "--ignore-namespaces",
        envvar="KPRUNE_IGNORE_NAMESPACES",
        help="Comma-joined namespaces to leave untouched (matched as substrings).",
    ),
]
AllNamespacesOpt = Annotated[
    bool,
    typer.Option(
        "--all-namespaces",
        "-A",
        help="Operate across all namespaces; --namespace is ignored.",
    ),
]
NamespaceOpt = Annotated[
    str | None,
    typer.Option(
        "--namespace",
        "-n",
        help="Namespace to operate in (defaults to the current context's namespace).",
    ),
]
KubeconfigOpt = Annotated[
    str | None,
    typer.Option(
        "--kubeconfig",
        help="Path to the kubeconfig file (defaults to $KUBECONFIG or ~/.kube/config).",
    ),
]
ContextOpt = Annotated[
    str | None,
    typer.Option("--context", help="Name of the kubeconfig context to use."),
]


def open_store(kubeconfig: str | None, context: str | None) -> tuple[ObjectStore, str]:
    """Connect to the cluster.

    Args:
        kubeconfig: Explicit kubeconfig path, None for the default lookup.
        context: Context name, None for the current context.

    Returns:
        Tuple of (object store, default namespace of the context).

    Raises:
        ClusterConfigError: If no cluster configuration can be loaded.
    """
    connection = load_cluster(kubeconfig, context)
    return KubernetesStore(connection.api_client), connection.namespace


def is_quiet(ctx: typer.Context, quiet: bool = False) -> bool:
    """Combine a command-level --quiet with the global one."""
    obj = ctx.obj if isinstance(ctx.obj, dict) else {}
    return quiet or bool(obj.get("quiet", False))
