"""Cluster access configuration.

Loads credentials from a kubeconfig file (``--kubeconfig``/``KUBECONFIG``,
else ``~/.kube/config``) and falls back to the in-cluster service account
when no kubeconfig is available.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException

from kprune.core.errors import ClusterConfigError

logger = logging.getLogger(__name__)

# Namespace file mounted into pods running with a service account.
IN_CLUSTER_NAMESPACE_PATH = Path("/var/run/secrets/kubernetes.io/serviceaccount/namespace")

DEFAULT_NAMESPACE = "default"


@dataclass(frozen=True, slots=True)
class ClusterConnection:
    """A configured API client and the namespace it defaults to.

    Attributes:
        api_client: Client for the selected cluster.
        namespace: Namespace of the active context (or pod), "default" if unset.
    """

    api_client: client.ApiClient
    namespace: str


def _context_namespace(kubeconfig: str | None, context: str | None) -> str:
    """Read the namespace configured for the selected kubeconfig context."""
    contexts, active = config.list_kube_config_contexts(config_file=kubeconfig)
    selected = active
    if context:
        selected = next((c for c in contexts if c.get("name") == context), None)
        if selected is None:
            msg = f"context {context!r} not found in kubeconfig"
            raise ClusterConfigError(msg)
    namespace = (selected or {}).get("context", {}).get("namespace")
    return namespace or DEFAULT_NAMESPACE


def _in_cluster_namespace() -> str:
    try:
        return IN_CLUSTER_NAMESPACE_PATH.read_text().strip() or DEFAULT_NAMESPACE
    except OSError:
        return DEFAULT_NAMESPACE


def load_cluster(kubeconfig: str | None = None, context: str | None = None) -> ClusterConnection:
    """Create an API client for the selected cluster.

    Args:
        kubeconfig: Path to a kubeconfig file, None for the default lookup.
        context: Context name, None for the current context.

    Returns:
        ClusterConnection for the cluster.

    Raises:
        ClusterConfigError: If neither kubeconfig nor in-cluster config is usable.
    """
    try:
        api_client = config.new_client_from_config(config_file=kubeconfig, context=context)
        namespace = _context_namespace(kubeconfig, context)
        logger.debug(
            "Loaded kubeconfig (context=%s, namespace=%s)", context or "<current>", namespace
        )
        return ClusterConnection(api_client=api_client, namespace=namespace)
    except (ConfigException, OSError) as e:
        if kubeconfig or context:
            raise ClusterConfigError(f"Failed to load kubeconfig: {e}") from e
        logger.debug("No usable kubeconfig (%s), trying in-cluster config", e)

    try:
        config.load_incluster_config()
    except ConfigException as e:
        msg = f"No cluster configuration found (kubeconfig or in-cluster): {e}"
        raise ClusterConfigError(msg) from e

    return ClusterConnection(api_client=client.ApiClient(), namespace=_in_cluster_namespace())
