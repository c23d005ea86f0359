"""Liveness collection.

Folds every workload in scope into a LivenessSet: the ConfigMaps, Secrets
and ServiceAccounts that at least one pod references. Collection must
complete before any candidate is classified.
"""

import logging
from collections.abc import Iterable

from kprune.cluster.base import ObjectStore
from kprune.models.liveness import LivenessBuilder, LivenessSet
from kprune.models.options import PruneOptions
from kprune.models.resource import ResourceKind
from kprune.models.workload import Container, WorkloadSpec

logger = logging.getLogger(__name__)

# Identity used by pods that do not name a service account.
DEFAULT_SERVICE_ACCOUNT = "default"


def _fold_container(builder: LivenessBuilder, namespace: str, container: Container) -> None:
    for env_from in container.env_from:
        if env_from.config_map_ref is not None and env_from.config_map_ref.name:
            builder.mark(ResourceKind.CONFIG_MAP, namespace, env_from.config_map_ref.name)
        if env_from.secret_ref is not None and env_from.secret_ref.name:
            builder.mark(ResourceKind.SECRET, namespace, env_from.secret_ref.name)

    for env in container.env:
        source = env.value_from
        if source is None:
            continue
        # Key-level use marks the whole object.
        if source.config_map_key_ref is not None and source.config_map_key_ref.name:
            builder.mark(ResourceKind.CONFIG_MAP, namespace, source.config_map_key_ref.name)
        if source.secret_key_ref is not None and source.secret_key_ref.name:
            builder.mark(ResourceKind.SECRET, namespace, source.secret_key_ref.name)


def fold_workload(builder: LivenessBuilder, workload: WorkloadSpec) -> None:
    """Mark every object referenced by one workload.

    Args:
        builder: Accumulator to mark references in.
        workload: Decoded pod.
    """
    namespace = workload.namespace
    spec = workload.spec

    for container in workload.all_containers:
        _fold_container(builder, namespace, container)

    for volume in spec.volumes:
        if volume.config_map is not None and volume.config_map.name:
            builder.mark(ResourceKind.CONFIG_MAP, namespace, volume.config_map.name)
        if volume.secret is not None and volume.secret.secret_name:
            builder.mark(ResourceKind.SECRET, namespace, volume.secret.secret_name)
        if volume.projected is not None:
            for projection in volume.projected.sources:
                if projection.config_map is not None and projection.config_map.name:
                    builder.mark(ResourceKind.CONFIG_MAP, namespace, projection.config_map.name)
                if projection.secret is not None and projection.secret.name:
                    builder.mark(ResourceKind.SECRET, namespace, projection.secret.name)

    for pull_secret in spec.image_pull_secrets:
        if pull_secret.name:
            builder.mark(ResourceKind.SECRET, namespace, pull_secret.name)

    builder.mark(
        ResourceKind.SERVICE_ACCOUNT,
        namespace,
        spec.service_account_name or DEFAULT_SERVICE_ACCOUNT,
    )


def collect_liveness(workloads: Iterable[WorkloadSpec]) -> LivenessSet:
    """Build a frozen LivenessSet from workloads.

    Args:
        workloads: Decoded pods. Iteration errors propagate unchanged, so a
            DecodeError raised mid-stream aborts the whole collection.

    Returns:
        Frozen LivenessSet.
    """
    builder = LivenessBuilder()
    scanned = 0
    for workload in workloads:
        logger.debug("Collecting references from pod %s/%s", workload.namespace, workload.name)
        fold_workload(builder, workload)
        scanned += 1

    liveness = builder.freeze()
    logger.info("Scanned %d pod(s), referenced objects: %s", scanned, liveness.counts())
    return liveness


class LivenessCollector:
    """Collects the LivenessSet for a run from an object store."""

    def __init__(self, store: ObjectStore) -> None:
        self._store = store

    def collect(self, options: PruneOptions) -> LivenessSet:
        """Fetch every pod in the options' scope and fold it.

        Raises:
            DecodeError: If any pod cannot be decoded.
            StoreError: If pods cannot be listed.
        """
        workloads = self._store.list_workloads(
            options.scope_namespace,
            options.label_selector,
            options.field_selector,
        )
        return collect_liveness(workloads)
