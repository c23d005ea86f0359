"""Abstract base class for object stores.

This module defines the ObjectStore interface the prune pipeline talks
to. The Kubernetes implementation lives in ``kprune.cluster.store``;
tests substitute in-memory stores.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from kprune.cluster.query import ResourceQuery
from kprune.models.resource import Candidate
from kprune.models.workload import WorkloadSpec


@dataclass(frozen=True, slots=True)
class DeleteOptions:
    """Options sent with a delete call.

    Attributes:
        grace_period_seconds: Grace period, None to use the object's default.
        dry_run: Server dry-run directives (``["All"]``), empty for a real delete.
    """

    grace_period_seconds: int | None = None
    dry_run: tuple[str, ...] = field(default_factory=tuple)

    def to_body(self) -> dict[str, Any]:
        """Render as a ``meta/v1`` DeleteOptions body."""
        body: dict[str, Any] = {"apiVersion": "v1", "kind": "DeleteOptions"}
        if self.grace_period_seconds is not None:
            body["gracePeriodSeconds"] = self.grace_period_seconds
        if self.dry_run:
            body["dryRun"] = list(self.dry_run)
        return body


class ObjectStore(ABC):
    """Abstract base class for the cluster object store.

    Example:
        >>> store = KubernetesStore(api_client)
        >>> for pod in store.list_workloads("default", None, None):
        ...     print(pod.name)
    """

    @abstractmethod
    def list_workloads(
        self,
        namespace: str | None,
        label_selector: str | None,
        field_selector: str | None,
    ) -> Iterator[WorkloadSpec]:
        """Yield every pod in scope matching the selectors.

        Args:
            namespace: Namespace to list in, None for all namespaces.
            label_selector: Label query, None for no filtering.
            field_selector: Field query, None for no filtering.

        Yields:
            Decoded WorkloadSpec per pod.

        Raises:
            DecodeError: If a pod cannot be decoded.
            StoreError: If listing fails.
        """

    @abstractmethod
    def list_candidates(
        self,
        queries: list[ResourceQuery],
        namespace: str | None,
        label_selector: str | None,
        field_selector: str | None,
    ) -> Iterator[Candidate]:
        """Yield every object matching the resource queries, in response order.

        Raises:
            DecodeError: If an object cannot be decoded.
            QueryError: If a resource type cannot be resolved.
            StoreError: If listing fails.
        """

    @abstractmethod
    def delete(self, candidate: Candidate, options: DeleteOptions) -> None:
        """Delete one object.

        Raises:
            DeletionError: If the store rejects the call.
        """

    @abstractmethod
    def verify_dry_run_support(self, candidate: Candidate) -> None:
        """Check that the candidate's resource supports server dry-run deletion.

        Raises:
            CapabilityError: If it does not.
        """
