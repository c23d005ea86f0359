"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Iterator
from typing import Any

import pytest
from kprune.cluster.base import DeleteOptions, ObjectStore
from kprune.cluster.query import ResourceQuery
from kprune.core.errors import CapabilityError, DeletionError
from kprune.models.resource import Candidate
from kprune.models.workload import WorkloadSpec


def make_pod(
    name: str,
    namespace: str = "ns1",
    *,
    containers: list[dict[str, Any]] | None = None,
    volumes: list[dict[str, Any]] | None = None,
    service_account: str | None = None,
    **spec_extra: Any,
) -> dict[str, Any]:
    """Build a raw pod object as returned by the API server."""
    spec: dict[str, Any] = {"containers": containers or [{"name": "app", "image": "nginx"}]}
    if volumes is not None:
        spec["volumes"] = volumes
    if service_account is not None:
        spec["serviceAccountName"] = service_account
    spec.update(spec_extra)
    return {
        "apiVersion": "v1",
        "kind": "Pod",
        "metadata": {"name": name, "namespace": namespace},
        "spec": spec,
    }


def make_candidate(
    name: str,
    kind: str = "ConfigMap",
    namespace: str = "ns1",
    secret_type: str | None = None,
    api_version: str = "v1",
) -> Candidate:
    """Build a Candidate with sensible defaults."""
    if kind == "Secret" and secret_type is None:
        secret_type = "Opaque"
    return Candidate(
        namespace=namespace,
        kind=kind,
        name=name,
        api_version=api_version,
        secret_type=secret_type,
        source=f"/api/v1/namespaces/{namespace}/{kind.lower()}s/{name}",
    )


class FakeStore(ObjectStore):
    """In-memory object store recording every call."""

    def __init__(
        self,
        pods: list[dict[str, Any]] | None = None,
        candidates: list[Candidate] | None = None,
        *,
        fail_delete: set[str] | None = None,
        no_dry_run_kinds: set[str] | None = None,
    ) -> None:
        self.pods = pods or []
        self.candidates = candidates or []
        self.fail_delete = fail_delete or set()
        self.no_dry_run_kinds = no_dry_run_kinds or set()
        self.deleted: list[tuple[str, DeleteOptions]] = []
        self.verified: list[str] = []
        self.workload_calls: list[tuple[str | None, str | None, str | None]] = []
        self.candidate_calls: list[list[ResourceQuery]] = []

    def list_workloads(
        self,
        namespace: str | None,
        label_selector: str | None,
        field_selector: str | None,
    ) -> Iterator[WorkloadSpec]:
        self.workload_calls.append((namespace, label_selector, field_selector))
        for raw in self.pods:
            if namespace is None or raw.get("metadata", {}).get("namespace") == namespace:
                yield WorkloadSpec.from_object(raw)

    def list_candidates(
        self,
        queries: list[ResourceQuery],
        namespace: str | None,
        label_selector: str | None,
        field_selector: str | None,
    ) -> Iterator[Candidate]:
        self.candidate_calls.append(queries)
        for candidate in self.candidates:
            if namespace is None or candidate.namespace == namespace:
                yield candidate

    def delete(self, candidate: Candidate, options: DeleteOptions) -> None:
        if candidate.name in self.fail_delete:
            raise DeletionError(
                f"error when deleting {candidate.source!r}: (403) Forbidden",
                identity=candidate.display,
                source=candidate.source,
            )
        self.deleted.append((candidate.key, options))

    def verify_dry_run_support(self, candidate: Candidate) -> None:
        self.verified.append(candidate.key)
        if candidate.kind in self.no_dry_run_kinds:
            raise CapabilityError(f"{candidate.qualified_kind} doesn't support dry-run deletion")

    @property
    def deleted_keys(self) -> list[str]:
        return [key for key, _ in self.deleted]


@pytest.fixture
def example_pods() -> list[dict[str, Any]]:
    """Pods from the reference scenario: one pod mounting cm-used."""
    return [
        make_pod(
            "web-0",
            volumes=[{"name": "config", "configMap": {"name": "cm-used"}}],
        )
    ]


@pytest.fixture
def example_candidates() -> list[Candidate]:
    """ConfigMaps and Secrets from the reference scenario."""
    return [
        make_candidate("cm-used"),
        make_candidate("cm-orphan"),
        make_candidate(
            "sa-token-xyz",
            kind="Secret",
            secret_type="kubernetes.io/service-account-token",
        ),
    ]


@pytest.fixture
def example_store(
    example_pods: list[dict[str, Any]],
    example_candidates: list[Candidate],
) -> FakeStore:
    """FakeStore loaded with the reference scenario."""
    return FakeStore(pods=example_pods, candidates=example_candidates)
