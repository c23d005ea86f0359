"""Kubernetes object store.

Implements ObjectStore on top of the dynamic client so any resource type
the server knows about can be listed; only ConfigMaps and Secrets are
ever deleted by the engine.
"""

import logging
from collections.abc import Iterator
from typing import Any

from kubernetes import client
from kubernetes.client.exceptions import ApiException
from kubernetes.dynamic import DynamicClient
from kubernetes.dynamic.exceptions import ResourceNotFoundError
from urllib3.exceptions import HTTPError

from kprune.cluster.base import DeleteOptions, ObjectStore
from kprune.cluster.query import ResourceQuery
from kprune.core.errors import CapabilityError, DeletionError, QueryError, StoreError
from kprune.models.resource import Candidate
from kprune.models.workload import WorkloadSpec

logger = logging.getLogger(__name__)


def _error_reason(e: Exception) -> str:
    if isinstance(e, ApiException):
        return f"({e.status}) {e.reason}"
    return str(e)


class KubernetesStore(ObjectStore):
    """ObjectStore backed by the Kubernetes API.

    Discovery runs lazily on first use. Resolved resources are cached for
    the lifetime of the store.
    """

    def __init__(self, api_client: client.ApiClient) -> None:
        self._api_client = api_client
        self._dynamic: DynamicClient | None = None
        self._by_alias: dict[str, Any] = {}
        self._by_kind: dict[tuple[str, str], Any] = {}

    @property
    def dynamic(self) -> DynamicClient:
        if self._dynamic is None:
            try:
                self._dynamic = DynamicClient(self._api_client)
            except (ApiException, HTTPError) as e:
                raise StoreError(f"Failed to discover server resources: {_error_reason(e)}") from e
        return self._dynamic

    def resolve(self, resource: str) -> Any:
        """Resolve a user-typed resource name to a discovered API resource.

        Matches plural, singular, kind and short names, optionally suffixed
        with a group (``deployments.apps``). Core and preferred versions win.

        Raises:
            QueryError: If the server has no such resource type.
        """
        alias = resource.lower()
        if alias in self._by_alias:
            return self._by_alias[alias]

        name, _, group = alias.partition(".")
        try:
            discovered = self.dynamic.resources.search()
        except (ApiException, HTTPError) as e:
            raise StoreError(f"Failed to discover server resources: {_error_reason(e)}") from e

        matches = []
        for res in discovered:
            plural = getattr(res, "name", None)
            if not plural or "/" in plural:
                continue
            if group and res.group != group:
                continue
            names = {
                plural,
                getattr(res, "singular_name", ""),
                res.kind.lower(),
                *(getattr(res, "short_names", None) or []),
            }
            if name in names:
                matches.append(res)

        if not matches:
            msg = f'the server doesn\'t have a resource type "{resource}"'
            raise QueryError(msg)

        matches.sort(key=lambda r: (r.group != "", not getattr(r, "preferred", False)))
        resolved = matches[0]
        self._by_alias[alias] = resolved
        self._by_kind[(resolved.group_version, resolved.kind)] = resolved
        logger.debug("Resolved %r to %s/%s", resource, resolved.group_version, resolved.name)
        return resolved

    def _resource_for(self, candidate: Candidate) -> Any:
        key = (candidate.api_version, candidate.kind)
        if key not in self._by_kind:
            self._by_kind[key] = self.dynamic.resources.get(
                api_version=candidate.api_version, kind=candidate.kind
            )
        return self._by_kind[key]

    def _list_raw(
        self,
        resource: Any,
        namespace: str | None,
        label_selector: str | None,
        field_selector: str | None,
    ) -> Iterator[tuple[dict[str, Any], str]]:
        """Yield (object, source) pairs from a list call."""
        kwargs: dict[str, Any] = {}
        if resource.namespaced and namespace is not None:
            kwargs["namespace"] = namespace
        if label_selector:
            kwargs["label_selector"] = label_selector
        if field_selector:
            kwargs["field_selector"] = field_selector

        try:
            response = resource.get(**kwargs)
        except (ApiException, HTTPError) as e:
            raise StoreError(f"Failed to list {resource.name}: {_error_reason(e)}") from e

        for item in response.items or []:
            yield self._with_type(resource, item.to_dict()), resource.path(namespace=namespace)

    def _get_raw(
        self, resource: Any, name: str, namespace: str | None
    ) -> tuple[dict[str, Any], str]:
        ns = namespace if resource.namespaced else None
        try:
            item = resource.get(name=name, namespace=ns)
        except (ApiException, HTTPError) as e:
            msg = f'Failed to get {resource.name} "{name}": {_error_reason(e)}'
            raise StoreError(msg) from e
        return self._with_type(resource, item.to_dict()), resource.path(name=name, namespace=ns)

    @staticmethod
    def _with_type(resource: Any, raw: dict[str, Any]) -> dict[str, Any]:
        # List items carry no kind/apiVersion of their own.
        raw.setdefault("kind", resource.kind)
        raw.setdefault("apiVersion", resource.group_version)
        return raw

    def list_workloads(
        self,
        namespace: str | None,
        label_selector: str | None,
        field_selector: str | None,
    ) -> Iterator[WorkloadSpec]:
        pods = self.resolve("pods")
        for raw, _source in self._list_raw(pods, namespace, label_selector, field_selector):
            yield WorkloadSpec.from_object(raw)

    def list_candidates(
        self,
        queries: list[ResourceQuery],
        namespace: str | None,
        label_selector: str | None,
        field_selector: str | None,
    ) -> Iterator[Candidate]:
        for query in queries:
            resource = self.resolve(query.resource)
            if query.select_all:
                listed = self._list_raw(resource, namespace, label_selector, field_selector)
                for raw, source in listed:
                    yield Candidate.from_object(raw, source=source)
                continue

            if namespace is None and resource.namespaced:
                msg = "a resource cannot be retrieved by name across all namespaces"
                raise QueryError(msg)
            for name in query.names:
                raw, source = self._get_raw(resource, name, namespace)
                yield Candidate.from_object(raw, source=source)

    def verify_dry_run_support(self, candidate: Candidate) -> None:
        try:
            resource = self._resource_for(candidate)
        except (ApiException, HTTPError, ResourceNotFoundError) as e:
            msg = f"{candidate.qualified_kind} doesn't support dry-run: {_error_reason(e)}"
            raise CapabilityError(msg) from e
        if "delete" not in (getattr(resource, "verbs", None) or []):
            msg = f"{candidate.qualified_kind} doesn't support dry-run deletion"
            raise CapabilityError(msg)

    def delete(self, candidate: Candidate, options: DeleteOptions) -> None:
        try:
            resource = self._resource_for(candidate)
            resource.delete(
                name=candidate.name,
                namespace=candidate.namespace or None,
                body=options.to_body(),
            )
        except (ApiException, HTTPError, ResourceNotFoundError) as e:
            source = candidate.source or candidate.display
            msg = f"error when deleting {source!r}: {_error_reason(e)}"
            raise DeletionError(msg, identity=candidate.display, source=source) from e
        logger.debug("Delete call succeeded for %s (%s)", candidate.display, options.to_body())
