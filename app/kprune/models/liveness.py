"""Liveness set: object identities referenced by at least one workload.

The set is accumulated by a LivenessBuilder during collection and then
frozen into an immutable LivenessSet that the prune engine only reads.
"""

from dataclasses import dataclass, field

from kprune.models.resource import ResourceKind, object_key


@dataclass(frozen=True, slots=True)
class LivenessSet:
    """Frozen liveness information, one key set per kind.

    Presence of a key means at least one scanned workload references the
    object. Absence only means no reference was found.

    Attributes:
        config_maps: ``namespace/name`` keys of referenced ConfigMaps.
        secrets: ``namespace/name`` keys of referenced Secrets.
        service_accounts: ``namespace/name`` keys of referenced ServiceAccounts.
    """

    config_maps: frozenset[str] = frozenset()
    secrets: frozenset[str] = frozenset()
    service_accounts: frozenset[str] = frozenset()

    def for_kind(self, kind: ResourceKind) -> frozenset[str]:
        """Return the key set tracked for a kind."""
        if kind == ResourceKind.CONFIG_MAP:
            return self.config_maps
        if kind == ResourceKind.SECRET:
            return self.secrets
        return self.service_accounts

    def is_used(self, kind: ResourceKind, key: str) -> bool:
        """Check whether ``key`` is referenced with the given kind."""
        return key in self.for_kind(kind)

    def counts(self) -> dict[str, int]:
        """Number of referenced objects per kind."""
        return {
            ResourceKind.CONFIG_MAP.value: len(self.config_maps),
            ResourceKind.SECRET.value: len(self.secrets),
            ResourceKind.SERVICE_ACCOUNT.value: len(self.service_accounts),
        }


@dataclass(slots=True)
class LivenessBuilder:
    """Mutable accumulator that produces a LivenessSet."""

    _keys: dict[ResourceKind, set[str]] = field(
        default_factory=lambda: {kind: set() for kind in ResourceKind}
    )

    def mark(self, kind: ResourceKind, namespace: str, name: str) -> None:
        """Record that ``namespace/name`` is referenced as ``kind``."""
        self._keys[kind].add(object_key(namespace, name))

    def freeze(self) -> LivenessSet:
        """Snapshot the accumulated keys into an immutable LivenessSet."""
        return LivenessSet(
            config_maps=frozenset(self._keys[ResourceKind.CONFIG_MAP]),
            secrets=frozenset(self._keys[ResourceKind.SECRET]),
            service_accounts=frozenset(self._keys[ResourceKind.SERVICE_ACCOUNT]),
        )
