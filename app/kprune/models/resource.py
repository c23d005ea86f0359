"""Resource kinds and prune candidates.

A Candidate is one object returned by the prune query. It carries just
enough metadata to classify it and to address it for deletion.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from kprune.core.errors import DecodeError


class ResourceKind(str, Enum):
    """Kinds tracked by the liveness set.

    Attributes:
        CONFIG_MAP: ``v1/ConfigMap``, prunable.
        SECRET: ``v1/Secret``, prunable unless platform managed.
        SERVICE_ACCOUNT: ``v1/ServiceAccount``, tracked for liveness only.
    """

    CONFIG_MAP = "ConfigMap"
    SECRET = "Secret"
    SERVICE_ACCOUNT = "ServiceAccount"


# Kinds this tool is allowed to delete.
PRUNABLE_KINDS: frozenset[str] = frozenset(
    {ResourceKind.CONFIG_MAP.value, ResourceKind.SECRET.value}
)

# Secret types whose lifecycle is owned by the platform itself.
MANAGED_SECRET_TYPES: frozenset[str] = frozenset(
    {
        "kubernetes.io/service-account-token",
        "kubernetes.io/dockercfg",
        "kubernetes.io/dockerconfigjson",
    }
)


def object_key(namespace: str, name: str) -> str:
    """Return the namespace-qualified key used by the liveness set."""
    return f"{namespace}/{name}"


@dataclass(frozen=True, slots=True)
class Candidate:
    """An object fetched by the prune query, pending classification.

    Attributes:
        namespace: Namespace of the object ("" for cluster-scoped kinds).
        kind: Object kind as reported by the API server (e.g. "ConfigMap").
        name: Object name.
        api_version: API version (e.g. "v1" or "apps/v1").
        secret_type: Value of ``type`` for Secrets, None otherwise.
        source: Origin of the object, used in error messages.
    """

    namespace: str
    kind: str
    name: str
    api_version: str = "v1"
    secret_type: str | None = None
    source: str = ""

    def __post_init__(self) -> None:
        """Validate candidate data after initialization."""
        if not self.name:
            msg = "Candidate name cannot be empty"
            raise ValueError(msg)
        if not self.kind:
            msg = "Candidate kind cannot be empty"
            raise ValueError(msg)

    @property
    def key(self) -> str:
        return object_key(self.namespace, self.name)

    @property
    def group(self) -> str:
        """API group, empty for the core group."""
        if "/" in self.api_version:
            return self.api_version.split("/", 1)[0]
        return ""

    @property
    def qualified_kind(self) -> str:
        """Lower-cased kind, suffixed with the group for non-core kinds."""
        if self.group:
            return f"{self.kind.lower()}.{self.group}"
        return self.kind.lower()

    @property
    def display(self) -> str:
        """Fully qualified identity shown to the operator."""
        return f"{self.namespace} {self.kind}/{self.name}"

    @property
    def is_managed_secret(self) -> bool:
        return self.kind == ResourceKind.SECRET.value and self.secret_type in MANAGED_SECRET_TYPES

    @classmethod
    def from_object(cls, raw: object, source: str = "") -> "Candidate":
        """Build a Candidate from a raw API object.

        Args:
            raw: Object as a JSON-compatible mapping.
            source: Origin of the object for error reporting.

        Returns:
            Candidate for the object.

        Raises:
            DecodeError: If kind or metadata.name are missing, or a Secret's
                type is not a string.
        """
        if not isinstance(raw, Mapping):
            msg = f"attempt to decode non-mapping object: {type(raw).__name__}"
            raise DecodeError(msg)

        kind = raw.get("kind")
        metadata = raw.get("metadata")
        if not isinstance(kind, str) or not kind:
            msg = f"unsupported object: missing kind: {source or '<unknown>'}"
            raise DecodeError(msg)
        if not isinstance(metadata, Mapping) or not isinstance(metadata.get("name"), str):
            msg = f"unsupported object: {kind}: missing metadata.name"
            raise DecodeError(msg)

        name: str = metadata["name"]
        namespace = metadata.get("namespace") or ""
        if not isinstance(namespace, str):
            msg = f"unsupported object: {kind}: {name}: invalid namespace"
            raise DecodeError(msg)

        secret_type: str | None = None
        if kind == ResourceKind.SECRET.value:
            raw_type = raw.get("type")
            if raw_type is not None and not isinstance(raw_type, str):
                msg = f"unsupported object: secrets: {namespace}/{name}: invalid type"
                raise DecodeError(msg)
            secret_type = raw_type

        try:
            return cls(
                namespace=namespace,
                kind=kind,
                name=name,
                api_version=str(raw.get("apiVersion") or "v1"),
                secret_type=secret_type,
                source=source,
            )
        except ValueError as e:
            raise DecodeError(f"unsupported object: {kind}: {e}") from e
