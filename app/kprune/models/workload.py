"""Workload (pod) models used for liveness collection.

Only the fields that can reference a ConfigMap, Secret or ServiceAccount
are modelled. Wire names are camelCase, as returned by the API server;
unknown fields are ignored and JSON nulls are treated as absent.
"""

from collections.abc import Mapping
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from kprune.core.errors import DecodeError


class _WireModel(BaseModel):
    """Base for models decoded from API server JSON."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        """Treat explicit nulls like missing keys so defaults apply."""
        if isinstance(data, Mapping):
            return {k: v for k, v in data.items() if v is not None}
        return data


class ObjectMeta(_WireModel):
    name: str
    namespace: str = ""


class LocalObjectReference(_WireModel):
    name: str = ""


class KeySelector(_WireModel):
    name: str = ""
    key: str = ""


class EnvVarSource(_WireModel):
    config_map_key_ref: Annotated[KeySelector | None, Field(alias="configMapKeyRef")] = None
    secret_key_ref: Annotated[KeySelector | None, Field(alias="secretKeyRef")] = None


class EnvVar(_WireModel):
    name: str = ""
    value_from: Annotated[EnvVarSource | None, Field(alias="valueFrom")] = None


class EnvFromSource(_WireModel):
    config_map_ref: Annotated[LocalObjectReference | None, Field(alias="configMapRef")] = None
    secret_ref: Annotated[LocalObjectReference | None, Field(alias="secretRef")] = None


class Container(_WireModel):
    name: str = ""
    env: list[EnvVar] = Field(default_factory=list)
    env_from: Annotated[list[EnvFromSource], Field(default_factory=list, alias="envFrom")]


class ConfigMapVolumeSource(_WireModel):
    name: str = ""


class SecretVolumeSource(_WireModel):
    secret_name: Annotated[str, Field(alias="secretName")] = ""


class VolumeProjection(_WireModel):
    config_map: Annotated[LocalObjectReference | None, Field(alias="configMap")] = None
    secret: LocalObjectReference | None = None


class ProjectedVolumeSource(_WireModel):
    sources: list[VolumeProjection] = Field(default_factory=list)


class Volume(_WireModel):
    name: str = ""
    config_map: Annotated[ConfigMapVolumeSource | None, Field(alias="configMap")] = None
    secret: SecretVolumeSource | None = None
    projected: ProjectedVolumeSource | None = None


class PodSpec(_WireModel):
    containers: list[Container] = Field(default_factory=list)
    init_containers: Annotated[list[Container], Field(default_factory=list, alias="initContainers")]
    ephemeral_containers: Annotated[
        list[Container], Field(default_factory=list, alias="ephemeralContainers")
    ]
    volumes: list[Volume] = Field(default_factory=list)
    service_account_name: Annotated[str, Field(alias="serviceAccountName")] = ""
    image_pull_secrets: Annotated[
        list[LocalObjectReference], Field(default_factory=list, alias="imagePullSecrets")
    ]


class WorkloadSpec(_WireModel):
    """A namespace-qualified pod specification.

    Attributes:
        metadata: Name and namespace of the pod.
        spec: The pod spec holding all reference-bearing fields.
    """

    metadata: ObjectMeta
    spec: PodSpec = Field(default_factory=PodSpec)

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def all_containers(self) -> list[Container]:
        """Regular, init and ephemeral containers, in that order."""
        return [
            *self.spec.containers,
            *self.spec.init_containers,
            *self.spec.ephemeral_containers,
        ]

    @classmethod
    def from_object(cls, raw: object) -> "WorkloadSpec":
        """Decode a raw pod object.

        Args:
            raw: Pod as a JSON-compatible mapping.

        Returns:
            Validated WorkloadSpec.

        Raises:
            DecodeError: If the object is not a mapping or does not match
                the pod shape.
        """
        if not isinstance(raw, Mapping):
            msg = f"attempt to decode non-mapping object: {type(raw).__name__}"
            raise DecodeError(msg)
        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            meta = raw.get("metadata")
            ident = "<unknown>"
            if isinstance(meta, Mapping):
                ident = f"{meta.get('namespace', '')}/{meta.get('name', '')}"
            msg = f"unsupported object: pods: {ident}: {e}"
            raise DecodeError(msg) from e
