"""Run options for the prune pipeline.

PruneOptions gathers everything the CLI collects from flags into one
validated, immutable value that the collector and engine consume.
"""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class DryRunStrategy(str, Enum):
    """Dry-run mode for the deletion step.

    Attributes:
        NONE: Delete for real.
        CLIENT: Report would-be deletions without contacting the store.
        SERVER: Ask the store to simulate the deletion.
    """

    NONE = "none"
    CLIENT = "client"
    SERVER = "server"


def resolve_grace_period(grace_period: int, force: bool) -> int:
    """Resolve the effective grace period from the requested one and --force.

    A grace period of exactly 0 without --force is promoted to 1 so that
    instant deletion needs an explicit --force. With --force, an unset
    (negative) grace period becomes 0. Anything else passes through.

    Args:
        grace_period: Requested grace period in seconds, negative when unset.
        force: Whether --force was given.

    Returns:
        Effective grace period in seconds, negative when still unset.
    """
    if grace_period == 0 and not force:
        return 1
    if force and grace_period < 0:
        return 0
    return grace_period


class PruneOptions(BaseModel):
    """Options for a single prune run.

    Attributes:
        namespace: Namespace to operate in when not across all namespaces.
        all_namespaces: List workloads and candidates in every namespace.
        label_selector: Label query applied to workloads and candidates.
        field_selector: Field query applied to workloads and candidates.
        ignore_namespaces: Comma-joined namespaces to leave untouched.
        yes: Answer yes to every confirmation.
        grace_period: Requested grace period in seconds, -1 when unset.
        force: Bypass graceful deletion.
        quiet: Suppress outcome lines.
        dry_run: Dry-run strategy.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    namespace: Annotated[str, Field(description="Target namespace")] = "default"
    all_namespaces: bool = False
    label_selector: str | None = None
    field_selector: str | None = None
    ignore_namespaces: str = ""
    yes: bool = False
    grace_period: int = -1
    force: bool = False
    quiet: bool = False
    dry_run: DryRunStrategy = DryRunStrategy.NONE

    @property
    def effective_grace_period(self) -> int:
        return resolve_grace_period(self.grace_period, self.force)

    @property
    def is_dry_run(self) -> bool:
        return self.dry_run != DryRunStrategy.NONE

    @property
    def scope_namespace(self) -> str | None:
        """Namespace to list in, None when listing across all namespaces."""
        return None if self.all_namespaces else self.namespace
