"""Data models for kprune.

This module exports the core data structures used throughout the application.
"""

from kprune.models.decision import (
    OutcomeState,
    PruneDecision,
    PruneOutcome,
    Reason,
    Verdict,
)
from kprune.models.liveness import LivenessBuilder, LivenessSet
from kprune.models.options import DryRunStrategy, PruneOptions, resolve_grace_period
from kprune.models.resource import (
    MANAGED_SECRET_TYPES,
    PRUNABLE_KINDS,
    Candidate,
    ResourceKind,
    object_key,
)
from kprune.models.workload import WorkloadSpec

__all__ = [
    "MANAGED_SECRET_TYPES",
    "PRUNABLE_KINDS",
    "Candidate",
    "DryRunStrategy",
    "LivenessBuilder",
    "LivenessSet",
    "OutcomeState",
    "PruneDecision",
    "PruneOptions",
    "PruneOutcome",
    "Reason",
    "ResourceKind",
    "Verdict",
    "WorkloadSpec",
    "object_key",
    "resolve_grace_period",
]
