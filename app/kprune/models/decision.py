"""Prune decisions and per-object outcomes.

A PruneDecision is the classification of one Candidate. A PruneOutcome
records what actually happened to it once the deletion policy ran.
"""

from dataclasses import dataclass
from enum import Enum

from kprune.models.resource import Candidate


class Verdict(Enum):
    """Classification of a candidate.

    Attributes:
        KEEP: The object stays (referenced, managed, or namespace excluded).
        DELETE: The object is unreferenced and pending confirmation.
        SKIP: The object is left alone without a keep/delete judgement.
    """

    KEEP = "keep"
    DELETE = "delete"
    SKIP = "skip"


class Reason(str, Enum):
    """Why a decision was reached."""

    REFERENCED = "referenced"
    SYSTEM_MANAGED = "system-managed"
    NAMESPACE_EXCLUDED = "namespace-excluded"
    UNSUPPORTED_KIND = "unsupported-kind"
    DECLINED = "declined"
    UNREFERENCED = "unreferenced"


@dataclass(frozen=True, slots=True)
class PruneDecision:
    """Classification of a single candidate.

    Attributes:
        candidate: The classified object.
        verdict: Keep, delete or skip.
        reason: Explanation for the verdict.
    """

    candidate: Candidate
    verdict: Verdict
    reason: Reason

    @classmethod
    def keep(cls, candidate: Candidate, reason: Reason) -> "PruneDecision":
        return cls(candidate=candidate, verdict=Verdict.KEEP, reason=reason)

    @classmethod
    def delete(cls, candidate: Candidate) -> "PruneDecision":
        return cls(candidate=candidate, verdict=Verdict.DELETE, reason=Reason.UNREFERENCED)

    @classmethod
    def skip(cls, candidate: Candidate, reason: Reason) -> "PruneDecision":
        return cls(candidate=candidate, verdict=Verdict.SKIP, reason=reason)

    @property
    def is_delete(self) -> bool:
        return self.verdict == Verdict.DELETE


class OutcomeState(Enum):
    """Terminal state of a candidate after the deletion policy ran."""

    KEPT = "kept"
    SKIPPED = "skipped"
    DECLINED = "declined"
    DRY_RUN_REPORTED = "dry-run"
    DELETED = "deleted"
    DELETION_FAILED = "failed"


# States that produce an outcome line.
REPORTED_STATES: frozenset[OutcomeState] = frozenset(
    {OutcomeState.DELETED, OutcomeState.DRY_RUN_REPORTED, OutcomeState.DELETION_FAILED}
)


@dataclass(frozen=True, slots=True)
class PruneOutcome:
    """What happened to one candidate.

    Attributes:
        decision: The classification that led here.
        state: Terminal state reached.
        operation: Operation label for reported states
            (e.g. "deleted", "force deleted (dry run)").
        error: Error message for DELETION_FAILED.
    """

    decision: PruneDecision
    state: OutcomeState
    operation: str | None = None
    error: str | None = None

    @property
    def candidate(self) -> Candidate:
        return self.decision.candidate

    @property
    def is_reported(self) -> bool:
        return self.state in REPORTED_STATES

    @property
    def message(self) -> str:
        """Outcome line, e.g. ``configmap "cm-orphan" deleted``."""
        c = self.candidate
        if self.state == OutcomeState.DELETION_FAILED:
            # "force deleted (dry run)" becomes "force deletion (dry run) failed"
            label = (self.operation or "deleted").replace("deleted", "deletion", 1)
            return f'{c.qualified_kind} "{c.name}" {label} failed: {self.error}'
        return f'{c.qualified_kind} "{c.name}" {self.operation or self.state.value}'
