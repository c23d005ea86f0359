"""Prune engine: classification and deletion policy.

Each candidate is classified against the frozen LivenessSet and, when
unreferenced, taken through confirmation and deletion:

    PendingConfirm -> Declined
    PendingConfirm -> Confirmed -> DryRunReported | Deleted | DeletionFailed

Candidates are handled one at a time in the order the store returned
them. The first fatal error stops the run; later candidates are not
visited.
"""

import logging
import warnings
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator

import typer

from kprune.cluster.base import DeleteOptions, ObjectStore
from kprune.core.errors import DeletionError, PromptError, UnsupportedKindWarning
from kprune.models.decision import OutcomeState, PruneDecision, PruneOutcome, Reason, Verdict
from kprune.models.liveness import LivenessSet
from kprune.models.options import DryRunStrategy, PruneOptions
from kprune.models.resource import PRUNABLE_KINDS, Candidate, ResourceKind

logger = logging.getLogger(__name__)

# Namespace that is never pruned.
SYSTEM_NAMESPACE = "kube-system"

# Dry-run directive understood by the API server.
SERVER_DRY_RUN_ALL = "All"

Reporter = Callable[[PruneOutcome], None]
Prompt = Callable[[str], bool]


def is_namespace_excluded(namespace: str, ignore_namespaces: str) -> bool:
    """Check whether a namespace is excluded from pruning.

    The ignore list is matched by substring containment against the raw
    comma-joined string, not by set membership: with ``"team-a,prod"``
    the namespaces ``team`` and ``a,pr`` are excluded too, and an empty
    namespace (cluster-scoped objects) is always excluded.

    Args:
        namespace: Namespace of the candidate.
        ignore_namespaces: Comma-joined ignore list as given by the operator.

    Returns:
        True if the namespace must be left untouched.
    """
    if namespace == SYSTEM_NAMESPACE:
        return True
    return namespace in ignore_namespaces


def classify(
    candidate: Candidate,
    liveness: LivenessSet,
    ignore_namespaces: str = "",
) -> PruneDecision:
    """Classify a candidate.

    Rules, in order: namespace exclusion, kind policy (managed Secrets are
    kept, unsupported kinds are skipped), then liveness.

    Args:
        candidate: Object to classify.
        liveness: Frozen liveness set from the collector.
        ignore_namespaces: Comma-joined ignore list.

    Returns:
        The PruneDecision for the candidate.
    """
    if is_namespace_excluded(candidate.namespace, ignore_namespaces):
        return PruneDecision.keep(candidate, Reason.NAMESPACE_EXCLUDED)

    if candidate.kind not in PRUNABLE_KINDS:
        warnings.warn(
            f"unsupported prune object: {candidate.qualified_kind}: "
            f"{candidate.namespace}/{candidate.name}",
            UnsupportedKindWarning,
            stacklevel=2,
        )
        return PruneDecision.skip(candidate, Reason.UNSUPPORTED_KIND)

    if candidate.is_managed_secret:
        return PruneDecision.keep(candidate, Reason.SYSTEM_MANAGED)

    if liveness.is_used(ResourceKind(candidate.kind), candidate.key):
        return PruneDecision.keep(candidate, Reason.REFERENCED)

    return PruneDecision.delete(candidate)


def build_delete_options(grace_period: int, dry_run: DryRunStrategy) -> DeleteOptions:
    """Build delete options from an effective grace period and dry-run mode.

    A negative grace period is left out so the object's default applies.
    """
    return DeleteOptions(
        grace_period_seconds=grace_period if grace_period >= 0 else None,
        dry_run=(SERVER_DRY_RUN_ALL,) if dry_run == DryRunStrategy.SERVER else (),
    )


def operation_label(grace_period: int, dry_run: DryRunStrategy) -> str:
    """Label for an outcome line, e.g. ``force deleted (server dry run)``."""
    operation = "force deleted" if grace_period == 0 else "deleted"
    if dry_run == DryRunStrategy.CLIENT:
        return f"{operation} (dry run)"
    if dry_run == DryRunStrategy.SERVER:
        return f"{operation} (server dry run)"
    return operation


class Confirmer(ABC):
    """Decides whether an unreferenced candidate may be deleted."""

    @abstractmethod
    def confirm(self, candidate: Candidate) -> bool:
        """Return True to proceed with deletion.

        Raises:
            PromptError: If no answer can be obtained.
        """


class AlwaysConfirm(Confirmer):
    """Confirms every candidate without asking (``--yes`` or any dry-run)."""

    def confirm(self, candidate: Candidate) -> bool:
        return True


def _typer_prompt(message: str) -> bool:
    return typer.confirm(message, default=False)


class InteractiveConfirm(Confirmer):
    """Asks the operator once per candidate.

    Attributes:
        _prompt: Callable that shows a yes/no question and returns the answer.
    """

    def __init__(self, prompt: Prompt | None = None) -> None:
        self._prompt = prompt or _typer_prompt

    def confirm(self, candidate: Candidate) -> bool:
        message = f"Delete {candidate.display}?"
        try:
            return bool(self._prompt(message))
        except (typer.Abort, EOFError, OSError) as e:
            msg = f"confirmation failed for {candidate.display}: {e or 'input closed'}"
            raise PromptError(msg) from e


def select_confirmer(options: PruneOptions, prompt: Prompt | None = None) -> Confirmer:
    """Pick the confirmer for a run: no prompting with --yes or any dry-run."""
    if options.yes or options.is_dry_run:
        return AlwaysConfirm()
    return InteractiveConfirm(prompt)


class PruneEngine:
    """Applies classification and the deletion policy to candidates.

    The liveness set is only read. Outcomes are produced lazily, one per
    candidate, so callers see results as they happen.
    """

    def __init__(
        self,
        store: ObjectStore,
        liveness: LivenessSet,
        options: PruneOptions,
        confirmer: Confirmer | None = None,
        reporter: Reporter | None = None,
    ) -> None:
        self._store = store
        self._liveness = liveness
        self._options = options
        self._confirmer = confirmer or select_confirmer(options)
        self._reporter = reporter
        self._grace_period = options.effective_grace_period
        self._delete_options = build_delete_options(self._grace_period, options.dry_run)
        self._operation = operation_label(self._grace_period, options.dry_run)

    def run(self, candidates: Iterable[Candidate]) -> Iterator[PruneOutcome]:
        """Process candidates in order, yielding one outcome each.

        Raises:
            DecodeError: Propagated from the candidate stream.
            CapabilityError: If server dry-run is unsupported for a candidate.
            DeletionError: If a delete call fails.
            PromptError: If confirmation fails.
        """
        for candidate in candidates:
            yield self.process(candidate)

    def process(self, candidate: Candidate) -> PruneOutcome:
        """Classify one candidate and apply the deletion policy to it."""
        decision = classify(candidate, self._liveness, self._options.ignore_namespaces)

        if decision.verdict == Verdict.KEEP:
            logger.debug("Keeping %s: %s", candidate.display, decision.reason.value)
            return self._report(PruneOutcome(decision=decision, state=OutcomeState.KEPT))
        if decision.verdict == Verdict.SKIP:
            return self._report(PruneOutcome(decision=decision, state=OutcomeState.SKIPPED))

        if not self._confirmer.confirm(candidate):
            logger.debug("Deletion of %s declined", candidate.display)
            return self._report(
                PruneOutcome(
                    decision=PruneDecision.skip(candidate, Reason.DECLINED),
                    state=OutcomeState.DECLINED,
                )
            )

        return self._delete(decision)

    def _delete(self, decision: PruneDecision) -> PruneOutcome:
        candidate = decision.candidate
        dry_run = self._options.dry_run

        if dry_run == DryRunStrategy.CLIENT:
            return self._report(
                PruneOutcome(
                    decision=decision,
                    state=OutcomeState.DRY_RUN_REPORTED,
                    operation=self._operation,
                )
            )

        if dry_run == DryRunStrategy.SERVER:
            self._store.verify_dry_run_support(candidate)

        try:
            self._store.delete(candidate, self._delete_options)
        except DeletionError as e:
            self._report(
                PruneOutcome(
                    decision=decision,
                    state=OutcomeState.DELETION_FAILED,
                    operation=self._operation,
                    error=str(e),
                )
            )
            raise

        state = OutcomeState.DELETED
        if dry_run == DryRunStrategy.SERVER:
            state = OutcomeState.DRY_RUN_REPORTED
        return self._report(PruneOutcome(decision=decision, state=state, operation=self._operation))

    def _report(self, outcome: PruneOutcome) -> PruneOutcome:
        if self._reporter is None or self._options.quiet or not outcome.is_reported:
            return outcome
        self._reporter(outcome)
        return outcome
