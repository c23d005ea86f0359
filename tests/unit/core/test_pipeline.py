"""End-to-end tests for collection followed by pruning, against an in-memory store."""

from typing import Any

from conftest import FakeStore, make_candidate, make_pod
from kprune.core.engine import PruneEngine
from kprune.core.liveness import LivenessCollector
from kprune.models.decision import OutcomeState, PruneOutcome
from kprune.models.options import PruneOptions


def _run(store: FakeStore, **options: Any) -> tuple[list[PruneOutcome], list[str]]:
    opts = PruneOptions.model_validate({"namespace": "ns1", **options})
    liveness = LivenessCollector(store).collect(opts)
    lines: list[str] = []
    engine = PruneEngine(store, liveness, opts, reporter=lambda o: lines.append(o.message))
    candidates = store.list_candidates([], opts.scope_namespace, None, None)
    return list(engine.run(candidates)), lines


class TestPrunePipeline:
    """Collection and pruning together."""

    def test_example_scenario(self, example_store: FakeStore) -> None:
        """Only the unreferenced ConfigMap is deleted."""
        outcomes, lines = _run(example_store, yes=True)

        assert example_store.deleted_keys == ["ns1/cm-orphan"]
        assert lines == ['configmap "cm-orphan" deleted']
        assert [o.state for o in outcomes] == [
            OutcomeState.KEPT,
            OutcomeState.DELETED,
            OutcomeState.KEPT,
        ]

    def test_example_scenario_client_dry_run(self, example_store: FakeStore) -> None:
        _outcomes, lines = _run(example_store, dry_run="client")

        assert example_store.deleted == []
        assert lines == ['configmap "cm-orphan" deleted (dry run)']

    def test_collection_precedes_deletion(self, example_store: FakeStore) -> None:
        """Pods are listed before any candidate is listed."""
        calls: list[str] = []

        class _OrderedStore(FakeStore):
            def list_workloads(self, *args: Any) -> Any:
                calls.append("workloads")
                return super().list_workloads(*args)

            def list_candidates(self, *args: Any) -> Any:
                calls.append("candidates")
                return super().list_candidates(*args)

        store = _OrderedStore(pods=example_store.pods, candidates=example_store.candidates)

        _run(store, yes=True)

        assert calls == ["workloads", "candidates"]

    def test_deterministic(self) -> None:
        """Identical inputs give identical outcome lines."""

        def build() -> FakeStore:
            pods: list[dict[str, Any]] = [
                make_pod("a", volumes=[{"name": "c", "configMap": {"name": "cm-1"}}]),
                make_pod(
                    "b",
                    containers=[{"name": "x", "envFrom": [{"secretRef": {"name": "s-1"}}]}],
                ),
            ]
            candidates = [
                make_candidate("cm-1"),
                make_candidate("cm-2"),
                make_candidate("s-1", kind="Secret"),
                make_candidate("s-2", kind="Secret"),
            ]
            return FakeStore(pods=pods, candidates=candidates)

        first_store, second_store = build(), build()
        _, first = _run(first_store, yes=True)
        _, second = _run(second_store, yes=True)

        assert first == second == ['configmap "cm-2" deleted', 'secret "s-2" deleted']
        assert first_store.deleted_keys == second_store.deleted_keys

    def test_other_namespace_pods_do_not_keep_objects(self) -> None:
        """References from outside the scope do not protect an object."""
        store = FakeStore(
            pods=[make_pod("a", "ns2", volumes=[{"name": "c", "configMap": {"name": "cm"}}])],
            candidates=[make_candidate("cm")],
        )

        _run(store, yes=True)

        assert store.deleted_keys == ["ns1/cm"]
