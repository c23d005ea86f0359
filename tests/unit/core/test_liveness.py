"""Unit tests for liveness collection."""

import logging

import pytest
from conftest import FakeStore, make_pod
from kprune.core.errors import DecodeError
from kprune.core.liveness import LivenessCollector, collect_liveness, fold_workload
from kprune.models.liveness import LivenessBuilder, LivenessSet
from kprune.models.options import PruneOptions
from kprune.models.resource import ResourceKind
from kprune.models.workload import WorkloadSpec


def _collect(*pods: dict) -> LivenessSet:
    return collect_liveness(WorkloadSpec.from_object(p) for p in pods)


class TestFoldWorkload:
    """Tests for the reference shapes folded from a pod."""

    def test_env_from_config_map_and_secret(self) -> None:
        liveness = _collect(
            make_pod(
                "p",
                containers=[
                    {
                        "name": "app",
                        "envFrom": [
                            {"configMapRef": {"name": "cm-env"}},
                            {"secretRef": {"name": "s-env"}},
                        ],
                    }
                ],
            )
        )

        assert liveness.config_maps == frozenset({"ns1/cm-env"})
        assert liveness.secrets == frozenset({"ns1/s-env"})

    def test_env_key_refs(self) -> None:
        """A single-key reference marks the whole object."""
        liveness = _collect(
            make_pod(
                "p",
                containers=[
                    {
                        "name": "app",
                        "env": [
                            {"name": "PLAIN", "value": "x"},
                            {
                                "name": "A",
                                "valueFrom": {"configMapKeyRef": {"name": "cm-key", "key": "a"}},
                            },
                            {
                                "name": "B",
                                "valueFrom": {"secretKeyRef": {"name": "s-key", "key": "b"}},
                            },
                        ],
                    }
                ],
            )
        )

        assert liveness.config_maps == frozenset({"ns1/cm-key"})
        assert liveness.secrets == frozenset({"ns1/s-key"})

    def test_volumes(self) -> None:
        liveness = _collect(
            make_pod(
                "p",
                volumes=[
                    {"name": "c", "configMap": {"name": "cm-vol"}},
                    {"name": "s", "secret": {"secretName": "s-vol"}},
                    {"name": "tmp", "emptyDir": {}},
                ],
            )
        )

        assert liveness.config_maps == frozenset({"ns1/cm-vol"})
        assert liveness.secrets == frozenset({"ns1/s-vol"})

    def test_projected_volume_sources(self) -> None:
        liveness = _collect(
            make_pod(
                "p",
                volumes=[
                    {
                        "name": "bundle",
                        "projected": {
                            "sources": [
                                {"configMap": {"name": "cm-proj"}},
                                {"secret": {"name": "s-proj"}},
                                {"serviceAccountToken": {"path": "token"}},
                            ]
                        },
                    }
                ],
            )
        )

        assert liveness.config_maps == frozenset({"ns1/cm-proj"})
        assert liveness.secrets == frozenset({"ns1/s-proj"})

    def test_init_and_ephemeral_containers(self) -> None:
        liveness = _collect(
            make_pod(
                "p",
                initContainers=[{"name": "init", "envFrom": [{"configMapRef": {"name": "cm-i"}}]}],
                ephemeralContainers=[
                    {"name": "debug", "envFrom": [{"secretRef": {"name": "s-e"}}]}
                ],
            )
        )

        assert "ns1/cm-i" in liveness.config_maps
        assert "ns1/s-e" in liveness.secrets

    def test_image_pull_secrets(self) -> None:
        liveness = _collect(make_pod("p", imagePullSecrets=[{"name": "regcred"}]))

        assert liveness.secrets == frozenset({"ns1/regcred"})

    def test_secrets_and_configmaps_do_not_collide(self) -> None:
        """A Secret reference does not make a same-named ConfigMap live."""
        liveness = _collect(
            make_pod("p", volumes=[{"name": "s", "secret": {"secretName": "shared"}}])
        )

        assert liveness.is_used(ResourceKind.SECRET, "ns1/shared")
        assert not liveness.is_used(ResourceKind.CONFIG_MAP, "ns1/shared")

    def test_empty_reference_names_ignored(self) -> None:
        liveness = _collect(
            make_pod(
                "p",
                containers=[{"name": "app", "envFrom": [{"configMapRef": {"name": ""}}]}],
                volumes=[{"name": "c", "configMap": {}}],
            )
        )

        assert liveness.config_maps == frozenset()


class TestServiceAccounts:
    """Service account identities."""

    def test_named_service_account(self) -> None:
        liveness = _collect(make_pod("p", service_account="builder"))
        assert liveness.service_accounts == frozenset({"ns1/builder"})

    def test_missing_service_account_is_default(self) -> None:
        liveness = _collect(make_pod("p"))
        assert liveness.service_accounts == frozenset({"ns1/default"})

    def test_empty_service_account_is_default(self) -> None:
        liveness = _collect(make_pod("p", service_account=""))
        assert liveness.service_accounts == frozenset({"ns1/default"})


class TestCollectLiveness:
    """Tests for collect_liveness."""

    def test_namespace_qualified_keys(self) -> None:
        """The same name in two namespaces yields two distinct keys."""
        liveness = _collect(
            make_pod("a", "ns1", volumes=[{"name": "c", "configMap": {"name": "app"}}]),
            make_pod("b", "ns2", volumes=[{"name": "c", "configMap": {"name": "app"}}]),
        )

        assert liveness.config_maps == frozenset({"ns1/app", "ns2/app"})

    def test_order_independent(self) -> None:
        """Folding pods in any order yields the same set."""
        pods = [
            make_pod("a", volumes=[{"name": "c", "configMap": {"name": "cm-a"}}]),
            make_pod("b", containers=[{"name": "x", "envFrom": [{"secretRef": {"name": "s"}}]}]),
            make_pod("c", "ns2", service_account="sa"),
        ]

        assert _collect(*pods) == _collect(*reversed(pods))

    def test_no_pods(self) -> None:
        liveness = collect_liveness([])
        assert liveness.counts() == {"ConfigMap": 0, "Secret": 0, "ServiceAccount": 0}

    def test_decode_error_aborts_collection(self) -> None:
        """A pod that cannot be decoded aborts the collection."""
        store = FakeStore(pods=[make_pod("ok"), {"metadata": {"namespace": "ns1"}}])

        with pytest.raises(DecodeError):
            LivenessCollector(store).collect(PruneOptions(namespace="ns1"))

    def test_logs_counts(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="kprune.core.liveness"):
            _collect(make_pod("p"))

        assert "Scanned 1 pod(s)" in caplog.text

    def test_fold_workload_marks_builder(self) -> None:
        builder = LivenessBuilder()
        fold_workload(
            builder,
            WorkloadSpec.from_object(
                make_pod("p", volumes=[{"name": "c", "configMap": {"name": "cm"}}])
            ),
        )

        assert builder.freeze().config_maps == frozenset({"ns1/cm"})


class TestLivenessCollector:
    """Tests for LivenessCollector scoping."""

    def test_collects_in_namespace(self) -> None:
        store = FakeStore(
            pods=[
                make_pod("a", "ns1", volumes=[{"name": "c", "configMap": {"name": "cm-1"}}]),
                make_pod("b", "ns2", volumes=[{"name": "c", "configMap": {"name": "cm-2"}}]),
            ]
        )

        liveness = LivenessCollector(store).collect(
            PruneOptions(namespace="ns1", label_selector="app=web")
        )

        assert liveness.config_maps == frozenset({"ns1/cm-1"})
        assert store.workload_calls == [("ns1", "app=web", None)]

    def test_collects_across_all_namespaces(self) -> None:
        store = FakeStore(pods=[make_pod("a", "ns1"), make_pod("b", "ns2")])

        liveness = LivenessCollector(store).collect(
            PruneOptions(all_namespaces=True, field_selector="status.phase=Running")
        )

        assert liveness.service_accounts == frozenset({"ns1/default", "ns2/default"})
        assert store.workload_calls == [(None, None, "status.phase=Running")]
