"""Unit tests for run options and grace period resolution."""

import pytest
from kprune.models.options import DryRunStrategy, PruneOptions, resolve_grace_period
from pydantic import ValidationError


class TestResolveGracePeriod:
    """Tests for resolve_grace_period."""

    def test_zero_without_force_promoted_to_one(self) -> None:
        assert resolve_grace_period(0, force=False) == 1

    def test_unset_with_force_becomes_zero(self) -> None:
        assert resolve_grace_period(-1, force=True) == 0

    def test_explicit_value_unchanged(self) -> None:
        assert resolve_grace_period(30, force=False) == 30

    def test_zero_with_force_stays_zero(self) -> None:
        assert resolve_grace_period(0, force=True) == 0

    def test_unset_without_force_stays_unset(self) -> None:
        assert resolve_grace_period(-1, force=False) == -1

    def test_explicit_value_with_force_unchanged(self) -> None:
        assert resolve_grace_period(10, force=True) == 10

    def test_any_negative_with_force_becomes_zero(self) -> None:
        assert resolve_grace_period(-5, force=True) == 0


class TestPruneOptions:
    """Tests for the PruneOptions model."""

    def test_defaults(self) -> None:
        options = PruneOptions()

        assert options.namespace == "default"
        assert options.all_namespaces is False
        assert options.grace_period == -1
        assert options.dry_run == DryRunStrategy.NONE
        assert options.is_dry_run is False
        assert options.effective_grace_period == -1

    def test_scope_namespace(self) -> None:
        assert PruneOptions(namespace="ns1").scope_namespace == "ns1"
        assert PruneOptions(namespace="ns1", all_namespaces=True).scope_namespace is None

    def test_effective_grace_period(self) -> None:
        assert PruneOptions(grace_period=0).effective_grace_period == 1
        assert PruneOptions(force=True).effective_grace_period == 0

    def test_dry_run_from_string(self) -> None:
        options = PruneOptions.model_validate({"dry_run": "server"})
        assert options.dry_run == DryRunStrategy.SERVER
        assert options.is_dry_run is True

    def test_invalid_dry_run_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PruneOptions.model_validate({"dry_run": "maybe"})

    def test_extra_fields_forbidden(self) -> None:
        with pytest.raises(ValidationError):
            PruneOptions.model_validate({"purge": True})

    def test_frozen(self) -> None:
        options = PruneOptions()
        with pytest.raises(ValidationError):
            options.yes = True  # type: ignore[misc]
