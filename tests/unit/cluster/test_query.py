"""Unit tests for resource argument parsing."""

import pytest
from kprune.cluster.query import ResourceQuery, parse_resource_args
from kprune.core.errors import QueryError


class TestParseTypes:
    """Tests for the TYPE[,TYPE...] [NAME ...] form."""

    def test_single_type(self) -> None:
        assert parse_resource_args(["configmap"]) == [ResourceQuery("configmap")]

    def test_type_list(self) -> None:
        queries = parse_resource_args(["ConfigMap,secret"])

        assert queries == [ResourceQuery("configmap"), ResourceQuery("secret")]
        assert all(q.select_all for q in queries)

    def test_duplicate_types_collapsed(self) -> None:
        queries = parse_resource_args(["cm,secret,cm"])
        assert [q.resource for q in queries] == ["cm", "secret"]

    def test_names_apply_to_every_type(self) -> None:
        queries = parse_resource_args(["cm,secret", "app", "db"])

        assert queries == [
            ResourceQuery("cm", ("app", "db")),
            ResourceQuery("secret", ("app", "db")),
        ]
        assert not queries[0].select_all

    def test_empty_type_in_list_rejected(self) -> None:
        with pytest.raises(QueryError, match="invalid resource type list"):
            parse_resource_args(["cm,,secret"])


class TestParseTypeNamePairs:
    """Tests for the TYPE/NAME form."""

    def test_pairs_grouped_by_type(self) -> None:
        queries = parse_resource_args(["cm/a", "secret/b", "CM/c"])

        assert queries == [
            ResourceQuery("cm", ("a", "c")),
            ResourceQuery("secret", ("b",)),
        ]

    def test_mixed_forms_rejected(self) -> None:
        with pytest.raises(QueryError, match="no need to specify a resource type"):
            parse_resource_args(["cm/a", "secret"])

    @pytest.mark.parametrize("arg", ["cm/", "/a", "cm/a/b"])
    def test_malformed_pair_rejected(self, arg: str) -> None:
        with pytest.raises(QueryError, match="single resource and name"):
            parse_resource_args([arg])


class TestParseErrors:
    """Argument-level errors."""

    def test_no_arguments(self) -> None:
        with pytest.raises(QueryError, match="must provide one or more resources"):
            parse_resource_args([])

    def test_names_with_selector_rejected(self) -> None:
        with pytest.raises(QueryError, match="name cannot be provided when a selector"):
            parse_resource_args(["cm", "app"], has_selector=True)

    def test_pairs_with_selector_rejected(self) -> None:
        with pytest.raises(QueryError, match="name cannot be provided when a selector"):
            parse_resource_args(["cm/app"], has_selector=True)

    def test_types_with_selector_allowed(self) -> None:
        queries = parse_resource_args(["cm,secret"], has_selector=True)
        assert len(queries) == 2
