"""Cluster access: configuration loading, resource queries and the object store."""

from kprune.cluster.base import DeleteOptions, ObjectStore
from kprune.cluster.config import ClusterConnection, load_cluster
from kprune.cluster.query import ResourceQuery, parse_resource_args
from kprune.cluster.store import KubernetesStore

__all__ = [
    "ClusterConnection",
    "DeleteOptions",
    "KubernetesStore",
    "ObjectStore",
    "ResourceQuery",
    "load_cluster",
    "parse_resource_args",
]
