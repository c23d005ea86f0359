"""kprune - Prune unused ConfigMaps and Secrets from a Kubernetes cluster."""

__version__ = "0.1.0"
