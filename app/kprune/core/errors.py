"""Exception hierarchy for the prune pipeline.

Fatal conditions derive from PruneError and abort the run with a non-zero
exit. Non-fatal conditions (unsupported kinds) are only logged.
"""


class PruneError(Exception):
    """Base exception for all fatal pipeline errors."""


class DecodeError(PruneError):
    """Raised when a cluster object cannot be decoded into the expected shape."""


class CapabilityError(PruneError):
    """Raised when server-side dry-run is not supported for a resource."""


class DeletionError(PruneError):
    """Raised when the object store rejects a delete call.

    Attributes:
        identity: ``<namespace> <Kind>/<name>`` of the object.
        source: Where the object came from (resource path or URL).
    """

    def __init__(self, message: str, *, identity: str = "", source: str = "") -> None:
        super().__init__(message)
        self.identity = identity
        self.source = source


class PromptError(PruneError):
    """Raised when the interactive confirmation cannot be answered."""


class QueryError(PruneError):
    """Raised when the resource arguments cannot be turned into a query."""


class StoreError(PruneError):
    """Raised when listing objects from the cluster fails."""


class ClusterConfigError(PruneError):
    """Raised when no usable cluster configuration can be loaded."""


class UnsupportedKindWarning(UserWarning):
    """Category for candidates whose kind cannot be pruned. Logged, never raised."""
