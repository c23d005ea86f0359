"""Resource argument parsing.

Turns command-line resource arguments into queries, accepting the two
kubectl forms::

    TYPE[,TYPE...] [NAME ...]      configmap,secret   /   secret app-creds
    TYPE/NAME [TYPE/NAME ...]      configmap/app-config secret/app-creds
"""

from dataclasses import dataclass

from kprune.core.errors import QueryError


@dataclass(frozen=True, slots=True)
class ResourceQuery:
    """One resource type, optionally narrowed to explicit names.

    Attributes:
        resource: Resource type as typed by the user (e.g. "cm", "secrets").
        names: Object names; empty means every object of the type.
    """

    resource: str
    names: tuple[str, ...] = ()

    @property
    def select_all(self) -> bool:
        return not self.names


def parse_resource_args(
    args: list[str],
    *,
    has_selector: bool = False,
) -> list[ResourceQuery]:
    """Parse resource arguments into queries.

    Args:
        args: Positional arguments from the command line.
        has_selector: Whether a label or field selector is in effect.

    Returns:
        One ResourceQuery per resource type, in argument order.

    Raises:
        QueryError: If no resource is given, forms are mixed, a part is
            empty, or names are combined with a selector.
    """
    if not args:
        msg = "You must provide one or more resources by argument, e.g. 'configmap,secret'"
        raise QueryError(msg)

    slashed = [a for a in args if "/" in a]
    if slashed:
        if len(slashed) != len(args):
            msg = (
                "there is no need to specify a resource type as a separate argument "
                "when passing arguments in resource/name form"
            )
            raise QueryError(msg)
        queries = _parse_type_name_pairs(args)
    else:
        queries = _parse_types_and_names(args)

    if has_selector and any(not q.select_all for q in queries):
        msg = "name cannot be provided when a selector is specified"
        raise QueryError(msg)

    return queries


def _parse_type_name_pairs(args: list[str]) -> list[ResourceQuery]:
    """Group ``TYPE/NAME`` arguments by type, keeping first-seen order."""
    grouped: dict[str, list[str]] = {}
    for arg in args:
        resource, _, name = arg.partition("/")
        if not resource or not name or "/" in name:
            msg = f"arguments in resource/name form must have a single resource and name: {arg!r}"
            raise QueryError(msg)
        grouped.setdefault(resource.lower(), []).append(name)
    return [ResourceQuery(resource=r, names=tuple(n)) for r, n in grouped.items()]


def _parse_types_and_names(args: list[str]) -> list[ResourceQuery]:
    """Parse ``TYPE[,TYPE...] [NAME ...]``."""
    types = [t.strip().lower() for t in args[0].split(",")]
    if any(not t for t in types):
        msg = f"invalid resource type list: {args[0]!r}"
        raise QueryError(msg)
    names = tuple(args[1:])

    queries: list[ResourceQuery] = []
    seen: set[str] = set()
    for resource in types:
        if resource in seen:
            continue
        seen.add(resource)
        queries.append(ResourceQuery(resource=resource, names=names))
    return queries
