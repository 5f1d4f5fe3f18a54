"""
Declarative Usabilla resource tree.

Endpoints are described as a table of ResourceSpec rows and interpreted once,
at client construction, into Resource handles that share a single signed-GET
callable. Example:

    client.websites.buttons.feedback.get(id="42", params={"limit": 5})
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple

from .exceptions import UsabillaError

# fetch(path_template, id, params) -> decoded body (or an awaitable of it)
Fetch = Callable[[str, Optional[Any], Optional[Mapping[str, Any]]], Any]


@dataclass(frozen=True)
class ResourceSpec:
    """One node of the resource table. ``path`` is relative to the parent."""

    name: str
    path: str
    children: Tuple["ResourceSpec", ...] = ()
    gettable: bool = True


# Websites product endpoints
WEBSITES = ResourceSpec(
    "websites",
    "/websites",
    gettable=False,
    children=(
        ResourceSpec(
            "buttons",
            "/button",
            children=(ResourceSpec("feedback", "/:id/feedback"),),
        ),
        ResourceSpec(
            "campaigns",
            "/campaign",
            children=(
                ResourceSpec("results", "/:id/results"),
                ResourceSpec("stats", "/:id/stats"),
            ),
        ),
    ),
)

PRODUCTS: Tuple[ResourceSpec, ...] = (WEBSITES,)


class Resource:
    """A node of the interpreted resource tree; children are attributes."""

    def __init__(
        self,
        name: str,
        path_template: str,
        fetch: Fetch,
        children: Optional[Dict[str, "Resource"]] = None,
        gettable: bool = True,
    ):
        self.name = name
        self.path_template = path_template
        self.gettable = gettable
        self._fetch = fetch
        self._children = children or {}

    def __getattr__(self, name: str) -> "Resource":
        children = self.__dict__.get("_children", {})
        if name in children:
            return children[name]
        raise AttributeError(f"Resource '{self.name}' has no child '{name}'")

    def __dir__(self):
        return list(super().__dir__()) + list(self._children)

    def __repr__(self) -> str:
        return f"Resource(name={self.name!r}, path_template={self.path_template!r})"

    @property
    def children(self) -> Dict[str, "Resource"]:
        return dict(self._children)

    def get(self, id: Optional[Any] = None, params: Optional[Mapping[str, Any]] = None) -> Any:
        """
        Fetch this resource with a signed GET.

        Args:
            id: Value for the ``:id`` placeholder, ``"*"`` for all.
            params: Query parameters supported by the endpoint, e.g. ``{"limit": 5}``.

        Returns:
            The decoded JSON body, or an awaitable of it for async clients.

        Raises:
            UsabillaError: If the node is a grouping node without an endpoint.
        """
        if not self.gettable:
            raise UsabillaError(f"Resource '{self.name}' has no endpoint of its own")
        return self._fetch(self.path_template, id, params)

    def iter_paths(self, prefix: str = "") -> Iterator[Tuple[str, "Resource"]]:
        """Walk the subtree yielding (dotted name, resource) pairs."""
        dotted = f"{prefix}.{self.name}" if prefix else self.name
        yield dotted, self
        for child in self._children.values():
            yield from child.iter_paths(dotted)


def build_resource(spec: ResourceSpec, parent_path: str, fetch: Fetch) -> Resource:
    path = f"{parent_path}{spec.path}"
    children = {child.name: build_resource(child, path, fetch) for child in spec.children}
    return Resource(spec.name, path, fetch, children=children, gettable=spec.gettable)


def build_tree(
    specs: Tuple[ResourceSpec, ...], base_path: str, fetch: Fetch
) -> Dict[str, Resource]:
    """
    Interpret a resource table.

    Args:
        specs: Top-level resource rows (products).
        base_path: Prefix of every path, e.g. "/live".
        fetch: Signed-GET callable shared by every node.

    Returns:
        Mapping of top-level name to Resource.
    """
    base = base_path.rstrip("/")
    return {spec.name: build_resource(spec, base, fetch) for spec in specs}


def find_resource(tree: Mapping[str, Resource], dotted_name: str) -> Resource:
    """
    Look up a resource by dotted name, e.g. ``websites.campaigns.stats``.

    Raises:
        KeyError: If no resource has that name.
    """
    for root in tree.values():
        for name, resource in root.iter_paths():
            if name == dotted_name:
                return resource
    raise KeyError(dotted_name)
