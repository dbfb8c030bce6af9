"""Resource handles and the capability descriptor.

Architecture:
    A Resource is a typed handle bound to one API base path and the shared
    ApiClient. What it can do is declared with capability descriptors:

        class AssetsResource(Resource):
            base_path = "assets"

            create = Create(AddAsset, Asset)
            retrieve = RetrieveWithIgnoreUnknownIds(Identity, Asset)
            list = List(AssetQuery, Asset)

    Accessing a capability through a resource instance returns a copy bound to
    that instance, so `client.assets.create(items)` posts to `.../assets`.

Design Decisions:
    - Composition over inheritance: a resource has capabilities, it does not
      inherit them, and two resources can declare the same capability with
      different types
    - Resources hold no mutable state; concurrent calls are independent
    - The request logic lives in free functions (see capabilities.py) that
      take an ApiClient and a path, so anything can reuse it
"""

from __future__ import annotations

import copy
from typing import Any, ClassVar

from ..runtime.rest.transport import ApiClient


class Resource:
    """Typed handle for one API base path."""

    base_path: ClassVar[str] = ""

    def __init__(self, api_client: ApiClient) -> None:
        self.api_client = api_client

    def path(self, suffix: str = "") -> str:
        if not suffix:
            return self.base_path
        return f"{self.base_path}/{suffix}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_path={self.base_path!r})"


class Capability:
    """Descriptor base for operations declared on a Resource subclass."""

    name: str | None = None
    _resource: Resource | None = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: Resource | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        bound = copy.copy(self)
        bound._resource = instance
        if self.name is not None:
            instance.__dict__[self.name] = bound
        return bound

    @property
    def resource(self) -> Resource:
        if self._resource is None:
            raise RuntimeError(f"{type(self).__name__} is not bound to a resource")
        return self._resource

    @property
    def api_client(self) -> ApiClient:
        return self.resource.api_client

    def path(self, suffix: str = "") -> str:
        return self.resource.path(suffix)

    @property
    def source(self) -> str:
        """Name used in logs, e.g. "assets.list"."""
        return f"{self.resource.base_path}.{self.name or type(self).__name__.lower()}"
