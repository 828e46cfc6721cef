#!/usr/bin/env python3
"""
KUBESELECT INFO
---------------
The unit of iteration: one resource instance identified by mapping,
namespace and name, bound to the client that can fetch it. The full
object representation is optional and filled on demand.

Author: KubeSelect Team
Date: 2026-10-18
"""

from typing import Any, Callable, Dict, Optional

from kubeselect.core.errors import ConfigurationError
from kubeselect.core.models import ResourceMapping


def object_metadata(obj: Any) -> Dict[str, Any]:
    """Returns the metadata map of a decoded object, or {} if there is none."""
    if isinstance(obj, dict) and isinstance(obj.get("metadata"), dict):
        return obj["metadata"]
    return {}


class Info:
    """
    Identity of one resource, plus its representation once fetched.

    An Info is also a Visitor over a single item (itself), so the same
    decorators can wrap singular and bulk selections.
    """

    def __init__(self, client: Any, mapping: ResourceMapping, namespace: str = "",
                 name: str = "", source: str = "", obj: Optional[Dict[str, Any]] = None,
                 resource_version: str = ""):
        self.client = client
        self.mapping = mapping
        self.namespace = namespace or ""
        self.name = name or ""
        self.source = source
        self.resource_version = resource_version
        self._object = obj
        self._fetch_on_read = False

    @classmethod
    def for_name(cls, client: Any, mapping: ResourceMapping, namespace: str, name: str) -> "Info":
        """
        Builds an Info for a resource addressed by name. Namespaced types need
        a namespace now, before any request is made.
        """
        if not mapping.namespaced:
            namespace = ""
        elif not namespace:
            raise ConfigurationError("namespace may not be empty when retrieving a resource by name")
        return cls(client, mapping, namespace, name)

    @property
    def namespaced(self) -> bool:
        return self.mapping.namespaced

    @property
    def object(self) -> Optional[Dict[str, Any]]:
        # Deferred refresh requested by the lazy decorator
        if self._object is None and self._fetch_on_read:
            self.get()
        return self._object

    @object.setter
    def object(self, value: Optional[Dict[str, Any]]) -> None:
        self._object = value
        self._fetch_on_read = False

    @property
    def fetched(self) -> bool:
        """True once a representation is held, without triggering a fetch."""
        return self._object is not None

    def mark_lazy(self) -> None:
        """Defer fetching until `object` is read, if nothing is held yet."""
        if self._object is None:
            self._fetch_on_read = True

    def visit(self, fn: Callable[["Info"], Any]) -> None:
        fn(self)

    def get(self) -> None:
        """Fetches the current representation from the server."""
        namespace = self.namespace if self.namespaced else ""
        obj = self.client.get(self.mapping, namespace, self.name)
        self._fetch_on_read = False
        self.refresh(obj, ignore_error=True)

    def refresh(self, obj: Dict[str, Any], ignore_error: bool = False) -> None:
        """
        Replaces the held object and re-reads name, namespace and
        resourceVersion from its metadata.
        """
        meta = object_metadata(obj)
        if not meta and not ignore_error:
            raise ConfigurationError(f"object for {self.mapping.resource} '{self.name}' has no metadata")
        self._object = obj
        self._fetch_on_read = False
        self.name = meta.get("name", self.name) or self.name
        self.namespace = meta.get("namespace", self.namespace) or self.namespace
        self.resource_version = meta.get("resourceVersion", "") or ""

    def update_object_namespace(self) -> None:
        """Writes `namespace` back into the held object's metadata."""
        if not isinstance(self._object, dict):
            return
        meta = self._object.setdefault("metadata", {})
        if self.namespace:
            meta["namespace"] = self.namespace
        else:
            meta.pop("namespace", None)

    def __repr__(self) -> str:
        return (f"Info({self.mapping.kind} namespace='{self.namespace}' "
                f"name='{self.name}' source='{self.source}')")
