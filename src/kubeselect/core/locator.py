#!/usr/bin/env python3
"""
KUBESELECT RESOURCE LOCATOR
---------------------------
Pure lookup layer between user input and the API:
  1. Expands multi-valued aliases ('all') and resolves resource strings
     to ResourceMappings through the TypeRegistry.
  2. Hands out one client per group/version, memoized.
  3. Turns decoded documents into Info objects; list documents are
     wrapped whole so flatten can expand them.

Author: KubeSelect Team
Date: 2026-10-18
"""

import logging
from typing import Any, Dict, Iterable, List

from kubeselect.core.errors import ConfigurationError, SelectionError, TypeResolutionError
from kubeselect.core.info import Info, object_metadata
from kubeselect.core.models import LIST_MAPPING, ResourceMapping
from kubeselect.core.registry import TypeRegistry
from kubeselect.visitors.pipeline import is_list_object

logger = logging.getLogger("kubeselect.locator")


class ResourceLocator:
    """
    Resolves resource type strings and supplies bound clients.

    Args:
        registry: the TypeRegistry answering alias and kind lookups.
        client_factory: any object with `client_for_mapping(mapping)`.
    """

    def __init__(self, registry: TypeRegistry, client_factory: Any):
        self.registry = registry
        self.client_factory = client_factory
        self._clients: Dict[str, Any] = {}

    def aliases_for(self, resource: str):
        return self.registry.aliases_for(resource)

    def expand_aliases(self, args: Iterable[str]) -> List[str]:
        """Replaces every alias argument by its comma-joined expansion."""
        replaced = []
        for arg in args:
            aliases = self.aliases_for(arg)
            replaced.append(",".join(aliases) if aliases is not None else arg)
        return replaced

    def resolve_type(self, resource: str) -> ResourceMapping:
        aliases = self.aliases_for(resource)
        if aliases is not None:
            if len(aliases) != 1:
                raise TypeResolutionError(
                    f"'{resource}' expands to several resource types ({','.join(aliases)})"
                )
            resource = aliases[0]
        version, kind = self.registry.version_and_kind_for_resource(resource)
        return self.registry.mapping_for(version, kind)

    def resolve_all(self, resources: Iterable[str], single_type: bool = False) -> List[ResourceMapping]:
        """
        Resolves every resource string in order. With `single_type`, more than
        one distinct canonical mapping is a configuration error.
        """
        mappings = [self.resolve_type(r) for r in resources]
        if single_type and len(set(mappings)) > 1:
            raise ConfigurationError("you may only specify a single resource type")
        return mappings

    def client_for(self, mapping: ResourceMapping) -> Any:
        """One client per group/version; repeated calls return the same one."""
        key = mapping.api_version
        if key not in self._clients:
            logger.debug(f"Creating client for {key}")
            self._clients[key] = self.client_factory.client_for_mapping(mapping)
        return self._clients[key]

    def info_for_data(self, data: Any, source: str) -> Info:
        """Builds an Info from one decoded document."""
        if not isinstance(data, dict):
            raise SelectionError(f"unable to decode '{source}': expected an object, got {type(data).__name__}")
        api_version = data.get("apiVersion")
        kind = data.get("kind")
        if not api_version or not kind:
            raise SelectionError(
                f"unable to get type info from '{source}': apiVersion and kind must both be set"
            )
        meta = object_metadata(data)
        if is_list_object(data):
            return self._info_for_list(data, str(api_version), str(kind), meta, source)
        mapping = self.registry.mapping_for(str(api_version), str(kind))
        client = self.client_for(mapping)
        return Info(
            client, mapping,
            namespace=meta.get("namespace", "") or "",
            name=meta.get("name", "") or "",
            source=source,
            obj=data,
            resource_version=meta.get("resourceVersion", "") or "",
        )

    def _info_for_list(self, data: Dict[str, Any], api_version: str, kind: str,
                       meta: Dict[str, Any], source: str) -> Info:
        """
        Wraps a list document whole. A typed list (PodList) takes the
        mapping of its items; a generic List takes LIST_MAPPING. The list
        is never fetched, so it carries no client.
        """
        if kind == "List":
            mapping = LIST_MAPPING
        else:
            mapping = self.registry.mapping_for(api_version, kind[:-len("List")])
        return Info(
            None, mapping,
            namespace=meta.get("namespace", "") or "",
            source=source,
            obj=data,
            resource_version=meta.get("resourceVersion", "") or "",
        )
