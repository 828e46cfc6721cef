#!/usr/bin/env python3
"""
KUBESELECT TYPE REGISTRY
------------------------
Maps human resource strings ('po', 'pod', 'pods', 'deployments.apps')
to a canonical (apiVersion, kind) and then to a full ResourceMapping.
Ships with a built-in table of core Kubernetes types and can be extended
from a JSON catalog, the same way the engine loads its schema catalog.

Catalog format (list of objects):
    [{"group": "example.com", "version": "v1", "kind": "Widget",
      "resource": "widgets", "namespaced": true, "shortNames": ["wd"]}]

Author: KubeSelect Team
Date: 2026-10-18
"""

import os
import sys
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from kubeselect.core.errors import ConfigurationError, TypeResolutionError
from kubeselect.core.models import (
    SCOPE_NAMESPACE,
    SCOPE_ROOT,
    ResourceMapping,
    split_api_version,
)

logger = logging.getLogger("kubeselect.registry")


@dataclass(frozen=True)
class TypeEntry:
    group: str
    version: str
    kind: str
    resource: str
    namespaced: bool = True
    short_names: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version

    def mapping(self) -> ResourceMapping:
        return ResourceMapping(
            group=self.group,
            version=self.version,
            kind=self.kind,
            resource=self.resource,
            scope=SCOPE_NAMESPACE if self.namespaced else SCOPE_ROOT,
        )

    def names(self) -> List[str]:
        """Every lowercase string that resolves to this entry."""
        singular = self.kind.lower()
        names = [self.resource, singular, *self.short_names]
        if self.group:
            names += [f"{self.resource}.{self.group}", f"{singular}.{self.group}"]
        return names


BUILTIN_TYPES: List[TypeEntry] = [
    TypeEntry("", "v1", "Pod", "pods", True, ("po",)),
    TypeEntry("", "v1", "Service", "services", True, ("svc",)),
    TypeEntry("", "v1", "ReplicationController", "replicationcontrollers", True, ("rc",)),
    TypeEntry("", "v1", "ConfigMap", "configmaps", True, ("cm",)),
    TypeEntry("", "v1", "Secret", "secrets", True),
    TypeEntry("", "v1", "ServiceAccount", "serviceaccounts", True, ("sa",)),
    TypeEntry("", "v1", "Endpoints", "endpoints", True, ("ep",)),
    TypeEntry("", "v1", "Event", "events", True, ("ev",)),
    TypeEntry("", "v1", "LimitRange", "limitranges", True, ("limits",)),
    TypeEntry("", "v1", "ResourceQuota", "resourcequotas", True, ("quota",)),
    TypeEntry("", "v1", "PersistentVolumeClaim", "persistentvolumeclaims", True, ("pvc",)),
    TypeEntry("", "v1", "PersistentVolume", "persistentvolumes", False, ("pv",)),
    TypeEntry("", "v1", "Namespace", "namespaces", False, ("ns",)),
    TypeEntry("", "v1", "Node", "nodes", False, ("no",)),
    TypeEntry("apps", "v1", "Deployment", "deployments", True, ("deploy",)),
    TypeEntry("apps", "v1", "ReplicaSet", "replicasets", True, ("rs",)),
    TypeEntry("apps", "v1", "StatefulSet", "statefulsets", True, ("sts",)),
    TypeEntry("apps", "v1", "DaemonSet", "daemonsets", True, ("ds",)),
    TypeEntry("batch", "v1", "Job", "jobs", True),
    TypeEntry("batch", "v1", "CronJob", "cronjobs", True, ("cj",)),
    TypeEntry("networking.k8s.io", "v1", "Ingress", "ingresses", True, ("ing",)),
    TypeEntry("networking.k8s.io", "v1", "NetworkPolicy", "networkpolicies", True, ("netpol",)),
    TypeEntry("rbac.authorization.k8s.io", "v1", "Role", "roles", True),
    TypeEntry("rbac.authorization.k8s.io", "v1", "RoleBinding", "rolebindings", True),
    TypeEntry("rbac.authorization.k8s.io", "v1", "ClusterRole", "clusterroles", False),
    TypeEntry("rbac.authorization.k8s.io", "v1", "ClusterRoleBinding", "clusterrolebindings", False),
    TypeEntry("storage.k8s.io", "v1", "StorageClass", "storageclasses", False, ("sc",)),
    TypeEntry("autoscaling", "v2", "HorizontalPodAutoscaler", "horizontalpodautoscalers", True, ("hpa",)),
    TypeEntry("policy", "v1", "PodDisruptionBudget", "poddisruptionbudgets", True, ("pdb",)),
    TypeEntry("apiextensions.k8s.io", "v1", "CustomResourceDefinition",
              "customresourcedefinitions", False, ("crd", "crds")),
]

# Multi-valued aliases expand to a comma-joined list of canonical resources.
BUILTIN_ALIASES: Dict[str, List[str]] = {
    "all": ["pods", "replicationcontrollers", "services", "deployments",
            "replicasets", "statefulsets", "daemonsets", "jobs", "cronjobs"],
}


class TypeRegistry:
    """
    The lookup table behind the ResourceLocator.
    Lookups are case-insensitive; ambiguous names fail instead of guessing.
    """

    def __init__(self, entries: Optional[List[TypeEntry]] = None,
                 aliases: Optional[Dict[str, List[str]]] = None):
        self._entries: List[TypeEntry] = []
        self._by_name: Dict[str, List[TypeEntry]] = {}
        self._aliases: Dict[str, List[str]] = dict(aliases or {})
        for entry in entries or []:
            self.register(entry)

    @classmethod
    def builtin(cls) -> "TypeRegistry":
        return cls(BUILTIN_TYPES, BUILTIN_ALIASES)

    @classmethod
    def from_catalog(cls, catalog_path: str, base: Optional["TypeRegistry"] = None) -> "TypeRegistry":
        """
        Loads extra types from a JSON catalog on top of `base` (built-ins by default).
        """
        registry = base if base is not None else cls.builtin()

        # Support for PyInstaller binary environments via _MEIPASS
        base_path = getattr(sys, "_MEIPASS", os.path.abspath("."))
        resolved = Path(base_path) / catalog_path
        if not resolved.exists():
            resolved = Path(catalog_path).resolve()

        try:
            with open(resolved, "r") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Unable to load type catalog from {resolved}")
            raise ConfigurationError(f"failed to load type catalog '{catalog_path}': {e}")

        if not isinstance(raw, list):
            raise ConfigurationError(f"type catalog '{catalog_path}' must contain a JSON list")
        for item in raw:
            try:
                registry.register(TypeEntry(
                    group=item.get("group", ""),
                    version=item["version"],
                    kind=item["kind"],
                    resource=item["resource"],
                    namespaced=bool(item.get("namespaced", True)),
                    short_names=tuple(item.get("shortNames", [])),
                ))
            except (KeyError, TypeError, AttributeError) as e:
                raise ConfigurationError(f"invalid entry in type catalog '{catalog_path}': {item!r} ({e})")
        return registry

    def register(self, entry: TypeEntry) -> None:
        if entry in self._entries:
            return
        self._entries.append(entry)
        for name in entry.names():
            bucket = self._by_name.setdefault(name.lower(), [])
            if entry not in bucket:
                bucket.append(entry)

    def entries(self) -> List[TypeEntry]:
        return list(self._entries)

    def aliases_for(self, resource: str) -> Optional[List[str]]:
        """Expansion of a multi-valued alias, or None if `resource` is not one."""
        aliases = self._aliases.get(resource.lower())
        return list(aliases) if aliases is not None else None

    def version_and_kind_for_resource(self, resource: str) -> Tuple[str, str]:
        candidates = self._by_name.get(resource.strip().lower(), [])
        if not candidates:
            raise TypeResolutionError(f"the server doesn't have a resource type '{resource}'")
        if len(candidates) > 1:
            options = ", ".join(f"{c.resource}.{c.group or 'core'}" for c in candidates)
            raise TypeResolutionError(f"resource type '{resource}' is ambiguous: matches {options}")
        entry = candidates[0]
        return entry.api_version, entry.kind

    def mapping_for(self, api_version: str, kind: str) -> ResourceMapping:
        group, version = split_api_version(api_version)
        for entry in self._entries:
            if entry.group == group and entry.version == version and entry.kind == kind:
                return entry.mapping()
        raise TypeResolutionError(f"no matches for kind '{kind}' in version '{api_version}'")
