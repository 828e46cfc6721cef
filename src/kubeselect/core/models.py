#!/usr/bin/env python3
"""
KUBESELECT CORE MODELS
----------------------
Defines the fundamental data structures shared by the locator, the
visitor pipeline and the selection builder. These models describe
resource TYPES; the per-instance unit lives in kubeselect.core.info.

Author: KubeSelect Team
Date: 2026-10-18
"""

from dataclasses import dataclass

SCOPE_NAMESPACE = "namespace"
SCOPE_ROOT = "root"


@dataclass(frozen=True)
class ResourceMapping:
    """
    The resolved identity of an API resource type.

    A mapping ties a (group/version, kind) pair to the plural resource name
    used in REST paths, and records whether instances live inside a namespace.
    """
    group: str              # API group, '' for the legacy core group
    version: str            # API version inside the group (e.g. 'v1')
    kind: str               # CamelCase kind (e.g. 'Deployment')
    resource: str           # Plural, lowercase resource name (e.g. 'deployments')
    scope: str = SCOPE_NAMESPACE

    @property
    def api_version(self) -> str:
        """The apiVersion string as it appears in manifests."""
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"

    @property
    def namespaced(self) -> bool:
        return self.scope == SCOPE_NAMESPACE

    def __str__(self) -> str:
        return f"{self.api_version}/{self.resource}"


@dataclass(frozen=True)
class ResourceTuple:
    """Raw 'type/name' user input; the type is resolved later."""
    resource: str
    name: str


def split_api_version(api_version: str):
    """Splits 'apps/v1' into ('apps', 'v1') and 'v1' into ('', 'v1')."""
    if "/" in api_version:
        group, _, version = api_version.partition("/")
        return group, version
    return "", api_version


# Generic 'v1 List' documents: never fetched, only expanded by flatten
LIST_MAPPING = ResourceMapping(group="", version="v1", kind="List", resource="lists", scope=SCOPE_ROOT)
