#!/usr/bin/env python3
"""
KUBESELECT EXPORTER
-------------------
Renders resolved objects back to YAML for `-o yaml`, with the usual
Kubernetes top-level key order.

Author: KubeSelect Team
Date: 2026-10-18
"""

import io
from typing import Any, Iterable

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq


class ObjectExporter:
    """Converts plain decoded objects into a multi-document YAML string."""

    def __init__(self):
        self.yaml = YAML(typ="rt")
        # Standard K8s: 2 spaces, but sequences are indented 4 (offset 2)
        self.yaml.indent(mapping=2, sequence=4, offset=2)
        self.yaml.width = 4096
        self.preferred_order = ["apiVersion", "kind", "metadata", "spec", "data", "status"]

    def _ordered(self, data: Any) -> Any:
        """Recursively copies into CommentedMaps, top keys in preferred order."""
        if isinstance(data, dict):
            keys = list(data.keys())

            def sort_logic(key):
                if key in self.preferred_order:
                    return self.preferred_order.index(key)
                # Unknown keys keep their relative original position
                return len(self.preferred_order) + keys.index(key)

            ordered = CommentedMap()
            for key in sorted(keys, key=sort_logic):
                ordered[key] = self._ordered(data[key])
            return ordered
        if isinstance(data, list):
            return CommentedSeq(self._ordered(item) for item in data)
        return data

    def export(self, objects: Iterable[Any]) -> str:
        stream = io.StringIO()
        for i, obj in enumerate(o for o in objects if o):
            if i > 0:
                stream.write("---\n")
            self.yaml.dump(self._ordered(obj), stream)
        return stream.getvalue()
