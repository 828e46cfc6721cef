#!/usr/bin/env python3
"""
KUBESELECT RESULT
-----------------
The terminal product of a selection: one visitor to pull items from,
plus the metadata the caller needs to present them.

Stream-backed sources (stdin) can only be walked once. Call `infos()`
to capture the items when they must be iterated more than once.

Author: KubeSelect Team
Date: 2026-10-18
"""

from typing import Any, Dict, List, Optional, Sequence

from kubeselect.core.errors import SelectionError
from kubeselect.core.info import Info


class Result:
    def __init__(self, visitor: Any = None, sources: Sequence[Any] = (),
                 singular: bool = False, error: Optional[SelectionError] = None):
        self.visitor = visitor
        self.sources = list(sources)
        self.singular = singular
        self.error = error
        self._infos: Optional[List[Info]] = None

    def err(self) -> Optional[SelectionError]:
        return self.error

    def is_singular(self) -> bool:
        """True when the selection can only ever name one resource."""
        return self.singular

    def visit(self, fn) -> None:
        if self.error is not None:
            raise self.error
        self.visitor.visit(fn)

    def infos(self) -> List[Info]:
        """
        Walks the visitor once and caches the items. A walk that failed
        records its error, which every later call raises again.
        """
        if self.error is not None:
            raise self.error
        if self._infos is not None:
            return list(self._infos)

        infos: List[Info] = []
        try:
            self.visitor.visit(infos.append)
        except SelectionError as e:
            self.error = e
            raise
        self._infos = infos
        return list(infos)

    def object(self) -> Dict[str, Any]:
        """
        The single object of a singular selection, otherwise every object
        wrapped in a v1 List.
        """
        infos = self.infos()
        objects = [info.object for info in infos]
        if len(objects) == 1 and self.singular:
            return objects[0]
        return {
            "apiVersion": "v1",
            "kind": "List",
            "metadata": {},
            "items": objects,
        }
