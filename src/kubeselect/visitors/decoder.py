#!/usr/bin/env python3
"""
KUBESELECT DOCUMENT DECODER
---------------------------
Turns raw manifest text (multi-document YAML or JSON) into plain Python
objects. JSON is parsed by the same YAML 1.2 loader.

Author: KubeSelect Team
Date: 2026-10-18
"""

from typing import Any, Iterator

from ruamel.yaml import YAML, YAMLError

from kubeselect.core.errors import SelectionError


class DocumentDecoder:
    """
    Streams documents out of a text blob. Empty documents (bare '---')
    are skipped; a parse error stops the stream after the documents
    that were already produced.
    """

    def __init__(self):
        self.yaml = YAML(typ="safe", pure=True)

    def iter_documents(self, text: str, source: str) -> Iterator[Any]:
        # Strip a UTF-8 BOM the way editors on Windows leave it behind
        text = text.lstrip("\ufeff")
        try:
            for doc in self.yaml.load_all(text):
                if doc is not None:
                    yield doc
        except YAMLError as e:
            raise SelectionError(f"error parsing {source}: {e}") from e
