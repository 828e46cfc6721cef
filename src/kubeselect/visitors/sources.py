#!/usr/bin/env python3
"""
KUBESELECT SOURCE VISITORS
--------------------------
Base visitors, one per input source:
  * StreamVisitor    - any readable text stream (stdin); single pass.
  * FileVisitor      - one file on disk.
  * DirectoryVisitor - the manifest files directly inside a directory.
  * URLVisitor       - a document served over http(s).
  * SelectorVisitor  - a server-side list of one type matching a selector.

With `ignore_errors`, documents whose type is unknown are skipped with a
warning. Malformed documents always fail their source.

Author: KubeSelect Team
Date: 2026-10-18
"""

import logging
from pathlib import Path
from typing import Any, Iterable, Optional, TextIO

import requests

from kubeselect.core.errors import (
    ClientConnectionError,
    NotFoundError,
    SelectionError,
)
from kubeselect.core.info import Info, object_metadata
from kubeselect.core.models import ResourceMapping
from kubeselect.visitors.decoder import DocumentDecoder
from kubeselect.visitors.pipeline import Visitor, VisitorFunc

logger = logging.getLogger("kubeselect.visitors")

MANIFEST_EXTENSIONS = (".json", ".yaml")


def _visit_text(text: str, source: str, locator: Any, decoder: DocumentDecoder,
                ignore_errors: bool, fn: VisitorFunc) -> None:
    for doc in decoder.iter_documents(text, source):
        try:
            info = locator.info_for_data(doc, source)
        except SelectionError as e:
            if ignore_errors:
                logger.warning(f"Skipping unrecognized object in {source}: {e}")
                continue
            raise
        fn(info)


def _read_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise SelectionError(f"unable to read '{path}': {e}")


class SinglePassReader:
    """
    Wraps a stream that cannot be rewound. A second read raises instead of
    silently returning nothing.
    """

    def __init__(self, reader: TextIO, source: str):
        self.reader = reader
        self.source = source
        self.consumed = False

    def read(self) -> str:
        if self.consumed:
            raise SelectionError(f"stream '{self.source}' has already been consumed")
        self.consumed = True
        text = self.reader.read()
        if isinstance(text, bytes):
            text = text.decode("utf-8-sig")
        return text


class StreamVisitor(Visitor):
    """Reads objects from a stream, once."""

    def __init__(self, reader: TextIO, locator: Any, source: str,
                 ignore_errors: bool = False, decoder: Optional[DocumentDecoder] = None):
        if not isinstance(reader, SinglePassReader):
            reader = SinglePassReader(reader, source)
        self.reader = reader
        self.locator = locator
        self.source = source
        self.ignore_errors = ignore_errors
        self.decoder = decoder or DocumentDecoder()

    def visit(self, fn: VisitorFunc) -> None:
        text = self.reader.read()
        _visit_text(text, self.source, self.locator, self.decoder, self.ignore_errors, fn)


class FileVisitor(Visitor):
    def __init__(self, path: str, locator: Any, ignore_errors: bool = False,
                 decoder: Optional[DocumentDecoder] = None):
        self.path = Path(path)
        self.locator = locator
        self.ignore_errors = ignore_errors
        self.decoder = decoder or DocumentDecoder()

    def visit(self, fn: VisitorFunc) -> None:
        text = _read_file(self.path)
        _visit_text(text, str(self.path), self.locator, self.decoder, self.ignore_errors, fn)


class DirectoryVisitor(Visitor):
    """Non-recursive: only files directly inside `path`, in name order."""

    def __init__(self, path: str, locator: Any, extensions: Iterable[str] = MANIFEST_EXTENSIONS,
                 ignore_errors: bool = False, decoder: Optional[DocumentDecoder] = None):
        self.path = Path(path)
        self.locator = locator
        self.extensions = tuple(e.lower() for e in extensions)
        self.ignore_errors = ignore_errors
        self.decoder = decoder or DocumentDecoder()

    def files(self):
        try:
            entries = sorted(self.path.iterdir())
        except OSError as e:
            raise SelectionError(f"unable to list directory '{self.path}': {e}")
        return [
            f for f in entries
            if f.is_file() and f.suffix.lower() in self.extensions
        ]

    def visit(self, fn: VisitorFunc) -> None:
        for file_path in self.files():
            text = _read_file(file_path)
            _visit_text(text, str(file_path), self.locator, self.decoder, self.ignore_errors, fn)


class URLVisitor(Visitor):
    def __init__(self, url: str, locator: Any, ignore_errors: bool = False,
                 decoder: Optional[DocumentDecoder] = None):
        self.url = url
        self.locator = locator
        self.ignore_errors = ignore_errors
        self.decoder = decoder or DocumentDecoder()

    def visit(self, fn: VisitorFunc) -> None:
        try:
            response = requests.get(self.url)
        except requests.RequestException as e:
            raise ClientConnectionError(f"unable to read URL '{self.url}': {e}")
        if response.status_code != 200:
            raise SelectionError(
                f"unable to read URL '{self.url}', server reported {response.status_code} {response.reason}"
            )
        _visit_text(response.text, self.url, self.locator, self.decoder, self.ignore_errors, fn)


class SelectorVisitor(Visitor):
    """
    Lists one resource type on the server and hands the whole list to the
    callback as a single Info; FlattenListVisitor splits it when asked.
    """

    def __init__(self, client: Any, mapping: ResourceMapping, namespace: str, selector: Any):
        self.client = client
        self.mapping = mapping
        self.namespace = namespace
        self.selector = selector

    def visit(self, fn: VisitorFunc) -> None:
        try:
            obj = self.client.list(self.mapping, self.namespace, self.selector)
        except NotFoundError:
            if self.selector.empty():
                logger.info(f"Unable to list '{self.mapping.resource}'")
            else:
                logger.info(f"Unable to find '{self.mapping.resource}' that match the selector '{self.selector}'")
            raise
        info = Info(
            self.client, self.mapping,
            namespace=self.namespace,
            source=f"{self.mapping.resource} selector '{self.selector}'",
            obj=obj,
            resource_version=object_metadata(obj).get("resourceVersion", "") or "",
        )
        fn(info)
