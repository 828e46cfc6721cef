#!/usr/bin/env python3
"""
KUBESELECT BUILDER - The Orchestrator
-------------------------------------
Converts command line style input (files, URLs, stdin, label selectors,
type/name arguments) into one Result to iterate over.

Selection happens in two phases:
  1. ACCUMULATE - SelectionBuilder records every call as plain data.
     Problems found here (missing paths, bad selectors, malformed
     'type/name' tokens) are collected, not raised.
  2. EVALUATE   - `evaluate(config, locator)` classifies the frozen
     SelectionConfig into exactly one SelectionMode, validates it and
     assembles the visitor pipeline.

Author: KubeSelect Team
Date: 2026-10-18
"""

import os
import sys
import stat
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, TextIO, Tuple
from urllib.parse import urlparse

from kubeselect.core import labels
from kubeselect.core.errors import (
    ConfigurationError,
    SelectionError,
    new_aggregate,
)
from kubeselect.core.info import Info
from kubeselect.core.locator import ResourceLocator
from kubeselect.core.models import ResourceMapping, ResourceTuple
from kubeselect.core.result import Result
from kubeselect.visitors.pipeline import (
    DecoratedVisitor,
    EagerVisitorList,
    FilteredVisitor,
    FlattenListVisitor,
    Visitor,
    VisitorList,
    filter_namespace,
    require_namespace,
    retrieve_latest,
    retrieve_lazy,
    set_namespace,
)
from kubeselect.visitors.sources import (
    DirectoryVisitor,
    FileVisitor,
    SelectorVisitor,
    SinglePassReader,
    StreamVisitor,
    URLVisitor,
)

logger = logging.getLogger("kubeselect.builder")

SOURCE_FILE = "file"
SOURCE_DIRECTORY = "directory"
SOURCE_URL = "url"
SOURCE_STREAM = "stream"

ARGS_CONFLICT = "when paths, URLs, or stdin is provided as input, you may not specify a resource by arguments as well"


@dataclass(frozen=True)
class PathSource:
    """One recorded filename/URL/stream input."""
    kind: str
    location: str
    reader: Optional[TextIO] = field(default=None, compare=False)


@dataclass(frozen=True)
class SelectionConfig:
    """Everything a SelectionBuilder accumulated, frozen for evaluation."""
    errors: Tuple[SelectionError, ...] = ()
    paths: Tuple[PathSource, ...] = ()
    selector: Optional[labels.Selector] = None
    select_all: bool = False
    implicit_select_all: bool = False
    resource_types: Tuple[str, ...] = ()
    namespace: str = ""
    names: Tuple[str, ...] = ()
    resource_tuples: Tuple[ResourceTuple, ...] = ()
    default_namespace: bool = False
    require_namespace: bool = False
    flatten: bool = False
    latest: bool = False
    single_resource_type: bool = False
    continue_on_error: bool = False

    @property
    def stream(self) -> bool:
        return any(p.kind == SOURCE_STREAM for p in self.paths)

    @property
    def dir(self) -> bool:
        return any(p.kind == SOURCE_DIRECTORY for p in self.paths)

    def effective_selector(self) -> Optional[labels.Selector]:
        if self.selector is not None:
            return self.selector
        if self.select_all or self.implicit_select_all:
            return labels.everything()
        return None


class SelectionMode(Enum):
    SELECTOR = "selector"
    TUPLES = "tuples"
    NAMES = "names"
    PATHS = "paths"
    NONE = "none"


def classify(config: SelectionConfig) -> SelectionMode:
    """Picks the one mode that owns this configuration, by precedence."""
    if config.effective_selector() is not None:
        return SelectionMode.SELECTOR
    if config.resource_tuples:
        return SelectionMode.TUPLES
    if config.names:
        return SelectionMode.NAMES
    if config.paths:
        return SelectionMode.PATHS
    return SelectionMode.NONE


def split_resource_argument(arg: str) -> List[str]:
    """Splits on commas, keeping the first occurrence of each value in order."""
    out: List[str] = []
    for s in arg.split(","):
        if s not in out:
            out.append(s)
    return out


def _has_combined_type_args(args: List[str]) -> Tuple[bool, Optional[SelectionError]]:
    with_slash = sum(1 for s in args if "/" in s)
    if with_slash and with_slash == len(args):
        return True, None
    if with_slash:
        return True, ConfigurationError(
            "when passing arguments in resource/name form, all arguments must include the resource"
        )
    return False, None


class SelectionBuilder:
    """
    Accumulates selection input. Every method records data and returns the
    builder; nothing is validated across fields until `do()`.
    """

    def __init__(self, locator: ResourceLocator):
        self.locator = locator
        self._errors: List[SelectionError] = []
        self._paths: List[PathSource] = []
        self._selector: Optional[labels.Selector] = None
        self._select_all = False
        self._implicit_select_all = False
        self._resources: List[str] = []
        self._namespace = ""
        self._names: List[str] = []
        self._tuples: List[ResourceTuple] = []
        self._default_namespace = False
        self._require_namespace = False
        self._flatten = False
        self._latest = False
        self._single_resource_type = False
        self._continue_on_error = False

    # --- Sources -------------------------------------------------------

    def filename_param(self, *paths: str) -> "SelectionBuilder":
        """'-' is stdin, http(s):// prefixes are URLs, anything else a path."""
        for s in paths:
            if s == "-":
                self.stdin()
            elif s.startswith("http://") or s.startswith("https://"):
                try:
                    parsed = urlparse(s)
                    if not parsed.netloc:
                        raise ValueError("missing host")
                except ValueError as e:
                    self._errors.append(ConfigurationError(f"the URL passed to filename '{s}' is not valid: {e}"))
                    continue
                self.url(s)
            else:
                self.path(s)
        return self

    def url(self, *urls: str) -> "SelectionBuilder":
        for u in urls:
            self._paths.append(PathSource(SOURCE_URL, u))
        return self

    def stdin(self) -> "SelectionBuilder":
        return self.stream(sys.stdin, "STDIN")

    def stream(self, reader: TextIO, name: str) -> "SelectionBuilder":
        """Objects read from `reader`; `name` labels them in errors."""
        # Wrapped once so every evaluation shares the single-pass guard
        self._paths.append(PathSource(SOURCE_STREAM, name, SinglePassReader(reader, name)))
        return self

    def path(self, *paths: str) -> "SelectionBuilder":
        for p in paths:
            try:
                is_dir = stat.S_ISDIR(os.stat(p).st_mode)
            except FileNotFoundError:
                self._errors.append(ConfigurationError(f"the path '{p}' does not exist"))
                continue
            except OSError as e:
                self._errors.append(ConfigurationError(f"the path '{p}' cannot be accessed: {e}"))
                continue
            self._paths.append(PathSource(SOURCE_DIRECTORY if is_dir else SOURCE_FILE, p))
        return self

    # --- Server side selection -----------------------------------------

    def resource_types(self, *types: str) -> "SelectionBuilder":
        self._resources.extend(types)
        return self

    def selector_param(self, selector: str) -> "SelectionBuilder":
        """
        Parses a label selector. An empty string is a no-op; use
        select_all_param(True) to select everything.
        """
        try:
            parsed = labels.parse(selector)
        except ValueError as e:
            self._errors.append(ConfigurationError(f"the provided selector '{selector}' is not valid: {e}"))
            return self
        if parsed.empty():
            return self
        return self.selector(parsed)

    def selector(self, selector: Optional[labels.Selector]) -> "SelectionBuilder":
        self._selector = selector
        return self

    def select_all_param(self, select_all: bool) -> "SelectionBuilder":
        self._select_all = select_all
        return self

    def namespace_param(self, namespace: str) -> "SelectionBuilder":
        self._namespace = namespace or ""
        return self

    def default_namespace(self) -> "SelectionBuilder":
        self._default_namespace = True
        return self

    def require_namespace(self) -> "SelectionBuilder":
        self._require_namespace = True
        return self

    def resource_type_or_name_args(self, allow_empty_selector: bool, *args: str) -> "SelectionBuilder":
        """
        Accepts `type[,type...]`, `type name [name...]` or
        `type/name [type/name...]`. A lone type with `allow_empty_selector`
        selects every object of that type.
        """
        args = self.locator.expand_aliases(args)
        combined, err = _has_combined_type_args(args)
        if combined:
            if err is not None:
                self._errors.append(err)
                return self
            for s in args:
                seg = s.split("/")
                if len(seg) != 2:
                    self._errors.append(ConfigurationError(
                        "arguments in resource/name form may not have more than one slash"
                    ))
                    return self
                resource, name = seg
                if not resource or not name or len(split_resource_argument(resource)) != 1:
                    self._errors.append(ConfigurationError(
                        "arguments in resource/name form must have a single resource and name"
                    ))
                    return self
                self._tuples.append(ResourceTuple(resource, name))
            return self

        if len(args) >= 2:
            self._names.extend(args[1:])
            self.resource_types(*split_resource_argument(args[0]))
        elif len(args) == 1:
            self.resource_types(*split_resource_argument(args[0]))
            if allow_empty_selector:
                self._implicit_select_all = True
        return self

    def resource_type_and_name_args(self, *args: str) -> "SelectionBuilder":
        """Exactly one type and one name, or nothing at all."""
        if len(args) == 2:
            self._names.append(args[1])
            self.resource_types(*split_resource_argument(args[0]))
        elif args:
            self._errors.append(ConfigurationError("when passing arguments, must be resource and name"))
        return self

    # --- Policy --------------------------------------------------------

    def flatten(self) -> "SelectionBuilder":
        """Lists are split into their items; the list itself is not visited."""
        self._flatten = True
        return self

    def latest(self) -> "SelectionBuilder":
        """Fetch the server's copy of objects loaded from files or URLs."""
        self._latest = True
        return self

    def continue_on_error(self) -> "SelectionBuilder":
        self._continue_on_error = True
        return self

    def single_resource_type(self) -> "SelectionBuilder":
        self._single_resource_type = True
        return self

    # --- Evaluation ----------------------------------------------------

    def config(self) -> SelectionConfig:
        return SelectionConfig(
            errors=tuple(self._errors),
            paths=tuple(self._paths),
            selector=self._selector,
            select_all=self._select_all,
            implicit_select_all=self._implicit_select_all,
            resource_types=tuple(self._resources),
            namespace=self._namespace,
            names=tuple(self._names),
            resource_tuples=tuple(self._tuples),
            default_namespace=self._default_namespace,
            require_namespace=self._require_namespace,
            flatten=self._flatten,
            latest=self._latest,
            single_resource_type=self._single_resource_type,
            continue_on_error=self._continue_on_error,
        )

    def do(self) -> Result:
        """
        Returns the Result for everything accumulated so far. Stream inputs
        are consumed by the first walk of the Result.
        """
        return evaluate(self.config(), self.locator)


def _combine(visitors: List[Visitor], continue_on_error: bool) -> Visitor:
    if continue_on_error:
        return EagerVisitorList(visitors)
    return VisitorList(visitors)


def _scoped_namespace(mapping: ResourceMapping, namespace: str) -> str:
    return namespace if mapping.namespaced else ""


def _select_by_selector(config: SelectionConfig, locator: ResourceLocator) -> Result:
    selector = config.effective_selector()
    if config.select_all and config.selector is not None and not config.selector.empty():
        raise ConfigurationError(
            f"found non empty selector '{config.selector}' with the 'all' parameter set"
        )
    if config.names:
        raise ConfigurationError("name cannot be provided when a selector is specified")
    if config.resource_tuples:
        raise ConfigurationError("selectors and the all flag cannot be used when passing resource/name arguments")
    if not config.resource_types:
        raise ConfigurationError("at least one resource must be specified to use a selector")
    if config.paths:
        # An empty selector only came from bare type arguments
        if selector.empty():
            raise ConfigurationError(ARGS_CONFLICT)
        raise ConfigurationError("a selector may not be specified when path, URL, or stdin is provided as input")

    mappings = locator.resolve_all(config.resource_types, config.single_resource_type)
    visitors: List[Visitor] = []
    for mapping in mappings:
        client = locator.client_for(mapping)
        visitors.append(SelectorVisitor(
            client, mapping, _scoped_namespace(mapping, config.namespace), selector
        ))
    return Result(_combine(visitors, config.continue_on_error), visitors)


def _resolve_tuple_mappings(config: SelectionConfig, locator: ResourceLocator) -> Dict[str, ResourceMapping]:
    """One lookup per distinct type string, keyed by raw and canonical name."""
    mappings: Dict[str, ResourceMapping] = {}
    canonical = set()
    for t in config.resource_tuples:
        if t.resource in mappings:
            continue
        mapping = locator.resolve_type(t.resource)
        mappings[mapping.resource] = mapping
        mappings[t.resource] = mapping
        canonical.add(mapping)
    if len(canonical) > 1 and config.single_resource_type:
        raise ConfigurationError("you may only specify a single resource type")
    return mappings


def _select_by_tuples(config: SelectionConfig, locator: ResourceLocator) -> Result:
    singular = len(config.resource_tuples) == 1
    if config.paths:
        raise ConfigurationError(ARGS_CONFLICT)
    if config.resource_types:
        raise ConfigurationError("you may not specify individual resources and bulk resources in the same call")

    mappings = _resolve_tuple_mappings(config, locator)
    clients: Dict[str, Any] = {}
    for mapping in mappings.values():
        key = f"{mapping.api_version}/{mapping.resource}"
        if key not in clients:
            clients[key] = locator.client_for(mapping)

    items: List[Visitor] = []
    for t in config.resource_tuples:
        mapping = mappings[t.resource]
        client = clients[f"{mapping.api_version}/{mapping.resource}"]
        items.append(Info.for_name(client, mapping, config.namespace, t.name))
    return Result(_combine(items, config.continue_on_error), items, singular=singular)


def _select_by_names(config: SelectionConfig, locator: ResourceLocator) -> Result:
    singular = len(config.names) == 1
    if config.paths:
        raise ConfigurationError(ARGS_CONFLICT)
    if not config.resource_types:
        raise ConfigurationError("you must provide a resource and a resource name together")
    if len(config.resource_types) > 1:
        raise ConfigurationError("you must specify only one resource")

    mapping = locator.resolve_all(config.resource_types, config.single_resource_type)[0]
    client = locator.client_for(mapping)

    visitors: List[Visitor] = []
    for name in config.names:
        info = Info.for_name(client, mapping, config.namespace, name)
        # Names are fetched right away; a failure aborts the whole selection
        info.get()
        visitors.append(info)
    return Result(VisitorList(visitors), visitors, singular=singular)


def _path_visitor(source: PathSource, locator: ResourceLocator, ignore_errors: bool) -> Visitor:
    if source.kind == SOURCE_STREAM:
        return StreamVisitor(source.reader, locator, source.location, ignore_errors)
    if source.kind == SOURCE_URL:
        return URLVisitor(source.location, locator, ignore_errors)
    if source.kind == SOURCE_DIRECTORY:
        return DirectoryVisitor(source.location, locator, ignore_errors=ignore_errors)
    return FileVisitor(source.location, locator, ignore_errors)


def _select_by_paths(config: SelectionConfig, locator: ResourceLocator) -> Tuple[Result, bool]:
    """Returns the Result and whether flatten/latest were already applied."""
    if config.resource_types:
        raise ConfigurationError(
            "when paths, URLs, or stdin is provided as input, you may not specify resource arguments as well"
        )
    sources = [_path_visitor(p, locator, config.continue_on_error) for p in config.paths]
    visitor = _combine(sources, config.continue_on_error)

    # Only objects loaded from disk or URLs can be re-fetched
    applied = False
    if config.latest:
        # Lists must be split before each item can be fetched
        if config.flatten:
            visitor = FlattenListVisitor(visitor, locator)
        visitor = DecoratedVisitor(visitor, retrieve_latest)
        applied = True
    singular = not config.dir and not config.stream and len(config.paths) == 1
    return Result(visitor, sources, singular=singular), applied


def _singular_hint(mode: SelectionMode, config: SelectionConfig) -> bool:
    if mode is SelectionMode.TUPLES:
        return len(config.resource_tuples) == 1
    if mode is SelectionMode.NAMES:
        return len(config.names) == 1
    if mode is SelectionMode.PATHS:
        return not config.dir and not config.stream and len(config.paths) == 1
    return False


def evaluate(config: SelectionConfig, locator: ResourceLocator) -> Result:
    """
    Turns a frozen configuration into a Result. Errors never escape: they
    are returned on the Result.
    """
    aggregate = new_aggregate(config.errors)
    if aggregate is not None:
        return Result(error=aggregate)

    mode = classify(config)
    logger.debug(f"Selection mode: {mode.value}")
    if mode is SelectionMode.NONE:
        return Result(error=ConfigurationError("you must provide one or more resources by argument or filename"))

    pre_applied = False
    try:
        if mode is SelectionMode.SELECTOR:
            result = _select_by_selector(config, locator)
        elif mode is SelectionMode.TUPLES:
            result = _select_by_tuples(config, locator)
        elif mode is SelectionMode.NAMES:
            result = _select_by_names(config, locator)
        else:
            result, pre_applied = _select_by_paths(config, locator)
    except SelectionError as e:
        return Result(singular=_singular_hint(mode, config), error=e)

    return _decorate(result, config, locator, pre_applied)


def _decorate(result: Result, config: SelectionConfig, locator: ResourceLocator,
              pre_applied: bool) -> Result:
    """
    Fixed overlay order: flatten, default namespace, require namespace,
    namespace filter, lazy refresh.
    """
    visitor = result.visitor
    if config.flatten and not pre_applied:
        visitor = FlattenListVisitor(visitor, locator)

    helpers = []
    if config.default_namespace:
        helpers.append(set_namespace(config.namespace))
    if config.require_namespace:
        helpers.append(require_namespace(config.namespace))
    if helpers:
        visitor = DecoratedVisitor(visitor, *helpers)

    scope = config.namespace if config.require_namespace else ""
    visitor = FilteredVisitor(visitor, filter_namespace(scope))

    if config.latest and not pre_applied:
        visitor = DecoratedVisitor(visitor, retrieve_lazy)

    result.visitor = visitor
    return result
