#!/usr/bin/env python3
"""
KUBESELECT VISITOR PIPELINE
---------------------------
A Visitor drives a callback with zero or more Info items:

    visitor.visit(fn)   # fn(info) raises to stop the walk

Combinators and decorators are Visitors themselves, so they nest freely:
  * VisitorList        - fail-fast, the first error aborts the walk.
  * EagerVisitorList   - continue-on-error, errors are aggregated.
  * DecoratedVisitor   - runs helper functions on each item before fn.
  * FilteredVisitor    - drops items a predicate rejects.
  * FlattenListVisitor - expands list documents into their items.

Every combinator preserves the order of its children.

Author: KubeSelect Team
Date: 2026-10-18
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Sequence

from kubeselect.core.errors import ConfigurationError, ValidationError, new_aggregate
from kubeselect.core.info import Info

logger = logging.getLogger("kubeselect.visitors")

VisitorFunc = Callable[[Info], Any]


class Visitor(ABC):
    """Anything that can walk a callback over Info items."""

    @abstractmethod
    def visit(self, fn: VisitorFunc) -> None:
        ...


# An Info is the one-item Visitor over itself
Visitor.register(Info)


class VisitorList(Visitor):
    """Visits children in order and stops at the first error."""

    def __init__(self, visitors: Sequence[Visitor]):
        self.visitors = list(visitors)

    def visit(self, fn: VisitorFunc) -> None:
        for visitor in self.visitors:
            visitor.visit(fn)


class EagerVisitorList(Visitor):
    """
    Visits every child even after failures. Errors raised by a child or by
    the callback are collected and raised together as one AggregateError
    once all children have been attempted.
    """

    def __init__(self, visitors: Sequence[Visitor]):
        self.visitors = list(visitors)

    def visit(self, fn: VisitorFunc) -> None:
        errors: List[Exception] = []

        def collect(info: Info) -> None:
            try:
                fn(info)
            except Exception as e:
                errors.append(e)

        for visitor in self.visitors:
            try:
                visitor.visit(collect)
            except Exception as e:
                errors.append(e)

        aggregate = new_aggregate(errors)
        if aggregate is not None:
            raise aggregate


class DecoratedVisitor(Visitor):
    """Applies each helper to an item, in order, before the callback sees it."""

    def __init__(self, visitor: Visitor, *helpers: VisitorFunc):
        self.visitor = visitor
        self.helpers = helpers

    def visit(self, fn: VisitorFunc) -> None:
        def decorated(info: Info) -> None:
            for helper in self.helpers:
                helper(info)
            fn(info)

        self.visitor.visit(decorated)


class FilteredVisitor(Visitor):
    """Forwards only the items every predicate accepts."""

    def __init__(self, visitor: Visitor, *predicates: Callable[[Info], bool]):
        self.visitor = visitor
        self.predicates = predicates

    def visit(self, fn: VisitorFunc) -> None:
        def filtered(info: Info) -> None:
            for keep in self.predicates:
                if not keep(info):
                    logger.debug(f"Filtered out {info!r}")
                    return
            fn(info)

        self.visitor.visit(filtered)


def is_list_object(obj: Any) -> bool:
    """True for 'List' and '<Kind>List' documents carrying an items array."""
    return (
        isinstance(obj, dict)
        and isinstance(obj.get("items"), list)
        and str(obj.get("kind", "")).endswith("List")
    )


def _default_item_type(list_obj: Dict[str, Any], item: Any) -> None:
    """Items of a typed list (PodList) inherit apiVersion and kind from it."""
    list_kind = str(list_obj.get("kind", ""))
    if not isinstance(item, dict) or list_kind == "List":
        return
    item.setdefault("kind", list_kind[:-len("List")])
    if "apiVersion" in list_obj:
        item.setdefault("apiVersion", list_obj["apiVersion"])


class FlattenListVisitor(Visitor):
    """
    Expands every item whose object is a list document into one item per
    entry. The list item itself is never forwarded; other items pass through.
    """

    def __init__(self, visitor: Visitor, locator: Any):
        self.visitor = visitor
        self.locator = locator

    def visit(self, fn: VisitorFunc) -> None:
        def flatten(info: Info) -> None:
            obj = info.object
            if not is_list_object(obj):
                fn(info)
                return

            items, errors = [], []
            for raw in obj["items"]:
                _default_item_type(obj, raw)
                try:
                    item = self.locator.info_for_data(raw, info.source)
                except Exception as e:
                    errors.append(e)
                    continue
                if info.resource_version:
                    item.resource_version = info.resource_version
                items.append(item)

            aggregate = new_aggregate(errors)
            if aggregate is not None:
                raise aggregate
            for item in items:
                fn(item)

        self.visitor.visit(flatten)


def set_namespace(namespace: str) -> VisitorFunc:
    """Fills an empty namespace on namespaced items; never overwrites one."""
    def helper(info: Info) -> None:
        if not info.namespaced:
            return
        if not info.namespace:
            info.namespace = namespace
            info.update_object_namespace()
    return helper


def require_namespace(namespace: str) -> VisitorFunc:
    """
    Fills an empty namespace like set_namespace, and rejects items that
    already carry a different one.
    """
    def helper(info: Info) -> None:
        if not info.namespaced:
            return
        if not info.namespace:
            info.namespace = namespace
            info.update_object_namespace()
            return
        if info.namespace != namespace:
            raise ValidationError(
                f"the namespace from the provided object '{info.namespace}' does not match "
                f"the namespace '{namespace}'. You must pass '--namespace={info.namespace}' "
                f"to perform this operation."
            )
    return helper


def filter_namespace(namespace: str = "") -> Callable[[Info], bool]:
    """
    Clears the namespace of cluster-scoped items. With a namespace given,
    namespaced items outside of it are dropped.
    """
    def predicate(info: Info) -> bool:
        if not info.namespaced:
            if info.namespace:
                info.namespace = ""
                info.update_object_namespace()
            return True
        return not namespace or info.namespace == namespace
    return predicate


def retrieve_latest(info: Info) -> None:
    """Re-fetches the item from the server before it moves on."""
    if not info.name:
        return
    if info.namespaced and not info.namespace:
        raise ConfigurationError(f"no namespace set on resource {info.mapping.resource} '{info.name}'")
    info.get()


def retrieve_lazy(info: Info) -> None:
    """Defers the fetch until the item's object is actually read."""
    info.mark_lazy()
