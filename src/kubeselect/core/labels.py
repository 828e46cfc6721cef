#!/usr/bin/env python3
"""
KUBESELECT LABEL SELECTORS
--------------------------
Parses label selector strings ('app=web,tier!=db', 'env in (prod,qa)',
'!canary') into an opaque Selector. The builder only needs to know whether
a selector is empty and how to render it for the API server; `matches` is
provided for in-memory filtering of decoded objects.

Author: KubeSelect Team
Date: 2026-10-18
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

EQUALS = "="
DOUBLE_EQUALS = "=="
NOT_EQUALS = "!="
IN = "in"
NOT_IN = "notin"
EXISTS = "exists"
DOES_NOT_EXIST = "!"

_KEY_RE = re.compile(
    r"^([a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*/)?"
    r"[A-Za-z0-9]([-A-Za-z0-9_.]*[A-Za-z0-9])?$"
)
_VALUE_RE = re.compile(r"^([A-Za-z0-9]([-A-Za-z0-9_.]*[A-Za-z0-9])?)?$")
_SET_RE = re.compile(r"^(?P<key>\S+)\s+(?P<op>in|notin)\s*\((?P<values>[^)]*)\)$")


@dataclass(frozen=True)
class Requirement:
    key: str
    operator: str
    values: Tuple[str, ...] = ()

    def matches(self, labels: Dict[str, str]) -> bool:
        if self.operator in (EQUALS, DOUBLE_EQUALS, IN):
            return self.key in labels and labels[self.key] in self.values
        if self.operator in (NOT_EQUALS, NOT_IN):
            return labels.get(self.key) not in self.values
        if self.operator == EXISTS:
            return self.key in labels
        return self.key not in labels

    def __str__(self) -> str:
        if self.operator == EXISTS:
            return self.key
        if self.operator == DOES_NOT_EXIST:
            return f"!{self.key}"
        if self.operator in (IN, NOT_IN):
            return f"{self.key} {self.operator} ({','.join(self.values)})"
        return f"{self.key}{self.operator}{self.values[0]}"


@dataclass(frozen=True)
class Selector:
    """A conjunction of requirements. No requirements selects everything."""
    requirements: Tuple[Requirement, ...] = field(default_factory=tuple)

    def empty(self) -> bool:
        return not self.requirements

    def matches(self, labels: Optional[Dict[str, str]]) -> bool:
        labels = labels or {}
        return all(r.matches(labels) for r in self.requirements)

    def __str__(self) -> str:
        return ",".join(str(r) for r in self.requirements)


def everything() -> Selector:
    """The selector that matches every object."""
    return Selector()


def _split_terms(text: str) -> List[str]:
    """Splits on commas that are not inside a '( ... )' value set."""
    terms, depth, current = [], 0, []
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise ValueError("unbalanced ')'")
        if char == "," and depth == 0:
            terms.append("".join(current))
            current = []
            continue
        current.append(char)
    if depth != 0:
        raise ValueError("unbalanced '('")
    terms.append("".join(current))
    return terms


def _check_key(key: str) -> str:
    if not _KEY_RE.match(key):
        raise ValueError(f"invalid label key '{key}'")
    return key


def _check_value(value: str) -> str:
    if len(value) > 63 or not _VALUE_RE.match(value):
        raise ValueError(f"invalid label value '{value}'")
    return value


def _parse_term(term: str) -> Requirement:
    term = term.strip()
    if not term:
        raise ValueError("found empty requirement")

    match = _SET_RE.match(term)
    if match:
        values = [v.strip() for v in match.group("values").split(",") if v.strip()]
        if not values:
            raise ValueError(f"'{term}' must have at least one value")
        return Requirement(
            _check_key(match.group("key")),
            match.group("op"),
            tuple(sorted(_check_value(v) for v in values)),
        )

    for operator in (NOT_EQUALS, DOUBLE_EQUALS, EQUALS):
        if operator in term:
            key, _, value = term.partition(operator)
            return Requirement(_check_key(key.strip()), operator, (_check_value(value.strip()),))

    if term.startswith("!"):
        return Requirement(_check_key(term[1:].strip()), DOES_NOT_EXIST)
    return Requirement(_check_key(term), EXISTS)


def parse(text: str) -> Selector:
    """
    Parses a selector string. An empty (or whitespace) string yields the
    empty selector. Raises ValueError on malformed input.
    """
    if not text or not text.strip():
        return Selector()
    return Selector(tuple(_parse_term(t) for t in _split_terms(text)))
