#!/usr/bin/env python3
"""
KUBESELECT ERRORS
-----------------
Error kinds raised while accumulating, evaluating and walking a selection.
Every error is a SelectionError so callers can catch the family at once,
while the subclasses let them tell configuration mistakes apart from
cluster-side failures.

Author: KubeSelect Team
Date: 2026-10-18
"""

from typing import Iterable, List, Optional


class SelectionError(Exception):
    """Base class for every error produced by kubeselect."""


class ConfigurationError(SelectionError):
    """Mutually exclusive or malformed input combination. Never retried."""


class TypeResolutionError(SelectionError):
    """Unknown or ambiguous resource alias, kind or version."""


class ClientConnectionError(SelectionError):
    """Client construction or request failure."""


class NotFoundError(SelectionError):
    """The named resource does not exist on the server."""


class ValidationError(SelectionError):
    """An object disagrees with the enforced namespace."""


class AggregateError(SelectionError):
    """
    An ordered collection of independent errors.

    Nested aggregates are flattened on construction so callers can
    enumerate leaf errors directly through `errors`.
    """

    def __init__(self, errors: Iterable[BaseException]):
        flat: List[BaseException] = []
        for err in errors:
            if isinstance(err, AggregateError):
                flat.extend(err.errors)
            else:
                flat.append(err)
        self.errors = flat
        super().__init__(self._message())

    def _message(self) -> str:
        if len(self.errors) == 1:
            return str(self.errors[0])
        return "[" + ", ".join(str(e) for e in self.errors) + "]"

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self):
        return iter(self.errors)


def new_aggregate(errors: Iterable[BaseException]) -> Optional[AggregateError]:
    """Returns None for an empty list, so 'no error' stays distinguishable."""
    errors = [e for e in errors if e is not None]
    if not errors:
        return None
    return AggregateError(errors)
