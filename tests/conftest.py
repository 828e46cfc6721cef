"""Shared fixtures: an in-memory API server standing in for the cluster."""

import copy

import pytest

from kubeselect.core.builder import SelectionBuilder
from kubeselect.core.errors import NotFoundError
from kubeselect.core.locator import ResourceLocator
from kubeselect.core.registry import TypeRegistry


class FakeServer:
    """Stores objects by (resource, namespace, name) and records every request."""

    def __init__(self):
        self.objects = {}
        self.calls = []

    def add(self, resource, obj):
        meta = obj.get("metadata", {})
        self.objects[(resource, meta.get("namespace", ""), meta["name"])] = obj
        return obj


class FakeClient:
    def __init__(self, server, api_version):
        self.server = server
        self.api_version = api_version

    def get(self, mapping, namespace, name):
        self.server.calls.append(("get", mapping.resource, namespace, name))
        key = (mapping.resource, namespace, name)
        if key not in self.server.objects:
            raise NotFoundError(f"{mapping.resource} '{name}' not found")
        return copy.deepcopy(self.server.objects[key])

    def list(self, mapping, namespace, selector):
        self.server.calls.append(("list", mapping.resource, namespace, str(selector)))
        items = []
        for (resource, ns, _), obj in self.server.objects.items():
            if resource != mapping.resource or (namespace and ns != namespace):
                continue
            if not selector.matches(obj.get("metadata", {}).get("labels")):
                continue
            # Real list responses omit the type on each item
            items.append({k: copy.deepcopy(v) for k, v in obj.items() if k not in ("apiVersion", "kind")})
        return {
            "apiVersion": mapping.api_version,
            "kind": f"{mapping.kind}List",
            "metadata": {"resourceVersion": "100"},
            "items": items,
        }


class FakeClientFactory:
    def __init__(self, server):
        self.server = server
        self.created = []

    def client_for_mapping(self, mapping):
        self.created.append(mapping.api_version)
        return FakeClient(self.server, mapping.api_version)


def make_pod(name, namespace=None, labels=None, **extra):
    metadata = {"name": name}
    if namespace:
        metadata["namespace"] = namespace
    if labels:
        metadata["labels"] = dict(labels)
    obj = {"apiVersion": "v1", "kind": "Pod", "metadata": metadata}
    obj.update(extra)
    return obj


@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
def factory(server):
    return FakeClientFactory(server)


@pytest.fixture
def registry():
    return TypeRegistry.builtin()


@pytest.fixture
def locator(registry, factory):
    return ResourceLocator(registry, factory)


@pytest.fixture
def builder(locator):
    return SelectionBuilder(locator)


@pytest.fixture
def pod():
    return make_pod


@pytest.fixture
def write_manifest(tmp_path):
    """Writes text to a file under tmp_path and returns its path as a string."""
    def _write(name, text):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
        return str(path)
    return _write
