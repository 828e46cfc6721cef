"""Type registry lookups and JSON catalog loading."""

import json

import pytest

from kubeselect.core.errors import ConfigurationError, TypeResolutionError
from kubeselect.core.models import SCOPE_ROOT
from kubeselect.core.registry import TypeEntry, TypeRegistry


@pytest.mark.parametrize("name", ["pods", "pod", "po", "POD", "Pods"])
def test_every_spelling_resolves_to_pod(registry, name):
    assert registry.version_and_kind_for_resource(name) == ("v1", "Pod")


def test_group_qualified_names(registry):
    assert registry.version_and_kind_for_resource("deployments.apps") == ("apps/v1", "Deployment")
    assert registry.version_and_kind_for_resource("deploy") == ("apps/v1", "Deployment")


def test_mapping_carries_resource_and_scope(registry):
    mapping = registry.mapping_for("v1", "Node")
    assert mapping.resource == "nodes"
    assert mapping.scope == SCOPE_ROOT
    assert not mapping.namespaced
    assert registry.mapping_for("apps/v1", "Deployment").api_version == "apps/v1"


def test_unknown_types_fail(registry):
    with pytest.raises(TypeResolutionError):
        registry.version_and_kind_for_resource("bogus")
    with pytest.raises(TypeResolutionError):
        registry.mapping_for("v2", "Pod")


def test_ambiguous_names_fail(registry):
    registry.register(TypeEntry("example.com", "v1", "Pod", "pods", True))
    with pytest.raises(TypeResolutionError, match="ambiguous"):
        registry.version_and_kind_for_resource("pods")
    # The group qualified form still points at exactly one type
    assert registry.version_and_kind_for_resource("pods.example.com") == ("example.com/v1", "Pod")


def test_multi_valued_alias(registry):
    aliases = registry.aliases_for("all")
    assert aliases[0] == "pods"
    assert "services" in aliases
    assert registry.aliases_for("pods") is None


def test_catalog_extends_builtins(tmp_path):
    catalog = tmp_path / "types.json"
    catalog.write_text(json.dumps([
        {"group": "example.com", "version": "v1", "kind": "Widget",
         "resource": "widgets", "namespaced": False, "shortNames": ["wd"]},
    ]))
    registry = TypeRegistry.from_catalog(str(catalog))
    assert registry.version_and_kind_for_resource("wd") == ("example.com/v1", "Widget")
    assert not registry.mapping_for("example.com/v1", "Widget").namespaced
    assert registry.version_and_kind_for_resource("po") == ("v1", "Pod")


def test_broken_catalogs_are_configuration_errors(tmp_path):
    missing = tmp_path / "missing.json"
    with pytest.raises(ConfigurationError):
        TypeRegistry.from_catalog(str(missing))

    bad_entry = tmp_path / "bad.json"
    bad_entry.write_text(json.dumps([{"group": "x"}]))
    with pytest.raises(ConfigurationError, match="invalid entry"):
        TypeRegistry.from_catalog(str(bad_entry))
