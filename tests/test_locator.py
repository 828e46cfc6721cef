"""ResourceLocator: type resolution, client memoization, document decoding."""

import pytest

from kubeselect.core.errors import ConfigurationError, SelectionError, TypeResolutionError


def test_resolve_type_returns_full_mapping(locator):
    mapping = locator.resolve_type("deploy")
    assert (mapping.api_version, mapping.kind, mapping.resource) == ("apps/v1", "Deployment", "deployments")


def test_expand_aliases_joins_multi_valued_alias(locator):
    expanded = locator.expand_aliases(["all", "pods"])
    assert expanded[0].startswith("pods,replicationcontrollers,services")
    assert expanded[1] == "pods"


def test_multi_valued_alias_is_not_a_single_type(locator):
    with pytest.raises(TypeResolutionError):
        locator.resolve_type("all")


def test_resolve_all_preserves_order(locator):
    mappings = locator.resolve_all(["svc", "pods", "deploy"])
    assert [m.resource for m in mappings] == ["services", "pods", "deployments"]


def test_single_type_counts_canonical_types_not_spellings(locator):
    mappings = locator.resolve_all(["pods", "po", "pod"], single_type=True)
    assert len(mappings) == 3
    with pytest.raises(ConfigurationError, match="single resource type"):
        locator.resolve_all(["pods", "services"], single_type=True)


def test_clients_are_memoized_per_group_version(locator, factory):
    pods = locator.client_for(locator.resolve_type("pods"))
    services = locator.client_for(locator.resolve_type("services"))
    deployments = locator.client_for(locator.resolve_type("deployments"))
    assert pods is services
    assert pods is not deployments
    assert locator.client_for(locator.resolve_type("pods")) is pods
    assert factory.created == ["v1", "apps/v1"]


def test_info_for_data_reads_metadata(locator, pod):
    obj = pod("web", namespace="prod")
    obj["metadata"]["resourceVersion"] = "42"
    info = locator.info_for_data(obj, "web.yaml")
    assert (info.name, info.namespace, info.resource_version, info.source) == ("web", "prod", "42", "web.yaml")
    assert info.object is obj
    assert info.mapping.kind == "Pod"


def test_info_for_data_rejects_untyped_documents(locator):
    with pytest.raises(SelectionError, match="apiVersion and kind"):
        locator.info_for_data({"metadata": {"name": "x"}}, "x.yaml")
    with pytest.raises(SelectionError, match="expected an object"):
        locator.info_for_data(["not", "a", "map"], "x.yaml")
    with pytest.raises(TypeResolutionError):
        locator.info_for_data({"apiVersion": "v9", "kind": "Pod"}, "x.yaml")


def test_generic_list_document_is_wrapped_whole(locator, pod, factory):
    data = {"apiVersion": "v1", "kind": "List", "metadata": {"resourceVersion": "3"}, "items": [pod("a")]}
    info = locator.info_for_data(data, "list.yaml")
    assert info.mapping.kind == "List"
    assert not info.namespaced
    assert info.object is data
    assert info.resource_version == "3"
    assert info.client is None
    assert factory.created == []


def test_typed_list_document_takes_item_mapping(locator):
    data = {"apiVersion": "apps/v1", "kind": "DeploymentList", "items": []}
    info = locator.info_for_data(data, "deployments.yaml")
    assert (info.mapping.kind, info.mapping.resource) == ("Deployment", "deployments")
    assert info.name == ""


def test_list_of_unknown_type_fails(locator):
    with pytest.raises(TypeResolutionError):
        locator.info_for_data({"apiVersion": "example.com/v1", "kind": "WidgetList", "items": []}, "w.yaml")
