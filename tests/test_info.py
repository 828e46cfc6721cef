"""Info identity rules and on-demand fetching."""

import pytest

from kubeselect.core.errors import ConfigurationError, NotFoundError
from kubeselect.core.info import Info


def test_namespaced_names_need_a_namespace(locator):
    mapping = locator.resolve_type("pods")
    with pytest.raises(ConfigurationError, match="namespace may not be empty"):
        Info.for_name(None, mapping, "", "web")


def test_cluster_scoped_names_drop_the_namespace(locator):
    mapping = locator.resolve_type("nodes")
    info = Info.for_name(None, mapping, "prod", "node-1")
    assert info.namespace == ""


def test_get_fills_object_and_metadata(locator, server, pod):
    server.add("pods", pod("web", namespace="prod"))
    server.objects[("pods", "prod", "web")]["metadata"]["resourceVersion"] = "7"
    mapping = locator.resolve_type("pods")
    info = Info.for_name(locator.client_for(mapping), mapping, "prod", "web")

    assert not info.fetched
    info.get()
    assert info.fetched
    assert info.object["metadata"]["name"] == "web"
    assert info.resource_version == "7"
    assert server.calls == [("get", "pods", "prod", "web")]


def test_get_omits_namespace_for_cluster_scoped(locator, server):
    server.add("nodes", {"apiVersion": "v1", "kind": "Node", "metadata": {"name": "node-1"}})
    mapping = locator.resolve_type("nodes")
    info = Info(locator.client_for(mapping), mapping, namespace="leftover", name="node-1")
    info.get()
    assert server.calls == [("get", "nodes", "", "node-1")]


def test_get_propagates_not_found(locator):
    mapping = locator.resolve_type("pods")
    info = Info.for_name(locator.client_for(mapping), mapping, "prod", "missing")
    with pytest.raises(NotFoundError):
        info.get()


def test_lazy_fetch_happens_on_first_read(locator, server, pod):
    server.add("pods", pod("web", namespace="prod"))
    mapping = locator.resolve_type("pods")
    info = Info.for_name(locator.client_for(mapping), mapping, "prod", "web")

    info.mark_lazy()
    assert server.calls == []
    assert info.object["kind"] == "Pod"
    assert info.object["kind"] == "Pod"
    assert len(server.calls) == 1


def test_info_visits_itself_once(locator):
    mapping = locator.resolve_type("pods")
    info = Info(None, mapping, "prod", "web")
    seen = []
    info.visit(seen.append)
    assert seen == [info]


def test_update_object_namespace(locator, pod):
    info = locator.info_for_data(pod("web"), "web.yaml")
    info.namespace = "prod"
    info.update_object_namespace()
    assert info.object["metadata"]["namespace"] == "prod"
    info.namespace = ""
    info.update_object_namespace()
    assert "namespace" not in info.object["metadata"]
