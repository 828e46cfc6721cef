"""End-to-end runs of the kubeselect command against the in-memory server."""

import pytest

from kubeselect.cli.main import KubeSelectCLI


@pytest.fixture
def cli(factory):
    return KubeSelectCLI(client_factory=factory)


def test_get_file_prints_names(cli, write_manifest, capsys, server):
    path = write_manifest("pod.yaml", "apiVersion: v1\nkind: Pod\nmetadata:\n  name: a\n")
    assert cli.run(["get", "-f", path, "-o", "name"]) == 0
    assert "pods/a" in capsys.readouterr().out
    assert server.calls == []


def test_get_without_input_fails(cli, capsys):
    assert cli.run(["get"]) == 1
    assert "you must provide" in capsys.readouterr().err


def test_get_tuple_fetches_for_yaml_output(cli, server, pod, capsys):
    server.add("pods", pod("web", namespace="default", labels={"app": "web"}))
    assert cli.run(["get", "pods/web", "-o", "yaml"]) == 0
    out = capsys.readouterr().out
    assert "name: web" in out
    assert server.calls == [("get", "pods", "default", "web")]


def test_get_selector_with_flatten(cli, server, pod, capsys):
    server.add("pods", pod("web", namespace="prod", labels={"app": "web"}))
    server.add("pods", pod("db", namespace="prod", labels={"app": "db"}))
    assert cli.run(["get", "pods", "-l", "app=web", "-n", "prod", "--flatten", "-o", "name"]) == 0
    out = capsys.readouterr().out
    assert "pods/web" in out
    assert "pods/db" not in out


def test_get_missing_name_reports_error(cli, capsys):
    assert cli.run(["get", "pods", "gone"]) == 1
    assert "not found" in capsys.readouterr().err


def test_get_conflicting_input(cli, write_manifest, capsys, server):
    path = write_manifest("pod.yaml", "apiVersion: v1\nkind: Pod\nmetadata:\n  name: a\n")
    assert cli.run(["get", "pods", "-f", path]) == 1
    assert "when paths" in capsys.readouterr().err
    assert server.calls == []


def test_get_json_output(cli, write_manifest, capsys):
    path = write_manifest("pod.yaml", "apiVersion: v1\nkind: Pod\nmetadata:\n  name: a\n")
    assert cli.run(["get", "-f", path, "-o", "json"]) == 0
    assert '"name": "a"' in capsys.readouterr().out


def test_api_resources(cli, capsys):
    assert cli.run(["api-resources"]) == 0
    assert "pods" in capsys.readouterr().out


def test_api_resources_with_bad_catalog(cli, tmp_path, capsys):
    catalog = tmp_path / "types.json"
    catalog.write_text("{not json")
    assert cli.run(["--catalog", str(catalog), "api-resources"]) == 1
    assert "failed to load type catalog" in capsys.readouterr().err


def test_get_type_lists_each_item_without_flatten_flag(cli, server, pod, capsys):
    server.add("pods", pod("web", namespace="prod"))
    server.add("pods", pod("db", namespace="prod"))
    assert cli.run(["get", "pods", "-n", "prod", "-o", "name"]) == 0
    out = capsys.readouterr().out
    assert "pods/web" in out
    assert "pods/db" in out


def test_get_file_list_is_split_with_flatten_flag(cli, write_manifest, capsys):
    path = write_manifest("list.yaml", (
        "apiVersion: v1\nkind: List\nitems:\n"
        "- {apiVersion: v1, kind: Pod, metadata: {name: a}}\n"
    ))
    assert cli.run(["get", "-f", path, "-o", "name", "--flatten"]) == 0
    assert "pods/a" in capsys.readouterr().out
