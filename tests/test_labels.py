"""Label selector parsing and matching."""

import pytest

from kubeselect.core import labels


def test_empty_string_is_empty_selector():
    assert labels.parse("").empty()
    assert labels.parse("   ").empty()
    assert labels.everything().empty()
    assert labels.everything().matches({"any": "thing"})


def test_equality_and_inequality():
    selector = labels.parse("app=web,tier!=db")
    assert not selector.empty()
    assert selector.matches({"app": "web", "tier": "frontend"})
    assert selector.matches({"app": "web"})
    assert not selector.matches({"app": "web", "tier": "db"})
    assert not selector.matches({"app": "api"})


def test_double_equals_and_existence():
    selector = labels.parse("app==web,canary,!legacy")
    assert selector.matches({"app": "web", "canary": "true"})
    assert not selector.matches({"app": "web"})
    assert not selector.matches({"app": "web", "canary": "1", "legacy": "yes"})


def test_set_based_requirements_keep_inner_commas():
    selector = labels.parse("env in (prod, qa),tier notin (db)")
    assert len(selector.requirements) == 2
    assert selector.matches({"env": "qa", "tier": "web"})
    assert not selector.matches({"env": "dev"})
    assert not selector.matches({"env": "prod", "tier": "db"})


def test_string_form_is_reparseable():
    text = str(labels.parse("app=web,env in (qa,prod),!legacy"))
    assert text == "app=web,env in (prod,qa),!legacy"
    assert labels.parse(text) == labels.parse("app=web,env in (qa,prod),!legacy")


def test_prefixed_keys_are_accepted():
    selector = labels.parse("app.kubernetes.io/name=nginx")
    assert selector.matches({"app.kubernetes.io/name": "nginx"})


@pytest.mark.parametrize("text", [
    "app=web,",
    "env in (prod",
    "a b c",
    "app=-bad-",
    "env in ()",
])
def test_malformed_selectors_raise(text):
    with pytest.raises(ValueError):
        labels.parse(text)
