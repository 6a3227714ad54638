import pytest

from formcheck.validation.paths import (
    MISSING,
    assign,
    is_wildcard,
    matches,
    resolve,
)


@pytest.fixture
def person():
    return {
        "name": {"first": "Ahmad", "last": "Fauzi"},
        "address": [
            {"street": "Jl. Mangga", "city": "Jakarta"},
            {"street": "Jl. Jeruk", "city": "Bandung"},
        ],
    }


def test_resolve_literal_path(person):
    found = resolve("name.first", person)
    assert len(found) == 1
    assert found[0].path == "name.first"
    assert found[0].segments == ("name", "first")
    assert found[0].value == "Ahmad"


def test_resolve_missing_key_yields_marker(person):
    found = resolve("name.middle", person)
    assert len(found) == 1
    assert found[0].path == "name.middle"
    assert found[0].value is MISSING
    assert found[0].missing


def test_resolve_missing_parent_keeps_full_path():
    found = resolve("a.b.c", {})
    assert [f.path for f in found] == ["a.b.c"]
    assert found[0].value is MISSING


def test_resolve_wildcard_expands_each_element(person):
    found = resolve("address.*.city", person)
    assert [f.path for f in found] == ["address.0.city", "address.1.city"]
    assert [f.value for f in found] == ["Jakarta", "Bandung"]
    assert found[1].segments == ("address", 1, "city")


def test_resolve_wildcard_missing_leaf_per_element():
    found = resolve("address.*.city", {"address": [{"city": "Jakarta"}, {}]})
    assert [f.path for f in found] == ["address.0.city", "address.1.city"]
    assert found[1].value is MISSING


@pytest.mark.parametrize("data", [
    {"address": "Jakarta"},
    {"address": 42},
    {},
    {"address": {"home": {"city": "Jakarta"}}},
])
def test_resolve_wildcard_over_non_sequence_is_empty(data):
    assert resolve("address.*.city", data) == []


def test_resolve_wildcard_over_index_keyed_dict():
    data = {"address": {"0": {"city": "Jakarta"}, "1": {"city": "Bogor"}}}
    found = resolve("address.*.city", data)
    assert [f.value for f in found] == ["Jakarta", "Bogor"]


def test_resolve_nested_wildcards():
    data = {"orders": [
        {"items": [{"sku": "A"}, {"sku": "B"}]},
        {"items": [{"sku": "C"}]},
    ]}
    found = resolve("orders.*.items.*.sku", data)
    assert [f.path for f in found] == [
        "orders.0.items.0.sku",
        "orders.0.items.1.sku",
        "orders.1.items.0.sku",
    ]


def test_resolve_numeric_segment_indexes_list():
    found = resolve("items.1", {"items": ["a", "b"]})
    assert found[0].value == "b"

    found = resolve("items.5", {"items": ["a", "b"]})
    assert found[0].path == "items.5"
    assert found[0].value is MISSING


def test_is_wildcard():
    assert is_wildcard("address.*.city")
    assert not is_wildcard("address.city")


def test_matches():
    assert matches("address.*.city", "address.3.city")
    assert not matches("address.*.city", "address.3.street")
    assert not matches("address.*.city", "address.3.4.city")
    assert matches("username", "username")
    assert not matches("username", "username_confirmation")


def test_assign_builds_lists_for_integer_segments():
    target = {}
    assign(target, ("address", 0, "city"), "Jakarta")
    assign(target, ("address", 1, "city"), "Bandung")
    assign(target, ("address", 0, "street"), "Jl. Mangga")
    assign(target, ("name", "first"), "Ahmad")

    assert target == {
        "address": [
            {"city": "Jakarta", "street": "Jl. Mangga"},
            {"city": "Bandung"},
        ],
        "name": {"first": "Ahmad"},
    }
