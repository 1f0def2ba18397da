from __future__ import annotations

import pytest

from backend.services.menu_tree import join_route, normalize_routes
from backend.tests.menu_helpers import folder, leaf, routes_by_id, system_tree


def test_normalize_prefixes_children_with_folder_route() -> None:
    normalized = normalize_routes(system_tree())

    assert routes_by_id(normalized) == {
        "system": "/system",
        "users": "/system/users",
        "roles": "/system/roles",
    }


@pytest.mark.parametrize(
    ("parent_path", "route", "expected"),
    [
        ("", "users", "/users"),
        ("", "//users", "/users"),
        ("/", "users", "/users"),
        ("/", "/users", "/users"),
        ("/admin", "roles", "/admin/roles"),
        ("/admin", "///roles", "/admin/roles"),
        ("/admin", None, "/admin"),
        ("/admin", "", "/admin"),
        ("", None, ""),
        ("/admin", "/admin/roles", "/admin/roles"),
    ],
)
def test_join_route(parent_path: str, route: str | None, expected: str) -> None:
    assert join_route(parent_path, route) == expected


def test_folder_without_route_inherits_parent_path() -> None:
    tree = [folder("admin", "/admin", [folder("security", None, [leaf("roles", "roles")])])]

    routes = routes_by_id(normalize_routes(tree))

    assert routes["security"] == "/admin"
    assert routes["roles"] == "/admin/roles"


def test_unresolvable_root_node_is_pruned_with_its_subtree() -> None:
    tree = [
        folder("orphan", None, [leaf("ghost"), leaf("reachable", "reachable")]),
        leaf("dashboard", "dashboard"),
    ]

    normalized = normalize_routes(tree)

    assert routes_by_id(normalized) == {"dashboard": "/dashboard"}


def test_leaf_without_route_at_root_is_pruned() -> None:
    assert normalize_routes([leaf("blank"), leaf("empty", "")]) == []


def test_sibling_order_is_preserved() -> None:
    tree = [leaf("b", "b", sort_order=5), leaf("a", "a", sort_order=1), leaf("c", "c", sort_order=3)]

    assert [node.id for node in normalize_routes(tree)] == ["b", "a", "c"]


def test_normalize_is_idempotent() -> None:
    tree = [
        leaf("home", "/"),
        folder(
            "system",
            "system",
            [
                leaf("users", "/users"),
                folder("nested", None, [leaf("audit", "audit/")]),
            ],
        ),
        folder("orphan", None, [leaf("lost")]),
    ]

    once = normalize_routes(tree)

    assert normalize_routes(once) == once


def test_normalize_does_not_touch_input_tree() -> None:
    tree = system_tree()

    normalize_routes(tree)

    assert tree[0].route == "system"
    assert tree[0].children[0].route == "/users"


def test_metadata_is_passed_through() -> None:
    tree = [leaf("hidden", "hidden", sort_order=7).model_copy(update={"is_visible": False})]

    (node,) = normalize_routes(tree)

    assert node.sort_order == 7
    assert node.is_visible is False
    assert node.label == "Hidden"
