from __future__ import annotations

import random

import pytest

from backend.services.menu_tree import (
    descendant_ids,
    flatten,
    find_node,
    selection_state,
    selection_states,
    subtree_ids,
    toggle_selection,
)
from backend.tests.menu_helpers import folder, leaf, system_tree


def _fixture_tree():
    return [
        folder(
            "system",
            "system",
            [
                leaf("users", "users"),
                leaf("roles", "roles"),
                folder(
                    "security",
                    "security",
                    [leaf("audit", "audit"), leaf("sessions", "sessions")],
                ),
                folder("empty", "empty"),
            ],
        ),
        folder("ops", "ops", [leaf("alerts", "alerts")]),
        leaf("dashboard", "dashboard"),
    ]


def test_descendant_and_subtree_ids() -> None:
    (system,) = system_tree()

    assert descendant_ids(system) == ["users", "roles"]
    assert subtree_ids(system) == ["system", "users", "roles"]
    assert descendant_ids(system.children[0]) == []


@pytest.mark.parametrize(("selected", "expected"), [({"users"}, "all"), (set(), "none"), ({"roles"}, "none")])
def test_leaf_state_is_membership(selected: set[str], expected: str) -> None:
    users = leaf("users", "users")

    assert selection_state(users, selected) == expected


def test_childless_folder_state_is_membership() -> None:
    empty = folder("empty")

    assert selection_state(empty, {"empty"}) == "all"
    assert selection_state(empty, set()) == "none"


def test_folder_state_ignores_own_membership() -> None:
    (system,) = system_tree()

    assert selection_state(system, {"system"}) == "none"
    assert selection_state(system, {"system", "users"}) == "partial"
    assert selection_state(system, {"users", "roles"}) == "all"


def test_nested_folder_ids_count_as_descendants() -> None:
    system = find_node(_fixture_tree(), "system")
    leaves = {"users", "roles", "audit", "sessions"}

    assert selection_state(system, leaves) == "partial"
    assert selection_state(system, leaves | {"security", "empty"}) == "all"


def test_tri_state_matches_descendant_coverage_for_random_subsets() -> None:
    tree = _fixture_tree()
    all_ids = [node.id for node in flatten(tree)]
    rng = random.Random(20240611)

    for _ in range(300):
        selected = {node_id for node_id in all_ids if rng.random() < 0.5}
        for node in flatten(tree):
            descendants = descendant_ids(node)
            state = selection_state(node, selected)
            if not descendants:
                assert state == ("all" if node.id in selected else "none")
                continue
            covered = [node_id in selected for node_id in descendants]
            assert (state == "all") == all(covered)
            assert (state == "none") == (not any(covered))
            assert (state == "partial") == (any(covered) and not all(covered))


def test_toggle_example_selects_folder_and_leaves() -> None:
    (system,) = system_tree()

    result = toggle_selection(system, set())

    assert result == {"system", "users", "roles"}
    assert selection_state(system, result) == "all"


def test_toggle_partial_folder_selects_whole_subtree() -> None:
    tree = _fixture_tree()
    security = find_node(tree, "security")
    selected = {"audit", "dashboard"}

    result = toggle_selection(security, selected)

    assert result == {"audit", "dashboard", "security", "sessions"}
    assert selection_state(security, result) == "all"


def test_toggle_full_folder_clears_subtree_only() -> None:
    tree = _fixture_tree()
    system = find_node(tree, "system")
    selected = set(subtree_ids(system)) | {"alerts", "ops"}

    result = toggle_selection(system, selected)

    assert result == {"alerts", "ops"}
    assert selection_state(system, result) == "none"


def test_toggle_leaves_siblings_untouched() -> None:
    tree = _fixture_tree()
    selected = {"alerts", "audit"}
    outside_before = {node_id for node_id in selected if node_id not in subtree_ids(find_node(tree, "system"))}

    result = toggle_selection(find_node(tree, "system"), selected)

    outside_after = {node_id for node_id in result if node_id not in subtree_ids(find_node(tree, "system"))}
    assert outside_after == outside_before
    assert selection_state(find_node(tree, "ops"), result) == "all"


def test_toggle_returns_new_set() -> None:
    (system,) = system_tree()
    selected = {"users"}

    result = toggle_selection(system, selected)

    assert selected == {"users"}
    assert result is not selected


def test_toggle_twice_clears_subtree() -> None:
    tree = _fixture_tree()
    system = find_node(tree, "system")
    selected = {"users", "security", "dashboard"}

    result = toggle_selection(system, toggle_selection(system, selected))

    assert selection_state(system, result) == "none"
    assert result == {"dashboard"}


def test_toggle_leaf_is_a_plain_flip() -> None:
    users = leaf("users", "users")

    assert toggle_selection(users, set()) == {"users"}
    assert toggle_selection(users, {"users"}) == set()


def test_ancestor_state_follows_descendant_toggle() -> None:
    tree = _fixture_tree()
    system = find_node(tree, "system")

    selected = toggle_selection(find_node(tree, "audit"), set())

    assert selection_state(find_node(tree, "security"), selected) == "partial"
    assert selection_state(system, selected) == "partial"


def test_selection_states_covers_every_node() -> None:
    tree = system_tree()

    states = selection_states(tree, {"users"})

    assert states == {"system": "partial", "users": "all", "roles": "none"}
