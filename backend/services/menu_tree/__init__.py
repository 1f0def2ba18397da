"""Menu tree engine: route normalization, active entry and tri-state selection."""

from .active import (
    ActiveMenu,
    expanded_for_path,
    find_node_by_route,
    is_route_match,
    merge_expanded,
    normalize_path,
    resolve_active,
    toggle_expanded,
)
from .routes import join_route, normalize_routes
from .selection import selection_state, selection_states, toggle_selection
from .tree import descendant_ids, find_node, find_node_by_key, flatten, iter_nodes, subtree_ids

__all__ = [
    "ActiveMenu",
    "descendant_ids",
    "expanded_for_path",
    "find_node",
    "find_node_by_key",
    "find_node_by_route",
    "flatten",
    "is_route_match",
    "iter_nodes",
    "join_route",
    "merge_expanded",
    "normalize_path",
    "normalize_routes",
    "resolve_active",
    "selection_state",
    "selection_states",
    "subtree_ids",
    "toggle_expanded",
    "toggle_selection",
]
