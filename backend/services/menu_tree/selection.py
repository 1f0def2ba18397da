"""Tri-state selection over a menu tree.

The selected set is the list persisted for a role. A node's displayed state
is derived from its descendants only: a folder's own membership is written
by :func:`toggle_selection` but never read back once it has descendants.
"""
from __future__ import annotations

import logging
from typing import AbstractSet, Iterable

from backend.core.models import MenuNode, SelectionState
from backend.services.menu_tree.tree import descendant_ids, iter_nodes, subtree_ids

logger = logging.getLogger(__name__)


def selection_state(node: MenuNode, selected: AbstractSet[str]) -> SelectionState:
    descendants = descendant_ids(node)
    if not descendants:
        return "all" if node.id in selected else "none"
    selected_count = sum(1 for node_id in descendants if node_id in selected)
    if selected_count == 0:
        return "none"
    if selected_count == len(descendants):
        return "all"
    return "partial"


def toggle_selection(node: MenuNode, selected: AbstractSet[str]) -> set[str]:
    """Return a new selection with ``node``'s whole subtree toggled.

    A fully selected node is cleared along with its subtree; a partial or
    empty one becomes fully selected. Ids outside the subtree are kept.
    """

    state = selection_state(node, selected)
    targets = subtree_ids(node)
    result = set(selected)
    if state == "all":
        result.difference_update(targets)
    else:
        result.update(targets)
    logger.debug("Bascule du menu %s (%s -> %d ids)", node.id, state, len(result))
    return result


def selection_states(tree: Iterable[MenuNode], selected: AbstractSet[str]) -> dict[str, SelectionState]:
    return {node.id: selection_state(node, selected) for node in iter_nodes(tree)}
