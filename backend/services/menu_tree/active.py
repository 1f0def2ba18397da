"""Resolution of the active menu entry for a navigation path."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from backend.core.models import MenuNode, MenuType
from backend.services.menu_tree.tree import iter_nodes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActiveMenu:
    active_id: Optional[str] = None
    ancestor_folder_ids: tuple[str, ...] = ()


def normalize_path(path: Optional[str]) -> str:
    """Strip query string, fragment and trailing slashes from ``path``."""

    if not path:
        return ""
    for separator in ("?", "#"):
        path = path.split(separator, 1)[0]
    if path and not path.strip("/"):
        return "/"
    return path.rstrip("/")


def is_route_match(node_route: Optional[str], current_path: Optional[str]) -> bool:
    route = normalize_path(node_route)
    if not route:
        return False
    current = normalize_path(current_path)
    return current == route or current.startswith(route + "/")


def resolve_active(tree: Iterable[MenuNode], current_path: Optional[str]) -> ActiveMenu:
    """Find the most specific navigable menu matching ``current_path``.

    Only ``MENU`` nodes can be active. The longest matching route wins; on a
    tie the first node met in pre-order is kept.
    """

    best = ActiveMenu()
    best_length = -1

    def visit(nodes: Iterable[MenuNode], ancestors: tuple[str, ...]) -> None:
        nonlocal best, best_length
        for node in nodes:
            if node.menu_type is MenuType.MENU and is_route_match(node.route, current_path):
                length = len(normalize_path(node.route))
                if length > best_length:
                    best = ActiveMenu(active_id=node.id, ancestor_folder_ids=ancestors)
                    best_length = length
            if node.children:
                child_ancestors = (
                    (*ancestors, node.id) if node.menu_type is MenuType.FOLDER else ancestors
                )
                visit(node.children, child_ancestors)

    visit(tree, ())
    logger.debug("Menu actif pour %r: %s", current_path, best.active_id)
    return best


def find_node_by_route(tree: Iterable[MenuNode], path: Optional[str]) -> Optional[MenuNode]:
    """Return the first node whose normalized route equals ``path``."""

    target = normalize_path(path)
    if not target:
        return None
    return next(
        (node for node in iter_nodes(tree) if normalize_path(node.route) == target),
        None,
    )


def merge_expanded(expanded: Iterable[str], folder_ids: Iterable[str]) -> list[str]:
    """Union ``folder_ids`` into ``expanded`` without collapsing anything."""

    merged = list(dict.fromkeys(expanded))
    seen = set(merged)
    for folder_id in folder_ids:
        if folder_id not in seen:
            merged.append(folder_id)
            seen.add(folder_id)
    return merged


def toggle_expanded(expanded: Iterable[str], folder_id: str) -> list[str]:
    current = list(dict.fromkeys(expanded))
    if folder_id in current:
        current.remove(folder_id)
    else:
        current.append(folder_id)
    return current


def expanded_for_path(
    tree: Sequence[MenuNode],
    current_path: Optional[str],
    expanded: Iterable[str] = (),
) -> tuple[ActiveMenu, list[str]]:
    active = resolve_active(tree, current_path)
    return active, merge_expanded(expanded, active.ancestor_folder_ids)
