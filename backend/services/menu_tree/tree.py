"""Shared traversal helpers for menu trees."""
from __future__ import annotations

from typing import Iterable, Iterator, Optional

from backend.core.models import MenuNode


def iter_nodes(nodes: Iterable[MenuNode]) -> Iterator[MenuNode]:
    """Yield every node of the forest in pre-order."""

    for node in nodes:
        yield node
        if node.children:
            yield from iter_nodes(node.children)


def flatten(nodes: Iterable[MenuNode]) -> list[MenuNode]:
    return list(iter_nodes(nodes))


def find_node(nodes: Iterable[MenuNode], node_id: str) -> Optional[MenuNode]:
    return next((node for node in iter_nodes(nodes) if node.id == node_id), None)


def find_node_by_key(nodes: Iterable[MenuNode], key: str) -> Optional[MenuNode]:
    return next((node for node in iter_nodes(nodes) if node.key == key), None)


def descendant_ids(node: MenuNode) -> list[str]:
    """Ids of every node below ``node`` at any depth, ``node`` excluded."""

    ids: list[str] = []
    for child in node.children:
        ids.append(child.id)
        ids.extend(descendant_ids(child))
    return ids


def subtree_ids(node: MenuNode) -> list[str]:
    return [node.id, *descendant_ids(node)]
