"""Normalisation des routes relatives de l'arbre de menus.

Chaque menu stocke un fragment de route relatif à son parent. La
normalisation calcule pour chaque nœud une route absolue et élague les
nœuds dont la route ne peut pas être résolue.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from backend.core.models import MenuNode

logger = logging.getLogger(__name__)


def with_leading_slash(fragment: str) -> str:
    """Return ``fragment`` starting with exactly one ``/``."""

    return "/" + fragment.lstrip("/")


def join_route(parent_path: str, route: Optional[str]) -> str:
    """Compose the absolute route of a node from its parent's absolute path.

    A node without a route inherits ``parent_path``. A fragment that already
    sits under ``parent_path`` is kept as is, so normalized trees can be fed
    back through :func:`normalize_routes` unchanged.
    """

    if not route:
        return parent_path
    fragment = with_leading_slash(route)
    base = parent_path.rstrip("/")
    if not base:
        return fragment
    if fragment == base or fragment.startswith(base + "/"):
        return fragment
    return base + fragment


def normalize_routes(nodes: Iterable[MenuNode], parent_path: str = "") -> list[MenuNode]:
    """Return a copy of the forest with absolute routes.

    Nodes whose route resolves to an empty string are dropped together with
    their subtree. Sibling order is preserved.
    """

    normalized: list[MenuNode] = []
    for node in nodes:
        route = join_route(parent_path, node.route)
        if not route:
            logger.debug("Menu %s (%s) ignoré: route non résolue", node.id, node.key)
            continue
        children = normalize_routes(node.children, route)
        normalized.append(node.model_copy(update={"route": route, "children": children}))
    return normalized
