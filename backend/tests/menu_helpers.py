from __future__ import annotations

from typing import Iterable, Optional

from backend.core.models import MenuNode, MenuType


def folder(node_id: str, route: Optional[str] = None, children: Iterable[MenuNode] = ()) -> MenuNode:
    return MenuNode(
        id=node_id,
        key=node_id,
        label=node_id.title(),
        menu_type=MenuType.FOLDER,
        route=route,
        children=list(children),
    )


def leaf(node_id: str, route: Optional[str] = None, *, sort_order: int = 0) -> MenuNode:
    return MenuNode(
        id=node_id,
        key=node_id,
        label=node_id.title(),
        menu_type=MenuType.MENU,
        route=route,
        sort_order=sort_order,
    )


def system_tree() -> list[MenuNode]:
    return [folder("system", "system", [leaf("users", "/users"), leaf("roles", "/roles")])]


def routes_by_id(nodes: Iterable[MenuNode]) -> dict[str, Optional[str]]:
    routes: dict[str, Optional[str]] = {}
    for node in nodes:
        routes[node.id] = node.route
        routes.update(routes_by_id(node.children))
    return routes
