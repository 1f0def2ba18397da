"""Routes de gestion des menus et de l'arbre de navigation."""
from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from backend.core import models, services
from backend.services import menu_tree

router = APIRouter()


def _navigation_tree() -> list[models.MenuNode]:
    return menu_tree.normalize_routes(services.get_menu_tree(include_hidden=False))


@router.get("", response_model=list[models.MenuNode])
def list_menus() -> list[models.MenuNode]:
    return services.list_menus()


@router.post("", response_model=models.MenuNode, status_code=201)
def create_menu(payload: models.MenuCreate) -> models.MenuNode:
    try:
        return services.create_menu(payload)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/tree", response_model=list[models.MenuNode])
def get_menu_tree() -> list[models.MenuNode]:
    return services.get_menu_tree()


@router.get("/folders", response_model=list[models.MenuFolder])
def list_menu_folders() -> list[models.MenuFolder]:
    return services.get_menu_folders()


@router.get("/navigation", response_model=list[models.MenuNode])
def get_navigation_tree() -> list[models.MenuNode]:
    return _navigation_tree()


@router.get("/active", response_model=models.ActiveMenuResponse)
def get_active_menu(
    path: str = Query(..., description="Chemin de navigation courant"),
    expanded: list[str] = Query(default=[]),
) -> models.ActiveMenuResponse:
    active, expanded_ids = menu_tree.expanded_for_path(_navigation_tree(), path, expanded)
    return models.ActiveMenuResponse(
        active_id=active.active_id,
        ancestor_folder_ids=list(active.ancestor_folder_ids),
        expanded_folder_ids=expanded_ids,
    )


@router.post("/selection/states", response_model=models.SelectionResponse)
def get_selection_states(payload: models.SelectionStatesPayload) -> models.SelectionResponse:
    selected = set(payload.menu_ids)
    return models.SelectionResponse(
        menu_ids=sorted(selected),
        states=menu_tree.selection_states(services.get_menu_tree(), selected),
    )


@router.post("/selection/toggle", response_model=models.SelectionResponse)
def toggle_selection(payload: models.SelectionToggleRequest) -> models.SelectionResponse:
    tree = services.get_menu_tree()
    node = menu_tree.find_node(tree, payload.menu_id)
    if node is None:
        raise HTTPException(status_code=404, detail="Menu introuvable")
    selected = menu_tree.toggle_selection(node, set(payload.menu_ids))
    return models.SelectionResponse(
        menu_ids=sorted(selected),
        states=menu_tree.selection_states(tree, selected),
    )


@router.get("/{menu_id}", response_model=models.MenuNode)
def get_menu(menu_id: str) -> models.MenuNode:
    try:
        return services.get_menu(menu_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.put("/{menu_id}", response_model=models.MenuNode)
def update_menu(menu_id: str, payload: models.MenuUpdate) -> models.MenuNode:
    try:
        return services.update_menu(menu_id, payload)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.delete("/{menu_id}", status_code=204)
def delete_menu(menu_id: str) -> None:
    try:
        services.delete_menu(menu_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
