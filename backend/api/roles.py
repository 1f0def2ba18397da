"""Routes pour les rôles et leurs menus affectés."""
from __future__ import annotations

from fastapi import APIRouter, HTTPException

from backend.core import models, services

router = APIRouter()


@router.get("", response_model=list[models.Role])
def list_roles() -> list[models.Role]:
    return services.list_roles()


@router.post("", response_model=models.Role, status_code=201)
def create_role(payload: models.RoleCreate) -> models.Role:
    try:
        return services.create_role(payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.delete("/{role_id}", status_code=204)
def delete_role(role_id: int) -> None:
    try:
        services.delete_role(role_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.get("/{role_id}/menus", response_model=models.RoleMenusResponse)
def get_role_menus(role_id: int) -> models.RoleMenusResponse:
    try:
        menu_ids = services.get_role_menu_ids(role_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return models.RoleMenusResponse(role_id=role_id, menu_ids=menu_ids)


@router.put("/{role_id}/menus", response_model=models.RoleMenusResponse)
def update_role_menus(role_id: int, payload: models.RoleMenusPayload) -> models.RoleMenusResponse:
    try:
        menu_ids = services.set_role_menu_ids(role_id, payload.menu_ids)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return models.RoleMenusResponse(role_id=role_id, menu_ids=menu_ids)
