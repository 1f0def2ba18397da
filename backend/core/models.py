"""Modèles Pydantic pour l'API."""
from __future__ import annotations

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

SelectionState = Literal["all", "partial", "none"]


class MenuType(str, Enum):
    FOLDER = "FOLDER"
    MENU = "MENU"


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class MenuNode(_CamelModel):
    """Entrée de l'arbre de menus (dossier ou menu navigable)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    key: str
    label: str = ""
    menu_type: MenuType = Field(MenuType.MENU, alias="menuType")
    route: Optional[str] = None
    icon: Optional[str] = None
    parent_id: Optional[str] = Field(None, alias="parentId")
    sort_order: int = Field(0, alias="sortOrder")
    is_visible: bool = Field(True, alias="isVisible")
    children: list[MenuNode] = Field(default_factory=list)

    @field_validator("id", "parent_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def is_folder(self) -> bool:
        return self.menu_type is MenuType.FOLDER


class MenuFolder(MenuNode):
    menu_count: int = Field(0, alias="menuCount")


class MenuBase(_CamelModel):
    key: str = Field(..., min_length=1, max_length=64)
    label: str = Field(..., min_length=1, max_length=128)
    menu_type: MenuType = Field(MenuType.MENU, alias="menuType")
    route: Optional[str] = Field(None, max_length=256)
    icon: Optional[str] = Field(None, max_length=64)
    parent_id: Optional[str] = Field(None, alias="parentId")
    sort_order: int = Field(0, alias="sortOrder")
    is_visible: bool = Field(True, alias="isVisible")

    @field_validator("key", "label")
    @classmethod
    def _strip_required(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("Valeur vide")
        return normalized

    @field_validator("route", "icon")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        normalized = value.strip()
        return normalized or None

    @field_validator("parent_id", mode="before")
    @classmethod
    def _coerce_parent_id(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class MenuCreate(MenuBase):
    pass


class MenuUpdate(MenuBase):
    pass


class RoleBase(BaseModel):
    code: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=128)

    @field_validator("code")
    @classmethod
    def _normalize_code(cls, value: str) -> str:
        normalized = value.strip().upper()
        if not normalized:
            raise ValueError("Code de rôle vide")
        return normalized


class RoleCreate(RoleBase):
    pass


class Role(RoleBase):
    id: int


class RoleMenusPayload(_CamelModel):
    menu_ids: list[str] = Field(default_factory=list, alias="menuIds")

    @field_validator("menu_ids", mode="before")
    @classmethod
    def _coerce_ids(cls, value: object) -> object:
        if isinstance(value, list):
            return [str(item) if isinstance(item, int) else item for item in value]
        return value


class RoleMenusResponse(RoleMenusPayload):
    role_id: int = Field(..., alias="roleId")


class ActiveMenuResponse(_CamelModel):
    active_id: Optional[str] = Field(None, alias="activeId")
    ancestor_folder_ids: list[str] = Field(default_factory=list, alias="ancestorFolderIds")
    expanded_folder_ids: list[str] = Field(default_factory=list, alias="expandedFolderIds")


class SelectionStatesPayload(RoleMenusPayload):
    pass


class SelectionToggleRequest(RoleMenusPayload):
    menu_id: str = Field(..., alias="menuId")

    @field_validator("menu_id", mode="before")
    @classmethod
    def _coerce_menu_id(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class SelectionResponse(RoleMenusPayload):
    states: dict[str, SelectionState] = Field(default_factory=dict)
