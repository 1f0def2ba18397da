"""Configuration statique du backend."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from backend.core.env_loader import load_env

_TRUE_VALUES = {"1", "true", "yes", "on", "y", "t"}
_FALSE_VALUES = {"0", "false", "no", "off", "n", "f"}

BASE_DIR = Path(__file__).resolve().parent.parent

DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
)

load_env()


def _get_env_flag(name: str, default: bool = False) -> bool:
    """Retourne une valeur booléenne à partir d'une variable d'environnement."""

    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return default


def _get_env_choice(name: str, choices: set[str], default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().upper()
    return normalized if normalized in choices else default


def _get_env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = os.getenv(name)
    if value is None:
        return default
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _get_env_path(name: str, default: Path) -> Path:
    value = os.getenv(name)
    if not value or not value.strip():
        return default
    return Path(value.strip()).expanduser()


@dataclass(frozen=True)
class Settings:
    """Paramètres globaux lus depuis l'environnement."""

    DATA_DIR: Path = BASE_DIR / "data"
    SEED_MENUS: bool = True
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: tuple[str, ...] = DEFAULT_CORS_ORIGINS


settings = Settings(
    DATA_DIR=_get_env_path("ADMIN_CONSOLE_DATA_DIR", BASE_DIR / "data"),
    SEED_MENUS=_get_env_flag("ADMIN_CONSOLE_SEED_MENUS", default=True),
    LOG_LEVEL=_get_env_choice(
        "ADMIN_CONSOLE_LOG_LEVEL", {"DEBUG", "INFO", "WARNING", "ERROR"}, "INFO"
    ),
    CORS_ORIGINS=_get_env_list("ADMIN_CONSOLE_CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
)
