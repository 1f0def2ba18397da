"""Services métier de la console d'administration (menus, rôles, affectations)."""
from __future__ import annotations

import logging
import sqlite3
from collections import defaultdict
from typing import Iterable, Optional

from backend.core import db, models
from backend.core.config import settings

_db_initialized = False

logger = logging.getLogger(__name__)

ROOT_MENU_KEY = "root"

# (key, label, route, icon, sort_order, menu_type, parent_key)
_DEFAULT_MENUS: tuple[tuple[str, str, Optional[str], Optional[str], int, models.MenuType, Optional[str]], ...] = (
    ("root", "Root", None, None, 0, models.MenuType.FOLDER, None),
    ("dashboard", "Tableau de bord", "dashboard", "DashboardOutlined", 10, models.MenuType.MENU, "root"),
    ("alerts", "Alertes", "alerts", "AlertOutlined", 20, models.MenuType.MENU, "root"),
    ("admin", "Administration", "admin", "SettingOutlined", 100, models.MenuType.FOLDER, "root"),
    ("admin:menus", "Menus", "menus", "MenuOutlined", 30, models.MenuType.MENU, "admin"),
    ("admin:users", "Utilisateurs", "users", "UserOutlined", 35, models.MenuType.MENU, "admin"),
    ("admin:roles", "Rôles", "roles", "TeamOutlined", 40, models.MenuType.MENU, "admin"),
    ("admin:dict", "Dictionnaires", "dict", "BookOutlined", 50, models.MenuType.MENU, "admin"),
)

_DEFAULT_ROLES: tuple[tuple[str, str], ...] = (
    ("ADMIN", "Administrateur"),
    ("MANAGER", "Responsable"),
    ("USER", "Utilisateur"),
)


def ensure_database_ready() -> None:
    global _db_initialized
    db.init_databases()

    if not _db_initialized:
        if settings.SEED_MENUS:
            seed_defaults()
        _db_initialized = True


def _parse_id(value: str | int, label: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise LookupError(f"{label} introuvable") from exc


def _row_to_menu(row: sqlite3.Row) -> models.MenuNode:
    return models.MenuNode(
        id=str(row["id"]),
        key=row["key"],
        label=row["label"],
        menu_type=models.MenuType(row["menu_type"]),
        route=row["route"],
        icon=row["icon"],
        parent_id=str(row["parent_id"]) if row["parent_id"] is not None else None,
        sort_order=row["sort_order"],
        is_visible=bool(row["is_visible"]),
    )


def _fetch_menu_rows(conn: sqlite3.Connection) -> list[sqlite3.Row]:
    return conn.execute("SELECT * FROM menus ORDER BY sort_order, id").fetchall()


def _find_root_id(conn: sqlite3.Connection) -> Optional[int]:
    row = conn.execute("SELECT id FROM menus WHERE key = ?", (ROOT_MENU_KEY,)).fetchone()
    return row["id"] if row else None


# ---------------------------------------------------------------------------
# Initialisation
# ---------------------------------------------------------------------------


def _insert_default_menu(
    conn: sqlite3.Connection,
    key: str,
    label: str,
    route: Optional[str],
    icon: Optional[str],
    sort_order: int,
    menu_type: models.MenuType,
    parent_id: Optional[int],
) -> int:
    existing = conn.execute("SELECT id FROM menus WHERE key = ?", (key,)).fetchone()
    if existing is not None:
        return existing["id"]
    cur = conn.execute(
        """
        INSERT INTO menus (key, label, route, icon, parent_id, sort_order, is_visible, menu_type)
        VALUES (?, ?, ?, ?, ?, ?, 1, ?)
        """,
        (key, label, route, icon, parent_id, sort_order, menu_type.value),
    )
    logger.info("Menu créé: %s (%s)", label, key)
    return int(cur.lastrowid)


def seed_defaults() -> None:
    """Crée les menus et rôles par défaut s'ils n'existent pas encore."""

    with db.get_console_connection() as conn:
        ids_by_key: dict[str, int] = {}
        for key, label, route, icon, sort_order, menu_type, parent_key in _DEFAULT_MENUS:
            parent_id = ids_by_key.get(parent_key) if parent_key else None
            ids_by_key[key] = _insert_default_menu(
                conn, key, label, route, icon, sort_order, menu_type, parent_id
            )
        root_id = ids_by_key[ROOT_MENU_KEY]
        cur = conn.execute(
            "UPDATE menus SET parent_id = ? WHERE parent_id IS NULL AND key != ?",
            (root_id, ROOT_MENU_KEY),
        )
        if cur.rowcount:
            logger.info("%d menus orphelins rattachés au dossier racine", cur.rowcount)
        conn.executemany(
            "INSERT OR IGNORE INTO roles (code, name) VALUES (?, ?)",
            _DEFAULT_ROLES,
        )
        conn.commit()


# ---------------------------------------------------------------------------
# Menus
# ---------------------------------------------------------------------------


def list_menus() -> list[models.MenuNode]:
    ensure_database_ready()
    with db.get_console_connection() as conn:
        return [_row_to_menu(row) for row in _fetch_menu_rows(conn)]


def get_menu(menu_id: str | int) -> models.MenuNode:
    ensure_database_ready()
    parsed_id = _parse_id(menu_id, "Menu")
    with db.get_console_connection() as conn:
        row = conn.execute("SELECT * FROM menus WHERE id = ?", (parsed_id,)).fetchone()
    if row is None:
        raise LookupError("Menu introuvable")
    return _row_to_menu(row)


def _subtree_ids(conn: sqlite3.Connection, menu_id: int) -> set[int]:
    children_by_parent: dict[int, list[int]] = defaultdict(list)
    for row in conn.execute("SELECT id, parent_id FROM menus WHERE parent_id IS NOT NULL"):
        children_by_parent[row["parent_id"]].append(row["id"])
    seen: set[int] = set()
    stack = [menu_id]
    while stack:
        current = stack.pop()
        if current in seen:
            continue
        seen.add(current)
        stack.extend(children_by_parent.get(current, ()))
    return seen


def _resolve_parent_id(
    conn: sqlite3.Connection, parent_id: Optional[str], menu_id: Optional[int] = None
) -> Optional[int]:
    if parent_id is None:
        if menu_id is not None and menu_id == _find_root_id(conn):
            return None
        return _find_root_id(conn)
    parsed = _parse_id(parent_id, "Menu parent")
    if menu_id is not None:
        if parsed == menu_id:
            raise ValueError("Un menu ne peut pas être son propre parent")
        if parsed in _subtree_ids(conn, menu_id):
            raise ValueError("Un menu ne peut pas être rattaché à l'un de ses descendants")
    row = conn.execute("SELECT menu_type FROM menus WHERE id = ?", (parsed,)).fetchone()
    if row is None:
        raise LookupError("Menu parent introuvable")
    if row["menu_type"] != models.MenuType.FOLDER.value:
        raise ValueError("Le menu parent doit être un dossier")
    return parsed


def create_menu(payload: models.MenuCreate) -> models.MenuNode:
    ensure_database_ready()
    with db.get_console_connection() as conn:
        if conn.execute("SELECT 1 FROM menus WHERE key = ?", (payload.key,)).fetchone():
            raise ValueError("Identifiant de menu déjà utilisé")
        parent_id = _resolve_parent_id(conn, payload.parent_id)
        cur = conn.execute(
            """
            INSERT INTO menus (key, label, route, icon, parent_id, sort_order, is_visible, menu_type)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                payload.key,
                payload.label,
                payload.route,
                payload.icon,
                parent_id,
                payload.sort_order,
                int(payload.is_visible),
                payload.menu_type.value,
            ),
        )
        menu_id = int(cur.lastrowid)
        conn.commit()
    logger.info("Menu %s créé (id=%s, parent=%s)", payload.key, menu_id, parent_id)
    return get_menu(menu_id)


def update_menu(menu_id: str | int, payload: models.MenuUpdate) -> models.MenuNode:
    ensure_database_ready()
    parsed_id = _parse_id(menu_id, "Menu")
    with db.get_console_connection() as conn:
        if conn.execute("SELECT 1 FROM menus WHERE id = ?", (parsed_id,)).fetchone() is None:
            raise LookupError("Menu introuvable")
        duplicate = conn.execute(
            "SELECT 1 FROM menus WHERE key = ? AND id != ?", (payload.key, parsed_id)
        ).fetchone()
        if duplicate:
            raise ValueError("Identifiant de menu déjà utilisé")
        parent_id = _resolve_parent_id(conn, payload.parent_id, parsed_id)
        if payload.menu_type is not models.MenuType.FOLDER and conn.execute(
            "SELECT 1 FROM menus WHERE parent_id = ? LIMIT 1", (parsed_id,)
        ).fetchone():
            raise ValueError("Un menu contenant des sous-menus doit rester un dossier")
        conn.execute(
            """
            UPDATE menus
            SET key = ?, label = ?, route = ?, icon = ?, parent_id = ?,
                sort_order = ?, is_visible = ?, menu_type = ?
            WHERE id = ?
            """,
            (
                payload.key,
                payload.label,
                payload.route,
                payload.icon,
                parent_id,
                payload.sort_order,
                int(payload.is_visible),
                payload.menu_type.value,
                parsed_id,
            ),
        )
        conn.commit()
    logger.info("Menu %s mis à jour (id=%s)", payload.key, parsed_id)
    return get_menu(parsed_id)


def delete_menu(menu_id: str | int) -> None:
    ensure_database_ready()
    parsed_id = _parse_id(menu_id, "Menu")
    with db.get_console_connection() as conn:
        if conn.execute("SELECT 1 FROM menus WHERE id = ?", (parsed_id,)).fetchone() is None:
            raise LookupError("Menu introuvable")
        if conn.execute("SELECT 1 FROM menus WHERE parent_id = ? LIMIT 1", (parsed_id,)).fetchone():
            raise ValueError("Supprimez d'abord les sous-menus")
        conn.execute("DELETE FROM menus WHERE id = ?", (parsed_id,))
        conn.commit()
    logger.info("Menu supprimé (id=%s)", parsed_id)


def _build_tree(rows: Iterable[sqlite3.Row], *, include_hidden: bool) -> list[models.MenuNode]:
    rows = list(rows)
    root_id = next((row["id"] for row in rows if row["key"] == ROOT_MENU_KEY), None)
    children_by_parent: dict[int, list[sqlite3.Row]] = defaultdict(list)
    for row in rows:
        if row["parent_id"] is not None:
            children_by_parent[row["parent_id"]].append(row)

    def keep(row: sqlite3.Row) -> bool:
        return row["key"] != ROOT_MENU_KEY and (include_hidden or bool(row["is_visible"]))

    def build(row: sqlite3.Row) -> models.MenuNode:
        children = [build(child) for child in children_by_parent.get(row["id"], []) if keep(child)]
        return _row_to_menu(row).model_copy(update={"children": children})

    if root_id is not None:
        top_level = children_by_parent.get(root_id, [])
    else:
        top_level = [row for row in rows if row["parent_id"] is None]
    return [build(row) for row in top_level if keep(row)]


def get_menu_tree(*, include_hidden: bool = True) -> list[models.MenuNode]:
    """Construit l'arbre des menus, trié par ordre d'affichage.

    Le dossier racine virtuel n'est jamais renvoyé : ses enfants forment le
    premier niveau.
    """

    ensure_database_ready()
    with db.get_console_connection() as conn:
        rows = _fetch_menu_rows(conn)
    return _build_tree(rows, include_hidden=include_hidden)


def get_menu_folders() -> list[models.MenuFolder]:
    ensure_database_ready()
    with db.get_console_connection() as conn:
        rows = _fetch_menu_rows(conn)
    child_counts: dict[int, int] = defaultdict(int)
    for row in rows:
        if row["parent_id"] is not None:
            child_counts[row["parent_id"]] += 1
    return [
        models.MenuFolder(**_row_to_menu(row).model_dump(), menu_count=child_counts[row["id"]])
        for row in rows
        if row["menu_type"] == models.MenuType.FOLDER.value and row["key"] != ROOT_MENU_KEY
    ]


# ---------------------------------------------------------------------------
# Rôles et affectations de menus
# ---------------------------------------------------------------------------


def _row_to_role(row: sqlite3.Row) -> models.Role:
    return models.Role(id=row["id"], code=row["code"], name=row["name"])


def list_roles() -> list[models.Role]:
    ensure_database_ready()
    with db.get_console_connection() as conn:
        cur = conn.execute("SELECT * FROM roles ORDER BY code COLLATE NOCASE")
        return [_row_to_role(row) for row in cur.fetchall()]


def get_role(role_id: int) -> models.Role:
    ensure_database_ready()
    with db.get_console_connection() as conn:
        row = conn.execute("SELECT * FROM roles WHERE id = ?", (role_id,)).fetchone()
    if row is None:
        raise LookupError("Rôle introuvable")
    return _row_to_role(row)


def create_role(payload: models.RoleCreate) -> models.Role:
    ensure_database_ready()
    with db.get_console_connection() as conn:
        try:
            cur = conn.execute(
                "INSERT INTO roles (code, name) VALUES (?, ?)",
                (payload.code, payload.name),
            )
        except sqlite3.IntegrityError as exc:
            raise ValueError("Code de rôle déjà utilisé") from exc
        role_id = int(cur.lastrowid)
        conn.commit()
    logger.info("Rôle %s créé (id=%s)", payload.code, role_id)
    return get_role(role_id)


def delete_role(role_id: int) -> None:
    ensure_database_ready()
    with db.get_console_connection() as conn:
        cur = conn.execute("DELETE FROM roles WHERE id = ?", (role_id,))
        if cur.rowcount == 0:
            raise LookupError("Rôle introuvable")
        conn.commit()
    logger.info("Rôle supprimé (id=%s)", role_id)


def _ensure_role_exists(conn: sqlite3.Connection, role_id: int) -> None:
    if conn.execute("SELECT 1 FROM roles WHERE id = ?", (role_id,)).fetchone() is None:
        raise LookupError("Rôle introuvable")


def get_role_menu_ids(role_id: int) -> list[str]:
    ensure_database_ready()
    with db.get_console_connection() as conn:
        _ensure_role_exists(conn, role_id)
        cur = conn.execute(
            "SELECT menu_id FROM role_menus WHERE role_id = ? ORDER BY menu_id",
            (role_id,),
        )
        return [str(row["menu_id"]) for row in cur.fetchall()]


def set_role_menu_ids(role_id: int, menu_ids: Iterable[str]) -> list[str]:
    """Remplace les menus affectés au rôle par exactement ``menu_ids``.

    Les identifiants de dossiers sont conservés tels quels : la liste
    enregistrée est celle produite par la sélection.
    """

    ensure_database_ready()
    parsed: list[int] = []
    for menu_id in dict.fromkeys(menu_ids):
        try:
            parsed.append(int(menu_id))
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Menu inconnu: {menu_id}") from exc
    with db.get_console_connection() as conn:
        _ensure_role_exists(conn, role_id)
        known = {row["id"] for row in conn.execute("SELECT id FROM menus")}
        unknown = [menu_id for menu_id in parsed if menu_id not in known]
        if unknown:
            raise ValueError(f"Menu inconnu: {unknown[0]}")
        conn.execute("DELETE FROM role_menus WHERE role_id = ?", (role_id,))
        conn.executemany(
            "INSERT INTO role_menus (role_id, menu_id) VALUES (?, ?)",
            [(role_id, menu_id) for menu_id in parsed],
        )
        conn.commit()
    logger.info("Rôle %s: %d menus affectés", role_id, len(parsed))
    return get_role_menu_ids(role_id)
