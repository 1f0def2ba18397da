#!/usr/bin/env python3
"""Helper script to launch the FastAPI dev server with one command."""
from __future__ import annotations

import argparse
import logging
import os
import subprocess
import sys
from pathlib import Path
from subprocess import TimeoutExpired

ROOT_DIR = Path(__file__).resolve().parents[1]
LOGGER = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Lance le backend de la console d'administration en mode développement",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port sur lequel exposer l'API (défaut: 8000)",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Adresse d'écoute d'uvicorn (défaut: 127.0.0.1)",
    )
    parser.add_argument(
        "--data-dir",
        help="Répertoire des bases SQLite (ADMIN_CONSOLE_DATA_DIR)",
    )
    parser.add_argument(
        "--no-seed",
        action="store_true",
        help="Ne pas créer les menus et rôles par défaut",
    )
    parser.add_argument(
        "--no-reload",
        action="store_true",
        help="Désactiver le rechargement automatique d'uvicorn",
    )
    return parser.parse_args(argv)


def build_command(args: argparse.Namespace) -> list[str]:
    command = [
        sys.executable,
        "-m",
        "uvicorn",
        "backend.app:app",
        "--host",
        args.host,
        "--port",
        str(args.port),
    ]
    if not args.no_reload:
        command.append("--reload")
    return command


def build_env(args: argparse.Namespace) -> dict[str, str]:
    env = os.environ.copy()
    if args.data_dir:
        env["ADMIN_CONSOLE_DATA_DIR"] = str(Path(args.data_dir).resolve())
    if args.no_seed:
        env["ADMIN_CONSOLE_SEED_MENUS"] = "0"
    return env


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    args = parse_args(argv)
    command = build_command(args)

    LOGGER.info("➡️  Lancement du backend FastAPI : %s", " ".join(command))

    process = subprocess.Popen(command, cwd=str(ROOT_DIR), env=build_env(args))
    try:
        return process.wait()
    except KeyboardInterrupt:
        LOGGER.info("⏹️  Arrêt du backend...")
        process.terminate()
        try:
            return process.wait(timeout=10)
        except TimeoutExpired:
            process.kill()
            return process.wait()


if __name__ == "__main__":
    raise SystemExit(main())
