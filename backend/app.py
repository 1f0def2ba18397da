"""Application FastAPI principale de la console d'administration."""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.api import menus, roles
from backend.core import services
from backend.core.config import settings
from backend.core.logging_config import configure_logging


configure_logging()

@asynccontextmanager
async def _lifespan(_: FastAPI):
    services.ensure_database_ready()
    yield


app = FastAPI(title="Admin Console API", version="1.0.0", lifespan=_lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.CORS_ORIGINS),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(menus.router, prefix="/menus", tags=["menus"])
app.include_router(roles.router, prefix="/roles", tags=["roles"])


@app.get("/health", tags=["health"])
async def healthcheck() -> dict[str, str]:
    """Renvoie l'état de santé générique du service."""
    return {"status": "ok"}
