"""Aggregate API routers."""

from fastapi import APIRouter

from .auth import router as auth_router
from .games import router as games_router
from .system import router as system_router
from .trophies import router as trophies_router

ALL_ROUTERS: tuple[APIRouter, ...] = (
    system_router,
    auth_router,
    games_router,
    trophies_router,
)

__all__ = ["ALL_ROUTERS"]
