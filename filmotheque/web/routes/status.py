"""
Routes de référence : catégories et mode de connexion.
"""

from fastapi import APIRouter, Request

from ...core.entities.media import DEFAULT_CATEGORIES, UNSORTED, UNSORTED_LABEL
from ..deps import get_container, read_app_version

router = APIRouter()


@router.get("/categories")
async def list_categories():
    """Catégories de classement disponibles (plus la valeur « non trié »)."""
    return {
        "success": True,
        "categories": [
            {"id": c.id, "name": c.name, "icon": c.icon, "label": c.label}
            for c in DEFAULT_CATEGORIES
        ],
        "unsorted": {"id": UNSORTED, "label": UNSORTED_LABEL},
    }


@router.get("/status")
async def connection_status(request: Request):
    """Mode de connexion courant."""
    settings = get_container(request).config()
    return {
        "offline": settings.offline_mode,
        "networkFeaturesAvailable": settings.network_features_available,
        "mode": "offline" if settings.offline_mode else "online",
        "version": read_app_version(),
    }
