"""
Route definitions for the musician catalogue.

Endpoints under /api/catalog:
- GET  /profiles               : full catalogue, newest first
- POST /profiles               : register a musician
- GET  /profiles/{profile_id}  : one profile
- PUT  /profiles/{profile_id}  : edit a profile
- GET  /view                   : filtered list, favourites, facets and theme
- PUT  /filter                 : replace the active filter
- GET  /search                 : one-shot filter; the stored filter is untouched
- GET  /facets                 : distinct instruments and genres
- GET  /favorites              : favourite profiles
- POST /favorites/{profile_id} : toggle a favourite
- GET  /theme                  : current theme
- POST /theme/toggle           : switch between light and dark
"""

from __future__ import annotations

import logging
import threading
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..config import get_settings
from ..models import FilterCriteria, Profile, ProfileDraft
from ..storage import JsonFileKeyValueStore, PreferenceStore
from .schemas import CatalogView, Facets, FavoriteToggle, ThemeState
from .store import CatalogStore, filter_profiles


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/catalog", tags=["catalog"])

# One store per process; created on first use so settings are read late.
_store: Optional[CatalogStore] = None
_store_lock = threading.Lock()


def get_store() -> CatalogStore:
    global _store
    with _store_lock:
        if _store is None:
            settings = get_settings()
            preferences = PreferenceStore(JsonFileKeyValueStore(settings.preferences_file))
            _store = CatalogStore(preferences=preferences, ambient_theme=settings.ambient_theme)
            logger.info(
                "Catalog store ready with %d profiles (preferences in %s)",
                len(_store.profiles),
                settings.preferences_file,
            )
        return _store


def _view(store: CatalogStore) -> CatalogView:
    return CatalogView(
        criteria=store.criteria,
        items=store.filtered(),
        favorites=store.favorited(),
        facets=store.facets(),
        theme=store.theme,
    )


@router.get("/profiles", response_model=List[Profile])
def list_profiles(store: CatalogStore = Depends(get_store)) -> List[Profile]:
    return store.profiles


@router.post("/profiles", response_model=Profile, status_code=201)
def register_profile(draft: ProfileDraft, store: CatalogStore = Depends(get_store)) -> Profile:
    if not draft.name.strip():
        raise HTTPException(status_code=400, detail="O nome é obrigatório.")
    return store.register(draft)


@router.get("/profiles/{profile_id}", response_model=Profile)
def get_profile(profile_id: str, store: CatalogStore = Depends(get_store)) -> Profile:
    profile = store.get(profile_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Musician not found")
    return profile


@router.put("/profiles/{profile_id}", response_model=Profile)
def edit_profile(
    profile_id: str,
    draft: ProfileDraft,
    store: CatalogStore = Depends(get_store),
) -> Profile:
    profile = store.edit(profile_id, draft)
    if profile is None:
        raise HTTPException(status_code=404, detail="Musician not found")
    return profile


@router.get("/view", response_model=CatalogView)
def current_view(store: CatalogStore = Depends(get_store)) -> CatalogView:
    return _view(store)


@router.put("/filter", response_model=CatalogView)
def set_filter(criteria: FilterCriteria, store: CatalogStore = Depends(get_store)) -> CatalogView:
    store.set_filter(criteria)
    return _view(store)


@router.get("/search", response_model=List[Profile])
def search_profiles(
    q: str = Query(default="", description="Pesquisar por nome"),
    instrument: Optional[str] = Query(default=None, description="Instrumento exato"),
    genre: Optional[str] = Query(default=None, description="Gênero exato"),
    store: CatalogStore = Depends(get_store),
) -> List[Profile]:
    criteria = FilterCriteria(text=q, instrument=instrument or None, genre=genre or None)
    return filter_profiles(store.profiles, criteria)


@router.get("/facets", response_model=Facets)
def list_facets(store: CatalogStore = Depends(get_store)) -> Facets:
    return store.facets()


# ---------------------------------------------------------------------------
# Favourites and theme
#
# Both are client preferences persisted through the store's
# ``PreferenceStore``. Favouriting an unknown ID is accepted: it simply
# never shows up in the favourites list.

@router.get("/favorites", response_model=List[Profile])
def list_favorites(store: CatalogStore = Depends(get_store)) -> List[Profile]:
    return store.favorited()


@router.post("/favorites/{profile_id}", response_model=FavoriteToggle)
def toggle_favorite(profile_id: str, store: CatalogStore = Depends(get_store)) -> FavoriteToggle:
    return FavoriteToggle(id=profile_id, favorite=store.toggle_favorite(profile_id))


@router.get("/theme", response_model=ThemeState)
def get_theme(store: CatalogStore = Depends(get_store)) -> ThemeState:
    return ThemeState(theme=store.theme)


@router.post("/theme/toggle", response_model=ThemeState)
def toggle_theme(store: CatalogStore = Depends(get_store)) -> ThemeState:
    return ThemeState(theme=store.toggle_theme())
