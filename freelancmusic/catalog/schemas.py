"""
Pydantic schema definitions for the catalog responses.

``Facets`` lists the distinct instruments and genres found in the
catalogue, ready to populate the filter selectors. ``CatalogView``
bundles everything a client needs to render the directory page after a
command: the active filter, the matching profiles, the favourites, the
facets and the current theme.
"""

from typing import List

from pydantic import BaseModel, Field

from ..models import FilterCriteria, Profile, Theme


class Facets(BaseModel):
    """Distinct filter values, each list sorted ascending."""

    instruments: List[str] = Field(default_factory=list)
    genres: List[str] = Field(default_factory=list)


class CatalogView(BaseModel):
    criteria: FilterCriteria
    items: List[Profile]
    favorites: List[Profile]
    facets: Facets
    theme: Theme


class FavoriteToggle(BaseModel):
    id: str
    favorite: bool


class ThemeState(BaseModel):
    theme: Theme
