"""
In-memory store for the musician catalogue.

``CatalogStore`` owns the catalogue, the favourite IDs, the active
filter and the display theme. Every change goes through one of its
commands; the filtered list, the favourites list and the facets are
recomputed from the current state whenever they are read. Favourites
and theme are written through a ``PreferenceStore`` so they survive a
restart.

The catalogue is seeded from ``data/sample_musicians.json``.
"""

from __future__ import annotations

import json
import logging
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence
from urllib.parse import quote

from ..models import FilterCriteria, Profile, ProfileDraft, Theme
from ..storage import PreferenceStore
from .schemas import Facets


logger = logging.getLogger(__name__)

DATA_FILE = Path(__file__).resolve().parents[1] / "data" / "sample_musicians.json"

PLACEHOLDER_IMAGE_URL = "https://i.pravatar.cc/400?u={seed}"

Observer = Callable[["CatalogStore"], None]


def _load_sample_profiles() -> List[Profile]:
    """Load the bundled sample musicians.

    Returns
    -------
    List[Profile]
        The sample catalogue, or an empty list when the file is missing
        or malformed.
    """
    try:
        with DATA_FILE.open("r", encoding="utf-8") as f:
            raw = json.load(f)
        return [Profile.model_validate(entry) for entry in raw]
    except Exception as exc:
        logger.error("Could not load sample musicians from %s: %s", DATA_FILE, exc)
        return []


def split_delimited(text: Optional[str]) -> List[str]:
    """Split comma-separated text into trimmed, non-empty segments."""
    return [part.strip() for part in (text or "").split(",") if part.strip()]


def placeholder_image(name: str) -> str:
    # same escaping as JavaScript's encodeURIComponent
    return PLACEHOLDER_IMAGE_URL.format(seed=quote(name, safe="-_.!~*'()"))


def new_profile_id(taken: Iterable[str] = ()) -> str:
    """Return a creation timestamp, or a random token if it is taken."""
    candidate = datetime.now(timezone.utc).isoformat(timespec="microseconds")
    if candidate in set(taken):
        candidate = uuid.uuid4().hex
    return candidate


def build_profile(draft: ProfileDraft, profile_id: str, image: Optional[str] = None) -> Profile:
    """Turn a form draft into a ``Profile``.

    Parameters
    ----------
    draft : ProfileDraft
        The submitted form. ``instruments`` and ``genres`` are
        comma-separated text.
    profile_id : str
        Identifier of the new or edited profile.
    image : Optional[str]
        Image used when the draft carries none. When both are empty a
        placeholder derived from the name is used.
    """
    return Profile(
        id=profile_id,
        name=draft.name,
        location=draft.location,
        instruments=split_delimited(draft.instruments),
        genres=split_delimited(draft.genres),
        bio=draft.bio,
        email=draft.email,
        portfolio=draft.portfolio,
        image=draft.image or image or placeholder_image(draft.name),
    )


def _sorted_distinct(values: Iterable[str]) -> List[str]:
    return sorted(set(values))


def compute_facets(profiles: Sequence[Profile]) -> Facets:
    return Facets(
        instruments=_sorted_distinct(i for p in profiles for i in p.instruments),
        genres=_sorted_distinct(g for p in profiles for g in p.genres),
    )


def matches_filter(profile: Profile, criteria: FilterCriteria) -> bool:
    """Check a profile against the name, instrument and genre filters.

    The name match is a case-insensitive substring test; instrument and
    genre must appear exactly in the profile's lists. Empty filters
    match everything.
    """
    if criteria.text.lower() not in profile.name.lower():
        return False
    if criteria.instrument and criteria.instrument not in profile.instruments:
        return False
    if criteria.genre and criteria.genre not in profile.genres:
        return False
    return True


def filter_profiles(profiles: Sequence[Profile], criteria: FilterCriteria) -> List[Profile]:
    return [p for p in profiles if matches_filter(p, criteria)]


def favorited_profiles(profiles: Sequence[Profile], favorites: Iterable[str]) -> List[Profile]:
    """Profiles whose ID is a favourite, in catalogue order.

    IDs that no longer match a profile are ignored.
    """
    wanted = set(favorites)
    return [p for p in profiles if p.id in wanted]


class CatalogStore:
    """Owner of the catalogue state.

    Commands apply synchronously, one at a time under a lock, and notify
    subscribers once the new state is in place. Persistence of favourites
    and theme is best effort: a failed write is logged and the in-memory
    state is kept.
    """

    def __init__(
        self,
        profiles: Optional[Iterable[Profile]] = None,
        preferences: Optional[PreferenceStore] = None,
        ambient_theme: Theme = "light",
    ) -> None:
        self._profiles: List[Profile] = (
            list(profiles) if profiles is not None else _load_sample_profiles()
        )
        self._preferences = preferences
        if preferences is not None:
            self._favorites: List[str] = preferences.load_favorites()
            self._theme: Theme = preferences.load_theme(ambient_theme)
        else:
            self._favorites = []
            self._theme = ambient_theme
        self._criteria = FilterCriteria()
        self._observers: List[Observer] = []
        # reentrant: edit() calls update() while holding it
        self._lock = threading.RLock()

    # -- state ---------------------------------------------------------

    @property
    def profiles(self) -> List[Profile]:
        return list(self._profiles)

    @property
    def favorites(self) -> List[str]:
        return list(self._favorites)

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    @property
    def theme(self) -> Theme:
        return self._theme

    def get(self, profile_id: str) -> Optional[Profile]:
        return next((p for p in self._profiles if p.id == profile_id), None)

    def is_favorite(self, profile_id: str) -> bool:
        return profile_id in self._favorites

    # -- commands ------------------------------------------------------

    def register(self, draft: ProfileDraft) -> Profile:
        """Create a profile from ``draft`` and put it first in the catalogue."""
        with self._lock:
            profile = build_profile(
                draft, new_profile_id(p.id for p in self._profiles)
            )
            self._profiles.insert(0, profile)
            logger.info("Registered profile %s (%s)", profile.id, profile.name)
            self._notify()
            return profile

    def update(self, profile: Profile) -> Optional[Profile]:
        """Replace the profile with the same ID, keeping its position.

        Returns
        -------
        Optional[Profile]
            The stored profile, or ``None`` when no profile has that ID.
            The catalogue is left untouched in that case.
        """
        with self._lock:
            for index, current in enumerate(self._profiles):
                if current.id == profile.id:
                    self._profiles[index] = profile
                    self._notify()
                    return profile
        logger.warning("Update ignored: no profile with id %s", profile.id)
        return None

    def edit(self, profile_id: str, draft: ProfileDraft) -> Optional[Profile]:
        """Apply an edit form to an existing profile.

        The current image is kept when the draft does not bring a new one.
        """
        with self._lock:
            current = self.get(profile_id)
            if current is None:
                logger.warning("Edit ignored: no profile with id %s", profile_id)
                return None
            return self.update(build_profile(draft, profile_id, image=current.image))

    def toggle_favorite(self, profile_id: str) -> bool:
        """Add or remove ``profile_id`` from the favourites.

        Returns the new membership of the ID.
        """
        with self._lock:
            if profile_id in self._favorites:
                self._favorites = [f for f in self._favorites if f != profile_id]
                favorite = False
            else:
                self._favorites = self._favorites + [profile_id]
                favorite = True
            self._persist("favorites", lambda p: p.save_favorites(self._favorites))
            self._notify()
            return favorite

    def set_filter(self, criteria: FilterCriteria) -> None:
        with self._lock:
            self._criteria = criteria
            self._notify()

    def toggle_theme(self) -> Theme:
        with self._lock:
            self._theme = "dark" if self._theme == "light" else "light"
            self._persist("theme", lambda p: p.save_theme(self._theme))
            self._notify()
            return self._theme

    # -- derived views -------------------------------------------------

    def facets(self) -> Facets:
        with self._lock:
            return compute_facets(self._profiles)

    def filtered(self) -> List[Profile]:
        with self._lock:
            return filter_profiles(self._profiles, self._criteria)

    def favorited(self) -> List[Profile]:
        with self._lock:
            return favorited_profiles(self._profiles, self._favorites)

    # -- subscriptions -------------------------------------------------

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Call ``observer`` after every command; returns an unsubscribe hook."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self) -> None:
        # errors are logged so the remaining observers still run
        for observer in list(self._observers):
            try:
                observer(self)
            except Exception:
                logger.exception("Catalog observer %r failed", observer)

    def _persist(self, what: str, write: Callable[[PreferenceStore], None]) -> None:
        if self._preferences is None:
            return
        try:
            write(self._preferences)
        except Exception as exc:
            logger.error("Failed to persist %s: %s", what, exc)
