# freelancmusic/models.py
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


Theme = Literal["light", "dark"]
THEMES = ("light", "dark")

BioStatus = Literal["pending", "resolved", "failed"]


class Profile(BaseModel):
    """A registered musician.

    Profiles are frozen: an update replaces the whole record, so the
    ``id`` assigned at registration never changes.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    location: str = ""
    instruments: List[str] = Field(default_factory=list)
    genres: List[str] = Field(default_factory=list)
    bio: str = ""
    email: str = ""
    portfolio: str = ""
    # URL or embedded data URI from an upload
    image: str = ""


class ProfileDraft(BaseModel):
    name: str
    location: str = ""
    instruments: str = Field(
        default="",
        description="Instrumentos separados por vírgula (ex.: 'Sax, Clarinete').",
    )
    genres: str = Field(
        default="",
        description="Gêneros separados por vírgula.",
    )
    bio: str = ""
    email: str = ""
    portfolio: str = ""
    image: Optional[str] = None


class FilterCriteria(BaseModel):
    text: str = ""
    instrument: Optional[str] = None
    genre: Optional[str] = None


class BioRequest(BaseModel):
    keywords: str


class BioResult(BaseModel):
    id: str
    keywords: str
    status: BioStatus = "pending"
    text: Optional[str] = None
