"""
Schémas des réponses des fournisseurs (validés une seule fois en bordure).
"""

from typing import Annotated, Any, List, Optional, Union

from pydantic import BaseModel, BeforeValidator, Field, field_validator


def _only_strings(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str)]


def _valid_cover_ids(value: Any) -> List[int]:
    # OpenLibrary utilise -1 pour une couverture supprimée
    if not isinstance(value, list):
        return []
    return [c for c in value if isinstance(c, int) and c > 0]


StringList = Annotated[List[str], BeforeValidator(_only_strings)]
CoverIds = Annotated[List[int], BeforeValidator(_valid_cover_ids)]


# ---------- Google Books ----------


class GoogleImageLinks(BaseModel):
    thumbnail: Optional[str] = None
    smallThumbnail: Optional[str] = None


class GoogleBooksVolumeInfo(BaseModel):
    """Google Books API volume info response model."""

    title: str = ""
    description: Optional[str] = None
    categories: StringList = Field(default_factory=list)
    imageLinks: Optional[GoogleImageLinks] = None


class GoogleBooksItem(BaseModel):
    volumeInfo: GoogleBooksVolumeInfo = Field(default_factory=GoogleBooksVolumeInfo)


class GoogleBooksResponse(BaseModel):
    """Google Books API search response model."""

    totalItems: int = 0
    items: List[GoogleBooksItem] = Field(default_factory=list)

    @field_validator("items", mode="before")
    @classmethod
    def null_items(cls, value: Any) -> Any:
        return value or []


# ---------- OpenLibrary ----------


class OpenLibraryText(BaseModel):
    """Texte typé OpenLibrary: {"type": "/type/text", "value": "..."}."""

    value: str = ""


class OpenLibraryRef(BaseModel):
    key: str = ""


def _text_of(description: Union[str, OpenLibraryText, None]) -> str:
    if isinstance(description, OpenLibraryText):
        return description.value
    return description or ""


class OpenLibraryEdition(BaseModel):
    """Réponse de /isbn/<isbn>.json (une édition)."""

    title: str = ""
    covers: CoverIds = Field(default_factory=list)
    description: Union[str, OpenLibraryText, None] = None
    subjects: StringList = Field(default_factory=list)
    works: List[OpenLibraryRef] = Field(default_factory=list)

    @property
    def description_text(self) -> str:
        return _text_of(self.description)


class OpenLibraryWork(BaseModel):
    """Réponse de /works/<id>.json."""

    description: Union[str, OpenLibraryText, None] = None
    subjects: StringList = Field(default_factory=list)

    @property
    def description_text(self) -> str:
        return _text_of(self.description)


class OpenLibraryDoc(BaseModel):
    key: str = ""
    title: str = ""
    cover_i: Optional[int] = None
    subject: StringList = Field(default_factory=list)


class OpenLibrarySearchResponse(BaseModel):
    """Réponse de /search.json."""

    numFound: int = 0
    docs: List[OpenLibraryDoc] = Field(default_factory=list)
