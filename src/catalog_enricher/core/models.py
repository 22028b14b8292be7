from dataclasses import asdict, dataclass
from typing import Any, Dict, Tuple

from ..config import UNKNOWN_GENRE


@dataclass(frozen=True)
class InputRecord:
    """Entrée du catalogue telle que fournie par l'ingestion."""

    title: str = ""
    author: str = ""
    isbn: str = ""

    def is_empty(self) -> bool:
        return not (self.title.strip() or self.author.strip() or self.isbn.strip())


@dataclass(frozen=True)
class PartialEnrichment:
    """Réponse (éventuellement vide) d'un seul adaptateur de fournisseur."""

    provider: str
    cover_url: str = ""
    description: str = ""
    # Signal brut de genre: catégories (Google Books) ou sujets (OpenLibrary)
    categories: Tuple[str, ...] = ()
    subjects: Tuple[str, ...] = ()

    @classmethod
    def empty(cls, provider: str) -> "PartialEnrichment":
        return cls(provider=provider)

    def is_empty(self) -> bool:
        return not (self.cover_url or self.description or self.categories or self.subjects)


@dataclass(frozen=True)
class EnrichmentResult:
    """Résultat fusionné de la cascade, stocké tel quel dans le cache."""

    cover_url: str = ""
    description: str = ""
    genre: str = UNKNOWN_GENRE
    source: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EnrichmentResult":
        """
        Reconstruit un résultat depuis sa forme sérialisée.

        Raises:
            ValueError: si la forme sérialisée est invalide
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping, got {type(data).__name__}")
        values = {}
        for name in ("cover_url", "description", "genre", "source"):
            value = data.get(name, "")
            if not isinstance(value, str):
                raise ValueError(f"Field {name!r} must be a string")
            values[name] = value
        values["genre"] = values["genre"] or UNKNOWN_GENRE
        return cls(**values)


@dataclass(frozen=True)
class EnrichedRecord:
    """Enregistrement final écrit dans le jeu de données de sortie."""

    id: int
    title: str
    author: str
    isbn: str
    cover_url: str = ""
    description: str = ""
    genre: str = UNKNOWN_GENRE
    source: str = ""

    @classmethod
    def build(cls, record_id: int, record: InputRecord, isbn: str, result: EnrichmentResult):
        return cls(
            id=record_id,
            title=record.title.strip(),
            author=record.author.strip(),
            isbn=isbn,
            cover_url=result.cover_url,
            description=result.description,
            genre=result.genre or UNKNOWN_GENRE,
            source=result.source,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Forme JSON consommée par la couche de présentation."""
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "isbn": self.isbn,
            "coverUrl": self.cover_url,
            "description": self.description,
            "genre": self.genre,
            "source": self.source,
        }


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: EnrichmentResult
    stored_at: float
