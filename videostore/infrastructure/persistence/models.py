"""
Modèles SQLModel pour la base de données VideoStore.

Ces modèles représentent les tables de la base de données SQLite.
Ils sont distincts des entités de domaine (dataclass dans core/entities/)
selon l'architecture hexagonale.

Tables:
- actors: Acteurs
- movies: Films, clé = IMDb ID fourni par l'appelant
- images: Images de films (contenu binaire)
- cast: Liaison film/acteur (plusieurs à plusieurs)
- movie_images: Liaison film/image ; image_id est la clé primaire, une image
  n'appartient donc qu'à un seul film

Les relations ne sont pas portées par des attributs d'objets : elles sont lues
et écrites uniquement dans les tables de liaison par les repositories.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlmodel import Field, Index, SQLModel


def _utc_now() -> datetime:
    """Horodatage UTC avec fuseau (les colonnes datetime l'exigent)."""
    return datetime.now(timezone.utc)


class ActorModel(SQLModel, table=True):
    """Modèle représentant un acteur dans la base de données."""

    __tablename__ = "actors"
    __table_args__ = (Index("ix_actors_last_first", "last_name", "first_name"),)

    id: int | None = Field(default=None, primary_key=True)
    first_name: str = Field(max_length=50)
    last_name: str | None = Field(default=None, max_length=50)  # Mononymes
    birth_date: date
    created_at: datetime | None = Field(default_factory=_utc_now)
    updated_at: datetime | None = Field(default_factory=_utc_now)


class MovieModel(SQLModel, table=True):
    """Modèle représentant un film dans la base de données."""

    __tablename__ = "movies"

    imdb_id: str = Field(primary_key=True, max_length=20)  # ex: "tt0107048"
    title: str = Field(index=True, max_length=600)
    year: int
    description: str | None = Field(default=None, max_length=10000)
    created_at: datetime | None = Field(default_factory=_utc_now)
    updated_at: datetime | None = Field(default_factory=_utc_now)


class ImageModel(SQLModel, table=True):
    """Modèle représentant une image de film (contenu binaire opaque)."""

    __tablename__ = "images"

    id: int | None = Field(default=None, primary_key=True)
    description: str = Field(max_length=255)
    content: bytes


class CastModel(SQLModel, table=True):
    """Lien de distribution entre un film et un acteur."""

    __tablename__ = "cast"

    imdb_id: str = Field(foreign_key="movies.imdb_id", primary_key=True)
    actor_id: int = Field(foreign_key="actors.id", primary_key=True, index=True)


class MovieImageModel(SQLModel, table=True):
    """Lien de propriété d'une image par un film."""

    __tablename__ = "movie_images"

    image_id: int = Field(foreign_key="images.id", primary_key=True)
    imdb_id: str = Field(foreign_key="movies.imdb_id", index=True)
