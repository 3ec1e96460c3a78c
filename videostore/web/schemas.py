"""
Schemas pydantic de l'API REST.

Les schemas d'entrée ne portent aucune contrainte métier : les règles de
champ sont celles du catalogue, appliquées par le RegistrationService, afin
que l'API renvoie les mêmes violations que les autres appelants.
"""

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, Field

from videostore.core.entities import Actor, ActorPatch, Image, ImagePatch, Movie, MoviePatch


def _set_fields(model: BaseModel) -> dict[str, Any]:
    """Champs explicitement fournis dans la requête (null compris)."""
    return {name: getattr(model, name) for name in model.model_fields_set}


class ActorFields(BaseModel):
    id: Optional[int] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    birth_date: Optional[date] = None

    def to_entity(self) -> Actor:
        return Actor(
            id=self.id,
            first_name=self.first_name,
            last_name=self.last_name,
            birth_date=self.birth_date,
            movie_ids=frozenset(),
        )


class MovieFields(BaseModel):
    imdb_id: Optional[str] = None
    title: Optional[str] = None
    year: Optional[int] = None
    description: Optional[str] = None

    def to_entity(self) -> Movie:
        return Movie(
            imdb_id=self.imdb_id,
            title=self.title,
            year=self.year,
            description=self.description,
            actor_ids=frozenset(),
            image_ids=frozenset(),
        )


class ActorCreate(ActorFields):
    """Acteur à enregistrer, avec d'éventuels nouveaux films."""

    movies: list[MovieFields] = Field(default_factory=list)


class MovieCreate(MovieFields):
    """Film à enregistrer, avec d'éventuels nouveaux acteurs."""

    actors: list[ActorFields] = Field(default_factory=list)


class ActorUpdate(BaseModel):
    """Clé absente : inchangé ; null : efface ; valeur : remplace."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    birth_date: Optional[date] = None

    def to_patch(self, actor_id: int) -> ActorPatch:
        return ActorPatch(id=actor_id, **_set_fields(self))


class MovieUpdate(BaseModel):
    """Clé absente : inchangé ; null : efface ; valeur : remplace."""

    title: Optional[str] = None
    year: Optional[int] = None
    description: Optional[str] = None

    def to_patch(self, imdb_id: str) -> MoviePatch:
        return MoviePatch(imdb_id=imdb_id, **_set_fields(self))


class ImageAttributes(BaseModel):
    """Partie "attributes" (JSON) d'un envoi multipart d'image."""

    id: Optional[int] = None
    description: Optional[str] = None

    def to_entity(self, content: Optional[bytes]) -> Image:
        return Image(id=self.id, description=self.description, content=content)

    def to_patch(self, image_id: int, content: Optional[bytes]) -> ImagePatch:
        changes = {name: value for name, value in _set_fields(self).items() if name != "id"}
        if content is not None:
            changes["content"] = content
        return ImagePatch(id=image_id, **changes)


class ActorOut(BaseModel):
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    birth_date: Optional[date] = None
    movie_ids: Optional[list[str]] = None

    @classmethod
    def from_entity(cls, actor: Actor) -> "ActorOut":
        return cls(
            id=actor.id,
            first_name=actor.first_name,
            last_name=actor.last_name,
            birth_date=actor.birth_date,
            movie_ids=sorted(actor.movie_ids) if actor.movie_ids is not None else None,
        )


class MovieOut(BaseModel):
    imdb_id: str
    title: Optional[str] = None
    year: Optional[int] = None
    description: Optional[str] = None
    actor_ids: Optional[list[int]] = None
    image_ids: Optional[list[int]] = None

    @classmethod
    def from_entity(cls, movie: Movie) -> "MovieOut":
        return cls(
            imdb_id=movie.imdb_id,
            title=movie.title,
            year=movie.year,
            description=movie.description,
            actor_ids=sorted(movie.actor_ids) if movie.actor_ids is not None else None,
            image_ids=sorted(movie.image_ids) if movie.image_ids is not None else None,
        )


class ImageOut(BaseModel):
    """Description d'une image ; le contenu est servi par un point d'accès dédié."""

    id: int
    description: Optional[str] = None
    imdb_id: Optional[str] = None
    size: int = 0

    @classmethod
    def from_entity(cls, image: Image) -> "ImageOut":
        return cls(
            id=image.id,
            description=image.description,
            imdb_id=image.imdb_id,
            size=len(image.content or b""),
        )
