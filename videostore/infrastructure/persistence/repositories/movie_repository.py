"""
Implementation SQLModel du repository Movie.

Implémente l'interface IMovieRepository pour la persistance des films,
de leur distribution (table "cast") et de leurs images (table "movie_images")
dans la base de données SQLite via SQLModel.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func
from sqlmodel import Session, select

from videostore.core.entities import Image, Movie, MoviePatch
from videostore.core.ports.repositories import IMovieRepository
from videostore.infrastructure.persistence.models import (
    CastModel,
    ImageModel,
    MovieImageModel,
    MovieModel,
)
from videostore.infrastructure.persistence.repositories.filtering import ci_order, icontains


class SQLModelMovieRepository(IMovieRepository):
    """
    Repository SQLModel pour les films.

    Implémente IMovieRepository avec conversion bidirectionnelle
    entre l'entité Movie (domaine) et MovieModel (persistance).
    Le film est le côté propriétaire des liaisons "cast" et "movie_images".
    """

    def __init__(self, session: Session) -> None:
        """
        Initialise le repository avec une session SQLModel.

        Args :
            session : Session SQLModel active pour les operations DB
        """
        self._session = session

    def _to_entity(self, model: MovieModel, hydrate: bool = False) -> Movie:
        """
        Convertit un modèle DB en entité domaine.

        Args :
            model : Le modèle MovieModel depuis la DB
            hydrate : Charger les IDs des acteurs et des images

        Retourne :
            L'entité Movie correspondante
        """
        actor_ids = None
        image_ids = None
        if hydrate:
            actor_ids = frozenset(
                self._session.exec(
                    select(CastModel.actor_id).where(CastModel.imdb_id == model.imdb_id)
                ).all()
            )
            image_ids = frozenset(
                self._session.exec(
                    select(MovieImageModel.image_id).where(
                        MovieImageModel.imdb_id == model.imdb_id
                    )
                ).all()
            )
        return Movie(
            imdb_id=model.imdb_id,
            title=model.title,
            year=model.year,
            description=model.description,
            actor_ids=actor_ids,
            image_ids=image_ids,
        )

    def _to_model(self, entity: Movie) -> MovieModel:
        return MovieModel(
            imdb_id=entity.imdb_id,
            title=entity.title,
            year=entity.year,
            description=entity.description,
        )

    def _sorted(self, statement):
        return statement.order_by(ci_order(MovieModel.title), MovieModel.imdb_id)

    def save(self, movie: Movie) -> str:
        """Insère un nouveau film. Un IMDb ID déjà présent échoue au flush."""
        model = self._to_model(movie)
        self._session.add(model)
        self._session.flush()
        return model.imdb_id

    def update(self, patch: MoviePatch) -> Optional[Movie]:
        """Applique uniquement les champs renseignés du patch (None efface)."""
        model = self._session.get(MovieModel, patch.imdb_id)
        if model is None:
            return None

        for name, value in patch.changes().items():
            setattr(model, name, value)
        model.updated_at = datetime.now(timezone.utc)

        self._session.add(model)
        self._session.flush()
        return self._to_entity(model, hydrate=True)

    def find_by_id(self, imdb_id: str) -> Optional[Movie]:
        """Récupère un film avec ses acteurs et ses images."""
        model = self._session.get(MovieModel, imdb_id)
        if model:
            return self._to_entity(model, hydrate=True)
        return None

    def find_by_id_lazily(self, imdb_id: str) -> Optional[Movie]:
        """Récupère un film sans interroger les tables de liaison."""
        statement = select(MovieModel).where(MovieModel.imdb_id == imdb_id)
        model = self._session.exec(statement).first()
        if model:
            return self._to_entity(model)
        return None

    def find_all(self) -> list[Movie]:
        """Liste tous les films avec leurs relations, triés par titre."""
        models = self._session.exec(self._sorted(select(MovieModel))).all()
        return [self._to_entity(model, hydrate=True) for model in models]

    def find_by_title(self, search_for: str) -> list[Movie]:
        """Recherche des films dont le titre contient search_for (insensible à la casse)."""
        statement = self._sorted(
            select(MovieModel).where(icontains(MovieModel.title, search_for))
        )
        models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]

    def find_page(
        self, offset: int, limit: int, search_for: Optional[str] = None
    ) -> list[Movie]:
        """Page de films (projection sans relations), filtrée sur le titre."""
        statement = select(MovieModel)
        if search_for is not None:
            statement = statement.where(icontains(MovieModel.title, search_for))
        statement = self._sorted(statement).offset(offset).limit(limit)
        models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]

    def find_actor_movies_lazily(self, actor_id: int) -> list[Movie]:
        """Films dans lesquels l'acteur est distribue, triés par titre."""
        statement = self._sorted(
            select(MovieModel)
            .join(CastModel, CastModel.imdb_id == MovieModel.imdb_id)
            .where(CastModel.actor_id == actor_id)
        )
        models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]

    def count(self, search_for: Optional[str] = None) -> int:
        """Compte les films avec le même predicat que find_page."""
        statement = select(func.count()).select_from(MovieModel)
        if search_for is not None:
            statement = statement.where(icontains(MovieModel.title, search_for))
        return self._session.exec(statement).one()

    def remove_by_id(self, imdb_id: str) -> bool:
        """
        Supprime un film de manière idempotente.

        Ordre : liens de distribution, puis images (liens et contenus),
        puis le film lui-même.

        Retourne :
            True si le film existait
        """
        model = self._session.get(MovieModel, imdb_id)
        if model is None:
            return False

        cast_links = self._session.exec(
            select(CastModel).where(CastModel.imdb_id == imdb_id)
        ).all()
        for link in cast_links:
            self._session.delete(link)

        image_links = self._session.exec(
            select(MovieImageModel).where(MovieImageModel.imdb_id == imdb_id)
        ).all()
        image_ids = [link.image_id for link in image_links]
        for link in image_links:
            self._session.delete(link)
        self._session.flush()

        for image_id in image_ids:
            image = self._session.get(ImageModel, image_id)
            if image is not None:
                self._session.delete(image)

        self._session.delete(model)
        self._session.flush()
        return True

    # Distribution

    def is_cast(self, imdb_id: str, actor_id: int) -> bool:
        return self._session.get(CastModel, (imdb_id, actor_id)) is not None

    def add_cast(self, imdb_id: str, actor_id: int) -> None:
        self._session.add(CastModel(imdb_id=imdb_id, actor_id=actor_id))
        self._session.flush()

    def remove_cast(self, imdb_id: str, actor_id: int) -> bool:
        link = self._session.get(CastModel, (imdb_id, actor_id))
        if link is None:
            return False
        self._session.delete(link)
        self._session.flush()
        return True

    # Images

    def save_movie_image(self, imdb_id: str, image: Image) -> int:
        """Enregistre l'image puis son lien de propriété ; retourne l'ID attribué."""
        model = ImageModel(description=image.description, content=image.content)
        self._session.add(model)
        self._session.flush()

        self._session.add(MovieImageModel(image_id=model.id, imdb_id=imdb_id))
        self._session.flush()
        return model.id

    def remove_movie_image_by_id(self, imdb_id: str, image_id: int) -> bool:
        """Supprime l'image si elle appartient au film. Retourne True si supprimée."""
        link = self._session.get(MovieImageModel, image_id)
        if link is None or link.imdb_id != imdb_id:
            return False

        self._session.delete(link)
        self._session.flush()

        image = self._session.get(ImageModel, image_id)
        if image is not None:
            self._session.delete(image)
            self._session.flush()
        return True

    def count_movie_images(self, imdb_id: str) -> int:
        statement = (
            select(func.count())
            .select_from(MovieImageModel)
            .where(MovieImageModel.imdb_id == imdb_id)
        )
        return self._session.exec(statement).one()
