"""
Implementation SQLModel du repository Actor.

Implémente l'interface IActorRepository pour la persistance des acteurs
dans la base de données SQLite via SQLModel.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, or_
from sqlmodel import Session, select

from videostore.core.entities import Actor, ActorPatch
from videostore.core.ports.repositories import IActorRepository
from videostore.infrastructure.persistence.models import ActorModel, CastModel
from videostore.infrastructure.persistence.repositories.filtering import ci_order, icontains


class SQLModelActorRepository(IActorRepository):
    """
    Repository SQLModel pour les acteurs.

    Implémente IActorRepository avec conversion bidirectionnelle
    entre l'entité Actor (domaine) et ActorModel (persistance).
    Les films d'un acteur sont lus dans la table de liaison "cast".
    """

    def __init__(self, session: Session) -> None:
        """
        Initialise le repository avec une session SQLModel.

        Args :
            session : Session SQLModel active pour les operations DB
        """
        self._session = session

    def _to_entity(self, model: ActorModel, hydrate: bool = False) -> Actor:
        """
        Convertit un modèle DB en entité domaine.

        Args :
            model : Le modèle ActorModel depuis la DB
            hydrate : Charger les IMDb IDs des films de l'acteur

        Retourne :
            L'entité Actor correspondante
        """
        movie_ids = self._movie_ids(model.id) if hydrate else None
        return Actor(
            id=model.id,
            first_name=model.first_name,
            last_name=model.last_name,
            birth_date=model.birth_date,
            movie_ids=movie_ids,
        )

    def _to_model(self, entity: Actor) -> ActorModel:
        return ActorModel(
            first_name=entity.first_name,
            last_name=entity.last_name,
            birth_date=entity.birth_date,
        )

    def _movie_ids(self, actor_id: Optional[int]) -> frozenset[str]:
        statement = select(CastModel.imdb_id).where(CastModel.actor_id == actor_id)
        return frozenset(self._session.exec(statement).all())

    def _sorted(self, statement):
        return statement.order_by(
            ci_order(ActorModel.last_name),
            ci_order(ActorModel.first_name),
            ActorModel.id,
        )

    def _name_filter(self, search_for: str):
        return or_(
            icontains(ActorModel.first_name, search_for),
            icontains(ActorModel.last_name, search_for),
        )

    def save(self, actor: Actor) -> int:
        """Insère un nouvel acteur ; l'ID est attribué au flush."""
        model = self._to_model(actor)
        self._session.add(model)
        self._session.flush()
        return model.id

    def update(self, patch: ActorPatch) -> Optional[Actor]:
        """Applique uniquement les champs renseignés du patch (None efface)."""
        model = self._session.get(ActorModel, patch.id)
        if model is None:
            return None

        for name, value in patch.changes().items():
            setattr(model, name, value)
        model.updated_at = datetime.now(timezone.utc)

        self._session.add(model)
        self._session.flush()
        return self._to_entity(model, hydrate=True)

    def find_by_id(self, actor_id: int) -> Optional[Actor]:
        """Récupère un acteur avec les IMDb IDs de ses films."""
        model = self._session.get(ActorModel, actor_id)
        if model:
            return self._to_entity(model, hydrate=True)
        return None

    def find_by_id_lazily(self, actor_id: int) -> Optional[Actor]:
        """Récupère un acteur sans interroger la table de liaison."""
        statement = select(ActorModel).where(ActorModel.id == actor_id)
        model = self._session.exec(statement).first()
        if model:
            return self._to_entity(model)
        return None

    def find_all(self) -> list[Actor]:
        """Liste tous les acteurs avec leurs films, triés par nom puis prénom."""
        models = self._session.exec(self._sorted(select(ActorModel))).all()
        return [self._to_entity(model, hydrate=True) for model in models]

    def find_page(
        self, offset: int, limit: int, search_for: Optional[str] = None
    ) -> list[Actor]:
        """Page d'acteurs (projection sans films), filtrée sur le prénom ou le nom."""
        statement = select(ActorModel)
        if search_for is not None:
            statement = statement.where(self._name_filter(search_for))
        statement = self._sorted(statement).offset(offset).limit(limit)
        models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]

    def find_movie_actors_lazily(self, imdb_id: str) -> list[Actor]:
        """Acteurs distribués dans un film, triés par nom."""
        statement = self._sorted(
            select(ActorModel)
            .join(CastModel, CastModel.actor_id == ActorModel.id)
            .where(CastModel.imdb_id == imdb_id)
        )
        models = self._session.exec(statement).all()
        return [self._to_entity(model) for model in models]

    def count(self, search_for: Optional[str] = None) -> int:
        """Compte les acteurs avec le même predicat que find_page."""
        statement = select(func.count()).select_from(ActorModel)
        if search_for is not None:
            statement = statement.where(self._name_filter(search_for))
        return self._session.exec(statement).one()

    def remove_by_id(self, actor_id: int) -> bool:
        """
        Supprime un acteur de manière idempotente.

        Les liens de distribution sont retirés avant l'acteur pour ne laisser
        aucune ligne orpheline dans "cast".

        Retourne :
            True si l'acteur existait
        """
        model = self._session.get(ActorModel, actor_id)
        if model is None:
            return False

        links = self._session.exec(
            select(CastModel).where(CastModel.actor_id == actor_id)
        ).all()
        for link in links:
            self._session.delete(link)
        self._session.flush()

        self._session.delete(model)
        self._session.flush()
        return True
