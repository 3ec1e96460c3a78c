"""
Module de persistance SQLite pour VideoStore.

Ce module fournit l'infrastructure de stockage utilisant SQLModel (SQLAlchemy).
Il contient :

- database.py : Configuration de l'engine SQLite, session factory, initialisation
- models.py : Modèles SQLModel représentant les tables et les tables de liaison
- repositories/ : Implementations des ports de persistance

Les modèles ici sont des adapters de persistance, distincts des entités de domaine
(dataclass dans core/entities/). La conversion entre les deux se fait dans les
repositories.

Usage:
    from videostore.infrastructure.persistence import create_db_engine, init_db

    engine = create_db_engine("sqlite:///videostore.db")
    init_db(engine)
"""

from videostore.infrastructure.persistence.database import (
    create_db_engine,
    get_engine,
    get_session,
    init_db,
    reset_engine,
)
from videostore.infrastructure.persistence.models import (
    ActorModel,
    CastModel,
    ImageModel,
    MovieImageModel,
    MovieModel,
)

__all__ = [
    "create_db_engine",
    "get_engine",
    "get_session",
    "init_db",
    "reset_engine",
    "ActorModel",
    "MovieModel",
    "ImageModel",
    "CastModel",
    "MovieImageModel",
]
