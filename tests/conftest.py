"""
Fixtures pytest partagées pour les tests VideoStore.

Ce module contient les fixtures communes utilisées dans les tests:
- Engine SQLite en mémoire (clés étrangères actives) et session
- Repositories SQLModel et services branches sur cette session
- Entités d'exemple (acteurs, films, image)
"""

from datetime import date
from typing import Iterator

import pytest
from sqlalchemy import Engine
from sqlmodel import Session

from videostore.core.entities import Actor, Image, Movie
from videostore.infrastructure.persistence.database import create_db_engine, init_db
from videostore.infrastructure.persistence.repositories import (
    SQLModelActorRepository,
    SQLModelImageRepository,
    SQLModelMovieRepository,
)
from videostore.services import ChangeBroadcaster, ListingService, RegistrationService


@pytest.fixture
def engine() -> Iterator[Engine]:
    """Base en mémoire isolée pour chaque test."""
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Iterator[Session]:
    with Session(engine) as session:
        yield session


@pytest.fixture
def actor_repo(session: Session) -> SQLModelActorRepository:
    return SQLModelActorRepository(session)


@pytest.fixture
def movie_repo(session: Session) -> SQLModelMovieRepository:
    return SQLModelMovieRepository(session)


@pytest.fixture
def image_repo(session: Session) -> SQLModelImageRepository:
    return SQLModelImageRepository(session)


@pytest.fixture
def service(
    session: Session,
    actor_repo: SQLModelActorRepository,
    movie_repo: SQLModelMovieRepository,
    image_repo: SQLModelImageRepository,
) -> RegistrationService:
    return RegistrationService(
        session=session,
        actor_repo=actor_repo,
        movie_repo=movie_repo,
        image_repo=image_repo,
    )


@pytest.fixture
def listing(
    actor_repo: SQLModelActorRepository, movie_repo: SQLModelMovieRepository
) -> ListingService:
    return ListingService(actor_repo=actor_repo, movie_repo=movie_repo)


@pytest.fixture
def broadcaster() -> ChangeBroadcaster:
    return ChangeBroadcaster()


def make_actor(first_name: str = "Bill", last_name: str | None = "Murray", **kwargs) -> Actor:
    """Acteur non enregistré, sans films."""
    kwargs.setdefault("birth_date", date(1950, 9, 21))
    kwargs.setdefault("movie_ids", frozenset())
    return Actor(first_name=first_name, last_name=last_name, **kwargs)


def make_movie(
    imdb_id: str = "tt0107048", title: str = "Groundhog Day", year: int = 1993, **kwargs
) -> Movie:
    """Film non enregistré, sans acteurs ni images."""
    kwargs.setdefault("actor_ids", frozenset())
    kwargs.setdefault("image_ids", frozenset())
    return Movie(imdb_id=imdb_id, title=title, year=year, **kwargs)


def make_image(description: str = "Affiche", content: bytes = b"\x89PNG...") -> Image:
    return Image(description=description, content=content)


@pytest.fixture
def sample_actor() -> Actor:
    return make_actor()


@pytest.fixture
def sample_movie() -> Movie:
    return make_movie()


@pytest.fixture
def sample_image() -> Image:
    return make_image()


@pytest.fixture
def actor_factory():
    """Fabrique d'acteurs non enregistrés : actor_factory("Emma", "Stone")."""
    return make_actor


@pytest.fixture
def movie_factory():
    """Fabrique de films non enregistrés : movie_factory("tt1156398", "Zombieland", 2009)."""
    return make_movie


@pytest.fixture
def image_factory():
    return make_image
