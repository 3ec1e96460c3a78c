"""
Configuration de la base de données SQLite pour VideoStore.

Ce module fournit :
- Engine SQLite avec clés étrangères actives (intégrité des tables de liaison)
- Session factory
- Fonction d'initialisation des tables

La base de données est configurée via VIDEOSTORE_DATABASE_URL (défaut: sqlite:///videostore.db).
"""

import unicodedata
from collections.abc import Generator
from pathlib import Path
from typing import Any, Optional

from loguru import logger
from sqlalchemy import Engine, event
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

# Engine global - initialisé lors du premier appel à get_engine()
_engine: Optional[Engine] = None


def _is_memory_url(db_url: str) -> bool:
    return db_url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in db_url


def _casefold(value: Optional[str]) -> Optional[str]:
    return value.casefold() if value is not None else None


def _sort_key(value: Optional[str]) -> Optional[str]:
    """Clé de tri sans casse ni accents : "Être" se range avec les E."""
    if value is None:
        return None
    decomposed = unicodedata.normalize("NFKD", value.casefold())
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def _configure_sqlite_connection(dbapi_connection: Any, connection_record: Any) -> None:
    """
    Prépare chaque connexion SQLite.

    SQLite n'applique les clés étrangères que si on le demande à chaque
    connexion, et son lower() ignore les lettres non ASCII : casefold()
    sert aux filtres, sort_key() aux tris.
    """
    dbapi_connection.create_function("casefold", 1, _casefold, deterministic=True)
    dbapi_connection.create_function("sort_key", 1, _sort_key, deterministic=True)
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(db_url: str, echo: bool = False) -> Engine:
    """
    Crée un engine SQLAlchemy pour l'URL donnée.

    Pour SQLite :
    - le répertoire parent du fichier est créé si nécessaire
    - une base en mémoire partage une connexion unique (StaticPool), ce qui
      permet de l'utiliser depuis plusieurs threads (tests de l'API)
    - les clés étrangères sont activées

    Args:
        db_url: URL SQLAlchemy de la base
        echo: Journaliser les requêtes SQL

    Returns:
        Engine configuré
    """
    kwargs: dict[str, Any] = {"echo": echo}
    is_sqlite = db_url.startswith("sqlite")

    if is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}
        if _is_memory_url(db_url):
            kwargs["poolclass"] = StaticPool
        elif db_url.startswith("sqlite:///"):
            db_path = Path(db_url.replace("sqlite:///", "", 1))
            db_path.parent.mkdir(exist_ok=True, parents=True)

    engine = create_engine(db_url, **kwargs)
    if is_sqlite:
        event.listen(engine, "connect", _configure_sqlite_connection)
    return engine


def get_engine() -> Engine:
    """
    Retourne l'engine de l'application, en le créant si nécessaire.

    Utilise la configuration de l'application pour l'URL de la BDD.
    """
    global _engine
    if _engine is None:
        from videostore.config import Settings

        settings = Settings()
        _engine = create_db_engine(settings.database_url, echo=settings.database_echo)
    return _engine


def reset_engine() -> None:
    """Libère l'engine global (utilisé par les tests et l'arrêt de l'application)."""
    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = None


def get_session() -> Generator[Session, None, None]:
    """
    Générateur de session SQLModel.

    Utilisation avec next() :
        session = next(get_session())

    Ou avec context manager :
        with Session(get_engine()) as session:
            # operations

    Yields:
        Session SQLModel connectée à l'engine
    """
    with Session(get_engine()) as session:
        yield session


def init_db(engine: Optional[Engine] = None) -> None:
    """
    Initialise la base de données en créant toutes les tables.

    Les modèles sont importés ici pour enregistrer leurs métadonnées dans
    SQLModel.metadata sans import circulaire.

    Args:
        engine: Engine cible (défaut: engine de l'application)
    """
    from videostore.infrastructure.persistence import models  # noqa: F401

    target = engine if engine is not None else get_engine()
    SQLModel.metadata.create_all(target)
    logger.debug("Tables initialisées", url=str(target.url))
