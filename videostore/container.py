"""
Container d'injection de dépendances via dependency-injector.

Fournit une gestion centralisée des dépendances pour les interfaces CLI et Web.
Les services d'écriture et de liste partagent la session de leurs repositories :
une session par appel de factory, donc une transaction par requête.
"""

from dependency_injector import containers, providers
from sqlmodel import Session

from .config import Settings
from .infrastructure.persistence.database import get_session, init_db
from .infrastructure.persistence.repositories import (
    SQLModelActorRepository,
    SQLModelImageRepository,
    SQLModelMovieRepository,
)
from .services.listing import ListingService
from .services.notifier import ChangeBroadcaster
from .services.registration import RegistrationService


def _registration_service(session: Session) -> RegistrationService:
    return RegistrationService(
        session=session,
        actor_repo=SQLModelActorRepository(session),
        movie_repo=SQLModelMovieRepository(session),
        image_repo=SQLModelImageRepository(session),
    )


def _listing_service(session: Session) -> ListingService:
    return ListingService(
        actor_repo=SQLModelActorRepository(session),
        movie_repo=SQLModelMovieRepository(session),
    )


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        container.database.init()  # Initialise la DB une fois
        session = container.session()
        service = container.registration_service(session=session)
        broadcaster = container.change_broadcaster()
    """

    # Configuration - singleton chargé une seule fois
    config = providers.Singleton(Settings)

    # Database - Resource pour initialisation unique
    database = providers.Resource(init_db)

    # Session factory - nouvelle session à chaque appel
    session = providers.Factory(lambda: next(get_session()))

    # Repositories - Factory pour nouvelle instance avec session fraîche
    actor_repository = providers.Factory(SQLModelActorRepository, session=session)
    movie_repository = providers.Factory(SQLModelMovieRepository, session=session)
    image_repository = providers.Factory(SQLModelImageRepository, session=session)

    # Services - la session passée à l'appel remplace la session fraîche
    registration_service = providers.Factory(_registration_service, session=session)
    listing_service = providers.Factory(_listing_service, session=session)

    # Diffusion des changements - partagée par toute l'application
    change_broadcaster = providers.Singleton(ChangeBroadcaster)
