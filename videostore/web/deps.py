"""
Dépendances partagées de l'application web.

Une session par requête : le service d'enregistrement et le service de liste
d'une même requête partagent la même transaction, fermée en fin de requête.
"""

from collections.abc import Generator

from fastapi import Depends, Request
from sqlmodel import Session

from videostore.config import Settings
from videostore.services import ChangeBroadcaster, ListingService, RegistrationService


def get_db_session(request: Request) -> Generator[Session, None, None]:
    session = request.app.state.container.session()
    try:
        yield session
    finally:
        session.close()


def get_settings(request: Request) -> Settings:
    return request.app.state.container.config()


def get_registration(
    request: Request, session: Session = Depends(get_db_session)
) -> RegistrationService:
    return request.app.state.container.registration_service(session=session)


def get_listing(request: Request, session: Session = Depends(get_db_session)) -> ListingService:
    return request.app.state.container.listing_service(session=session)


def get_broadcaster(request: Request) -> ChangeBroadcaster:
    return request.app.state.container.change_broadcaster()
