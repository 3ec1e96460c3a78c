"""
Services applicatifs de VideoStore.

- registration : moteur de cohérence (enregistrement, distribution, suppression)
- listing : listes paginées et filtrées
- notifier : diffusion des événements de changement après commit
"""

from videostore.services.listing import ListingService, Page, count_total_pages, offset_for_page
from videostore.services.notifier import CHANNEL_MESSAGES, ChangeBroadcaster
from videostore.services.registration import RegistrationService

__all__ = [
    "RegistrationService",
    "ListingService",
    "Page",
    "count_total_pages",
    "offset_for_page",
    "ChangeBroadcaster",
    "CHANNEL_MESSAGES",
]
