"""
Contrôles d'état métier.

Chaque contrôle compare un état attendu (présent ou absent) à l'état réel et
lève une BusinessStateViolation à message unique en cas d'écart.
"""

from typing import Any, Optional

from videostore.core.errors import BusinessStateViolation


def is_identifier_present(entity_id: Optional[int]) -> bool:
    """Un identifiant numérique est absent s'il vaut None ou 0."""
    return entity_id is not None and entity_id != 0


def check_not_null(entity: Any) -> None:
    if entity is None:
        raise BusinessStateViolation("Entity should not be null.")


def check_entity_identifier(entity_id: Optional[int], should_be_present: bool) -> None:
    """
    Contrôle la présence d'un identifiant généré.

    Args:
        entity_id: Identifiant à contrôler
        should_be_present: False pour une création, True pour une mise à jour,
            une suppression ou une liaison
    """
    present = is_identifier_present(entity_id)
    if should_be_present and not present:
        raise BusinessStateViolation("Entity id should not be null.")
    if not should_be_present and present:
        raise BusinessStateViolation("Entity id should be null.")


def check_persistence(label: Any, found: bool, should_be_present: bool) -> None:
    """
    Contrôle l'existence d'une entité en base.

    Args:
        label: Identifiant affiche dans le message
        found: True si l'entité existe en base
        should_be_present: État attendu
    """
    if found and not should_be_present:
        raise BusinessStateViolation(f"{label} is already registered.")
    if not found and should_be_present:
        raise BusinessStateViolation(f"{label} has not been registered.")


def check_cast(imdb_id: str, actor_id: int, linked: bool, should_be_present: bool) -> None:
    """Contrôle l'existence d'une relation de distribution film/acteur."""
    if linked and not should_be_present:
        raise BusinessStateViolation(f"{imdb_id} is already cast to actor {actor_id}.")
    if not linked and should_be_present:
        raise BusinessStateViolation(f"{imdb_id} is not cast to actor {actor_id}.")


def check_no_relations(label: str, related_ids: Optional[frozenset], hint: str) -> None:
    """Refuse une entité à créer qui prétend déjà être liée à des entités existantes."""
    if related_ids:
        raise BusinessStateViolation(f"{label} cannot reference existing entities: {hint}")
