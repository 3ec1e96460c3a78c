"""
Sous-système de validation.

Deux niveaux :
- structurel (constraints.py) : tables de contraintes de champ par entité
- état métier (business.py) : existence, présence d'identifiant, relations
"""

from videostore.core.validation.business import (
    check_cast,
    check_entity_identifier,
    check_no_relations,
    check_not_null,
    check_persistence,
    is_identifier_present,
)
from videostore.core.validation.constraints import (
    ACTOR_CONSTRAINTS,
    IMAGE_CONSTRAINTS,
    IMDB_ID_PATTERN,
    MAX_PAGE_LIMIT,
    MOVIE_CONSTRAINTS,
    PAGING_CONSTRAINTS,
    check_entity,
    check_filter,
    check_paging,
    check_value,
    validate_entity,
    validate_value,
)

__all__ = [
    "ACTOR_CONSTRAINTS",
    "MOVIE_CONSTRAINTS",
    "IMAGE_CONSTRAINTS",
    "PAGING_CONSTRAINTS",
    "IMDB_ID_PATTERN",
    "MAX_PAGE_LIMIT",
    "validate_entity",
    "validate_value",
    "check_entity",
    "check_value",
    "check_paging",
    "check_filter",
    "check_cast",
    "check_entity_identifier",
    "check_no_relations",
    "check_not_null",
    "check_persistence",
    "is_identifier_present",
]
