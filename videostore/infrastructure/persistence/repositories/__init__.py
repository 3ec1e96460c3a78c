"""
Implementations SQLModel des repositories.

Ce module contient les implementations concrètes des interfaces repository
définies dans videostore/core/ports/repositories.py, utilisant SQLModel pour
la persistance SQLite.

Chaque repository :
- Hérite de l'interface ABC correspondante du domaine
- Reçoit une session SQLModel via injection de dépendances
- Convertit entre entités de domaine (dataclass) et modèles DB (SQLModel)
- Ne valide jamais la transaction (flush uniquement)
"""

from videostore.infrastructure.persistence.repositories.actor_repository import (
    SQLModelActorRepository,
)
from videostore.infrastructure.persistence.repositories.image_repository import (
    SQLModelImageRepository,
)
from videostore.infrastructure.persistence.repositories.movie_repository import (
    SQLModelMovieRepository,
)

__all__ = [
    "SQLModelActorRepository",
    "SQLModelMovieRepository",
    "SQLModelImageRepository",
]
