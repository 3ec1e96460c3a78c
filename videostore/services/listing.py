"""
Listes paginées et filtrées des films et des acteurs.

Une page est une projection sans relations, triée de façon stable, et
accompagnée du nombre total d'éléments correspondant au même filtre.
"""

from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar

from videostore.core.entities import Actor, Movie
from videostore.core.ports.repositories import IActorRepository, IMovieRepository
from videostore.core.validation import check_filter, check_paging

T = TypeVar("T")


def count_total_pages(total: int, rows_per_page: int) -> int:
    """Nombre de pages nécessaires pour afficher total éléments (0 si aucun)."""
    if total <= 0:
        return 0
    return (total + rows_per_page - 1) // rows_per_page


def offset_for_page(page: int, rows_per_page: int) -> int:
    """
    Convertit un numéro de page (à partir de 1) en offset.

    Raises:
        ValueError: Si page ou rows_per_page est inférieur à 1
    """
    if page < 1:
        raise ValueError(f"Numéro de page invalide : {page}")
    if rows_per_page < 1:
        raise ValueError(f"Nombre de lignes par page invalide : {rows_per_page}")
    return (page - 1) * rows_per_page


@dataclass(frozen=True)
class Page(Generic[T]):
    """
    Page d'une liste triée.

    Attributes:
        items: Éléments de la page (projection sans relations)
        offset: Position du premier element
        limit: Taille maximale de la page
        total: Nombre total d'éléments correspondant au filtre
        search_for: Filtre applique, None si aucun
    """

    items: list[T] = field(default_factory=list)
    offset: int = 0
    limit: int = 10
    total: int = 0
    search_for: Optional[str] = None

    @property
    def total_pages(self) -> int:
        return count_total_pages(self.total, self.limit)

    @property
    def page_number(self) -> int:
        """Numéro de la page courante, à partir de 1."""
        return self.offset // self.limit + 1

    @property
    def has_next(self) -> bool:
        return self.offset + len(self.items) < self.total

    @property
    def has_previous(self) -> bool:
        return self.offset > 0


class ListingService:
    """
    Service de listes paginées.

    Valide les paramètres de pagination (offset >= 0, 1 <= limit <= 100) et
    le filtre (non vide) avant d'interroger les repositories.
    """

    def __init__(self, actor_repo: IActorRepository, movie_repo: IMovieRepository) -> None:
        self._actor_repo = actor_repo
        self._movie_repo = movie_repo

    def _check(self, offset: int, limit: int, search_for: Optional[str]) -> None:
        check_paging(offset, limit)
        if search_for is not None:
            check_filter(search_for)

    def list_movies(
        self, offset: int, limit: int, search_for: Optional[str] = None
    ) -> Page[Movie]:
        """
        Page de films triée par titre, filtrée sur le titre si demande.

        Raises:
            StructuralViolation: Pagination ou filtre invalide
        """
        self._check(offset, limit, search_for)
        return Page(
            items=self._movie_repo.find_page(offset, limit, search_for),
            offset=offset,
            limit=limit,
            total=self._movie_repo.count(search_for),
            search_for=search_for,
        )

    def list_actors(
        self, offset: int, limit: int, search_for: Optional[str] = None
    ) -> Page[Actor]:
        """
        Page d'acteurs triée par nom puis prénom, filtrée sur le prénom ou le nom.

        Raises:
            StructuralViolation: Pagination ou filtre invalide
        """
        self._check(offset, limit, search_for)
        return Page(
            items=self._actor_repo.find_page(offset, limit, search_for),
            offset=offset,
            limit=limit,
            total=self._actor_repo.count(search_for),
            search_for=search_for,
        )
