"""
Interfaces ports pour les repositories.

Interfaces abstraites (ports) définissant les contrats pour la persistance du catalogue.
Les implémentations (adaptateurs) fournissent les mécanismes de stockage concrets
(SQLite via SQLModel, en mémoire pour les tests, etc.).

Les repositories ne valident jamais la transaction : ils se contentent de
rendre les écritures visibles dans la session (flush). Le service
d'enregistrement décide du commit ou du rollback.
"""

from abc import ABC, abstractmethod
from typing import Optional

from videostore.core.entities import (
    Actor,
    ActorPatch,
    Image,
    ImagePatch,
    Movie,
    MoviePatch,
)


class IActorRepository(ABC):
    """
    Interface de stockage des acteurs.

    Tri par défaut : nom puis prénom (insensible à la casse).
    """

    @abstractmethod
    def save(self, actor: Actor) -> int:
        """Insère un nouvel acteur et retourne l'identifiant attribué."""
        ...

    @abstractmethod
    def update(self, patch: ActorPatch) -> Optional[Actor]:
        """Applique les champs renseignés du patch. None si l'acteur n'existe pas."""
        ...

    @abstractmethod
    def find_by_id(self, actor_id: int) -> Optional[Actor]:
        """Récupère un acteur avec les IDs de ses films."""
        ...

    @abstractmethod
    def find_by_id_lazily(self, actor_id: int) -> Optional[Actor]:
        """Récupère un acteur sans ses films."""
        ...

    @abstractmethod
    def find_all(self) -> list[Actor]:
        """Liste tous les acteurs (avec leurs films), triés par nom."""
        ...

    @abstractmethod
    def find_page(
        self, offset: int, limit: int, search_for: Optional[str] = None
    ) -> list[Actor]:
        """Page d'acteurs sans leurs films, filtrée sur le prénom ou le nom."""
        ...

    @abstractmethod
    def find_movie_actors_lazily(self, imdb_id: str) -> list[Actor]:
        """Acteurs distribués dans un film, sans leurs films."""
        ...

    @abstractmethod
    def count(self, search_for: Optional[str] = None) -> int:
        """Compte les acteurs (avec filtre optionnel sur le nom)."""
        ...

    @abstractmethod
    def remove_by_id(self, actor_id: int) -> bool:
        """Supprime un acteur et ses liens de distribution. Retourne True si supprimé."""
        ...


class IMovieRepository(ABC):
    """
    Interface de stockage des films, de la distribution et des images d'un film.

    Tri par défaut : titre (insensible à la casse).
    """

    @abstractmethod
    def save(self, movie: Movie) -> str:
        """Insère un nouveau film et retourne son IMDb ID."""
        ...

    @abstractmethod
    def update(self, patch: MoviePatch) -> Optional[Movie]:
        """Applique les champs renseignés du patch. None si le film n'existe pas."""
        ...

    @abstractmethod
    def find_by_id(self, imdb_id: str) -> Optional[Movie]:
        """Récupère un film avec les IDs de ses acteurs et de ses images."""
        ...

    @abstractmethod
    def find_by_id_lazily(self, imdb_id: str) -> Optional[Movie]:
        """Récupère un film sans acteurs ni images."""
        ...

    @abstractmethod
    def find_all(self) -> list[Movie]:
        """Liste tous les films (avec leurs relations), triés par titre."""
        ...

    @abstractmethod
    def find_by_title(self, search_for: str) -> list[Movie]:
        """Films dont le titre contient la chaîne recherchée, sans relations."""
        ...

    @abstractmethod
    def find_page(
        self, offset: int, limit: int, search_for: Optional[str] = None
    ) -> list[Movie]:
        """Page de films sans relations, filtrée sur le titre."""
        ...

    @abstractmethod
    def find_actor_movies_lazily(self, actor_id: int) -> list[Movie]:
        """Films d'un acteur, sans relations."""
        ...

    @abstractmethod
    def count(self, search_for: Optional[str] = None) -> int:
        """Compte les films (avec filtre optionnel sur le titre)."""
        ...

    @abstractmethod
    def remove_by_id(self, imdb_id: str) -> bool:
        """Supprime un film, sa distribution et ses images. Retourne True si supprimé."""
        ...

    @abstractmethod
    def is_cast(self, imdb_id: str, actor_id: int) -> bool:
        """Indique si l'acteur est distribué dans le film."""
        ...

    @abstractmethod
    def add_cast(self, imdb_id: str, actor_id: int) -> None:
        """Crée le lien de distribution film/acteur."""
        ...

    @abstractmethod
    def remove_cast(self, imdb_id: str, actor_id: int) -> bool:
        """Supprime le lien de distribution. Retourne True si le lien existait."""
        ...

    @abstractmethod
    def save_movie_image(self, imdb_id: str, image: Image) -> int:
        """Enregistre une nouvelle image rattachée au film et retourne son ID."""
        ...

    @abstractmethod
    def remove_movie_image_by_id(self, imdb_id: str, image_id: int) -> bool:
        """Supprime une image du film. Retourne True si elle existait."""
        ...

    @abstractmethod
    def count_movie_images(self, imdb_id: str) -> int:
        """Compte les images d'un film."""
        ...


class IImageRepository(ABC):
    """Interface de stockage des images de films."""

    @abstractmethod
    def update(self, patch: ImagePatch) -> Optional[Image]:
        """Applique les champs renseignés du patch. None si l'image n'existe pas."""
        ...

    @abstractmethod
    def find_by_id(self, image_id: int) -> Optional[Image]:
        """Récupère une image (avec son film propriétaire)."""
        ...

    @abstractmethod
    def find_movie_image_by_id(self, imdb_id: str, image_id: int) -> Optional[Image]:
        """Récupère une image seulement si elle appartient au film."""
        ...

    @abstractmethod
    def find_movie_images(self, imdb_id: str) -> list[Image]:
        """Images d'un film, triées par description."""
        ...

    @abstractmethod
    def find_owner(self, image_id: int) -> Optional[str]:
        """IMDb ID du film propriétaire de l'image."""
        ...

    @abstractmethod
    def count(self) -> int:
        """Compte toutes les images."""
        ...
