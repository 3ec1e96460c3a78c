"""
Entités du catalogue.

Entités représentant les acteurs, les films et les images de films.

Les relations ne sont pas des références d'objets croisées : chaque entité
porte les identifiants de ses partenaires, lus depuis les tables de liaison
(distribution et images). Une projection "lazy" laisse ces ensembles à None.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass
class Actor:
    """
    Un acteur du catalogue.

    Attributs :
        id : Identifiant généré par la base (None avant l'enregistrement)
        first_name : Prénom (obligatoire)
        last_name : Nom (optionnel, pour les personnes mononymes)
        birth_date : Date de naissance (pas dans le futur)
        movie_ids : IMDb IDs des films de l'acteur (None si non chargés)
    """

    id: Optional[int] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    birth_date: Optional[date] = None
    movie_ids: Optional[frozenset[str]] = None

    @property
    def full_name(self) -> str:
        """Nom complet affichable (prénom seul pour les mononymes)."""
        if self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.first_name or ""


@dataclass
class Movie:
    """
    Un film du catalogue, identifié par son IMDb ID.

    Attributs :
        imdb_id : Identifiant IMDb fourni par l'appelant (clé immuable)
        title : Titre (1 à 600 caractères)
        year : Année de sortie (1900-2099)
        description : Synopsis optionnel (10000 caractères max)
        actor_ids : IDs des acteurs distribués (None si non chargés)
        image_ids : IDs des images du film (None si non chargées)
    """

    imdb_id: Optional[str] = None
    title: Optional[str] = None
    year: Optional[int] = None
    description: Optional[str] = None
    actor_ids: Optional[frozenset[int]] = None
    image_ids: Optional[frozenset[int]] = None


@dataclass
class Image:
    """
    Image appartenant à un seul film.

    Attributs :
        id : Identifiant généré par la base (None avant l'enregistrement)
        description : Légende de l'image
        content : Contenu binaire (non interprété)
        imdb_id : Film propriétaire (renseigné en lecture)
    """

    id: Optional[int] = None
    description: Optional[str] = None
    content: Optional[bytes] = None
    imdb_id: Optional[str] = None

    def __repr__(self) -> str:
        size = len(self.content) if self.content is not None else None
        return f"Image(id={self.id!r}, description={self.description!r}, size={size!r})"
