"""
Ports (interfaces abstraites) de la couche domaine.

Exports :
- IActorRepository : Persistance des acteurs
- IMovieRepository : Persistance des films, de la distribution et des images d'un film
- IImageRepository : Persistance des images
"""

from videostore.core.ports.repositories import (
    IActorRepository,
    IImageRepository,
    IMovieRepository,
)

__all__ = [
    "IActorRepository",
    "IMovieRepository",
    "IImageRepository",
]
