"""
Entités métier représentant les concepts du catalogue.

Exports :
- Actor : Acteur avec les IMDb IDs de ses films
- Movie : Film avec les IDs de ses acteurs et de ses images
- Image : Image appartenant à un film
- ActorPatch, MoviePatch, ImagePatch : Mises à jour partielles à trois états
- UNSET : Sentinelle d'un champ de patch non modifié
"""

from videostore.core.entities.catalog import Actor, Image, Movie
from videostore.core.entities.patches import (
    UNSET,
    ActorPatch,
    ImagePatch,
    MoviePatch,
    is_set,
)

__all__ = [
    "Actor",
    "Movie",
    "Image",
    "ActorPatch",
    "MoviePatch",
    "ImagePatch",
    "UNSET",
    "is_set",
]
