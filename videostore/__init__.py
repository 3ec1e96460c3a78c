"""
VideoStore - Catalogue de films, d'acteurs et d'images.

Ce package enregistre les films, les acteurs et leurs images en maintenant
la cohérence des relations (distribution acteur/film, images d'un film).

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entités, ports, validation, erreurs)
- services/ : Couche application (enregistrement, listes paginées, notifications)
- infrastructure/ : Persistance SQLite via SQLModel
- web/ : API REST FastAPI
"""

__version__ = "0.1.0"
