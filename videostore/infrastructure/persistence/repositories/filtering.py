"""
Aides de requête partagées par les repositories (filtre texte, tri).

Les filtres passent par la fonction SQL casefold() et les tris par
sort_key(), enregistrées sur chaque connexion SQLite (voir database.py),
pour rester insensibles à la casse au-delà de l'ASCII ("AMÉLIE" trouve
"Amélie").
"""

from typing import Any

from sqlalchemy import func

_LIKE_ESCAPE = "\\"


def contains_pattern(search_for: str) -> str:
    """
    Construit un motif LIKE "contient" où % et _ sont littéraux.

    Args:
        search_for: Texte recherché tel que saisi par l'utilisateur

    Returns:
        Motif à utiliser avec like(..., escape="\\")
    """
    escaped = (
        search_for.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def icontains(column: Any, search_for: str) -> Any:
    """Clause de sous-chaîne insensible à la casse sur une colonne."""
    return func.casefold(column).like(
        contains_pattern(search_for.casefold()), escape=_LIKE_ESCAPE
    )


def ci_order(column: Any) -> Any:
    """Expression de tri insensible à la casse et aux accents."""
    return func.sort_key(column)
