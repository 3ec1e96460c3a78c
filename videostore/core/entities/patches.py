"""
Patchs de mise à jour partielle.

Chaque champ d'un patch a trois états :
- UNSET : le champ n'est pas modifié
- None : le champ est effacé (refusé par la validation si obligatoire)
- une valeur : le champ est remplace

Cela distingue "ne pas toucher au nom" de "effacer le nom" pour un acteur
mononyme, ce qu'une simple convention "None = inchangé" ne permet pas.
"""

from dataclasses import dataclass, fields
from datetime import date
from typing import Any, Optional, Union


class _Unset:
    """Sentinelle d'un champ absent du patch."""

    _instance: Optional["_Unset"] = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def is_set(value: Any) -> bool:
    """Indique si un champ de patch porte une modification."""
    return value is not UNSET


@dataclass
class _Patch:
    """Base commune : enumeration des champs modifiés."""

    def changes(self) -> dict[str, Any]:
        """Retourne les champs modifiés (hors identifiant), valeur comprise."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name not in ("id", "imdb_id") and is_set(getattr(self, f.name))
        }

    @property
    def is_empty(self) -> bool:
        return not self.changes()


@dataclass
class ActorPatch(_Patch):
    id: Optional[int] = None
    first_name: Union[str, None, _Unset] = UNSET
    last_name: Union[str, None, _Unset] = UNSET
    birth_date: Union[date, None, _Unset] = UNSET


@dataclass
class MoviePatch(_Patch):
    imdb_id: Optional[str] = None
    title: Union[str, None, _Unset] = UNSET
    year: Union[int, None, _Unset] = UNSET
    description: Union[str, None, _Unset] = UNSET


@dataclass
class ImagePatch(_Patch):
    id: Optional[int] = None
    description: Union[str, None, _Unset] = UNSET
    content: Union[bytes, None, _Unset] = UNSET
