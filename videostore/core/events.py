"""
Événements de changement du catalogue.

Un ChangeEvent est produit par chaque opération d'écriture réussie. Les
événements sont retournés avec le résultat (Outcome) et ne sont diffusés
par l'appelant qu'une fois la transaction validée.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class AggregateKind(Enum):
    """Type d'agrégat concerne par un changement."""

    ACTOR = "actor"
    MOVIE = "movie"


@dataclass(frozen=True)
class ChangeEvent:
    """
    Notification de changement d'un agrégat.

    Attributes:
        kind: Type d'agrégat (acteur ou film)
        operation: Nom de l'opération (ex: "register_cast")
        ids: Identifiants concernes
    """

    kind: AggregateKind
    operation: str
    ids: tuple[Any, ...] = ()

    def __str__(self) -> str:
        if not self.ids:
            return self.operation
        return f"{self.operation}( {' '.join(str(i) for i in self.ids)} )"


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Résultat d'une opération d'écriture et événements à diffuser."""

    value: T
    events: tuple[ChangeEvent, ...] = field(default_factory=tuple)

    @property
    def changed(self) -> bool:
        return bool(self.events)

    def kinds(self) -> set[AggregateKind]:
        return {event.kind for event in self.events}
