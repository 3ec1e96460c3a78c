"""
Contraintes de champ (validation structurelle).

Chaque entité dispose d'une table explicite associant un nom de champ à une
suite de contraintes. Un validateur générique évalue la table contre une
entité complète ou contre une valeur isolée et produit une liste de Violation.

Les contraintes autres que NotNull/NotBlank ignorent une valeur None :
l'obligation d'un champ est portée uniquement par NotNull.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional

from videostore.core.errors import StructuralViolation, Violation

IMDB_ID_PATTERN = r"ev\d{7}/\d{4}(-\d)?|(ch|co|ev|ni|nm|tt)\d{7}"

MAX_PAGE_LIMIT = 100


class Constraint:
    """Contrainte de champ : retourne un message d'erreur ou None."""

    def check(self, value: Any) -> Optional[str]:
        raise NotImplementedError


@dataclass(frozen=True)
class NotNull(Constraint):
    message: str = "must not be null"

    def check(self, value: Any) -> Optional[str]:
        return self.message if value is None else None


@dataclass(frozen=True)
class NotBlank(Constraint):
    message: str = "must not be blank"

    def check(self, value: Any) -> Optional[str]:
        if value is None or not str(value).strip():
            return self.message
        return None


@dataclass(frozen=True)
class Size(Constraint):
    """Longueur d'une chaîne ou d'un contenu binaire."""

    min: int = 0
    max: Optional[int] = None

    def check(self, value: Any) -> Optional[str]:
        if not isinstance(value, (str, bytes, bytearray)):
            return None
        length = len(value)
        if length < self.min or (self.max is not None and length > self.max):
            if self.max is None:
                return f"size must be at least {self.min}"
            return f"size must be between {self.min} and {self.max}"
        return None


@dataclass(frozen=True)
class Range(Constraint):
    """Bornes numériques inclusives."""

    min: Optional[int] = None
    max: Optional[int] = None

    def check(self, value: Any) -> Optional[str]:
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int):
            return "must be an integer"
        if self.min is not None and value < self.min:
            return f"must be greater than or equal to {self.min}"
        if self.max is not None and value > self.max:
            return f"must be less than or equal to {self.max}"
        return None


@dataclass(frozen=True)
class Pattern(Constraint):
    """Correspondance complète d'une expression régulière."""

    regexp: str
    message: str = "must match the expected pattern"

    def check(self, value: Any) -> Optional[str]:
        if value is None:
            return None
        if not isinstance(value, str) or re.fullmatch(self.regexp, value) is None:
            return self.message
        return None


@dataclass(frozen=True)
class PastOrPresent(Constraint):
    """Date dans le passé ou aujourd'hui."""

    today: Callable[[], date] = date.today

    def check(self, value: Any) -> Optional[str]:
        if value is None:
            return None
        if not isinstance(value, date):
            return "must be a date"
        if isinstance(value, datetime):
            value = value.date()
        if value > self.today():
            return "must be a date in the past or in the present"
        return None


@dataclass(frozen=True)
class TypeOf(Constraint):
    expected: type
    message: str = "has an invalid type"

    def check(self, value: Any) -> Optional[str]:
        if value is None or isinstance(value, self.expected):
            return None
        return self.message


ConstraintTable = Mapping[str, tuple[Constraint, ...]]


# Tables de contraintes par entité

ACTOR_CONSTRAINTS: ConstraintTable = {
    "id": (Range(min=0),),
    "first_name": (NotNull(), TypeOf(str), Size(min=1, max=50)),
    "last_name": (TypeOf(str), Size(max=50)),
    "birth_date": (NotNull(), PastOrPresent()),
}

MOVIE_CONSTRAINTS: ConstraintTable = {
    "imdb_id": (
        NotNull(),
        Pattern(
            IMDB_ID_PATTERN,
            message="Identifier should match Internet Movie Database identifier pattern",
        ),
    ),
    "title": (NotNull(), TypeOf(str), Size(min=1, max=600)),
    "year": (NotNull(), Range(min=1900, max=2099)),
    "description": (TypeOf(str), Size(max=10000)),
}

IMAGE_CONSTRAINTS: ConstraintTable = {
    "id": (Range(min=0),),
    "description": (NotNull(), TypeOf(str), Size(min=1, max=255)),
    "content": (NotNull(), TypeOf(bytes), Size(min=1)),
}

PAGING_CONSTRAINTS: ConstraintTable = {
    "offset": (NotNull(), Range(min=0)),
    "limit": (NotNull(), Range(min=1, max=MAX_PAGE_LIMIT)),
    "search_for": (NotBlank(),),
}


def _join(prefix: str, name: str) -> str:
    return f"{prefix}.{name}" if prefix else name


def validate_value(
    table: ConstraintTable, field_name: str, value: Any, prefix: str = ""
) -> list[Violation]:
    """
    Évalue les contraintes d'un seul champ.

    Args:
        table: Table de contraintes de l'entité
        field_name: Nom du champ
        value: Valeur à contrôler
        prefix: Préfixe de chemin (entité englobante)

    Returns:
        Liste des violations (vide si la valeur est valide)
    """
    if field_name not in table:
        raise KeyError(f"Champ sans contraintes : {field_name}")
    violations = []
    for constraint in table[field_name]:
        message = constraint.check(value)
        if message is not None:
            violations.append(Violation(_join(prefix, field_name), message))
    return violations


def validate_entity(entity: Any, table: ConstraintTable, prefix: str = "") -> list[Violation]:
    """Évalue toutes les contraintes de la table contre les attributs de l'entité."""
    violations = []
    for field_name in table:
        value = getattr(entity, field_name, None)
        violations.extend(validate_value(table, field_name, value, prefix))
    return violations


def check_value(table: ConstraintTable, field_name: str, value: Any, prefix: str = "") -> None:
    """Comme validate_value, mais lève StructuralViolation en cas d'échec."""
    violations = validate_value(table, field_name, value, prefix)
    if violations:
        raise StructuralViolation(violations)


def check_entity(entity: Any, table: ConstraintTable, prefix: str = "") -> None:
    """Comme validate_entity, mais lève StructuralViolation en cas d'échec."""
    violations = validate_entity(entity, table, prefix)
    if violations:
        raise StructuralViolation(violations)


def check_paging(offset: int, limit: int) -> None:
    """Contrôle offset >= 0 et 0 < limit <= 100 (violations cumulées)."""
    violations = validate_value(PAGING_CONSTRAINTS, "offset", offset)
    violations += validate_value(PAGING_CONSTRAINTS, "limit", limit)
    if violations:
        raise StructuralViolation(violations)


def check_filter(search_for: Optional[str]) -> None:
    """Contrôle qu'un filtre texte n'est pas vide."""
    check_value(PAGING_CONSTRAINTS, "search_for", search_for)
