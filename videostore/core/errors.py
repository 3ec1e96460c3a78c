"""
Erreurs du catalogue.

Trois familles, toutes provoquant l'annulation de la transaction en cours :
- StructuralViolation : une ou plusieurs contraintes de champ non respectées
- BusinessStateViolation : état d'existence ou de relation inattendu
- InfrastructureFailure : échec inattendu du stockage (détail journalisé seulement)
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Violation:
    """
    Violation d'une contrainte de champ.

    Attributes:
        path: Chemin du champ (ex: "title", "movies[0].year")
        message: Message lisible par l'utilisateur
    """

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


class CatalogError(Exception):
    """Base des erreurs levées par le catalogue."""


class StructuralViolation(CatalogError):
    """
    Exception levée quand un champ ne respecte pas ses contraintes.

    Attributes:
        violations: Liste des violations (chemin + message)
    """

    def __init__(self, violations: list[Violation]) -> None:
        self.violations = list(violations)
        super().__init__("; ".join(str(v) for v in self.violations))

    def as_dict(self) -> dict[str, str]:
        """Regroupe les violations par chemin de champ."""
        result: dict[str, str] = {}
        for violation in self.violations:
            if violation.path in result:
                result[violation.path] += f", {violation.message}"
            else:
                result[violation.path] = violation.message
        return result


class BusinessStateViolation(CatalogError):
    """Exception levée quand l'état attendu (existence, relation) diffère de l'état réel."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InfrastructureFailure(CatalogError):
    """
    Exception levée sur un échec inattendu du stockage.

    Le message public reste opaque ; la cause est conservée pour les logs.
    """

    PUBLIC_MESSAGE = "For more details dive into server log."

    def __init__(self, operation: str, cause: Optional[BaseException] = None) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(f"Échec du stockage pendant {operation}")
