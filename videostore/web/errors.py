"""
Traduction des erreurs du catalogue en réponses HTTP.

- StructuralViolation : 400, {chemin du champ: message}
- BusinessStateViolation : 400, {entité: message}, l'entité étant le tag de la route
- InfrastructureFailure : 500, message opaque (le détail est dans les logs serveur)
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from loguru import logger

from videostore.core.errors import (
    BusinessStateViolation,
    InfrastructureFailure,
    StructuralViolation,
)


def _entity_key(request: Request) -> str:
    route = request.scope.get("route")
    tags = getattr(route, "tags", None)
    return str(tags[0]) if tags else "Entity"


async def structural_violation_handler(request: Request, exc: StructuralViolation):
    return JSONResponse(status_code=400, content=exc.as_dict())


async def business_state_violation_handler(request: Request, exc: BusinessStateViolation):
    return JSONResponse(status_code=400, content={_entity_key(request): exc.message})


async def infrastructure_failure_handler(request: Request, exc: InfrastructureFailure):
    logger.error("{} {} : {}", request.method, request.url.path, exc)
    return PlainTextResponse(status_code=500, content=InfrastructureFailure.PUBLIC_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StructuralViolation, structural_violation_handler)
    app.add_exception_handler(BusinessStateViolation, business_state_violation_handler)
    app.add_exception_handler(InfrastructureFailure, infrastructure_failure_handler)
