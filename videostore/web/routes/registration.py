"""
Routes REST d'enregistrement du catalogue.

Toutes les routes sont sous /registration. Chaque écriture passe par le
RegistrationService ; ses événements ne sont diffusés qu'une fois
l'opération validée. Le tag de chaque route nomme l'entité reportée dans
les réponses d'erreur métier.

Les IMDb IDs d'événement contiennent un "/", d'où le convertisseur path :
les routes génériques /movies/{imdb_id} sont déclarées après les routes
plus spécifiques.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, Response, UploadFile
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import ValidationError

from ...config import Settings
from ...services import ChangeBroadcaster, ListingService, RegistrationService
from ..deps import get_broadcaster, get_listing, get_registration, get_settings
from ..schemas import (
    ActorCreate,
    ActorOut,
    ActorUpdate,
    ImageAttributes,
    ImageOut,
    MovieCreate,
    MovieOut,
    MovieUpdate,
)

router = APIRouter(prefix="/registration")

MULTIPART_ATTRIBUTES = "attributes"
MULTIPART_IMAGE = "image"


def _read_multipart(
    attributes: Optional[str], image: Optional[UploadFile]
) -> tuple[Optional[ImageAttributes], Optional[bytes], Optional[str]]:
    """
    Lit les parties "attributes" (JSON) et "image" (fichier) d'un envoi multipart.

    Returns:
        (attributs, contenu, erreur) ; erreur est renseignée si la requête
        est inexploitable
    """
    if attributes is None:
        return None, None, f"Request is missing input part {{{MULTIPART_ATTRIBUTES}}}."
    try:
        parsed = ImageAttributes.model_validate_json(attributes)
    except ValidationError as exc:
        return None, None, f"Invalid input part {{{MULTIPART_ATTRIBUTES}}}: {exc.errors()[0]['msg']}"

    if image is None:
        logger.warning("Requête sans partie {{{}}}", MULTIPART_IMAGE)
        return parsed, None, None
    return parsed, image.file.read(), None


# ---------------------------------------------------------------------------
# Acteurs
# ---------------------------------------------------------------------------


@router.post("/actors", status_code=201, tags=["Actor"])
def post_actor(
    payload: ActorCreate,
    request: Request,
    response: Response,
    service: RegistrationService = Depends(get_registration),
    broadcaster: ChangeBroadcaster = Depends(get_broadcaster),
) -> ActorOut:
    """Enregistre un acteur et ses éventuels nouveaux films."""
    outcome = service.register_actor(
        payload.to_entity(), [movie.to_entity() for movie in payload.movies]
    )
    broadcaster.publish(outcome.events)
    response.headers["Location"] = str(request.url_for("get_actor", actor_id=outcome.value.id))
    return ActorOut.from_entity(outcome.value)


@router.get("/actors", tags=["Actor"])
def get_actors(
    response: Response,
    offset: int = Query(0),
    limit: Optional[int] = Query(None),
    search: Optional[str] = Query(None),
    listing: ListingService = Depends(get_listing),
    settings: Settings = Depends(get_settings),
) -> list[ActorOut]:
    """Page d'acteurs ; le total est renvoyé dans X-Total-Count."""
    page = listing.list_actors(
        offset, limit if limit is not None else settings.default_page_limit, search
    )
    response.headers["X-Total-Count"] = str(page.total)
    return [ActorOut.from_entity(actor) for actor in page.items]


@router.get("/actors/{actor_id}/movies", tags=["Actor"])
def get_actor_movies(
    actor_id: int, service: RegistrationService = Depends(get_registration)
) -> list[MovieOut]:
    return [MovieOut.from_entity(m) for m in service.find_actor_movies_lazily(actor_id)]


@router.get("/actors/{actor_id}", tags=["Actor"])
def get_actor(actor_id: int, service: RegistrationService = Depends(get_registration)):
    service.validate_actor_id(actor_id)
    actor = service.find_actor_by_id(actor_id)
    if actor is None:
        return Response(status_code=404)
    return ActorOut.from_entity(actor)


@router.put("/actors/{actor_id}", tags=["Actor"])
def put_actor(
    actor_id: int,
    payload: ActorUpdate,
    service: RegistrationService = Depends(get_registration),
    broadcaster: ChangeBroadcaster = Depends(get_broadcaster),
) -> ActorOut:
    outcome = service.update_actor(payload.to_patch(actor_id))
    broadcaster.publish(outcome.events)
    return ActorOut.from_entity(outcome.value)


@router.delete("/actors/{actor_id}", status_code=204, tags=["Actor"])
def delete_actor(
    actor_id: int,
    service: RegistrationService = Depends(get_registration),
    broadcaster: ChangeBroadcaster = Depends(get_broadcaster),
) -> Response:
    """Suppression idempotente : 204 même si l'acteur n'existe pas."""
    broadcaster.publish(service.unregister_actor(actor_id).events)
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------


@router.put("/images/{image_id}", tags=["Image"])
def put_image(
    image_id: int,
    attributes: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    service: RegistrationService = Depends(get_registration),
    broadcaster: ChangeBroadcaster = Depends(get_broadcaster),
):
    """Met à jour la description (clés présentes) et/ou le contenu (partie image)."""
    parsed, content, error = _read_multipart(attributes, image)
    if error:
        return JSONResponse(status_code=400, content={"Image": error})

    outcome = service.update_image(parsed.to_patch(image_id, content))
    broadcaster.publish(outcome.events)
    return ImageOut.from_entity(outcome.value)


# ---------------------------------------------------------------------------
# Films
# ---------------------------------------------------------------------------


@router.post("/movies", status_code=201, tags=["Movie"])
def post_movie(
    payload: MovieCreate,
    request: Request,
    response: Response,
    service: RegistrationService = Depends(get_registration),
    broadcaster: ChangeBroadcaster = Depends(get_broadcaster),
) -> MovieOut:
    """Enregistre un film et ses éventuels nouveaux acteurs."""
    outcome = service.register_movie(
        payload.to_entity(), [actor.to_entity() for actor in payload.actors]
    )
    broadcaster.publish(outcome.events)
    response.headers["Location"] = str(
        request.url_for("get_movie", imdb_id=outcome.value.imdb_id)
    )
    return MovieOut.from_entity(outcome.value)


@router.get("/movies", tags=["Movie"])
def get_movies(
    response: Response,
    offset: int = Query(0),
    limit: Optional[int] = Query(None),
    search: Optional[str] = Query(None),
    listing: ListingService = Depends(get_listing),
    settings: Settings = Depends(get_settings),
) -> list[MovieOut]:
    """Page de films ; le total est renvoyé dans X-Total-Count."""
    page = listing.list_movies(
        offset, limit if limit is not None else settings.default_page_limit, search
    )
    response.headers["X-Total-Count"] = str(page.total)
    return [MovieOut.from_entity(movie) for movie in page.items]


@router.post("/movies/{imdb_id:path}/actors/{actor_id}", status_code=201, tags=["Cast"])
def post_cast(
    imdb_id: str,
    actor_id: int,
    service: RegistrationService = Depends(get_registration),
    broadcaster: ChangeBroadcaster = Depends(get_broadcaster),
) -> Response:
    broadcaster.publish(service.register_cast(imdb_id, actor_id).events)
    return Response(status_code=201)


@router.delete("/movies/{imdb_id:path}/actors/{actor_id}", status_code=204, tags=["Cast"])
def delete_cast(
    imdb_id: str,
    actor_id: int,
    service: RegistrationService = Depends(get_registration),
    broadcaster: ChangeBroadcaster = Depends(get_broadcaster),
) -> Response:
    broadcaster.publish(service.unregister_cast(imdb_id, actor_id).events)
    return Response(status_code=204)


@router.get("/movies/{imdb_id:path}/actors", tags=["Movie"])
def get_movie_actors(
    imdb_id: str, service: RegistrationService = Depends(get_registration)
) -> list[ActorOut]:
    return [ActorOut.from_entity(a) for a in service.find_movie_actors_lazily(imdb_id)]


@router.post("/movies/{imdb_id:path}/images", status_code=201, tags=["Image"])
def post_movie_image(
    imdb_id: str,
    request: Request,
    attributes: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    service: RegistrationService = Depends(get_registration),
    broadcaster: ChangeBroadcaster = Depends(get_broadcaster),
):
    """Ajoute une image à un film (multipart : attributes JSON + fichier image)."""
    parsed, content, error = _read_multipart(attributes, image)
    if error:
        return JSONResponse(status_code=400, content={"Image": error})

    outcome = service.register_movie_image(imdb_id, parsed.to_entity(content))
    broadcaster.publish(outcome.events)
    location = request.url_for("get_movie_image", imdb_id=imdb_id, image_id=outcome.value.id)
    return JSONResponse(
        status_code=201,
        content=ImageOut.from_entity(outcome.value).model_dump(),
        headers={"Location": str(location)},
    )


@router.get("/movies/{imdb_id:path}/images", tags=["Image"])
def get_movie_images(
    imdb_id: str, service: RegistrationService = Depends(get_registration)
) -> list[ImageOut]:
    return [ImageOut.from_entity(image) for image in service.find_movie_images(imdb_id)]


@router.get("/movies/{imdb_id:path}/images/{image_id}/content", tags=["MovieImage"])
def get_movie_image_content(
    imdb_id: str, image_id: int, service: RegistrationService = Depends(get_registration)
) -> Response:
    service.validate_imdb_id(imdb_id)
    service.validate_image_id(image_id)
    image = service.find_movie_image_by_id(imdb_id, image_id)
    if image is None:
        return Response(status_code=404)
    return Response(content=image.content, media_type="application/octet-stream")


@router.get("/movies/{imdb_id:path}/images/{image_id}", tags=["MovieImage"])
def get_movie_image(
    imdb_id: str, image_id: int, service: RegistrationService = Depends(get_registration)
):
    service.validate_imdb_id(imdb_id)
    service.validate_image_id(image_id)
    image = service.find_movie_image_by_id(imdb_id, image_id)
    if image is None:
        return Response(status_code=404)
    return ImageOut.from_entity(image)


@router.delete("/movies/{imdb_id:path}/images/{image_id}", status_code=204, tags=["MovieImage"])
def delete_movie_image(
    imdb_id: str,
    image_id: int,
    service: RegistrationService = Depends(get_registration),
    broadcaster: ChangeBroadcaster = Depends(get_broadcaster),
) -> Response:
    broadcaster.publish(service.unregister_movie_image(imdb_id, image_id).events)
    return Response(status_code=204)


@router.get("/movies/{imdb_id:path}", tags=["Movie"])
def get_movie(imdb_id: str, service: RegistrationService = Depends(get_registration)):
    service.validate_imdb_id(imdb_id)
    movie = service.find_movie_by_id(imdb_id)
    if movie is None:
        return Response(status_code=404)
    return MovieOut.from_entity(movie)


@router.put("/movies/{imdb_id:path}", tags=["Movie"])
def put_movie(
    imdb_id: str,
    payload: MovieUpdate,
    service: RegistrationService = Depends(get_registration),
    broadcaster: ChangeBroadcaster = Depends(get_broadcaster),
) -> MovieOut:
    outcome = service.update_movie(payload.to_patch(imdb_id))
    broadcaster.publish(outcome.events)
    return MovieOut.from_entity(outcome.value)


@router.delete("/movies/{imdb_id:path}", status_code=204, tags=["Movie"])
def delete_movie(
    imdb_id: str,
    service: RegistrationService = Depends(get_registration),
    broadcaster: ChangeBroadcaster = Depends(get_broadcaster),
) -> Response:
    """Suppression idempotente du film, de sa distribution et de ses images."""
    broadcaster.publish(service.unregister_movie(imdb_id).events)
    return Response(status_code=204)
