"""
Service d'enregistrement orchestrant la cohérence des relations du catalogue.

Le RegistrationService est le seul point d'écriture du catalogue. Il centralise :
- l'enregistrement des acteurs, des films et des images (avec création
  simultanée d'entités liées toutes nouvelles)
- la distribution (liaison/déliaison film-acteur)
- les mises à jour partielles (patchs)
- les suppressions idempotentes en cascade

Chaque opération d'écriture :
1. valide dans l'ordre : contraintes de champ, présence des identifiants,
   état métier (le premier échec interrompt l'opération)
2. s'execute dans une transaction unique (commit ou rollback complet)
3. retourne un Outcome portant la valeur et les événements de changement,
   produits seulement après le commit
"""

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from videostore.core.entities import (
    Actor,
    ActorPatch,
    Image,
    ImagePatch,
    Movie,
    MoviePatch,
)
from videostore.core.errors import (
    BusinessStateViolation,
    CatalogError,
    InfrastructureFailure,
    StructuralViolation,
    Violation,
)
from videostore.core.events import AggregateKind, ChangeEvent, Outcome
from videostore.core.ports.repositories import (
    IActorRepository,
    IImageRepository,
    IMovieRepository,
)
from videostore.core.validation import (
    ACTOR_CONSTRAINTS,
    IMAGE_CONSTRAINTS,
    MOVIE_CONSTRAINTS,
    check_cast,
    check_entity_identifier,
    check_filter,
    check_no_relations,
    check_not_null,
    check_persistence,
    check_value,
    validate_entity,
    validate_value,
)


def _raise_if_any(violations: list[Violation]) -> None:
    if violations:
        raise StructuralViolation(violations)


class RegistrationService:
    """
    Moteur de cohérence des relations acteur/film/image.

    Example:
        service = RegistrationService(
            session=session,
            actor_repo=SQLModelActorRepository(session),
            movie_repo=SQLModelMovieRepository(session),
            image_repo=SQLModelImageRepository(session),
        )

        outcome = service.register_movie(movie, actors=[new_actor])
        broadcaster.publish(outcome.events)  # après le commit, jamais avant
    """

    def __init__(
        self,
        session: Session,
        actor_repo: IActorRepository,
        movie_repo: IMovieRepository,
        image_repo: IImageRepository,
    ) -> None:
        """
        Initialise le service d'enregistrement.

        Args:
            session: Session partagée par les trois repositories (transaction)
            actor_repo: Repository des acteurs
            movie_repo: Repository des films (distribution et images comprises)
            image_repo: Repository des images
        """
        self._session = session
        self._actor_repo = actor_repo
        self._movie_repo = movie_repo
        self._image_repo = image_repo

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[None]:
        """
        Frontière transactionnelle d'une opération publique.

        Toute exception annule l'ensemble des écritures de l'opération. Les
        erreurs SQLAlchemy sont converties en InfrastructureFailure et
        journalisées avec leur trace ; le message expose reste opaque.
        """
        try:
            yield
            self._session.commit()
        except CatalogError as exc:
            self._session.rollback()
            logger.warning("{} annulée : {}", operation, exc)
            raise
        except SQLAlchemyError as exc:
            self._session.rollback()
            logger.exception("Échec du stockage pendant {}", operation)
            raise InfrastructureFailure(operation, exc) from exc
        except Exception:
            self._session.rollback()
            raise

    def _done(self, value, events: list[ChangeEvent]) -> Outcome:
        for event in events:
            logger.info("{}", event)
        return Outcome(value=value, events=tuple(events))

    # Identifiants

    def validate_actor_id(self, actor_id: Optional[int]) -> None:
        """Contrôle structurel d'un identifiant d'acteur."""
        check_value(ACTOR_CONSTRAINTS, "id", actor_id)

    def validate_imdb_id(self, imdb_id: Optional[str]) -> None:
        """Contrôle structurel d'un IMDb ID (obligatoire, motif IMDb)."""
        check_value(MOVIE_CONSTRAINTS, "imdb_id", imdb_id)

    def validate_image_id(self, image_id: Optional[int]) -> None:
        """Contrôle structurel d'un identifiant d'image."""
        check_value(IMAGE_CONSTRAINTS, "id", image_id)

    # Enregistrements

    def register_actor(self, actor: Actor, movies: Sequence[Movie] = ()) -> Outcome[Actor]:
        """
        Enregistre un nouvel acteur, et éventuellement de nouveaux films liés.

        Les films fournis doivent tous être nouveaux : un film déjà enregistré
        se lie à l'acteur via register_cast, jamais par rattachement implicite.

        Args:
            actor: Acteur à créer (id absent)
            movies: Films à créer en même temps, distribués avec l'acteur

        Returns:
            Outcome avec l'acteur enregistré (films compris)

        Raises:
            StructuralViolation: Champ invalide sur l'acteur ou un film
            BusinessStateViolation: Acteur avec id, film déjà enregistré ou
                fourni deux fois
        """
        with self._transaction("register_actor"):
            check_not_null(actor)
            violations = validate_entity(actor, ACTOR_CONSTRAINTS)
            for index, movie in enumerate(movies):
                check_not_null(movie)
                violations += validate_entity(movie, MOVIE_CONSTRAINTS, f"movies[{index}]")
            _raise_if_any(violations)

            check_entity_identifier(actor.id, should_be_present=False)

            check_no_relations(
                "Actor", actor.movie_ids, "existing movies are linked with register_cast"
            )
            seen: set[str] = set()
            for movie in movies:
                if movie.imdb_id in seen:
                    raise BusinessStateViolation(f"{movie.imdb_id} is listed more than once.")
                seen.add(movie.imdb_id)
                check_persistence(
                    movie.imdb_id,
                    self._movie_repo.find_by_id_lazily(movie.imdb_id) is not None,
                    should_be_present=False,
                )
                check_no_relations(
                    movie.imdb_id, movie.actor_ids, "existing actors are linked with register_cast"
                )
                check_no_relations(
                    movie.imdb_id, movie.image_ids, "images are added with register_movie_image"
                )

            actor_id = self._actor_repo.save(actor)
            for movie in movies:
                self._movie_repo.save(movie)
                self._movie_repo.add_cast(movie.imdb_id, actor_id)
            saved = self._actor_repo.find_by_id(actor_id)

        events = [ChangeEvent(AggregateKind.ACTOR, "register_actor", (actor_id,))]
        if movies:
            events.append(
                ChangeEvent(
                    AggregateKind.MOVIE,
                    "register_actor",
                    tuple(movie.imdb_id for movie in movies),
                )
            )
        return self._done(saved, events)

    def register_movie(
        self,
        movie: Movie,
        actors: Sequence[Actor] = (),
        images: Sequence[Image] = (),
    ) -> Outcome[Movie]:
        """
        Enregistre un nouveau film, et éventuellement de nouveaux acteurs et images.

        Args:
            movie: Film à créer (IMDb ID non encore enregistré)
            actors: Acteurs à créer en même temps (id absent), distribués dans le film
            images: Images à créer en même temps (id absent)

        Returns:
            Outcome avec le film enregistré (acteurs et images compris)

        Raises:
            StructuralViolation: Champ invalide sur le film, un acteur ou une image
            BusinessStateViolation: Film déjà enregistré, acteur ou image avec id
        """
        with self._transaction("register_movie"):
            check_not_null(movie)
            violations = validate_entity(movie, MOVIE_CONSTRAINTS)
            for index, actor in enumerate(actors):
                check_not_null(actor)
                violations += validate_entity(actor, ACTOR_CONSTRAINTS, f"actors[{index}]")
            for index, image in enumerate(images):
                check_not_null(image)
                violations += validate_entity(image, IMAGE_CONSTRAINTS, f"images[{index}]")
            _raise_if_any(violations)

            # Un acteur portant un id est déjà enregistré : seule la distribution
            # (register_cast) peut le lier à ce film.
            for actor in actors:
                check_entity_identifier(actor.id, should_be_present=False)
            for image in images:
                check_entity_identifier(image.id, should_be_present=False)

            check_persistence(
                movie.imdb_id,
                self._movie_repo.find_by_id_lazily(movie.imdb_id) is not None,
                should_be_present=False,
            )
            check_no_relations(
                movie.imdb_id, movie.actor_ids, "existing actors are linked with register_cast"
            )
            check_no_relations(
                movie.imdb_id, movie.image_ids, "images are added with register_movie_image"
            )
            for actor in actors:
                check_no_relations(
                    "Actor", actor.movie_ids, "existing movies are linked with register_cast"
                )

            imdb_id = self._movie_repo.save(movie)
            actor_ids = []
            for actor in actors:
                actor_id = self._actor_repo.save(actor)
                self._movie_repo.add_cast(imdb_id, actor_id)
                actor_ids.append(actor_id)
            for image in images:
                self._movie_repo.save_movie_image(imdb_id, image)
            saved = self._movie_repo.find_by_id(imdb_id)

        events = [ChangeEvent(AggregateKind.MOVIE, "register_movie", (imdb_id,))]
        if actor_ids:
            events.append(ChangeEvent(AggregateKind.ACTOR, "register_movie", tuple(actor_ids)))
        return self._done(saved, events)

    def register_movie_image(self, imdb_id: str, image: Image) -> Outcome[Image]:
        """
        Ajoute une nouvelle image à un film enregistré.

        Raises:
            StructuralViolation: IMDb ID ou champ de l'image invalide
            BusinessStateViolation: Image avec id ou film non enregistré
        """
        with self._transaction("register_movie_image"):
            check_not_null(image)
            violations = validate_value(MOVIE_CONSTRAINTS, "imdb_id", imdb_id)
            violations += validate_entity(image, IMAGE_CONSTRAINTS)
            _raise_if_any(violations)

            check_entity_identifier(image.id, should_be_present=False)

            check_persistence(
                imdb_id,
                self._movie_repo.find_by_id_lazily(imdb_id) is not None,
                should_be_present=True,
            )

            image_id = self._movie_repo.save_movie_image(imdb_id, image)
            saved = self._image_repo.find_by_id(image_id)

        return self._done(
            saved,
            [ChangeEvent(AggregateKind.MOVIE, "register_movie_image", (imdb_id, image_id))],
        )

    def register_cast(self, imdb_id: str, actor_id: int) -> Outcome[None]:
        """
        Distribue un acteur enregistré dans un film enregistré.

        Raises:
            StructuralViolation: Identifiant invalide
            BusinessStateViolation: Film ou acteur non enregistré, ou acteur
                déjà distribue dans ce film
        """
        with self._transaction("register_cast"):
            violations = validate_value(MOVIE_CONSTRAINTS, "imdb_id", imdb_id)
            violations += validate_value(ACTOR_CONSTRAINTS, "id", actor_id)
            _raise_if_any(violations)

            check_entity_identifier(actor_id, should_be_present=True)

            check_persistence(
                imdb_id,
                self._movie_repo.find_by_id_lazily(imdb_id) is not None,
                should_be_present=True,
            )
            check_persistence(
                actor_id,
                self._actor_repo.find_by_id_lazily(actor_id) is not None,
                should_be_present=True,
            )
            check_cast(
                imdb_id,
                actor_id,
                self._movie_repo.is_cast(imdb_id, actor_id),
                should_be_present=False,
            )

            self._movie_repo.add_cast(imdb_id, actor_id)

        return self._done(
            None,
            [
                ChangeEvent(AggregateKind.ACTOR, "register_cast", (imdb_id, actor_id)),
                ChangeEvent(AggregateKind.MOVIE, "register_cast", (imdb_id, actor_id)),
            ],
        )

    # Mises à jour

    def _patch_violations(self, patch, table, id_field: str) -> list[Violation]:
        violations = validate_value(table, id_field, getattr(patch, id_field))
        for name, value in patch.changes().items():
            violations += validate_value(table, name, value)
        return violations

    def update_actor(self, patch: ActorPatch) -> Outcome[Actor]:
        """
        Met à jour les champs renseignés d'un acteur enregistré.

        Un champ à None efface la valeur stockée (refusé pour un champ
        obligatoire) ; un champ UNSET reste inchangé.

        Raises:
            StructuralViolation: Valeur de champ invalide
            BusinessStateViolation: Identifiant absent ou acteur non enregistré
        """
        with self._transaction("update_actor"):
            check_not_null(patch)
            _raise_if_any(self._patch_violations(patch, ACTOR_CONSTRAINTS, "id"))
            check_entity_identifier(patch.id, should_be_present=True)
            check_persistence(
                patch.id,
                self._actor_repo.find_by_id_lazily(patch.id) is not None,
                should_be_present=True,
            )
            if patch.is_empty:
                return Outcome(value=self._actor_repo.find_by_id(patch.id))
            updated = self._actor_repo.update(patch)

        return self._done(
            updated, [ChangeEvent(AggregateKind.ACTOR, "update_actor", (patch.id,))]
        )

    def update_movie(self, patch: MoviePatch) -> Outcome[Movie]:
        """
        Met à jour les champs renseignés d'un film enregistré.

        Raises:
            StructuralViolation: IMDb ID ou valeur de champ invalide
            BusinessStateViolation: Film non enregistré
        """
        with self._transaction("update_movie"):
            check_not_null(patch)
            _raise_if_any(self._patch_violations(patch, MOVIE_CONSTRAINTS, "imdb_id"))
            check_persistence(
                patch.imdb_id,
                self._movie_repo.find_by_id_lazily(patch.imdb_id) is not None,
                should_be_present=True,
            )
            if patch.is_empty:
                return Outcome(value=self._movie_repo.find_by_id(patch.imdb_id))
            updated = self._movie_repo.update(patch)

        return self._done(
            updated, [ChangeEvent(AggregateKind.MOVIE, "update_movie", (patch.imdb_id,))]
        )

    def update_image(self, patch: ImagePatch) -> Outcome[Image]:
        """
        Met à jour la description et/ou le contenu d'une image enregistrée.

        Raises:
            StructuralViolation: Valeur de champ invalide
            BusinessStateViolation: Identifiant absent ou image non enregistrée
        """
        with self._transaction("update_image"):
            check_not_null(patch)
            _raise_if_any(self._patch_violations(patch, IMAGE_CONSTRAINTS, "id"))
            check_entity_identifier(patch.id, should_be_present=True)
            check_persistence(
                patch.id,
                self._image_repo.find_by_id(patch.id) is not None,
                should_be_present=True,
            )
            if patch.is_empty:
                return Outcome(value=self._image_repo.find_by_id(patch.id))
            updated = self._image_repo.update(patch)

        ids = (patch.id,) if updated.imdb_id is None else (updated.imdb_id, patch.id)
        return self._done(updated, [ChangeEvent(AggregateKind.MOVIE, "update_image", ids)])

    # Suppressions (idempotentes)

    def unregister_actor(self, actor_id: int) -> Outcome[bool]:
        """
        Supprime un acteur et sa distribution.

        Supprimer un acteur absent n'est pas une erreur : seul l'événement
        de changement depend de son existence préalable.

        Returns:
            Outcome dont la valeur indique si l'acteur existait
        """
        with self._transaction("unregister_actor"):
            _raise_if_any(validate_value(ACTOR_CONSTRAINTS, "id", actor_id))
            check_entity_identifier(actor_id, should_be_present=True)

            movies = self._movie_repo.find_actor_movies_lazily(actor_id)
            existed = self._actor_repo.remove_by_id(actor_id)

        if not existed:
            logger.debug("unregister_actor( {} ) : acteur absent, rien à faire", actor_id)
            return Outcome(value=False)

        events = [ChangeEvent(AggregateKind.ACTOR, "unregister_actor", (actor_id,))]
        if movies:
            events.append(
                ChangeEvent(
                    AggregateKind.MOVIE,
                    "unregister_actor",
                    tuple(movie.imdb_id for movie in movies),
                )
            )
        return self._done(True, events)

    def unregister_movie(self, imdb_id: str) -> Outcome[bool]:
        """
        Supprime un film, sa distribution et ses images.

        Returns:
            Outcome dont la valeur indique si le film existait
        """
        with self._transaction("unregister_movie"):
            self.validate_imdb_id(imdb_id)

            actors = self._actor_repo.find_movie_actors_lazily(imdb_id)
            existed = self._movie_repo.remove_by_id(imdb_id)

        if not existed:
            logger.debug("unregister_movie( {} ) : film absent, rien à faire", imdb_id)
            return Outcome(value=False)

        events = [ChangeEvent(AggregateKind.MOVIE, "unregister_movie", (imdb_id,))]
        if actors:
            events.append(
                ChangeEvent(
                    AggregateKind.ACTOR,
                    "unregister_movie",
                    tuple(actor.id for actor in actors),
                )
            )
        return self._done(True, events)

    def unregister_movie_image(self, imdb_id: str, image_id: int) -> Outcome[bool]:
        """
        Supprime une image d'un film enregistré.

        Raises:
            StructuralViolation: Identifiant invalide
            BusinessStateViolation: Identifiant d'image absent ou film non enregistré
        """
        with self._transaction("unregister_movie_image"):
            violations = validate_value(MOVIE_CONSTRAINTS, "imdb_id", imdb_id)
            violations += validate_value(IMAGE_CONSTRAINTS, "id", image_id)
            _raise_if_any(violations)

            check_entity_identifier(image_id, should_be_present=True)

            check_persistence(
                imdb_id,
                self._movie_repo.find_by_id_lazily(imdb_id) is not None,
                should_be_present=True,
            )

            existed = self._movie_repo.remove_movie_image_by_id(imdb_id, image_id)

        if not existed:
            logger.debug(
                "unregister_movie_image( {} {} ) : image absente, rien à faire",
                imdb_id,
                image_id,
            )
            return Outcome(value=False)

        return self._done(
            True,
            [ChangeEvent(AggregateKind.MOVIE, "unregister_movie_image", (imdb_id, image_id))],
        )

    def unregister_cast(self, imdb_id: str, actor_id: int) -> Outcome[bool]:
        """
        Retire un acteur de la distribution d'un film.

        Sans effet (et sans erreur) si le film ou l'acteur n'existe pas, ou
        s'ils ne sont pas liés.

        Returns:
            Outcome dont la valeur indique si un lien a été supprimé
        """
        with self._transaction("unregister_cast"):
            violations = validate_value(MOVIE_CONSTRAINTS, "imdb_id", imdb_id)
            violations += validate_value(ACTOR_CONSTRAINTS, "id", actor_id)
            _raise_if_any(violations)

            check_entity_identifier(actor_id, should_be_present=True)

            removed = False
            movie_found = self._movie_repo.find_by_id_lazily(imdb_id) is not None
            actor_found = self._actor_repo.find_by_id_lazily(actor_id) is not None
            if movie_found and actor_found:
                removed = self._movie_repo.remove_cast(imdb_id, actor_id)

        if not removed:
            logger.debug("unregister_cast( {} {} ) : aucun lien, rien à faire", imdb_id, actor_id)
            return Outcome(value=False)

        return self._done(
            True,
            [
                ChangeEvent(AggregateKind.MOVIE, "unregister_cast", (imdb_id, actor_id)),
                ChangeEvent(AggregateKind.ACTOR, "unregister_cast", (imdb_id, actor_id)),
            ],
        )

    # Lectures (validation des paramètres à la charge de l'appelant sauf mention)

    def find_actor_by_id(self, actor_id: int) -> Optional[Actor]:
        """Acteur avec les IMDb IDs de ses films."""
        return self._actor_repo.find_by_id(actor_id)

    def find_movie_by_id(self, imdb_id: str) -> Optional[Movie]:
        """Film avec les IDs de ses acteurs et de ses images."""
        return self._movie_repo.find_by_id(imdb_id)

    def find_actor_by_id_lazily(self, actor_id: int) -> Optional[Actor]:
        return self._actor_repo.find_by_id_lazily(actor_id)

    def find_movie_by_id_lazily(self, imdb_id: str) -> Optional[Movie]:
        return self._movie_repo.find_by_id_lazily(imdb_id)

    def find_image_by_id(self, image_id: int) -> Optional[Image]:
        return self._image_repo.find_by_id(image_id)

    def find_movie_image_by_id(self, imdb_id: str, image_id: int) -> Optional[Image]:
        return self._image_repo.find_movie_image_by_id(imdb_id, image_id)

    def find_all_actors(self) -> list[Actor]:
        """
        Tous les acteurs, triés par nom puis prénom.

        A réserver aux petits volumes (tests, démonstration) : préférer les
        listes paginées du ListingService.
        """
        return self._actor_repo.find_all()

    def find_all_movies(self) -> list[Movie]:
        """Tous les films, triés par titre. Mêmes réserves que find_all_actors."""
        return self._movie_repo.find_all()

    def find_movies_by_title(self, search_for: str) -> list[Movie]:
        """Films dont le titre contient search_for (filtre non vide)."""
        check_filter(search_for)
        return self._movie_repo.find_by_title(search_for)

    def find_movie_images(self, imdb_id: str) -> list[Image]:
        """Images d'un film enregistré, triées par description."""
        self.validate_imdb_id(imdb_id)
        check_persistence(
            imdb_id,
            self._movie_repo.find_by_id_lazily(imdb_id) is not None,
            should_be_present=True,
        )
        return self._image_repo.find_movie_images(imdb_id)

    def find_movie_actors_lazily(self, imdb_id: str) -> list[Actor]:
        """Acteurs d'un film enregistré (sans leurs films), triés par nom."""
        self.validate_imdb_id(imdb_id)
        check_persistence(
            imdb_id,
            self._movie_repo.find_by_id_lazily(imdb_id) is not None,
            should_be_present=True,
        )
        return self._actor_repo.find_movie_actors_lazily(imdb_id)

    def find_actor_movies_lazily(self, actor_id: int) -> list[Movie]:
        """Films d'un acteur enregistré (sans relations), triés par titre."""
        self.validate_actor_id(actor_id)
        check_entity_identifier(actor_id, should_be_present=True)
        check_persistence(
            actor_id,
            self._actor_repo.find_by_id_lazily(actor_id) is not None,
            should_be_present=True,
        )
        return self._movie_repo.find_actor_movies_lazily(actor_id)

    def count_actors(self, search_for: Optional[str] = None) -> int:
        if search_for is not None:
            check_filter(search_for)
        return self._actor_repo.count(search_for)

    def count_movies(self, search_for: Optional[str] = None) -> int:
        if search_for is not None:
            check_filter(search_for)
        return self._movie_repo.count(search_for)

    def count_movie_images(self, imdb_id: str) -> int:
        return self._movie_repo.count_movie_images(imdb_id)

    def count_images(self) -> int:
        return self._image_repo.count()
