"""Tests pour les repositories SQLModel (acteurs, films, images)."""

from datetime import date, timedelta

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from videostore.core.entities import ActorPatch, Image, MoviePatch
from videostore.infrastructure.persistence.models import (
    ActorModel,
    CastModel,
    MovieImageModel,
    MovieModel,
)


@pytest.fixture
def three_movies(movie_repo, movie_factory, session):
    """Trois films dont les titres sont dans le désordre."""
    movie_repo.save(movie_factory("tt8064418", "The Art of Self-Defense", 2019))
    movie_repo.save(movie_factory("tt0107048", "Groundhog Day", 1993))
    movie_repo.save(movie_factory("tt1156398", "Zombieland", 2009))
    session.commit()


# ============================================================================
# Pagination et filtres
# ============================================================================


class TestMoviePaging:
    """Tests pour find_page et count du repository Movie."""

    def test_last_page_holds_single_movie(self, movie_repo, three_movies):
        """offset=2, limit=2 sur trois films triés par titre : Zombieland seul."""
        page = movie_repo.find_page(offset=2, limit=2)

        assert [movie.title for movie in page] == ["Zombieland"]

    def test_first_page_sorted_by_title(self, movie_repo, three_movies):
        page = movie_repo.find_page(offset=0, limit=2)

        assert [movie.title for movie in page] == ["Groundhog Day", "The Art of Self-Defense"]

    def test_page_is_lazy_projection(self, movie_repo, three_movies):
        page = movie_repo.find_page(offset=0, limit=10)

        assert all(movie.actor_ids is None and movie.image_ids is None for movie in page)

    def test_filter_is_case_insensitive_substring(self, movie_repo, three_movies):
        page = movie_repo.find_page(offset=0, limit=10, search_for="DAY")

        assert [movie.imdb_id for movie in page] == ["tt0107048"]
        assert movie_repo.count("DAY") == 1

    def test_filter_treats_wildcards_literally(self, movie_repo, movie_factory, session):
        movie_repo.save(movie_factory("tt0000001", "100% Arabica", 1997))
        movie_repo.save(movie_factory("tt0000002", "1000 Arabica", 1997))
        session.commit()

        assert [m.imdb_id for m in movie_repo.find_page(0, 10, "0%")] == ["tt0000001"]
        assert movie_repo.count("_") == 0

    def test_count_without_filter(self, movie_repo, three_movies):
        assert movie_repo.count() == 3


class TestAccentedText:
    """Filtres et tris insensibles à la casse hors ASCII."""

    @pytest.fixture
    def accented_movies(self, movie_repo, movie_factory, session):
        movie_repo.save(movie_factory("tt0211915", "Amélie", 2001))
        movie_repo.save(movie_factory("tt0318202", "Être et avoir", 2002))
        movie_repo.save(movie_factory("tt0120746", "Zorro", 1998))
        session.commit()

    def test_uppercase_accented_filter_matches(self, movie_repo, accented_movies):
        """La recherche "AMÉLIE" trouve "Amélie"."""
        page = movie_repo.find_page(offset=0, limit=10, search_for="AMÉLIE")

        assert [movie.title for movie in page] == ["Amélie"]
        assert movie_repo.count("AMÉLIE") == 1

    def test_lowercase_filter_matches_capital_accent(self, movie_repo, accented_movies):
        assert [m.title for m in movie_repo.find_by_title("être")] == ["Être et avoir"]

    def test_accented_titles_sorted_with_their_letter(self, movie_repo, accented_movies):
        assert [movie.title for movie in movie_repo.find_all()] == [
            "Amélie",
            "Être et avoir",
            "Zorro",
        ]

    def test_listing_finds_accented_title(self, listing, accented_movies):
        page = listing.list_movies(0, 10, "AMÉLIE")

        assert page.total == 1
        assert [movie.imdb_id for movie in page.items] == ["tt0211915"]

    def test_actor_filter_ignores_case_of_accents(self, actor_repo, actor_factory, session):
        actor_repo.save(actor_factory("Émilie", "Dequenne"))
        actor_repo.save(actor_factory("Bill", "Murray"))
        session.commit()

        assert [a.first_name for a in actor_repo.find_page(0, 10, "émilie")] == ["Émilie"]


class TestActorPaging:
    """Tests pour find_page et count du repository Actor."""

    @pytest.fixture
    def actors(self, actor_repo, actor_factory, session):
        actor_repo.save(actor_factory("Emma", "Stone"))
        actor_repo.save(actor_factory("Bill", "Murray"))
        actor_repo.save(actor_factory("Andie", "MacDowell"))
        actor_repo.save(actor_factory("Zendaya", None))
        session.commit()

    def test_sorted_by_last_then_first_name(self, actor_repo, actors):
        page = actor_repo.find_page(offset=0, limit=10)

        assert [actor.full_name for actor in page][-3:] == [
            "Andie MacDowell",
            "Bill Murray",
            "Emma Stone",
        ]

    def test_filter_matches_first_or_last_name(self, actor_repo, actors):
        assert {a.first_name for a in actor_repo.find_page(0, 10, "ma")} == {"Emma", "Andie"}
        assert actor_repo.count("ma") == 2

    def test_filter_matches_mononymous_actor(self, actor_repo, actors):
        assert [a.first_name for a in actor_repo.find_page(0, 10, "zEN")] == ["Zendaya"]


# ============================================================================
# Mise à jour partielle
# ============================================================================


class TestPartialUpdate:
    """Tests pour update avec patch à trois états."""

    def test_only_set_fields_change(self, actor_repo, actor_factory, session):
        actor_id = actor_repo.save(actor_factory("Bill", "Murray"))
        session.commit()

        updated = actor_repo.update(ActorPatch(id=actor_id, first_name="William"))

        assert updated.first_name == "William"
        assert updated.last_name == "Murray"
        assert updated.birth_date == date(1950, 9, 21)

    def test_none_clears_field(self, movie_repo, movie_factory, session):
        movie_repo.save(movie_factory(description="Un jour sans fin."))
        session.commit()

        updated = movie_repo.update(MoviePatch(imdb_id="tt0107048", description=None))

        assert updated.description is None
        assert updated.title == "Groundhog Day"

    def test_unknown_identifier_returns_none(self, actor_repo):
        assert actor_repo.update(ActorPatch(id=123, first_name="William")) is None


# ============================================================================
# Suppression et liaisons
# ============================================================================


class TestRemoval:
    """Tests pour remove_by_id et les tables de liaison."""

    def test_remove_actor_strips_cast_links(
        self, actor_repo, movie_repo, actor_factory, movie_factory, session
    ):
        actor_id = actor_repo.save(actor_factory())
        movie_repo.save(movie_factory())
        movie_repo.add_cast("tt0107048", actor_id)
        session.commit()

        assert actor_repo.remove_by_id(actor_id) is True
        session.commit()

        assert session.exec(select(CastModel)).all() == []
        assert movie_repo.find_by_id("tt0107048").actor_ids == frozenset()

    def test_remove_missing_actor(self, actor_repo):
        assert actor_repo.remove_by_id(77) is False

    def test_remove_movie_deletes_owned_images(
        self, movie_repo, image_repo, movie_factory, session
    ):
        movie_repo.save(movie_factory())
        movie_repo.save_movie_image("tt0107048", Image(description="Affiche", content=b"x"))
        session.commit()

        assert movie_repo.remove_by_id("tt0107048") is True
        session.commit()

        assert image_repo.count() == 0
        assert session.exec(select(MovieImageModel)).all() == []

    def test_remove_cast_is_idempotent(self, actor_repo, movie_repo, actor_factory, movie_factory):
        actor_id = actor_repo.save(actor_factory())
        movie_repo.save(movie_factory())
        movie_repo.add_cast("tt0107048", actor_id)

        assert movie_repo.remove_cast("tt0107048", actor_id) is True
        assert movie_repo.remove_cast("tt0107048", actor_id) is False
        assert movie_repo.is_cast("tt0107048", actor_id) is False

    def test_cast_requires_existing_rows(self, movie_repo, movie_factory, session):
        """Les clés étrangères SQLite sont actives sur chaque connexion."""
        movie_repo.save(movie_factory())

        assert session.connection().exec_driver_sql("PRAGMA foreign_keys").scalar() == 1
        with pytest.raises(IntegrityError):
            movie_repo.add_cast("tt0107048", 999)

    def test_duplicate_imdb_id_fails_at_flush(self, movie_repo, movie_factory, session):
        movie_repo.save(movie_factory())
        session.commit()
        session.expunge_all()

        with pytest.raises(IntegrityError):
            movie_repo.save(movie_factory(title="Copie"))


class TestImageRepository:
    """Tests pour le repository Image."""

    def test_find_movie_image_checks_owner(self, movie_repo, image_repo, movie_factory):
        movie_repo.save(movie_factory("tt0107048"))
        movie_repo.save(movie_factory("tt1156398", "Zombieland", 2009))
        image_id = movie_repo.save_movie_image(
            "tt0107048", Image(description="Affiche", content=b"x")
        )

        assert image_repo.find_movie_image_by_id("tt0107048", image_id).description == "Affiche"
        assert image_repo.find_movie_image_by_id("tt1156398", image_id) is None
        assert image_repo.find_owner(image_id) == "tt0107048"
        assert movie_repo.count_movie_images("tt0107048") == 1


# ============================================================================
# Horodatage
# ============================================================================


class TestTimestamps:
    """Les horodatages sont des datetimes UTC avec fuseau."""

    def test_new_models_are_timezone_aware(self):
        actor = ActorModel(first_name="Bill", birth_date=date(1950, 9, 21))
        movie = MovieModel(imdb_id="tt0107048", title="Groundhog Day", year=1993)

        for stamp in (actor.created_at, actor.updated_at, movie.created_at, movie.updated_at):
            assert stamp.tzinfo is not None
            assert stamp.utcoffset() == timedelta(0)

    def test_update_sets_timezone_aware_stamp(
        self, actor_repo, movie_repo, actor_factory, movie_factory, session
    ):
        actor_id = actor_repo.save(actor_factory())
        movie_repo.save(movie_factory())
        session.commit()

        actor_repo.update(ActorPatch(id=actor_id, first_name="William"))
        movie_repo.update(MoviePatch(imdb_id="tt0107048", title="Un jour sans fin"))

        assert session.get(ActorModel, actor_id).updated_at.tzinfo is not None
        assert session.get(MovieModel, "tt0107048").updated_at.tzinfo is not None
