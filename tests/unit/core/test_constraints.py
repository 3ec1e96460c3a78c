"""Tests pour les tables de contraintes et le validateur structurel."""

from datetime import date, datetime, timedelta

import pytest

from videostore.core.entities import Actor, Movie
from videostore.core.errors import StructuralViolation, Violation
from videostore.core.validation import (
    ACTOR_CONSTRAINTS,
    MOVIE_CONSTRAINTS,
    check_filter,
    check_paging,
    validate_entity,
    validate_value,
)
from videostore.core.validation.constraints import PastOrPresent, Range, Size


class TestConstraints:
    """Tests des contraintes élémentaires."""

    def test_size_ignores_non_text_values(self):
        assert Size(min=1, max=3).check(12345) is None

    def test_size_bounds(self):
        assert Size(min=1, max=3).check("") == "size must be between 1 and 3"
        assert Size(min=1).check(b"") == "size must be at least 1"
        assert Size(max=3).check("abc") is None

    def test_range_rejects_booleans(self):
        assert Range(min=0).check(True) == "must be an integer"

    def test_past_or_present_uses_injected_today(self):
        constraint = PastOrPresent(today=lambda: date(2020, 1, 1))

        assert constraint.check(date(2020, 1, 1)) is None
        assert constraint.check(datetime(2020, 1, 2, 8, 0)) == (
            "must be a date in the past or in the present"
        )


class TestImdbIdentifier:
    """Tests du motif d'identifiant IMDb."""

    @pytest.mark.parametrize(
        "imdb_id",
        ["tt0107048", "nm0000195", "co0000001", "ev0000003/2019", "ev0000003/2019-1"],
    )
    def test_valid(self, imdb_id):
        assert validate_value(MOVIE_CONSTRAINTS, "imdb_id", imdb_id) == []

    @pytest.mark.parametrize("imdb_id", ["tt010704", "xx0107048", "tt0107048 ", "ev0000003/19"])
    def test_invalid(self, imdb_id):
        violations = validate_value(MOVIE_CONSTRAINTS, "imdb_id", imdb_id)

        assert [v.path for v in violations] == ["imdb_id"]

    def test_missing(self):
        assert validate_value(MOVIE_CONSTRAINTS, "imdb_id", None) == [
            Violation("imdb_id", "must not be null")
        ]


class TestValidateEntity:
    """Tests de validate_entity."""

    def test_valid_actor(self):
        actor = Actor(first_name="Bill", last_name="Murray", birth_date=date(1950, 9, 21))

        assert validate_entity(actor, ACTOR_CONSTRAINTS) == []

    def test_collects_all_violations_with_prefix(self):
        movie = Movie(imdb_id="tt0107048", title="", year=1899, description="x" * 10001)

        violations = validate_entity(movie, MOVIE_CONSTRAINTS, prefix="movies[1]")

        assert {v.path for v in violations} == {
            "movies[1].title",
            "movies[1].year",
            "movies[1].description",
        }

    def test_future_birth_date(self):
        actor = Actor(first_name="Bill", birth_date=date.today() + timedelta(days=1))

        assert validate_entity(actor, ACTOR_CONSTRAINTS) == [
            Violation("birth_date", "must be a date in the past or in the present")
        ]

    def test_wrong_type(self):
        assert validate_value(MOVIE_CONSTRAINTS, "title", 42) == [
            Violation("title", "has an invalid type")
        ]

    def test_unknown_field(self):
        with pytest.raises(KeyError):
            validate_value(ACTOR_CONSTRAINTS, "nickname", "Bill")


class TestPagingAndFilter:
    """Tests de check_paging et check_filter."""

    def test_valid_paging(self):
        check_paging(0, 100)

    def test_reports_offset_and_limit_together(self):
        with pytest.raises(StructuralViolation) as exc_info:
            check_paging(-1, 101)

        assert exc_info.value.as_dict() == {
            "offset": "must be greater than or equal to 0",
            "limit": "must be less than or equal to 100",
        }

    def test_zero_limit(self):
        with pytest.raises(StructuralViolation, match="limit"):
            check_paging(0, 0)

    @pytest.mark.parametrize("search_for", ["", "   ", None])
    def test_blank_filter(self, search_for):
        with pytest.raises(StructuralViolation, match="must not be blank"):
            check_filter(search_for)
