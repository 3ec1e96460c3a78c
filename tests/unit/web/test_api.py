"""Tests de l'API REST /registration avec le TestClient FastAPI."""

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient
from sqlmodel import Session

from videostore.container import Container
from videostore.core.errors import InfrastructureFailure
from videostore.core.events import AggregateKind
from videostore.infrastructure.persistence.database import init_db
from videostore.services import RegistrationService
from videostore.web.app import create_app

BILL = {"first_name": "Bill", "last_name": "Murray", "birth_date": "1950-09-21"}
GROUNDHOG = {"imdb_id": "tt0107048", "title": "Groundhog Day", "year": 1993}


@pytest.fixture
def container(engine):
    container = Container()
    container.database.override(providers.Resource(init_db, engine))
    container.session.override(providers.Factory(Session, engine))
    return container


@pytest.fixture
def client(container):
    with TestClient(create_app(container)) as client:
        yield client


class TestActorsApi:
    def test_post_actor(self, client):
        response = client.post("/registration/actors", json=BILL)

        assert response.status_code == 201
        body = response.json()
        assert body["first_name"] == "Bill"
        assert body["movie_ids"] == []
        assert response.headers["location"].endswith(f"/registration/actors/{body['id']}")

    def test_post_actor_with_identifier(self, client):
        response = client.post("/registration/actors", json={**BILL, "id": 3})

        assert response.status_code == 400
        assert response.json() == {"Actor": "Entity id should be null."}

    def test_post_actor_with_invalid_fields(self, client):
        response = client.post("/registration/actors", json={"birth_date": "1950-09-21"})

        assert response.status_code == 400
        assert response.json() == {"first_name": "must not be null"}

    def test_get_actor(self, client):
        actor_id = client.post("/registration/actors", json=BILL).json()["id"]

        response = client.get(f"/registration/actors/{actor_id}")

        assert response.status_code == 200
        assert response.json()["last_name"] == "Murray"

    def test_get_unknown_actor(self, client):
        assert client.get("/registration/actors/404").status_code == 404

    def test_put_actor_is_tri_state(self, client):
        """Clé absente : inchangé ; null explicite : efface."""
        actor_id = client.post("/registration/actors", json=BILL).json()["id"]

        response = client.put(f"/registration/actors/{actor_id}", json={"last_name": None})

        assert response.status_code == 200
        assert response.json()["first_name"] == "Bill"
        assert response.json()["last_name"] is None

    def test_delete_actor_is_idempotent(self, client):
        actor_id = client.post("/registration/actors", json=BILL).json()["id"]

        assert client.delete(f"/registration/actors/{actor_id}").status_code == 204
        assert client.delete(f"/registration/actors/{actor_id}").status_code == 204

    def test_page_of_actors_reports_total(self, client):
        client.post("/registration/actors", json=BILL)
        client.post("/registration/actors", json={**BILL, "first_name": "Brian"})

        response = client.get("/registration/actors", params={"limit": 1, "search": "murray"})

        assert response.status_code == 200
        assert [actor["first_name"] for actor in response.json()] == ["Bill"]
        assert response.headers["x-total-count"] == "2"


class TestMoviesApi:
    def test_post_movie_with_new_actor(self, client):
        response = client.post("/registration/movies", json={**GROUNDHOG, "actors": [BILL]})

        assert response.status_code == 201
        actor_id = response.json()["actor_ids"][0]
        assert client.get(f"/registration/actors/{actor_id}").json()["movie_ids"] == ["tt0107048"]

    def test_page_limit_is_validated(self, client):
        response = client.get("/registration/movies", params={"limit": 500})

        assert response.status_code == 400
        assert response.json() == {"limit": "must be less than or equal to 100"}

    def test_event_identifier_with_slash(self, client):
        client.post(
            "/registration/movies", json={**GROUNDHOG, "imdb_id": "ev0000003/2019-1"}
        )

        response = client.get("/registration/movies/ev0000003/2019-1")

        assert response.status_code == 200
        assert response.json()["imdb_id"] == "ev0000003/2019-1"

    def test_cast_link_and_idempotent_unlink(self, client):
        client.post("/registration/movies", json=GROUNDHOG)
        actor_id = client.post("/registration/actors", json=BILL).json()["id"]

        assert client.post(f"/registration/movies/tt0107048/actors/{actor_id}").status_code == 201
        again = client.post(f"/registration/movies/tt0107048/actors/{actor_id}")
        assert again.status_code == 400
        assert again.json() == {"Cast": f"tt0107048 is already cast to actor {actor_id}."}

        assert client.delete(f"/registration/movies/tt0107048/actors/{actor_id}").status_code == 204
        assert client.delete(f"/registration/movies/tt0107048/actors/{actor_id}").status_code == 204

    def test_delete_unknown_movie(self, client):
        assert client.delete("/registration/movies/tt9999999").status_code == 204


class TestImagesApi:
    def _upload(self, client, imdb_id="tt0107048", attributes='{"description": "Affiche"}'):
        return client.post(
            f"/registration/movies/{imdb_id}/images",
            data={"attributes": attributes},
            files={"image": ("poster.png", b"\x89PNG", "image/png")},
        )

    def test_upload_and_download(self, client):
        client.post("/registration/movies", json=GROUNDHOG)

        response = self._upload(client)

        assert response.status_code == 201
        image = response.json()
        assert image["description"] == "Affiche"
        assert image["size"] == 4
        content = client.get(f"/registration/movies/tt0107048/images/{image['id']}/content")
        assert content.content == b"\x89PNG"

    def test_upload_to_unknown_movie(self, client):
        response = self._upload(client, imdb_id="tt9999999")

        assert response.status_code == 400
        assert response.json() == {"Image": "tt9999999 has not been registered."}

    def test_upload_without_attributes(self, client):
        client.post("/registration/movies", json=GROUNDHOG)

        response = client.post(
            "/registration/movies/tt0107048/images",
            files={"image": ("poster.png", b"\x89PNG", "image/png")},
        )

        assert response.status_code == 400
        assert response.json() == {"Image": "Request is missing input part {attributes}."}

    def test_put_image_description(self, client):
        client.post("/registration/movies", json=GROUNDHOG)
        image_id = self._upload(client).json()["id"]

        response = client.put(
            f"/registration/images/{image_id}", data={"attributes": '{"description": "Scene"}'}
        )

        assert response.status_code == 200
        assert response.json()["description"] == "Scene"
        assert response.json()["size"] == 4


class TestChangeNotifications:
    def test_writes_are_broadcast(self, client, container):
        received = []
        container.change_broadcaster().subscribe(
            AggregateKind.ACTOR, lambda message, event: received.append(message)
        )

        client.post("/registration/actors", json=BILL)

        assert received == ["actorListNotification"]

    def test_rejected_writes_are_not_broadcast(self, client, container):
        received = []
        container.change_broadcaster().subscribe(
            AggregateKind.ACTOR, lambda message, event: received.append(message)
        )

        client.post("/registration/actors", json={**BILL, "id": 3})

        assert received == []


class TestInfrastructureFailure:
    def test_failure_is_opaque(self, client, monkeypatch):
        def failing(self, actor, movies=()):
            raise InfrastructureFailure("register_actor")

        monkeypatch.setattr(RegistrationService, "register_actor", failing)

        response = client.post("/registration/actors", json=BILL)

        assert response.status_code == 500
        assert response.text == "For more details dive into server log."
