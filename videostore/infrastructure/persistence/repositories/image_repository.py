"""
Implementation SQLModel du repository Image.

Les images sont créées et supprimées via le repository Movie (propriétaire
de la liaison "movie_images") ; ce repository couvre la lecture et la mise
à jour des images elles-mêmes.
"""

from typing import Optional

from sqlalchemy import func
from sqlmodel import Session, select

from videostore.core.entities import Image, ImagePatch
from videostore.core.ports.repositories import IImageRepository
from videostore.infrastructure.persistence.models import ImageModel, MovieImageModel


class SQLModelImageRepository(IImageRepository):
    """Repository SQLModel pour les images de films."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _to_entity(self, model: ImageModel, imdb_id: Optional[str] = None) -> Image:
        return Image(
            id=model.id,
            description=model.description,
            content=model.content,
            imdb_id=imdb_id,
        )

    def update(self, patch: ImagePatch) -> Optional[Image]:
        """Applique uniquement les champs renseignés du patch."""
        model = self._session.get(ImageModel, patch.id)
        if model is None:
            return None

        for name, value in patch.changes().items():
            setattr(model, name, value)

        self._session.add(model)
        self._session.flush()
        return self._to_entity(model, self.find_owner(model.id))

    def find_by_id(self, image_id: int) -> Optional[Image]:
        model = self._session.get(ImageModel, image_id)
        if model:
            return self._to_entity(model, self.find_owner(image_id))
        return None

    def find_movie_image_by_id(self, imdb_id: str, image_id: int) -> Optional[Image]:
        """Récupère l'image seulement si elle appartient au film donne."""
        statement = (
            select(ImageModel)
            .join(MovieImageModel, MovieImageModel.image_id == ImageModel.id)
            .where(MovieImageModel.imdb_id == imdb_id)
            .where(ImageModel.id == image_id)
        )
        model = self._session.exec(statement).first()
        if model:
            return self._to_entity(model, imdb_id)
        return None

    def find_movie_images(self, imdb_id: str) -> list[Image]:
        """Images d'un film, triées par description."""
        statement = (
            select(ImageModel)
            .join(MovieImageModel, MovieImageModel.image_id == ImageModel.id)
            .where(MovieImageModel.imdb_id == imdb_id)
            .order_by(ImageModel.description, ImageModel.id)
        )
        models = self._session.exec(statement).all()
        return [self._to_entity(model, imdb_id) for model in models]

    def find_owner(self, image_id: int) -> Optional[str]:
        link = self._session.get(MovieImageModel, image_id)
        return link.imdb_id if link else None

    def count(self) -> int:
        return self._session.exec(select(func.count()).select_from(ImageModel)).one()
