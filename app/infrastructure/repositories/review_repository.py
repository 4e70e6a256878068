"""Persistence helpers for review entities."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.domain.entities import Project, Review, User
from app.infrastructure.models import ReviewModel
from app.utils import ensure_app_timezone

from .project_repository import ProjectRepository
from .user_repository import UserRepository


class ReviewRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, review_id: str | None) -> Review | None:
        if not review_id:
            return None
        model = self.session.get(ReviewModel, review_id)
        return self._to_entity(model) if model else None

    def get_with_context(
        self, review_id: str | None
    ) -> tuple[Review, Project, User] | None:
        """Return the review together with its project and reviewer."""

        if not review_id:
            return None
        model = self.session.get(ReviewModel, review_id)
        if model is None or model.project is None or model.reviewer is None:
            return None
        return (
            self._to_entity(model),
            ProjectRepository._to_entity(model.project),
            UserRepository._to_entity(model.reviewer),
        )

    @staticmethod
    def _to_entity(model: ReviewModel) -> Review:
        return Review(
            id=model.id,
            project_id=model.project_id,
            reviewer_id=model.reviewer_id,
            rating=model.rating,
            status=model.status,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["ReviewRepository"]
