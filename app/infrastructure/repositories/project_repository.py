"""Persistence helpers for project entities."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.domain.entities import Project
from app.infrastructure.models import ProjectModel
from app.utils import ensure_app_timezone


class ProjectRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, project_id: str | None) -> Project | None:
        if not project_id:
            return None
        model = self.session.get(ProjectModel, project_id)
        return self._to_entity(model) if model else None

    @staticmethod
    def _to_entity(model: ProjectModel) -> Project:
        return Project(
            id=model.id,
            author_id=model.author_id,
            title=model.title,
            likes=model.likes or 0,
            views=model.views or 0,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["ProjectRepository"]
