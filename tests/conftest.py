"""Shared fixtures: a throwaway SQLite database and fresh realtime components."""

from __future__ import annotations

import importlib
import os
import sys
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

TEST_DB_PATH = Path(tempfile.gettempdir()) / "devflow_notifications_test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ["ENVIRONMENT"] = "test"
os.environ.pop("SENDGRID_API_KEY", None)
os.environ.pop("SENDGRID_SENDER", None)

import pytest  # noqa: E402

from app.config import get_settings  # noqa: E402

get_settings.cache_clear()

from app.domain.entities import Project, Review, User  # noqa: E402
from app.infrastructure.database import (  # noqa: E402
    Base,
    SessionLocal,
    engine,
    initialize_database,
)
from app.infrastructure.models import ProjectModel, ReviewModel  # noqa: E402
from app.infrastructure.notifications import (  # noqa: E402
    NotificationPublisher,
    PresenceRegistry,
    RealtimeGateway,
)
from app.infrastructure.repositories import (  # noqa: E402
    ProjectRepository,
    ReviewRepository,
    UserRepository,
)
from app.infrastructure.security import create_access_token  # noqa: E402

create_notification_module = importlib.import_module(
    "app.application.use_cases.notifications.create_notification"
)


@pytest.fixture(autouse=True)
def reset_database():
    """Ensure the test database starts from a clean state for each test."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def session():
    with SessionLocal() as db:
        yield db


@pytest.fixture()
def make_user(session):
    def _make(
        username: str,
        *,
        email: str | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> User:
        return UserRepository(session).create(
            User(
                id=None,
                username=username,
                email=email,
                first_name=first_name,
                last_name=last_name,
            )
        )

    return _make


@pytest.fixture()
def make_project(session):
    def _make(author: User, title: str = "Pathfinder", *, likes: int = 0) -> Project:
        model = ProjectModel(author_id=author.id, title=title, likes=likes)
        session.add(model)
        session.commit()
        return ProjectRepository(session).get(model.id)

    return _make


@pytest.fixture()
def make_review(session):
    def _make(project: Project, reviewer: User, rating: int = 4) -> Review:
        model = ReviewModel(project_id=project.id, reviewer_id=reviewer.id, rating=rating)
        session.add(model)
        session.commit()
        return ReviewRepository(session).get(model.id)

    return _make


@pytest.fixture()
def sent_emails(monkeypatch):
    """Capture notification emails instead of calling SendGrid."""

    sent: list[tuple[str, str, str]] = []

    def _fake_send(email: str, title: str, message: str) -> bool:
        sent.append((email, title, message))
        return True

    monkeypatch.setattr(create_notification_module, "send_notification_email", _fake_send)
    return sent


@pytest.fixture()
def gateway() -> RealtimeGateway:
    return RealtimeGateway(PresenceRegistry(), session_factory=SessionLocal)


@pytest.fixture()
def publisher(gateway) -> NotificationPublisher:
    return NotificationPublisher(gateway)


@pytest.fixture()
def auth_headers():
    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers


@pytest.fixture()
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def ticking_clock(monkeypatch):
    """Give each created notification a distinct, increasing ``created_at``."""

    state = {"now": datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)}

    def _now() -> datetime:
        state["now"] += timedelta(minutes=1)
        return state["now"]

    monkeypatch.setattr(create_notification_module, "now_utc", _now)
    return state
