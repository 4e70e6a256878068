"""SQLAlchemy model for the users table."""

from uuid import uuid4

from sqlalchemy import Column, DateTime, String, func

from app.infrastructure.database import Base


class UserModel(Base):
    """Database representation of a DevFlow user."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    username = Column(String(50), nullable=False, unique=True, index=True)
    email = Column(String(120), nullable=True, unique=True, index=True)
    first_name = Column(String(80), nullable=True)
    last_name = Column(String(80), nullable=True)
    avatar = Column(String(255), nullable=True)
    last_active = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())


__all__ = ["UserModel"]
