"""Pydantic models for the service health endpoint."""

from pydantic import BaseModel


class HealthRead(BaseModel):
    status: str
    online_users: int


__all__ = ["HealthRead"]
