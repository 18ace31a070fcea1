"""Content records shown on the public site: products and services.

Both kinds share one shape and live in separate tables.
"""

import uuid
from datetime import datetime, timezone

from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


class ContentBase(SQLModel):
    title: str
    description: str
    image_url: str


class Product(ContentBase, table=True):
    __tablename__ = "products"

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=32)
    created_at: datetime = Field(default_factory=_utcnow, index=True)
    updated_at: datetime = Field(default_factory=_utcnow)


class Service(ContentBase, table=True):
    __tablename__ = "services"

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=32)
    created_at: datetime = Field(default_factory=_utcnow, index=True)
    updated_at: datetime = Field(default_factory=_utcnow)
