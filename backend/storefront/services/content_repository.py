"""CRUD over content records (products and services).

One repository class serves both kinds; a ``ContentKind`` names the table
model and the label used in messages. Store failures are logged and
re-raised as ``StorageError`` so callers never see driver details.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from storefront.errors import StorageError, ValidationError
from storefront.models.content import ContentBase, Product, Service

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "description", "image_url")
UPDATABLE_FIELDS = ("title", "description", "image_url")
# Fields that may be supplied on update but never empty
NON_EMPTY_ON_UPDATE = ("title", "description")


@dataclass(frozen=True)
class ContentKind:
    name: str  # URL segment, e.g. "products"
    label: str  # Human label, e.g. "Product"
    model: Type[ContentBase]


PRODUCTS = ContentKind(name="products", label="Product", model=Product)
SERVICES = ContentKind(name="services", label="Service", model=Service)

CONTENT_KINDS = {kind.name: kind for kind in (PRODUCTS, SERVICES)}


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class ContentRepository:
    def __init__(self, session: Session, kind: ContentKind):
        self.session = session
        self.kind = kind

    @property
    def model(self):
        return self.kind.model

    def list(self) -> List[ContentBase]:
        """All records, newest first. Empty list when there are none."""
        try:
            statement = select(self.model).order_by(self.model.created_at.desc())
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise self._storage_error("fetch", e) from e

    def get_by_id(self, item_id: str) -> Optional[ContentBase]:
        try:
            return self.session.get(self.model, item_id)
        except SQLAlchemyError as e:
            raise self._storage_error("fetch", e) from e

    def create(self, fields: Dict[str, Any]) -> ContentBase:
        """
        Insert a new record. ``id`` and ``created_at`` are assigned here.

        Raises:
          - ValidationError if title, description or image_url is missing/empty
          - StorageError if the insert fails
        """
        missing = [name for name in REQUIRED_FIELDS if _is_blank(fields.get(name))]
        if missing:
            raise ValidationError("Missing required fields", fields=missing)

        item = self.model(**{name: fields[name] for name in REQUIRED_FIELDS})
        try:
            self.session.add(item)
            self.session.commit()
            self.session.refresh(item)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise self._storage_error("create", e) from e

        logger.info(f"Created {self.kind.label.lower()} {item.id}")
        return item

    def update(self, item_id: str, fields: Dict[str, Any]) -> Optional[ContentBase]:
        """
        Merge the supplied fields into an existing record.

        Fields not supplied are left unchanged; an empty ``fields`` dict
        returns the record as stored. Returns None if ``item_id`` is unknown.
        """
        item = self.get_by_id(item_id)
        if item is None:
            return None

        unknown = sorted(set(fields) - set(UPDATABLE_FIELDS))
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(unknown)}", fields=unknown)

        empty = [name for name in NON_EMPTY_ON_UPDATE if name in fields and _is_blank(fields[name])]
        if "image_url" in fields and fields["image_url"] is None:
            empty.append("image_url")
        if empty:
            raise ValidationError(f"Fields must not be empty: {', '.join(empty)}", fields=empty)

        if not fields:
            self.session.refresh(item)
            return item

        for name, value in fields.items():
            setattr(item, name, value)
        item.updated_at = datetime.now(timezone.utc)

        try:
            self.session.add(item)
            self.session.commit()
            self.session.refresh(item)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise self._storage_error("update", e) from e

        logger.info(f"Updated {self.kind.label.lower()} {item_id} ({', '.join(sorted(fields))})")
        return item

    def delete(self, item_id: str) -> bool:
        """
        Remove a record. Returns False if it did not exist.

        The record's image stays in the object store; callers delete it
        separately if they want it gone.
        """
        item = self.get_by_id(item_id)
        if item is None:
            return False

        try:
            self.session.delete(item)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise self._storage_error("delete", e) from e

        logger.info(f"Deleted {self.kind.label.lower()} {item_id}")
        return True

    def _storage_error(self, action: str, exc: SQLAlchemyError) -> StorageError:
        logger.error(f"Failed to {action} {self.kind.label.lower()}: {exc}")
        return StorageError(f"Failed to {action} {self.kind.label.lower()}")
