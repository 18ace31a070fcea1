"""Tests for the generic content repository."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import Session, select

from storefront.errors import StorageError, ValidationError
from storefront.models.content import Product, Service
from storefront.services.content_repository import (
    PRODUCTS,
    SERVICES,
    ContentRepository,
)

FIELDS = {"title": "Oat Tote", "description": "Hand-sewn canvas tote", "image_url": "/images/tote.jpg"}


@pytest.fixture
def products(session: Session):
    return ContentRepository(session, PRODUCTS)


@pytest.fixture
def services(session: Session):
    return ContentRepository(session, SERVICES)


def _fail_commit(*args, **kwargs):
    raise OperationalError("INSERT INTO products ...", {}, Exception("connection refused on 10.0.0.5"))


def test_create_then_get_round_trip(products):
    created = products.create(FIELDS)

    fetched = products.get_by_id(created.id)

    assert fetched is not None
    assert fetched.id == created.id
    assert fetched.title == FIELDS["title"]
    assert fetched.description == FIELDS["description"]
    assert fetched.image_url == FIELDS["image_url"]
    assert fetched.created_at is not None


def test_create_assigns_unique_ids(products):
    ids = {products.create(FIELDS).id for _ in range(5)}

    assert len(ids) == 5
    assert all(isinstance(item_id, str) and item_id for item_id in ids)


@pytest.mark.parametrize("missing", ["title", "description", "image_url"])
def test_create_rejects_missing_field(products, session, missing):
    fields = {k: v for k, v in FIELDS.items() if k != missing}

    with pytest.raises(ValidationError) as exc_info:
        products.create(fields)

    assert exc_info.value.fields == [missing]
    assert session.exec(select(Product)).all() == []


@pytest.mark.parametrize("blank", ["", "   ", None])
def test_create_rejects_blank_title(products, session, blank):
    with pytest.raises(ValidationError, match="Missing required fields"):
        products.create({**FIELDS, "title": blank})

    assert session.exec(select(Product)).all() == []


def test_list_is_empty_when_no_records(products):
    assert products.list() == []


def test_list_orders_newest_first(products, session):
    first = products.create({**FIELDS, "title": "First"})
    second = products.create({**FIELDS, "title": "Second"})
    third = products.create({**FIELDS, "title": "Third"})

    base = datetime(2026, 1, 1, 12, 0, 0)
    for offset, item in enumerate([first, second, third]):
        item.created_at = base + timedelta(minutes=offset)
        session.add(item)
    session.commit()

    assert [item.title for item in products.list()] == ["Third", "Second", "First"]


def test_products_and_services_are_separate(products, services):
    product = products.create(FIELDS)
    service = services.create({**FIELDS, "title": "Custom Alterations"})

    assert [p.id for p in products.list()] == [product.id]
    assert [s.id for s in services.list()] == [service.id]
    assert services.get_by_id(product.id) is None
    assert isinstance(services.get_by_id(service.id), Service)


def test_get_unknown_id_returns_none(products):
    assert products.get_by_id("does-not-exist") is None


def test_partial_update_preserves_untouched_fields(products):
    created = products.create(FIELDS)

    updated = products.update(created.id, {"title": "X"})

    assert updated.title == "X"
    assert updated.description == FIELDS["description"]
    assert updated.image_url == FIELDS["image_url"]
    assert updated.id == created.id


def test_update_keeps_created_at_and_bumps_updated_at(products, session):
    created = products.create(FIELDS)
    created.updated_at = datetime(2020, 1, 1)
    session.add(created)
    session.commit()
    created_at = products.get_by_id(created.id).created_at

    updated = products.update(created.id, {"description": "New description"})

    assert updated.created_at == created_at
    assert updated.updated_at > datetime(2020, 1, 1)


@pytest.mark.parametrize("fields", [{"title": "X"}, {"title": ""}, {"created_at": "changed"}])
def test_update_unknown_id_returns_none(products, fields):
    assert products.update("does-not-exist", fields) is None


def test_empty_update_returns_unchanged_record(products):
    created = products.create(FIELDS)

    same = products.update(created.id, {})

    assert same.id == created.id
    assert same.title == FIELDS["title"]
    assert same.description == FIELDS["description"]


@pytest.mark.parametrize("field", ["title", "description"])
def test_update_rejects_empty_required_field(products, field):
    created = products.create(FIELDS)

    with pytest.raises(ValidationError):
        products.update(created.id, {field: ""})

    assert getattr(products.get_by_id(created.id), field) == FIELDS[field]


@pytest.mark.parametrize("field", ["id", "created_at", "price"])
def test_update_rejects_immutable_or_unknown_fields(products, field):
    created = products.create(FIELDS)

    with pytest.raises(ValidationError, match=field):
        products.update(created.id, {field: "changed"})

    assert products.get_by_id(created.id) is not None


def test_delete_twice_returns_true_then_false(products):
    created = products.create(FIELDS)

    assert products.delete(created.id) is True
    assert products.delete(created.id) is False
    assert products.get_by_id(created.id) is None


def test_delete_unknown_id_returns_false(services):
    assert services.delete("does-not-exist") is False


def test_store_failure_on_create_raises_generic_storage_error(products, session, monkeypatch):
    monkeypatch.setattr(session, "commit", _fail_commit)

    with pytest.raises(StorageError) as exc_info:
        products.create(FIELDS)

    assert exc_info.value.message == "Failed to create product"
    assert "10.0.0.5" not in str(exc_info.value)


def test_store_failure_on_delete_raises_storage_error(services, session, monkeypatch):
    created = services.create(FIELDS)
    monkeypatch.setattr(session, "commit", _fail_commit)

    with pytest.raises(StorageError, match="Failed to delete service"):
        services.delete(created.id)
