"""Products and services API.

The same routes are mounted once per content kind:

    GET    /api/{kind}          public
    GET    /api/{kind}/{id}     public
    POST   /api/{kind}          admin
    PUT    /api/{kind}/{id}     admin, partial update
    DELETE /api/{kind}/{id}     admin

Clients send and receive ``image``; records store it as ``image_url``.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from sqlmodel import Session

from storefront.database import get_session
from storefront.dependencies import require_admin
from storefront.errors import ContentNotFound, ValidationError
from storefront.models.content import ContentBase
from storefront.services.content_repository import CONTENT_KINDS, ContentKind, ContentRepository
from storefront.services.token_service import TokenClaims

logger = logging.getLogger(__name__)


class ContentPayload(BaseModel):
    """Create/update body. Unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None

    def to_fields(self) -> Dict[str, Any]:
        """Supplied fields only, renamed to the record's column names."""
        fields = self.model_dump(exclude_unset=True)
        if "image" in fields:
            fields["image_url"] = fields.pop("image")
        return fields


class ContentResponse(BaseModel):
    id: str
    title: str
    description: str
    image: str


class DeleteResponse(BaseModel):
    success: bool


def to_response(item: ContentBase) -> ContentResponse:
    return ContentResponse(id=item.id, title=item.title, description=item.description, image=item.image_url)


def build_content_router(kind: ContentKind) -> APIRouter:
    router = APIRouter()
    not_found = f"{kind.label} not found"

    def get_repository(session: Session = Depends(get_session)) -> ContentRepository:
        return ContentRepository(session, kind)

    @router.get(f"/{kind.name}", response_model=List[ContentResponse], name=f"list_{kind.name}")
    def list_items(repo: ContentRepository = Depends(get_repository)):
        return [to_response(item) for item in repo.list()]

    @router.get(f"/{kind.name}/{{item_id}}", response_model=ContentResponse, name=f"get_{kind.name}")
    def get_item(item_id: str, repo: ContentRepository = Depends(get_repository)):
        item = repo.get_by_id(item_id)
        if item is None:
            raise ContentNotFound(not_found)
        return to_response(item)

    @router.post(f"/{kind.name}", response_model=ContentResponse, status_code=201, name=f"create_{kind.name}")
    def create_item(
        payload: ContentPayload,
        admin: TokenClaims = Depends(require_admin),
        repo: ContentRepository = Depends(get_repository),
    ):
        item = repo.create(payload.to_fields())
        logger.info(f"{admin.username} created {kind.label.lower()} {item.id}")
        return to_response(item)

    @router.put(f"/{kind.name}/{{item_id}}", response_model=ContentResponse, name=f"update_{kind.name}")
    def update_item(
        item_id: str,
        payload: ContentPayload,
        admin: TokenClaims = Depends(require_admin),
        repo: ContentRepository = Depends(get_repository),
    ):
        if repo.get_by_id(item_id) is None:
            raise ContentNotFound(not_found)

        fields = payload.to_fields()
        if not fields:
            raise ValidationError("No valid fields to update")

        item = repo.update(item_id, fields)
        if item is None:
            raise ContentNotFound(not_found)
        logger.info(f"{admin.username} updated {kind.label.lower()} {item_id}")
        return to_response(item)

    @router.delete(f"/{kind.name}/{{item_id}}", response_model=DeleteResponse, name=f"delete_{kind.name}")
    def delete_item(
        item_id: str,
        admin: TokenClaims = Depends(require_admin),
        repo: ContentRepository = Depends(get_repository),
    ):
        if not repo.delete(item_id):
            raise ContentNotFound(not_found)
        logger.info(f"{admin.username} deleted {kind.label.lower()} {item_id}")
        return DeleteResponse(success=True)

    return router


routers = {name: build_content_router(kind) for name, kind in CONTENT_KINDS.items()}
