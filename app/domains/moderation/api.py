# app/domains/moderation/api.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from app.core.errors import NotFoundError
from app.domains.auth.dependencies import is_admin, require_moderator
from app.domains.moderation.entities import ContentType, ModerationStatus
from app.domains.moderation.schemas import (AddLocationRequest,
                                            ModerationItemResponse,
                                            ModerationQueueResponse,
                                            QueueStatsResponse, RejectRequest,
                                            UpdateContentRequest)
from app.domains.moderation.service import moderation_workflow

router = APIRouter()


@router.get("/queue", response_model=ModerationQueueResponse)
async def list_queue(
    status: ModerationStatus = ModerationStatus.PENDING,
    content_type: Optional[ContentType] = None,
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    user=Depends(require_moderator),
):
    """Items in the queue filtered by status and, optionally, content type"""
    result = await moderation_workflow.get_queue(status, content_type, page, size)
    return ModerationQueueResponse(
        content=[ModerationItemResponse.model_validate(i) for i in result.items],
        page=result.page,
        size=result.size,
        total_elements=result.total,
        total_pages=result.total_pages,
    )


@router.get("/queue/stats", response_model=QueueStatsResponse)
async def queue_stats(user=Depends(require_moderator)):
    stats = await moderation_workflow.get_queue_stats()
    return QueueStatsResponse.model_validate(stats)


@router.get("/queue/by-content/{content_id}", response_model=ModerationItemResponse)
async def get_item_by_content(
    content_id: str,
    status: ModerationStatus = ModerationStatus.PENDING,
    user=Depends(require_moderator),
):
    item = await moderation_workflow.find_by_content_id(content_id, status)
    if item is None:
        raise NotFoundError(f"No {status.value} moderation item for content {content_id}")
    return ModerationItemResponse.model_validate(item)


@router.get("/queue/{item_id}", response_model=ModerationItemResponse)
async def get_item(item_id: str, user=Depends(require_moderator)):
    item = await moderation_workflow.get_item(item_id)
    return ModerationItemResponse.model_validate(item)


@router.post("/queue/{item_id}/approve", response_model=ModerationItemResponse)
async def approve_item(item_id: str, user=Depends(require_moderator)):
    item = await moderation_workflow.approve(item_id, user["id"])
    return ModerationItemResponse.model_validate(item)


@router.post("/queue/{item_id}/reject", response_model=ModerationItemResponse)
async def reject_item(item_id: str, request: RejectRequest, user=Depends(require_moderator)):
    item = await moderation_workflow.reject(item_id, user["id"], request.reason)
    return ModerationItemResponse.model_validate(item)


@router.put("/queue/{item_id}/content", response_model=ModerationItemResponse)
async def update_content(
    item_id: str, request: UpdateContentRequest, user=Depends(require_moderator)
):
    """Edit the submitted content's metadata; non-admins only while the item is PENDING"""
    item = await moderation_workflow.update_content_metadata(
        item_id, request.to_content_fields(), actor_is_admin=is_admin(user)
    )
    return ModerationItemResponse.model_validate(item)


@router.post("/queue/{item_id}/locations", response_model=ModerationItemResponse)
async def add_location(
    item_id: str, request: AddLocationRequest, user=Depends(require_moderator)
):
    item = await moderation_workflow.add_content_location(
        item_id, request.location_id, request.is_primary, actor_is_admin=is_admin(user)
    )
    return ModerationItemResponse.model_validate(item)


@router.delete("/queue/{item_id}/locations/{location_id}", status_code=204)
async def remove_location(item_id: str, location_id: str, user=Depends(require_moderator)):
    await moderation_workflow.remove_content_location(
        item_id, location_id, actor_is_admin=is_admin(user)
    )
    return Response(status_code=204)
