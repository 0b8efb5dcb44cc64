from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TCH003

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status

from tagwise.api.v1.schemas.pagination import PageRead
from tagwise.api.v1.schemas.tag import TagCreate, TagRead, TagUpdate
from tagwise.background import learn_tag_semantics
from tagwise.core.schemas.pagination import PaginationDirection
from tagwise.dependencies import (
    get_current_user,
    get_suggestion_service,
    get_tag_service,
)

if TYPE_CHECKING:
    from tagwise.core.schemas.auth import AuthUser
    from tagwise.core.services.suggestion_service import SuggestionService
    from tagwise.core.services.tag_service import TagService, TagWriteResult

router = APIRouter()


def _schedule_learning(
    background_tasks: BackgroundTasks,
    result: TagWriteResult,
    suggestions: SuggestionService,
) -> None:
    if result.semantic_to_learn:
        background_tasks.add_task(
            learn_tag_semantics,
            suggestions=suggestions,
            semantics=[result.semantic_to_learn],
        )


@router.post("/", response_model=TagRead, status_code=status.HTTP_201_CREATED)
async def create_tag(
    payload: TagCreate,
    background_tasks: BackgroundTasks,
    current_user: AuthUser = Depends(get_current_user),
    service: TagService = Depends(get_tag_service),
    suggestions: SuggestionService = Depends(get_suggestion_service),
):
    """Create a tag; creating an existing name again revives and overwrites it."""
    result = await service.create_tag(payload.name, payload.semantic, user_id=current_user.id)
    _schedule_learning(background_tasks, result, suggestions)
    return TagRead.model_validate(result.tag)


@router.get("/", response_model=PageRead[TagRead])
async def list_tags(
    chunk_id: UUID | None = None,
    limit: int = Query(default=20, ge=1),
    offset: int = Query(default=0, ge=0),
    direction: PaginationDirection = PaginationDirection.NEXT,
    current_user: AuthUser = Depends(get_current_user),
    service: TagService = Depends(get_tag_service),
):
    page = await service.list_tags(
        current_user.id,
        chunk_id=chunk_id,
        limit=limit,
        offset=offset,
        direction=direction,
    )
    return PageRead[TagRead].model_validate(page)


@router.get("/lookup", response_model=list[TagRead])
async def get_tags_by_ids(
    ids: list[UUID] = Query(min_length=1, max_length=100),
    current_user: AuthUser = Depends(get_current_user),
    service: TagService = Depends(get_tag_service),
):
    tags = await service.get_tags_by_ids(ids, user_id=current_user.id)
    return [TagRead.model_validate(t) for t in tags]


@router.get("/{tag_id}", response_model=TagRead)
async def get_tag(
    tag_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: TagService = Depends(get_tag_service),
):
    tag = await service.get_tag(tag_id, user_id=current_user.id)
    if not tag:
        raise HTTPException(status_code=404, detail="Tag not found")
    return TagRead.model_validate(tag)


@router.patch("/{tag_id}", response_model=TagRead)
async def update_tag(
    tag_id: UUID,
    payload: TagUpdate,
    background_tasks: BackgroundTasks,
    current_user: AuthUser = Depends(get_current_user),
    service: TagService = Depends(get_tag_service),
    suggestions: SuggestionService = Depends(get_suggestion_service),
):
    result = await service.update_tag(
        tag_id,
        current_user.id,
        name=payload.name,
        semantic=payload.semantic,
    )
    if not result:
        raise HTTPException(status_code=404, detail="Tag not found")
    _schedule_learning(background_tasks, result, suggestions)
    return TagRead.model_validate(result.tag)


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag(
    tag_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: TagService = Depends(get_tag_service),
):
    deleted = await service.delete_tag(tag_id, user_id=current_user.id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Tag not found")
    return None
