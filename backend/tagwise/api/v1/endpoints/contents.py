from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TCH003

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status

from tagwise.api.v1.schemas.content import ContentRead, ContentUpdate, TextContentCreate, YoutubeContentCreate
from tagwise.api.v1.schemas.content_tag import ContentTagRead, ContentTagsChanged, ContentTagsRequest
from tagwise.api.v1.schemas.pagination import PageRead
from tagwise.background import regenerate_content_suggestions
from tagwise.core.schemas.pagination import PaginationDirection
from tagwise.core.schemas.suggestion import SuggestionResult
from tagwise.dependencies import (
    get_app_settings,
    get_content_service,
    get_content_tag_service,
    get_current_user,
    get_suggestion_service,
)

if TYPE_CHECKING:
    from tagwise.config import Settings
    from tagwise.core.models.content import Content
    from tagwise.core.schemas.auth import AuthUser
    from tagwise.core.services.content_service import ContentService
    from tagwise.core.services.content_tag_service import ContentTagService
    from tagwise.core.services.suggestion_service import SuggestionService

router = APIRouter()


def _schedule_suggestions(
    background_tasks: BackgroundTasks,
    content: Content,
    suggestions: SuggestionService,
    settings: Settings,
) -> None:
    background_tasks.add_task(
        regenerate_content_suggestions,
        suggestions=suggestions,
        content_id=content.id,
        user_id=content.user_id,
        body=content.body,
        suggestions_count=settings.suggestions_count,
    )


@router.post("/", response_model=ContentRead, status_code=status.HTTP_201_CREATED)
async def create_text_content(
    payload: TextContentCreate,
    background_tasks: BackgroundTasks,
    current_user: AuthUser = Depends(get_current_user),
    service: ContentService = Depends(get_content_service),
    suggestions: SuggestionService = Depends(get_suggestion_service),
    settings: Settings = Depends(get_app_settings),
):
    content = await service.create_text_content(
        title=payload.title,
        body=payload.content,
        content_type=payload.content_type,
        user_id=current_user.id,
    )
    _schedule_suggestions(background_tasks, content, suggestions, settings)
    return ContentRead.model_validate(content)


@router.post("/youtube", response_model=ContentRead, status_code=status.HTTP_201_CREATED)
async def create_youtube_content(
    payload: YoutubeContentCreate,
    background_tasks: BackgroundTasks,
    current_user: AuthUser = Depends(get_current_user),
    service: ContentService = Depends(get_content_service),
    suggestions: SuggestionService = Depends(get_suggestion_service),
    settings: Settings = Depends(get_app_settings),
):
    content = await service.create_youtube_content(
        url=payload.url,
        user_id=current_user.id,
        title=payload.title,
        description=payload.description,
        transcript=payload.transcript,
    )
    _schedule_suggestions(background_tasks, content, suggestions, settings)
    return ContentRead.model_validate(content)


@router.get("/", response_model=PageRead[ContentRead])
async def list_contents(
    chunk_id: UUID | None = None,
    limit: int = Query(default=20, ge=1),
    offset: int = Query(default=0, ge=0),
    direction: PaginationDirection = PaginationDirection.NEXT,
    current_user: AuthUser = Depends(get_current_user),
    service: ContentService = Depends(get_content_service),
):
    page = await service.list_contents(
        current_user.id,
        chunk_id=chunk_id,
        limit=limit,
        offset=offset,
        direction=direction,
    )
    return PageRead[ContentRead].model_validate(page)


@router.get("/by-tags", response_model=PageRead[ContentRead])
async def list_contents_by_tags(
    tag_ids: list[UUID] = Query(min_length=1, max_length=100),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    current_user: AuthUser = Depends(get_current_user),
    service: ContentService = Depends(get_content_service),
):
    """List content carrying every one of the given tags, newest first."""
    page = await service.list_contents_by_tags(current_user.id, tag_ids, limit=limit, offset=offset)
    return PageRead[ContentRead].model_validate(page)


@router.get("/{content_id}", response_model=ContentRead)
async def get_content(
    content_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: ContentService = Depends(get_content_service),
):
    content = await service.get_content(content_id, user_id=current_user.id)
    if not content:
        raise HTTPException(status_code=404, detail="Content not found")
    return ContentRead.model_validate(content)


@router.patch("/{content_id}", response_model=ContentRead)
async def update_content(
    content_id: UUID,
    payload: ContentUpdate,
    background_tasks: BackgroundTasks,
    current_user: AuthUser = Depends(get_current_user),
    service: ContentService = Depends(get_content_service),
    suggestions: SuggestionService = Depends(get_suggestion_service),
    settings: Settings = Depends(get_app_settings),
):
    result = await service.update_content(
        content_id,
        current_user.id,
        title=payload.title,
        body=payload.content,
        content_type=payload.content_type,
    )
    if not result:
        raise HTTPException(status_code=404, detail="Content not found")
    if result.body_changed:
        _schedule_suggestions(background_tasks, result.content, suggestions, settings)
    return ContentRead.model_validate(result.content)


@router.delete("/{content_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_content(
    content_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: ContentService = Depends(get_content_service),
):
    deleted = await service.delete_content(content_id, user_id=current_user.id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Content not found")
    return None


@router.get("/{content_id}/tags", response_model=PageRead[ContentTagRead])
async def list_tags_of_content(
    content_id: UUID,
    chunk_id: UUID | None = None,
    limit: int = Query(default=20, ge=1),
    offset: int = Query(default=0, ge=0),
    direction: PaginationDirection = PaginationDirection.NEXT,
    current_user: AuthUser = Depends(get_current_user),
    service: ContentTagService = Depends(get_content_tag_service),
):
    page = await service.list_tags_of_content(
        content_id,
        current_user.id,
        chunk_id=chunk_id,
        limit=limit,
        offset=offset,
        direction=direction,
    )
    return PageRead[ContentTagRead].model_validate(page)


@router.get("/{content_id}/tags/{tag_id}", response_model=ContentTagRead)
async def get_tag_of_content(
    content_id: UUID,
    tag_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: ContentTagService = Depends(get_content_tag_service),
):
    link = await service.get_tag_of_content(content_id, tag_id, current_user.id)
    if not link:
        raise HTTPException(status_code=404, detail="Tag is not linked to this content")
    return ContentTagRead.model_validate(link)


@router.post("/{content_id}/tags", response_model=ContentTagsChanged)
async def add_tags_to_content(
    content_id: UUID,
    payload: ContentTagsRequest,
    current_user: AuthUser = Depends(get_current_user),
    service: ContentTagService = Depends(get_content_tag_service),
):
    added = await service.add_tags_to_content(content_id, payload.tag_ids, current_user.id)
    if added is None:
        raise HTTPException(status_code=404, detail="Content not found")
    return ContentTagsChanged(content_id=content_id, count=added)


@router.post("/{content_id}/tags/remove", response_model=ContentTagsChanged)
async def remove_tags_from_content(
    content_id: UUID,
    payload: ContentTagsRequest,
    current_user: AuthUser = Depends(get_current_user),
    service: ContentTagService = Depends(get_content_tag_service),
):
    removed = await service.remove_tags_from_content(content_id, payload.tag_ids, current_user.id)
    return ContentTagsChanged(content_id=content_id, count=removed)


@router.get("/{content_id}/suggestions", response_model=SuggestionResult)
async def get_content_suggestions(
    content_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    suggestions: SuggestionService = Depends(get_suggestion_service),
):
    """Return cached suggestions; 404 means they have not been computed yet."""
    result = await suggestions.get_suggestions_for_content(content_id, current_user.id)
    if result is None:
        raise HTTPException(status_code=404, detail="Suggestions not computed yet")
    return result


@router.post("/{content_id}/suggestions", response_model=SuggestionResult)
async def refresh_content_suggestions(
    content_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: ContentService = Depends(get_content_service),
    suggestions: SuggestionService = Depends(get_suggestion_service),
    settings: Settings = Depends(get_app_settings),
):
    """Recompute suggestions for a stored item now and cache them."""
    content = await service.get_content(content_id, user_id=current_user.id)
    if not content:
        raise HTTPException(status_code=404, detail="Content not found")
    return await suggestions.create_suggestions_for_content(
        content=content.body,
        user_id=current_user.id,
        suggestions_count=settings.suggestions_count,
        content_id=content.id,
    )
