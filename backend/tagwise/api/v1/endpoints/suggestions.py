from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends

from tagwise.api.v1.schemas.suggestion import SuggestionRequest
from tagwise.core.schemas.suggestion import SuggestionResult
from tagwise.dependencies import get_app_settings, get_current_user, get_suggestion_service

if TYPE_CHECKING:
    from tagwise.config import Settings
    from tagwise.core.schemas.auth import AuthUser
    from tagwise.core.services.suggestion_service import SuggestionService

router = APIRouter()


@router.post("/", response_model=SuggestionResult)
async def suggest_tags(
    payload: SuggestionRequest,
    current_user: AuthUser = Depends(get_current_user),
    suggestions: SuggestionService = Depends(get_suggestion_service),
    settings: Settings = Depends(get_app_settings),
):
    """Suggest tags for unsaved text. Nothing is cached."""
    count = payload.suggestions_count if payload.suggestions_count is not None else settings.suggestions_count
    return await suggestions.create_suggestions_for_content(
        content=payload.content,
        user_id=current_user.id,
        suggestions_count=count,
    )
