"""Settings API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request

from src.api.dependencies.chest import get_settings_service
from src.api.errors import problem
from src.api.models.common import ProblemDetailResponse
from src.api.models.settings import (
    SettingsEditabilityResponse,
    SettingsResponse,
    UpdateSettingsRequest,
)
from src.application.services.settings_service import SettingsService
from src.domain.exceptions import ChestAppError

router = APIRouter(prefix="/v1/settings", tags=["settings"])

_ERRORS = {
    404: {"model": ProblemDetailResponse, "description": "Unknown identity"},
    409: {"model": ProblemDetailResponse, "description": "Duration locked by a chest"},
    422: {"model": ProblemDetailResponse, "description": "Validation failed"},
}


@router.get("/{owner_id}", response_model=SettingsResponse, responses=_ERRORS)
async def get_settings(
    owner_id: UUID,
    request: Request,
    service: SettingsService = Depends(get_settings_service),
) -> SettingsResponse:
    try:
        settings = await service.get(owner_id)
    except ChestAppError as e:
        raise problem(e, request) from None
    return SettingsResponse.from_domain(settings)


@router.put("/{owner_id}", response_model=SettingsResponse, responses=_ERRORS)
async def update_settings(
    owner_id: UUID,
    request_data: UpdateSettingsRequest,
    request: Request,
    service: SettingsService = Depends(get_settings_service),
) -> SettingsResponse:
    try:
        settings = await service.update(
            owner_id,
            chest_duration_days=request_data.chest_duration_days,
            notifications_enabled=request_data.notifications_enabled,
            sound_enabled=request_data.sound_enabled,
            theme=request_data.theme,
        )
    except ChestAppError as e:
        raise problem(e, request) from None
    return SettingsResponse.from_domain(settings)


@router.get(
    "/{owner_id}/editable",
    response_model=SettingsEditabilityResponse,
    responses=_ERRORS,
    summary="Whether the chest duration may be changed right now",
)
async def get_settings_editability(
    owner_id: UUID,
    request: Request,
    service: SettingsService = Depends(get_settings_service),
) -> SettingsEditabilityResponse:
    try:
        result = await service.can_edit(owner_id)
    except ChestAppError as e:
        raise problem(e, request) from None
    return SettingsEditabilityResponse(
        owner_id=owner_id,
        can_edit=result.can_edit,
        reason=result.reason,
        chest_id=result.chest_id,
    )
