"""Chest API routes: creation, lookup and the status lifecycle."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from src.api.dependencies.chest import get_chest_lifecycle_service
from src.api.errors import problem
from src.api.models.chest import (
    ActiveChestResponse,
    ChestActionRequest,
    ChestResponse,
    ChestStatsResponse,
    CreateChestRequest,
    SetChestStatusRequest,
    UnlockStatusResponse,
)
from src.api.models.common import ProblemDetailResponse
from src.application.services.chest_lifecycle_service import ChestLifecycleService
from src.domain.exceptions import ChestAppError

router = APIRouter(prefix="/v1/chests", tags=["chests"])

_ERRORS = {
    403: {"model": ProblemDetailResponse, "description": "Not an owner"},
    404: {"model": ProblemDetailResponse, "description": "Unknown chest"},
    409: {"model": ProblemDetailResponse, "description": "Conflict or wrong status"},
    422: {"model": ProblemDetailResponse, "description": "Validation failed"},
}


@router.post(
    "",
    response_model=ChestResponse,
    status_code=201,
    responses=_ERRORS,
    summary="Start a chest for a paired couple",
)
async def create_chest(
    request_data: CreateChestRequest,
    request: Request,
    service: ChestLifecycleService = Depends(get_chest_lifecycle_service),
) -> ChestResponse:
    try:
        chest = await service.create(
            request_data.owner_a, request_data.owner_b, request_data.duration_days
        )
    except ChestAppError as e:
        raise problem(e, request) from None
    return ChestResponse.from_domain(chest)


@router.get(
    "/active",
    response_model=ActiveChestResponse,
    summary="The pair's live chest, if any",
)
async def get_active_chest(
    owner_a: UUID = Query(...),
    owner_b: UUID = Query(...),
    service: ChestLifecycleService = Depends(get_chest_lifecycle_service),
) -> ActiveChestResponse:
    chest = await service.get_active_chest(owner_a, owner_b)
    if chest is None:
        return ActiveChestResponse(can_start=True)
    return ActiveChestResponse(can_start=False, chest=ChestResponse.from_domain(chest))


@router.get("/{chest_id}", response_model=ChestResponse, responses=_ERRORS)
async def get_chest(
    chest_id: UUID,
    request: Request,
    requester_id: UUID = Query(...),
    service: ChestLifecycleService = Depends(get_chest_lifecycle_service),
) -> ChestResponse:
    try:
        chest = await service.get_chest(chest_id, requester_id)
    except ChestAppError as e:
        raise problem(e, request) from None
    return ChestResponse.from_domain(chest)


@router.get(
    "/{chest_id}/unlockable",
    response_model=UnlockStatusResponse,
    responses=_ERRORS,
    summary="Check the deadline, advancing the chest when it has passed",
)
async def check_unlockable(
    chest_id: UUID,
    request: Request,
    requester_id: UUID = Query(...),
    service: ChestLifecycleService = Depends(get_chest_lifecycle_service),
) -> UnlockStatusResponse:
    try:
        result = await service.check_unlockable(chest_id, requester_id)
    except ChestAppError as e:
        raise problem(e, request) from None
    return UnlockStatusResponse(
        chest_id=chest_id,
        is_unlockable=result.is_unlockable,
        days_remaining=result.days_remaining,
        status=result.status,
    )


@router.put("/{chest_id}/status", response_model=ChestResponse, responses=_ERRORS)
async def set_chest_status(
    chest_id: UUID,
    request_data: SetChestStatusRequest,
    request: Request,
    service: ChestLifecycleService = Depends(get_chest_lifecycle_service),
) -> ChestResponse:
    try:
        chest = await service.set_status(
            chest_id, request_data.status, request_data.requester_id
        )
    except ChestAppError as e:
        raise problem(e, request) from None
    return ChestResponse.from_domain(chest)


@router.post(
    "/{chest_id}/open",
    response_model=ChestResponse,
    responses=_ERRORS,
    summary="First read request of a partner",
)
async def open_chest(
    chest_id: UUID,
    request_data: ChestActionRequest,
    request: Request,
    service: ChestLifecycleService = Depends(get_chest_lifecycle_service),
) -> ChestResponse:
    try:
        chest = await service.open_for_reader(chest_id, request_data.reader_id)
    except ChestAppError as e:
        raise problem(e, request) from None
    return ChestResponse.from_domain(chest)


@router.post("/{chest_id}/finish", response_model=ChestResponse, responses=_ERRORS)
async def finish_chest(
    chest_id: UUID,
    request_data: ChestActionRequest,
    request: Request,
    service: ChestLifecycleService = Depends(get_chest_lifecycle_service),
) -> ChestResponse:
    try:
        chest = await service.finish_reading(chest_id, request_data.reader_id)
    except ChestAppError as e:
        raise problem(e, request) from None
    return ChestResponse.from_domain(chest)


@router.get("/{chest_id}/stats", response_model=ChestStatsResponse, responses=_ERRORS)
async def get_chest_stats(
    chest_id: UUID,
    request: Request,
    requester_id: UUID = Query(...),
    service: ChestLifecycleService = Depends(get_chest_lifecycle_service),
) -> ChestStatsResponse:
    try:
        stats = await service.get_stats(chest_id, requester_id)
    except ChestAppError as e:
        raise problem(e, request) from None
    return ChestStatsResponse(
        chest_id=chest_id,
        total_chits=stats.total_chits,
        emotion_count=stats.emotion_count,
        status=stats.status,
        start_at=stats.start_at,
        unlock_at=stats.unlock_at,
    )
