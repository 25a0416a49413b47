"""Chit API routes.

Listing and stats are blind-box views: a reader only ever gets the
partner's chits, and nothing before the chest's deadline.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from src.api.dependencies.chest import get_chit_service
from src.api.errors import problem
from src.api.models.chit import (
    AddChitRequest,
    ChitListResponse,
    ChitResponse,
    ChitStatsResponse,
    MarkReadRequest,
)
from src.api.models.common import ProblemDetailResponse
from src.application.services.chit_service import ChitService
from src.domain.exceptions import ChestAppError

router = APIRouter(prefix="/v1/chests/{chest_id}/chits", tags=["chits"])

_ERRORS = {
    403: {"model": ProblemDetailResponse, "description": "Not allowed"},
    404: {"model": ProblemDetailResponse, "description": "Unknown chest or chit"},
    409: {"model": ProblemDetailResponse, "description": "Chest not writable or locked"},
    422: {"model": ProblemDetailResponse, "description": "Validation failed"},
}


@router.post("", response_model=ChitResponse, status_code=201, responses=_ERRORS)
async def add_chit(
    chest_id: UUID,
    request_data: AddChitRequest,
    request: Request,
    service: ChitService = Depends(get_chit_service),
) -> ChitResponse:
    try:
        chit = await service.add(
            chest_id, request_data.author_id, request_data.content, request_data.emotion
        )
    except ChestAppError as e:
        raise problem(e, request) from None
    return ChitResponse.from_domain(chit)


@router.get("", response_model=ChitListResponse, responses=_ERRORS)
async def list_chits(
    chest_id: UUID,
    request: Request,
    reader_id: UUID = Query(...),
    service: ChitService = Depends(get_chit_service),
) -> ChitListResponse:
    try:
        chits = await service.list_for_reader(chest_id, reader_id)
    except ChestAppError as e:
        raise problem(e, request) from None
    return ChitListResponse(
        chest_id=chest_id,
        reader_id=reader_id,
        chits=[ChitResponse.from_domain(chit) for chit in chits],
    )


@router.get("/stats", response_model=ChitStatsResponse, responses=_ERRORS)
async def get_chit_stats(
    chest_id: UUID,
    request: Request,
    reader_id: UUID = Query(...),
    service: ChitService = Depends(get_chit_service),
) -> ChitStatsResponse:
    try:
        stats = await service.get_chit_stats(chest_id, reader_id)
    except ChestAppError as e:
        raise problem(e, request) from None
    return ChitStatsResponse(
        chest_id=chest_id,
        total_chits=stats.total_chits,
        read_count=stats.read_count,
        remaining_count=stats.remaining_count,
        emotion_count=stats.emotion_count,
        progress=stats.progress,
    )


@router.post("/{chit_id}/read", response_model=ChitResponse, responses=_ERRORS)
async def mark_chit_read(
    chest_id: UUID,
    chit_id: UUID,
    request_data: MarkReadRequest,
    request: Request,
    service: ChitService = Depends(get_chit_service),
) -> ChitResponse:
    try:
        chit = await service.mark_read(chest_id, chit_id, request_data.reader_id)
    except ChestAppError as e:
        raise problem(e, request) from None
    return ChitResponse.from_domain(chit)
