"""Identity and pairing API routes.

The caller's identity is passed explicitly; authentication sits in front
of this service and is not its concern.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from src.api.dependencies.chest import (
    get_chest_lifecycle_service,
    get_chit_service,
    get_identity_service,
    get_pairing_service,
)
from src.api.errors import problem
from src.api.models.chest import ChestHistoryResponse, ChestResponse
from src.api.models.chit import ChitHistoryEntryResponse, ChitResponse
from src.api.models.common import ProblemDetailResponse
from src.api.models.identity import (
    IdentityResponse,
    PairingResponse,
    PairingStatusResponse,
    PairRequest,
    PartnerResponse,
    RegisterIdentityRequest,
)
from src.application.services.chest_lifecycle_service import ChestLifecycleService
from src.application.services.chit_service import ChitService
from src.application.services.identity_service import IdentityService
from src.application.services.pairing_service import PairingService
from src.domain.exceptions import ChestAppError

router = APIRouter(prefix="/v1", tags=["identities"])

_ERRORS = {
    404: {"model": ProblemDetailResponse, "description": "Unknown identity"},
    409: {"model": ProblemDetailResponse, "description": "Conflict"},
    422: {"model": ProblemDetailResponse, "description": "Validation failed"},
}


@router.post(
    "/identities",
    response_model=IdentityResponse,
    status_code=201,
    responses=_ERRORS,
    summary="Register an identity",
)
async def register_identity(
    request_data: RegisterIdentityRequest,
    request: Request,
    service: IdentityService = Depends(get_identity_service),
) -> IdentityResponse:
    try:
        identity = await service.register(request_data.username, request_data.gender)
    except ChestAppError as e:
        raise problem(e, request) from None
    return IdentityResponse.from_domain(identity)


@router.get(
    "/identities/unpaired",
    response_model=list[IdentityResponse],
    summary="List identities without a partner",
)
async def list_unpaired_identities(
    excluding_id: UUID | None = Query(default=None),
    service: IdentityService = Depends(get_identity_service),
) -> list[IdentityResponse]:
    identities = await service.list_unpaired(excluding_id)
    return [IdentityResponse.from_domain(identity) for identity in identities]


@router.get(
    "/identities/by-username/{username}",
    response_model=IdentityResponse,
    responses=_ERRORS,
)
async def get_identity_by_username(
    username: str,
    request: Request,
    service: IdentityService = Depends(get_identity_service),
) -> IdentityResponse:
    try:
        identity = await service.get_by_username(username)
    except ChestAppError as e:
        raise problem(e, request) from None
    return IdentityResponse.from_domain(identity)


@router.get(
    "/identities/{identity_id}",
    response_model=IdentityResponse,
    responses=_ERRORS,
)
async def get_identity(
    identity_id: UUID,
    request: Request,
    service: IdentityService = Depends(get_identity_service),
) -> IdentityResponse:
    try:
        identity = await service.get_identity(identity_id)
    except ChestAppError as e:
        raise problem(e, request) from None
    return IdentityResponse.from_domain(identity)


@router.get(
    "/identities/{identity_id}/pairing",
    response_model=PairingStatusResponse,
    responses=_ERRORS,
    summary="Pairing status and partner of an identity",
)
async def get_pairing_status(
    identity_id: UUID,
    request: Request,
    service: IdentityService = Depends(get_identity_service),
) -> PairingStatusResponse:
    try:
        partner = await service.get_partner_info(identity_id)
    except ChestAppError as e:
        raise problem(e, request) from None
    if partner is None:
        return PairingStatusResponse(is_paired=False)
    return PairingStatusResponse(
        is_paired=True,
        partner=PartnerResponse(
            id=partner.partner_id,
            username=partner.username,
            gender=partner.gender.value,
            paired_since=partner.paired_since,
        ),
    )


@router.get(
    "/identities/{identity_id}/chests",
    response_model=ChestHistoryResponse,
    summary="Every chest of an identity, newest first",
)
async def get_chest_history(
    identity_id: UUID,
    service: ChestLifecycleService = Depends(get_chest_lifecycle_service),
) -> ChestHistoryResponse:
    chests = await service.get_history(identity_id)
    return ChestHistoryResponse(
        identity_id=identity_id,
        chests=[ChestResponse.from_domain(chest) for chest in chests],
    )


@router.get(
    "/identities/{identity_id}/chits",
    response_model=list[ChitHistoryEntryResponse],
    summary="Partner chits from every unlocked chest, newest unlock first",
)
async def get_chit_history(
    identity_id: UUID,
    service: ChitService = Depends(get_chit_service),
) -> list[ChitHistoryEntryResponse]:
    history = await service.get_history(identity_id)
    return [
        ChitHistoryEntryResponse(
            chest_id=entry.chest.id,
            unlock_at=entry.chest.unlock_at,
            chits=[ChitResponse.from_domain(chit) for chit in entry.chits],
        )
        for entry in history
    ]


@router.post(
    "/pairings",
    response_model=PairingResponse,
    status_code=201,
    responses=_ERRORS,
    summary="Pair the requester with a partner, permanently",
)
async def create_pairing(
    request_data: PairRequest,
    request: Request,
    service: PairingService = Depends(get_pairing_service),
) -> PairingResponse:
    try:
        record = await service.pair(
            request_data.requester_id, request_data.partner_username
        )
    except ChestAppError as e:
        raise problem(e, request) from None
    return PairingResponse.from_domain(record)
