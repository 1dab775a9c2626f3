"""Athlete Routes — admission, finalization and per-athlete queries.

Invariants:
    - Single admission takes the owner from X-Participant-Id (caller registers itself)
    - Finalize requires the coordinator token (require_coordinator dependency)
    - Routes never contain registry logic: they convert payloads and delegate to services
    - Registry errors propagate to the global RegistryError handler (uniform envelope)

Design Decisions:
    - Hex -> CiphertextHandle conversion happens here, at the boundary, so services and
      core only ever see opaque handles
"""

import logging

from fastapi import APIRouter, Depends, Header, status

from athlete_registry.api.dependencies import (
    get_admission, get_reconciliation, get_registry, require_coordinator,
)
from athlete_registry.core.domain_types import (
    MAX_OWNER_ID_LENGTH, CiphertextHandle, OwnerId,
)
from athlete_registry.schemas.registration import (
    AthleteInfoResponse,
    AthleteRegistration,
    BatchRegistration,
    FinalizeRequest,
    RegisteredAthletesResponse,
    RegistrationStatusResponse,
    hex_to_bytes,
)
from athlete_registry.services.admission import AdmissionController
from athlete_registry.services.reconciliation import ReconciliationController
from athlete_registry.services.registry import Registry

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/athletes", tags=["athletes"])


@router.post(
    "", response_model=AthleteInfoResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_athlete(
    body: AthleteRegistration,
    x_participant_id: str = Header(min_length=1, max_length=MAX_OWNER_ID_LENGTH),
    admission: AdmissionController = Depends(get_admission),
):
    """Admit the calling participant with encrypted profile fields."""
    snapshot = await admission.register_athlete(
        owner=OwnerId(x_participant_id.strip()),
        encrypted_name=CiphertextHandle.from_hex(body.encrypted_name),
        encrypted_age=CiphertextHandle.from_hex(body.encrypted_age),
        encrypted_contact=CiphertextHandle.from_hex(body.encrypted_contact),
        encrypted_category=CiphertextHandle.from_hex(body.encrypted_category),
        category=body.category,
        input_proof=hex_to_bytes(body.input_proof),
    )
    return AthleteInfoResponse.from_snapshot(snapshot)


@router.post(
    "/batch", response_model=RegisteredAthletesResponse,
    status_code=status.HTTP_201_CREATED,
)
async def batch_register_athletes(
    body: BatchRegistration,
    admission: AdmissionController = Depends(get_admission),
):
    """Admit up to the batch ceiling of athletes atomically under one shared proof."""
    snapshots = await admission.batch_register_athletes(
        owners=[OwnerId(o) for o in body.owners],
        encrypted_names=[CiphertextHandle.from_hex(h) for h in body.encrypted_names],
        encrypted_ages=[CiphertextHandle.from_hex(h) for h in body.encrypted_ages],
        encrypted_contacts=[
            CiphertextHandle.from_hex(h) for h in body.encrypted_contacts
        ],
        encrypted_categories=[
            CiphertextHandle.from_hex(h) for h in body.encrypted_categories
        ],
        categories=body.categories,
        input_proof=hex_to_bytes(body.input_proof),
    )
    owners = [s.owner for s in snapshots]
    return RegisteredAthletesResponse(owners=owners, count=len(owners))


@router.get("", response_model=RegisteredAthletesResponse)
async def list_registered(registry: Registry = Depends(get_registry)):
    """All registered owners in admission order."""
    owners = registry.list_registered()
    return RegisteredAthletesResponse(owners=owners, count=len(owners))


@router.get("/{owner}/registered", response_model=RegistrationStatusResponse)
async def is_registered(owner: str, registry: Registry = Depends(get_registry)):
    return RegistrationStatusResponse(
        owner=owner, is_registered=registry.is_registered(OwnerId(owner)),
    )


@router.get("/{owner}", response_model=AthleteInfoResponse)
async def get_info(owner: str, registry: Registry = Depends(get_registry)):
    """Record snapshot: plaintext only once finalized."""
    return AthleteInfoResponse.from_snapshot(registry.get_info(OwnerId(owner)))


@router.post(
    "/{owner}/finalize", response_model=AthleteInfoResponse,
    dependencies=[Depends(require_coordinator)],
)
async def finalize_results(
    owner: str,
    body: FinalizeRequest,
    reconciliation: ReconciliationController = Depends(get_reconciliation),
):
    """Accept the authorized plaintext disclosure for one athlete."""
    snapshot = await reconciliation.finalize_results(
        OwnerId(owner), body.plain_name, body.plain_age, body.plain_contact,
    )
    return AthleteInfoResponse.from_snapshot(snapshot)
