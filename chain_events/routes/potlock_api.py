# chain_events/routes/potlock_api.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Request

from chain_events.deps import get_query_engine
from chain_events.models import (
    EventKind,
    PotlockDonationEvent,
    PotlockPotDonationEvent,
    PotlockPotProjectDonationEvent,
)
from chain_events.query.engine import EventQueryEngine
from chain_events.routes.runner import run_query

router = APIRouter(prefix="/v0/potlock", tags=["potlock"])


@router.get("/potlock_donation", response_model=List[PotlockDonationEvent])
async def potlock_donation(
    request: Request,
    start_block_timestamp_nanosec: Optional[str] = None,
    blocks: Optional[str] = None,
    project_id: Optional[str] = None,
    donor_id: Optional[str] = None,
    referrer_id: Optional[str] = None,
    engine: EventQueryEngine = Depends(get_query_engine),
):
    """Direct donations to a project."""
    return await run_query(
        request,
        engine,
        EventKind.POTLOCK_DONATION,
        {
            "start_block_timestamp_nanosec": start_block_timestamp_nanosec,
            "blocks": blocks,
            "project_id": project_id,
            "donor_id": donor_id,
            "referrer_id": referrer_id,
        },
    )


@router.get("/potlock_pot_project_donation", response_model=List[PotlockPotProjectDonationEvent])
async def potlock_pot_project_donation(
    request: Request,
    start_block_timestamp_nanosec: Optional[str] = None,
    blocks: Optional[str] = None,
    pot_id: Optional[str] = None,
    project_id: Optional[str] = None,
    donor_id: Optional[str] = None,
    referrer_id: Optional[str] = None,
    engine: EventQueryEngine = Depends(get_query_engine),
):
    """Donations to a project made through a pot."""
    return await run_query(
        request,
        engine,
        EventKind.POTLOCK_POT_PROJECT_DONATION,
        {
            "start_block_timestamp_nanosec": start_block_timestamp_nanosec,
            "blocks": blocks,
            "pot_id": pot_id,
            "project_id": project_id,
            "donor_id": donor_id,
            "referrer_id": referrer_id,
        },
    )


@router.get("/potlock_pot_donation", response_model=List[PotlockPotDonationEvent])
async def potlock_pot_donation(
    request: Request,
    start_block_timestamp_nanosec: Optional[str] = None,
    blocks: Optional[str] = None,
    pot_id: Optional[str] = None,
    donor_id: Optional[str] = None,
    referrer_id: Optional[str] = None,
    engine: EventQueryEngine = Depends(get_query_engine),
):
    """Donations to a pot's matching pool."""
    return await run_query(
        request,
        engine,
        EventKind.POTLOCK_POT_DONATION,
        {
            "start_block_timestamp_nanosec": start_block_timestamp_nanosec,
            "blocks": blocks,
            "pot_id": pot_id,
            "donor_id": donor_id,
            "referrer_id": referrer_id,
        },
    )
