# chain_events/routes/nft_api.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Request

from chain_events.deps import get_query_engine
from chain_events.models import EventKind, NftBurnEvent, NftMintEvent, NftTransferEvent
from chain_events.query.engine import EventQueryEngine
from chain_events.routes.runner import run_query

router = APIRouter(prefix="/v0/nft", tags=["nft"])


@router.get("/nft_mint", response_model=List[NftMintEvent])
async def nft_mint(
    request: Request,
    start_block_timestamp_nanosec: Optional[str] = None,
    blocks: Optional[str] = None,
    token_account_id: Optional[str] = None,
    account_id: Optional[str] = None,
    engine: EventQueryEngine = Depends(get_query_engine),
):
    """Mints, optionally filtered by NFT contract and receiving account."""
    return await run_query(
        request,
        engine,
        EventKind.NFT_MINT,
        {
            "start_block_timestamp_nanosec": start_block_timestamp_nanosec,
            "blocks": blocks,
            "token_account_id": token_account_id,
            "account_id": account_id,
        },
    )


@router.get("/nft_transfer", response_model=List[NftTransferEvent])
async def nft_transfer(
    request: Request,
    start_block_timestamp_nanosec: Optional[str] = None,
    blocks: Optional[str] = None,
    token_account_id: Optional[str] = None,
    old_owner_id: Optional[str] = None,
    new_owner_id: Optional[str] = None,
    involved_account_ids: Optional[str] = None,
    engine: EventQueryEngine = Depends(get_query_engine),
):
    """Transfers. ``involved_account_ids`` (comma separated) matches either
    side of the transfer and replaces ``old_owner_id``/``new_owner_id``."""
    return await run_query(
        request,
        engine,
        EventKind.NFT_TRANSFER,
        {
            "start_block_timestamp_nanosec": start_block_timestamp_nanosec,
            "blocks": blocks,
            "token_account_id": token_account_id,
            "old_owner_id": old_owner_id,
            "new_owner_id": new_owner_id,
            "involved_account_ids": involved_account_ids,
        },
    )


@router.get("/nft_burn", response_model=List[NftBurnEvent])
async def nft_burn(
    request: Request,
    start_block_timestamp_nanosec: Optional[str] = None,
    blocks: Optional[str] = None,
    token_account_id: Optional[str] = None,
    account_id: Optional[str] = None,
    engine: EventQueryEngine = Depends(get_query_engine),
):
    return await run_query(
        request,
        engine,
        EventKind.NFT_BURN,
        {
            "start_block_timestamp_nanosec": start_block_timestamp_nanosec,
            "blocks": blocks,
            "token_account_id": token_account_id,
            "account_id": account_id,
        },
    )
