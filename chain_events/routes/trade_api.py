# chain_events/routes/trade_api.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Request

from chain_events.deps import get_query_engine
from chain_events.models import EventKind, TradePoolChangeEvent, TradePoolEvent, TradeSwapEvent
from chain_events.query.engine import EventQueryEngine
from chain_events.routes.runner import run_query

router = APIRouter(prefix="/v0/trade", tags=["trade"])


@router.get("/trade_pool", response_model=List[TradePoolEvent])
async def trade_pool(
    request: Request,
    start_block_timestamp_nanosec: Optional[str] = None,
    blocks: Optional[str] = None,
    pool_id: Optional[str] = None,
    account_id: Optional[str] = None,
    engine: EventQueryEngine = Depends(get_query_engine),
):
    """Single-pool trades. ``pool_id`` looks like ``REF-123``."""
    return await run_query(
        request,
        engine,
        EventKind.TRADE_POOL,
        {
            "start_block_timestamp_nanosec": start_block_timestamp_nanosec,
            "blocks": blocks,
            "pool_id": pool_id,
            "account_id": account_id,
        },
    )


@router.get("/trade_swap", response_model=List[TradeSwapEvent])
async def trade_swap(
    request: Request,
    start_block_timestamp_nanosec: Optional[str] = None,
    blocks: Optional[str] = None,
    involved_token_account_ids: Optional[str] = None,
    account_id: Optional[str] = None,
    engine: EventQueryEngine = Depends(get_query_engine),
):
    """Swaps whose balance changes touch any of ``involved_token_account_ids``."""
    return await run_query(
        request,
        engine,
        EventKind.TRADE_SWAP,
        {
            "start_block_timestamp_nanosec": start_block_timestamp_nanosec,
            "blocks": blocks,
            "involved_token_account_ids": involved_token_account_ids,
            "account_id": account_id,
        },
    )


@router.get("/trade_pool_change", response_model=List[TradePoolChangeEvent])
async def trade_pool_change(
    request: Request,
    start_block_timestamp_nanosec: Optional[str] = None,
    blocks: Optional[str] = None,
    pool_id: Optional[str] = None,
    engine: EventQueryEngine = Depends(get_query_engine),
):
    return await run_query(
        request,
        engine,
        EventKind.TRADE_POOL_CHANGE,
        {
            "start_block_timestamp_nanosec": start_block_timestamp_nanosec,
            "blocks": blocks,
            "pool_id": pool_id,
        },
    )
