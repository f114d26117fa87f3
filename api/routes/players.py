"""Player wallet persistence endpoints."""

from fastapi import APIRouter, HTTPException

from api.schemas import PlayerWalletResponse, WalletRequest
from api.suppliers import get_wallet_store
from core.errors import SupplierUnavailable

router = APIRouter()


@router.post("")
async def create_player(request: WalletRequest) -> PlayerWalletResponse:
    """Store a new player and assign its id."""
    store = await get_wallet_store()
    try:
        player_id = await store.create(request.wallet)
    except SupplierUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return PlayerWalletResponse(id=player_id, wallet=request.wallet)


@router.get("/{player_id}")
async def get_player(player_id: str) -> PlayerWalletResponse:
    store = await get_wallet_store()
    try:
        wallet = await store.get(player_id)
    except SupplierUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    if wallet is None:
        raise HTTPException(status_code=404, detail="Player not found")
    return PlayerWalletResponse(id=player_id, wallet=wallet)


@router.put("/{player_id}")
async def update_player(player_id: str, request: WalletRequest) -> PlayerWalletResponse:
    """Overwrite a player's wallet."""
    store = await get_wallet_store()
    try:
        if await store.get(player_id) is None:
            raise HTTPException(status_code=404, detail="Player not found")
        await store.update(player_id, request.wallet)
    except SupplierUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return PlayerWalletResponse(id=player_id, wallet=request.wallet)
