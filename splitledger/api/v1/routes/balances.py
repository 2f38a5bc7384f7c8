from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from splitledger.db.session import get_db
from splitledger.core.currency import format_currency
from splitledger.core.dependencies import get_current_user, check_group_membership
from splitledger.schemas.balances import GroupBalanceOut, NetSpendOut, SettlementSuggestionOut
from splitledger.services.balance_services import get_group_balances, get_my_net_spend, get_settlement_suggestion

router = APIRouter()

@router.get("/{group_id}", response_model=GroupBalanceOut)
async def group_balances(
    group_id: int,
    request_id: int | None = None,
    currency: str | None = None,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    await check_group_membership(db, group_id, current_user.id)
    balances = await get_group_balances(db, group_id, request_id)

    formatted = {}
    if currency:
        formatted = {uid: format_currency(amount, currency) for uid, amount in balances.items()}

    return {
        "group_id": group_id,
        "request_id": request_id,
        "balances": balances,
        "formatted": formatted,
    }

@router.get("/{group_id}/me/spend", response_model=NetSpendOut)
async def my_spend(
    group_id: int,
    request_id: int | None = None,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    await check_group_membership(db, group_id, current_user.id)
    spend = await get_my_net_spend(db, group_id, current_user.id, request_id)
    return {"user_id": current_user.id, "net_spend": spend}

@router.get("/{group_id}/suggest", response_model=SettlementSuggestionOut)
async def suggest(
    group_id: int,
    payer_id: int,
    recipient_id: int,
    request_id: int | None = None,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    await check_group_membership(db, group_id, current_user.id)
    amount = await get_settlement_suggestion(db, group_id, payer_id, recipient_id, request_id)
    return {"payer_id": payer_id, "recipient_id": recipient_id, "amount": amount}
