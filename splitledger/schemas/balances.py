from decimal import Decimal
from typing import Dict
from pydantic import BaseModel

class GroupBalanceOut(BaseModel):
    group_id: int
    request_id: int | None = None
    balances: Dict[int, Decimal]
    formatted: Dict[int, str] = {}

class NetSpendOut(BaseModel):
    user_id: int
    net_spend: Decimal

class SettlementSuggestionOut(BaseModel):
    payer_id: int
    recipient_id: int
    amount: Decimal | None = None
