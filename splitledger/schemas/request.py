from decimal import Decimal
from typing import List
from pydantic import BaseModel
from splitledger.models.request import DEFAULT_ICON

class RequestCreate(BaseModel):
    group_id: int
    title: str
    member_ids: List[int]
    icon: str = DEFAULT_ICON

class RequestOut(BaseModel):
    id: int
    group_id: int
    title: str
    icon: str
    created_by: int
    member_ids: List[int]
    members_paid: List[int]
    total_amount: Decimal | None = None

    class Config:
        from_attributes = True
