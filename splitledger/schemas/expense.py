from datetime import datetime
from decimal import Decimal
from typing import List
from pydantic import BaseModel
from splitledger.models.expense import ExpenseType

class ExpenseCreate(BaseModel):
    group_id: int
    title: str = ""
    amount: Decimal
    paid_by: int | None = None
    split_with: List[int]
    type: ExpenseType = ExpenseType.EXPENSE
    request_id: int | None = None

class ExpenseOut(BaseModel):
    id: int
    group_id: int
    request_id: int | None = None
    title: str
    amount: Decimal
    paid_by: int
    split_with: List[int]
    type: ExpenseType | None = None
    date: datetime

    class Config:
        from_attributes = True
