import enum
from decimal import Decimal
from typing import List
from pydantic import BaseModel
from splitledger.schemas.user import UserOut

class MembershipStatus(str, enum.Enum):
    ADDED = "added"
    ALREADY_MEMBER = "already_member"

class GroupCreate(BaseModel):
    name: str
    image_ref: str | None = None

class GroupOut(BaseModel):
    id: int
    name: str
    image_ref: str | None = None
    total_expenses: Decimal
    created_by: int
    member_ids: List[int]
    members: List[UserOut]

    class Config:
        from_attributes = True

class MembershipOut(BaseModel):
    status: MembershipStatus
