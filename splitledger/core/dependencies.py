from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession
from splitledger.db.session import get_db
from splitledger.core.exceptions import PermissionDenied
from splitledger.core.jwt_config import decode_token, get_token_from_cookie
from splitledger.services.group_services import get_group
from splitledger.services.user_service import get_user_by_id

async def get_current_user(request: Request, db: AsyncSession = Depends(get_db)):
    token = get_token_from_cookie(request=request)
    payload = decode_token(token)
    user_id = payload.get("sub")

    if user_id is None:
        raise HTTPException(status_code=401, detail="Invalid authentication credentials")

    try:
        user = await get_user_by_id(db, int(user_id))
    except ValueError:
        raise HTTPException(status_code=401, detail="Could not validate credentials")

    if user is None:
        raise HTTPException(status_code=401, detail="User not found")

    return user

async def check_group_membership(db: AsyncSession, group_id: int, user_id: int):
    group = await get_group(db, group_id)

    if user_id not in group.member_ids:
        raise PermissionDenied("You are not a member of this group")

    return group

def ensure_creator(entity, user_id: int, action: str):
    # the ledger core trusts its callers; ownership is checked here
    if entity.created_by != user_id:
        raise PermissionDenied(f"Only the creator can {action}")
