from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from splitledger.db.session import get_db
from splitledger.core.dependencies import get_current_user, check_group_membership, ensure_creator
from splitledger.core.exceptions import NotFound
from splitledger.schemas.expense import ExpenseOut
from splitledger.schemas.group import GroupCreate, GroupOut, MembershipOut
from splitledger.schemas.request import RequestOut
from splitledger.services.expense_services import get_group_expenses
from splitledger.services.group_services import (
    create_group, list_groups_for_user, add_member, remove_member, delete_group, get_group
)
from splitledger.services.request_services import get_group_requests
from splitledger.services.user_service import get_user_by_id

router = APIRouter()

@router.post("/", response_model=GroupOut, description="create new group")
async def create_new_group(
    data: GroupCreate,
    db: AsyncSession = Depends(get_db),
    user = Depends(get_current_user)
):
    return await create_group(db, data.name, user, image_ref=data.image_ref)

@router.get("/my-groups", response_model=list[GroupOut], description="get user groups")
async def my_groups(db: AsyncSession = Depends(get_db), user = Depends(get_current_user)):
    return await list_groups_for_user(db, user.id)

@router.get("/{group_id}", response_model=GroupOut)
async def fetch_group(group_id: int, db: AsyncSession = Depends(get_db), current_user = Depends(get_current_user)):
    return await check_group_membership(db, group_id, current_user.id)

@router.delete("/{group_id}")
async def del_group(group_id: int, db: AsyncSession = Depends(get_db), current_user = Depends(get_current_user)):
    group = await get_group(db, group_id)
    ensure_creator(group, current_user.id, "delete this group")

    if not await delete_group(db, group_id):
        raise HTTPException(404, "Group doesn't exist")

    return {"status": "deleted"}

@router.post("/{group_id}/add/{user_id}", response_model=MembershipOut)
async def add_user_to_group(
    group_id: int,
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    await check_group_membership(db, group_id, current_user.id)
    user = await get_user_by_id(db, user_id)

    if not user:
        raise NotFound("User", user_id)

    status = await add_member(db, group_id, user)
    return {"status": status}

@router.delete("/{group_id}/remove/{user_id}")
async def rem_mem(group_id: int, user_id: int, db: AsyncSession = Depends(get_db), current_user = Depends(get_current_user)):
    await check_group_membership(db, group_id, current_user.id)
    await remove_member(db, group_id=group_id, member_id=user_id)
    return {"status": "member_removed"}

@router.get("/{group_id}/requests", response_model=list[RequestOut])
async def group_requests(group_id: int, db: AsyncSession = Depends(get_db), current_user = Depends(get_current_user)):
    await check_group_membership(db, group_id, current_user.id)
    return await get_group_requests(db, group_id)

@router.get("/{group_id}/expenses", response_model=list[ExpenseOut], description="get all expenses of the group")
async def fetch_expenses(
    group_id: int,
    request_id: int | None = None,
    db: AsyncSession = Depends(get_db),
    user = Depends(get_current_user)
):
    await check_group_membership(db, group_id, user.id)
    return await get_group_expenses(db, group_id, request_id)
