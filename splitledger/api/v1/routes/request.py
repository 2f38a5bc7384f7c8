from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from splitledger.db.session import get_db
from splitledger.core.dependencies import get_current_user, check_group_membership, ensure_creator
from splitledger.schemas.group import MembershipOut
from splitledger.schemas.request import RequestCreate, RequestOut
from splitledger.services.request_services import (
    create_request, delete_request, get_request, list_requests_for_user,
    add_member_to_request, remove_member_from_request
)

router = APIRouter()

@router.post("/", response_model=RequestOut, description="create a request inside a group")
async def create_new_request(
    data: RequestCreate,
    db: AsyncSession = Depends(get_db),
    user = Depends(get_current_user)
):
    await check_group_membership(db, data.group_id, user.id)
    return await create_request(db, data.group_id, data.title, data.member_ids, user.id, icon=data.icon)

@router.get("/my-requests", response_model=list[RequestOut])
async def my_requests(db: AsyncSession = Depends(get_db), user = Depends(get_current_user)):
    return await list_requests_for_user(db, user.id)

@router.get("/{request_id}", response_model=RequestOut)
async def fetch_request(request_id: int, db: AsyncSession = Depends(get_db), user = Depends(get_current_user)):
    request = await get_request(db, request_id)
    await check_group_membership(db, request.group_id, user.id)
    return request

@router.delete("/{request_id}")
async def del_request(request_id: int, db: AsyncSession = Depends(get_db), user = Depends(get_current_user)):
    request = await get_request(db, request_id)
    ensure_creator(request, user.id, "delete this request")

    if not await delete_request(db, request_id):
        raise HTTPException(404, "Request doesn't exist")

    return {"status": "deleted"}

@router.post("/{request_id}/add/{user_id}", response_model=MembershipOut)
async def add_user_to_request(
    request_id: int,
    user_id: int,
    db: AsyncSession = Depends(get_db),
    user = Depends(get_current_user)
):
    request = await get_request(db, request_id)
    await check_group_membership(db, request.group_id, user.id)
    status = await add_member_to_request(db, request_id, user_id)
    return {"status": status}

@router.delete("/{request_id}/remove/{user_id}", response_model=RequestOut)
async def remove_user_from_request(
    request_id: int,
    user_id: int,
    db: AsyncSession = Depends(get_db),
    user = Depends(get_current_user)
):
    request = await get_request(db, request_id)
    await check_group_membership(db, request.group_id, user.id)
    return await remove_member_from_request(db, request_id, user_id)
