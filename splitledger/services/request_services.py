import logging
from typing import List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from splitledger.models.group import Group
from splitledger.models.request import Request, DEFAULT_ICON
from splitledger.core.exceptions import InvalidArgument, NotFound
from splitledger.core.utils import commit_or_fail
from splitledger.schemas.group import MembershipStatus
from splitledger.services.aggregate_services import add_request_member, remove_request_member
from splitledger.services.expense_services import delete_expense, find_expense_ids

logger = logging.getLogger(__name__)

async def create_request(
    db: AsyncSession,
    group_id: int,
    title: str,
    member_ids: List[int],
    creator_id: int,
    icon: str = DEFAULT_ICON,
):
    if not title or not title.strip():
        raise InvalidArgument("Title is required")

    if not member_ids:
        raise InvalidArgument("Select at least one member")

    group = await db.get(Group, group_id)
    if not group:
        raise NotFound("Group", group_id)

    # the creator is always part of their own request
    all_member_ids = []
    for uid in [*member_ids, creator_id]:
        if uid not in all_member_ids:
            all_member_ids.append(uid)

    request = Request(
        group_id=group_id,
        title=title.strip(),
        icon=icon or DEFAULT_ICON,
        created_by=creator_id,
        member_ids=all_member_ids,
        members_paid=[],
        total_amount=0,
    )
    db.add(request)
    await commit_or_fail(db)
    logger.info("Created request %s in group %s", request.id, group_id)
    return request

async def get_request(db: AsyncSession, request_id: int):
    request = await db.get(Request, request_id, populate_existing=True)

    if not request:
        raise NotFound("Request", request_id)

    return request

async def get_group_requests(db: AsyncSession, group_id: int):
    q = (
        select(Request)
        .where(Request.group_id == group_id)
        .order_by(Request.id)
        .execution_options(populate_existing=True)
    )
    res = await db.execute(q)
    return list(res.scalars().all())

async def list_requests_for_user(db: AsyncSession, user_id: int):
    # JSON membership is not portably queryable, filter after loading
    q = select(Request).order_by(Request.id).execution_options(populate_existing=True)
    res = await db.execute(q)
    return [r for r in res.scalars().all() if user_id in (r.member_ids or [])]

async def add_member_to_request(db: AsyncSession, request_id: int, user_id: int):
    request, added = await add_request_member(db, request_id, user_id)

    if request is None:
        raise NotFound("Request", request_id)

    if not added:
        logger.info("User %s already in request %s", user_id, request_id)
        return MembershipStatus.ALREADY_MEMBER

    logger.info("Added user %s to request %s", user_id, request_id)
    return MembershipStatus.ADDED

async def remove_member_from_request(db: AsyncSession, request_id: int, user_id: int):
    request = await remove_request_member(db, request_id, user_id)

    if request is None:
        raise NotFound("Request", request_id)

    logger.info("Removed user %s from request %s", user_id, request_id)
    return request

async def delete_request(db: AsyncSession, request_id: int) -> bool:
    """
    Delete every expense linked to the request, then the request.

    Safe to re-run after a partial failure: each expense delete tolerates an
    already-deleted row. Returns False when the request itself was already
    gone (its stray expenses are still swept).
    """
    for expense_id in await find_expense_ids(db, request_id=request_id):
        await delete_expense(db, expense_id)

    request = await db.get(Request, request_id)
    if not request:
        logger.info("Request %s already deleted", request_id)
        return False

    await db.delete(request)
    await commit_or_fail(db)
    logger.info("Deleted request %s", request_id)
    return True
