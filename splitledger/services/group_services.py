import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from splitledger.models.group import Group
from splitledger.models.group_member import GroupMember
from splitledger.models.request import Request
from splitledger.models.user import User
from splitledger.core.exceptions import InvalidArgument, NotFound
from splitledger.core.utils import ZERO, commit_or_fail
from splitledger.schemas.group import MembershipStatus
from splitledger.services.expense_services import delete_expense, find_expense_ids
from splitledger.services.request_services import delete_request

logger = logging.getLogger(__name__)

async def create_group(db: AsyncSession, name: str, creator: User, image_ref: str | None = None):
    if not name or not name.strip():
        raise InvalidArgument("Group name is required")

    group = Group(
        name=name.strip(),
        image_ref=image_ref,
        created_by=creator.id,
        total_expenses=ZERO,
        memberships=[GroupMember(user_id=creator.id)],
    )
    db.add(group)
    await commit_or_fail(db)
    logger.info("Created group %s owned by %s", group.id, creator.id)
    return await get_group(db, group.id)

async def get_group(db: AsyncSession, group_id: int):
    group = await db.get(Group, group_id, populate_existing=True)

    if not group:
        raise NotFound("Group", group_id)

    return group

async def list_groups_for_user(db: AsyncSession, user_id: int):
    q = (
        select(Group)
        .join(GroupMember)
        .where(GroupMember.user_id == user_id)
        .order_by(Group.id)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(q)
    return list(result.scalars().all())

async def add_member(db: AsyncSession, group_id: int, user: User):
    group = await get_group(db, group_id)

    if user.id in group.member_ids:
        logger.info("User %s already in group %s", user.id, group_id)
        return MembershipStatus.ALREADY_MEMBER

    # one row carries both the member and its id, so they can't diverge
    group.memberships.append(GroupMember(group_id=group_id, user_id=user.id))

    try:
        await db.commit()
    except IntegrityError:
        # a concurrent add won the unique constraint
        await db.rollback()
        logger.info("User %s joined group %s concurrently", user.id, group_id)
        return MembershipStatus.ALREADY_MEMBER

    logger.info("Added user %s to group %s", user.id, group_id)
    return MembershipStatus.ADDED

async def remove_member(db: AsyncSession, group_id: int, member_id: int):
    # Historical expenses keep referencing the member; balances tolerate it.
    #TODO: restrict removal while the member has a non-zero balance once product decides the rule
    group = await get_group(db, group_id)

    if member_id == group.created_by:
        raise InvalidArgument("The group creator cannot be removed")

    membership = next((m for m in group.memberships if m.user_id == member_id), None)

    if not membership:
        logger.info("User %s is not a member of group %s", member_id, group_id)
        return group

    group.memberships.remove(membership)
    await commit_or_fail(db)
    logger.info("Removed user %s from group %s", member_id, group_id)
    return group

async def delete_group(db: AsyncSession, group_id: int) -> bool:
    """
    Cascade: requests (with their expenses), then any remaining group
    expenses, then the group row. Every step tolerates rows that are already
    gone, so a failed cascade can simply be run again.
    """
    # 1. Requests and their expenses
    res = await db.execute(select(Request.id).where(Request.group_id == group_id))
    for request_id in list(res.scalars().all()):
        await delete_request(db, request_id)

    # 2. General expenses and stragglers
    for expense_id in await find_expense_ids(db, group_id=group_id):
        await delete_expense(db, expense_id)

    # 3. The group itself
    group = await db.get(Group, group_id, populate_existing=True)
    if not group:
        logger.info("Group %s already deleted", group_id)
        return False

    await db.delete(group)
    await commit_or_fail(db)
    logger.info("Deleted group %s", group_id)
    return True
