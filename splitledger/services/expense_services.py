import logging
from typing import List
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from splitledger.models.expense import Expense, ExpenseType
from splitledger.models.expense_split import ExpenseSplit
from splitledger.models.group import Group
from splitledger.models.request import Request
from splitledger.core.exceptions import InvalidArgument, NotFound, StoreFailure
from splitledger.core.utils import ZERO, commit_or_fail, flush_or_fail, qround, to_dec
from splitledger.services.aggregate_services import adjust_group_total, add_request_payer

logger = logging.getLogger(__name__)

async def _validate_expense(db: AsyncSession, group_id, title, amount, paid_by, split_with, type, request_id):
    # 1. Basic shape
    if amount is None or to_dec(amount) <= ZERO:
        raise InvalidArgument("Amount must be positive")

    if not split_with:
        raise InvalidArgument("Expense must be split with at least one member")

    if len(split_with) != len(set(split_with)):
        raise InvalidArgument("Duplicate users found in split")

    if type == ExpenseType.EXPENSE and not (title and title.strip()):
        raise InvalidArgument("Title is required")

    if type == ExpenseType.SETTLEMENT:
        if len(split_with) != 1:
            raise InvalidArgument("A settlement has exactly one recipient")
        if split_with[0] == paid_by:
            raise InvalidArgument("Payer cannot settle with themselves")

    # 2. Group and membership
    group = await db.get(Group, group_id, populate_existing=True)
    if not group:
        raise NotFound("Group", group_id)

    member_ids = set(group.member_ids)

    if paid_by not in member_ids:
        raise InvalidArgument("Payer is not a member of the group")

    if any(uid not in member_ids for uid in split_with):
        raise InvalidArgument("Some users in split are not group members")

    # 3. Request scoping
    if request_id is not None:
        request = await db.get(Request, request_id, populate_existing=True)
        if not request:
            raise NotFound("Request", request_id)
        if request.group_id != group_id:
            raise InvalidArgument("Request does not belong to this group")

    return group

async def add_expense(
    db: AsyncSession,
    group_id: int,
    title: str,
    amount,
    paid_by: int,
    split_with: List[int],
    type: ExpenseType = ExpenseType.EXPENSE,
    request_id: int | None = None,
):
    """
    Record an expense or a settlement.

    Three independent writes, in order: the expense row, the group's running
    total (plain expenses only) and, for request-scoped records, the payer in
    the request's members_paid. Validation happens before the first write.
    """
    try:
        type = ExpenseType(type or ExpenseType.EXPENSE)
    except ValueError:
        raise InvalidArgument(f"Unknown expense type: {type}")

    # stored with two decimals, so validate what will actually be stored
    if amount is not None:
        amount = qround(to_dec(amount))
    split_with = list(split_with or [])

    group = await _validate_expense(db, group_id, title, amount, paid_by, split_with, type, request_id)

    if type == ExpenseType.SETTLEMENT and not (title and title.strip()):
        recipient = next((m for m in group.members if m.id == split_with[0]), None)
        title = f"Payment to {recipient.name if recipient else 'member'}"

    # 1. Expense record
    expense = Expense(
        group_id=group_id,
        request_id=request_id,
        title=title.strip(),
        amount=amount,
        paid_by=paid_by,
        type=type.value,
    )
    db.add(expense)
    await flush_or_fail(db)  # gives expense.id

    for position, uid in enumerate(split_with):
        db.add(ExpenseSplit(expense_id=expense.id, user_id=uid, position=position))

    await commit_or_fail(db)
    expense_id = expense.id
    logger.info("Recorded %s %s of %s in group %s", type.value, expense_id, amount, group_id)

    # 2. Running total (settlements are transfers, not consumption)
    if type == ExpenseType.EXPENSE:
        await adjust_group_total(db, group_id, amount)

    # 3. Payer credit on the request
    if request_id is not None:
        await add_request_payer(db, request_id, paid_by)

    return await get_expense(db, expense_id)

async def get_expense(db: AsyncSession, expense_id: int):
    q = (
        select(Expense)
        .where(Expense.id == expense_id)
        .execution_options(populate_existing=True)
    )
    res = await db.execute(q)
    expense = res.scalar_one_or_none()

    if not expense:
        raise NotFound("Expense", expense_id)

    return expense

async def delete_expense(db: AsyncSession, expense_id: int) -> bool:
    """
    Remove an expense and take it out of the group's running total.

    Returns False when the expense is already gone. The payer is left in
    the request's members_paid even if this was their only contribution.
    """
    expense = await db.get(Expense, expense_id, populate_existing=True)

    if not expense:
        logger.info("Expense %s already deleted", expense_id)
        return False

    group_id = expense.group_id
    amount = to_dec(expense.amount)
    counts_towards_total = expense.type in (None, ExpenseType.EXPENSE.value)

    await db.delete(expense)
    await commit_or_fail(db)
    logger.info("Deleted expense %s from group %s", expense_id, group_id)

    if counts_towards_total:
        await adjust_group_total(db, group_id, -amount)

    return True

async def get_group_expenses(db: AsyncSession, group_id: int, request_id: int | None = None):
    """Expenses of a group, optionally of one request, most recent first."""
    q = select(Expense).where(Expense.group_id == group_id)

    if request_id is not None:
        q = q.where(Expense.request_id == request_id)

    q = (
        q.order_by(Expense.date.desc(), Expense.id.desc())
        .execution_options(populate_existing=True)
    )

    try:
        res = await db.execute(q)
    except SQLAlchemyError as e:
        raise StoreFailure(str(e)) from e

    return list(res.scalars().all())

async def find_expense_ids(db: AsyncSession, group_id: int | None = None, request_id: int | None = None):
    q = select(Expense.id)

    if group_id is not None:
        q = q.where(Expense.group_id == group_id)
    if request_id is not None:
        q = q.where(Expense.request_id == request_id)

    res = await db.execute(q.order_by(Expense.id))
    return list(res.scalars().all())
