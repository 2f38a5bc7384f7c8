import logging
from decimal import Decimal
from typing import Dict, Iterable, List
from sqlalchemy.ext.asyncio import AsyncSession
from splitledger.models.expense import Expense
from splitledger.core.utils import ZERO, qround, to_dec
from splitledger.services.aggregate_services import set_group_total, set_request_payers
from splitledger.services.expense_services import get_group_expenses
from splitledger.services.group_services import get_group
from splitledger.services.request_services import get_request

logger = logging.getLogger(__name__)

def compute_balances(expenses: Iterable[Expense], member_ids: Iterable[int]) -> Dict[int, Decimal]:
    """
    Net balance per user: positive is owed, negative owes.

    Current members start at zero. Every record, settlements included, adds
    its amount to the payer and takes amount / len(split_with) from each
    split member, so ids of members removed since still show up. Records
    with an empty split are skipped. No rounding is applied.
    """
    balances: Dict[int, Decimal] = {uid: ZERO for uid in member_ids}

    for expense in expenses:
        split_with = expense.split_with
        if not split_with:
            continue

        amount = to_dec(expense.amount)
        share = amount / len(split_with)

        balances[expense.paid_by] = balances.get(expense.paid_by, ZERO) + amount

        for uid in split_with:
            balances[uid] = balances.get(uid, ZERO) - share

    return balances

def compute_net_spend(expenses: Iterable[Expense], user_id: int) -> Decimal:
    """What the user consumed: their share of every non-settlement expense they are split into."""
    total = ZERO
    for expense in expenses:
        if expense.is_settlement:
            continue
        split_with = expense.split_with
        if user_id in split_with:
            total += to_dec(expense.amount) / max(1, len(split_with))
    return total

def suggest_settlement_amount(balances: Dict[int, Decimal], payer_id: int, recipient_id: int):
    payer = balances.get(payer_id, ZERO)
    recipient = balances.get(recipient_id, ZERO)

    if payer < 0 and recipient > 0:
        suggested = qround(min(abs(payer), recipient))
        if suggested > 0:
            return suggested

    return None

def recompute_total_expenses(expenses: Iterable[Expense]) -> Decimal:
    total = sum(
        (to_dec(e.amount) for e in expenses if not e.is_settlement),
        ZERO
    )
    return max(ZERO, total)

def recompute_members_paid(expenses: Iterable[Expense]) -> List[int]:
    paid: List[int] = []
    # settlements count too, matching what add_expense records
    for expense in sorted(expenses, key=lambda e: e.id):
        if expense.paid_by not in paid:
            paid.append(expense.paid_by)
    return paid

async def get_group_balances(db: AsyncSession, group_id: int, request_id: int | None = None):
    group = await get_group(db, group_id)
    expenses = await get_group_expenses(db, group_id, request_id)
    return compute_balances(expenses, group.member_ids)

async def get_my_net_spend(db: AsyncSession, group_id: int, user_id: int, request_id: int | None = None):
    await get_group(db, group_id)
    expenses = await get_group_expenses(db, group_id, request_id)
    return compute_net_spend(expenses, user_id)

async def get_settlement_suggestion(
    db: AsyncSession,
    group_id: int,
    payer_id: int,
    recipient_id: int,
    request_id: int | None = None,
):
    balances = await get_group_balances(db, group_id, request_id)
    return suggest_settlement_amount(balances, payer_id, recipient_id)

async def reconcile_group_total(db: AsyncSession, group_id: int) -> Decimal:
    """Repair job: rewrite the cached total from the expense log."""
    group = await get_group(db, group_id)
    expenses = await get_group_expenses(db, group_id)
    total = recompute_total_expenses(expenses)

    if to_dec(group.total_expenses) != total:
        logger.warning(
            "Group %s total drifted: cached %s, log %s",
            group_id, group.total_expenses, total
        )
    await set_group_total(db, group_id, total)
    return total

async def reconcile_members_paid(db: AsyncSession, request_id: int) -> List[int]:
    """Repair job: rebuild members_paid from the request's surviving expenses."""
    request = await get_request(db, request_id)
    expenses = await get_group_expenses(db, request.group_id, request_id)
    paid = recompute_members_paid(expenses)

    if set(request.members_paid or []) != set(paid):
        logger.warning(
            "Request %s members_paid drifted: cached %s, log %s",
            request_id, request.members_paid, paid
        )
    await set_request_payers(db, request_id, paid)
    return paid
