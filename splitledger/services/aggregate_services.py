"""
Maintenance of the denormalised aggregates: Group.total_expenses and
Request.members_paid / Request.member_ids.

Every write here is its own optimistic transaction (see run_with_retry), so
two callers touching the same group or request never lose each other's
update. A missing row is tolerated and reported as False.
"""
import logging
from decimal import Decimal
from typing import Iterable
from sqlalchemy.ext.asyncio import AsyncSession
from splitledger.models.group import Group
from splitledger.models.request import Request
from splitledger.core.utils import ZERO, run_with_retry, to_dec

logger = logging.getLogger(__name__)

def _union(current: Iterable[int], *ids: int):
    merged = list(current or [])
    for uid in ids:
        if uid not in merged:
            merged.append(uid)
    return merged

async def adjust_group_total(db: AsyncSession, group_id: int, delta: Decimal) -> bool:
    delta = to_dec(delta)

    def apply(group: Group):
        current = to_dec(group.total_expenses or ZERO)
        group.total_expenses = max(ZERO, current + delta)

    group = await run_with_retry(db, Group, group_id, apply)
    if group is None:
        logger.info("Group %s vanished before its total could be adjusted by %s", group_id, delta)
        return False
    return True

async def set_group_total(db: AsyncSession, group_id: int, total: Decimal) -> bool:
    def apply(group: Group):
        group.total_expenses = max(ZERO, to_dec(total))

    return await run_with_retry(db, Group, group_id, apply) is not None

async def add_request_payer(db: AsyncSession, request_id: int, user_id: int) -> bool:
    def apply(request: Request):
        if user_id not in (request.members_paid or []):
            request.members_paid = _union(request.members_paid, user_id)

    request = await run_with_retry(db, Request, request_id, apply)
    if request is None:
        logger.info("Request %s not found while recording payer %s", request_id, user_id)
        return False
    return True

async def set_request_payers(db: AsyncSession, request_id: int, user_ids) -> bool:
    def apply(request: Request):
        request.members_paid = list(user_ids)

    return await run_with_retry(db, Request, request_id, apply) is not None

async def add_request_member(db: AsyncSession, request_id: int, user_id: int):
    """Returns (request, added); request is None when it does not exist."""
    added = []

    def apply(request: Request):
        added.clear()
        if user_id not in (request.member_ids or []):
            request.member_ids = _union(request.member_ids, user_id)
            added.append(True)

    request = await run_with_retry(db, Request, request_id, apply)
    return request, bool(added)

async def remove_request_member(db: AsyncSession, request_id: int, user_id: int):
    def apply(request: Request):
        if user_id in (request.member_ids or []):
            request.member_ids = [uid for uid in request.member_ids if uid != user_id]

    return await run_with_retry(db, Request, request_id, apply)
