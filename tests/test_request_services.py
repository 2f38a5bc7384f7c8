from decimal import Decimal
import pytest
from sqlalchemy import select
from splitledger.core.exceptions import InvalidArgument, NotFound
from splitledger.models.expense import Expense
from splitledger.models.request import DEFAULT_ICON
from splitledger.schemas.group import MembershipStatus
from splitledger.services.expense_services import add_expense
from splitledger.services.group_services import create_group, add_member, get_group
from splitledger.services.request_services import (
    create_request, get_request, get_group_requests, list_requests_for_user,
    add_member_to_request, remove_member_from_request, delete_request
)


async def test_creator_is_forced_into_request(db, alice, bob):
    group = await create_group(db, "Roommates", alice)
    await add_member(db, group.id, bob)

    request = await create_request(db, group.id, "Goa Trip", [bob.id, bob.id], alice.id)

    assert request.member_ids == [bob.id, alice.id]
    assert request.members_paid == []
    assert request.created_by == alice.id
    assert request.icon == DEFAULT_ICON
    assert request.group_id == group.id


async def test_creator_listed_once(db, alice, bob):
    group = await create_group(db, "Roommates", alice)

    request = await create_request(db, group.id, "Goa Trip", [alice.id, bob.id], alice.id, icon="airplane")

    assert request.member_ids == [alice.id, bob.id]
    assert request.icon == "airplane"


async def test_create_request_validation(db, alice, bob):
    group = await create_group(db, "Roommates", alice)

    with pytest.raises(InvalidArgument):
        await create_request(db, group.id, "Goa Trip", [], alice.id)

    with pytest.raises(InvalidArgument):
        await create_request(db, group.id, " ", [bob.id], alice.id)

    with pytest.raises(NotFound):
        await create_request(db, 999, "Goa Trip", [bob.id], alice.id)

    assert await get_group_requests(db, group.id) == []


async def test_request_members_are_not_checked_against_group(db, alice, carol):
    group = await create_group(db, "Roommates", alice)

    request = await create_request(db, group.id, "Goa Trip", [carol.id], alice.id)
    status = await add_member_to_request(db, request.id, 4242)

    assert status == MembershipStatus.ADDED
    assert (await get_request(db, request.id)).member_ids == [carol.id, alice.id, 4242]
    assert (await get_group(db, group.id)).member_ids == [alice.id]


async def test_request_membership_changes(db, alice, bob, carol):
    group = await create_group(db, "Roommates", alice)
    request = await create_request(db, group.id, "Goa Trip", [bob.id], alice.id)

    assert await add_member_to_request(db, request.id, carol.id) == MembershipStatus.ADDED
    assert await add_member_to_request(db, request.id, carol.id) == MembershipStatus.ALREADY_MEMBER

    await remove_member_from_request(db, request.id, bob.id)
    await remove_member_from_request(db, request.id, bob.id)

    assert (await get_request(db, request.id)).member_ids == [alice.id, carol.id]


async def test_request_membership_on_missing_request(db, alice):
    with pytest.raises(NotFound):
        await add_member_to_request(db, 999, alice.id)

    with pytest.raises(NotFound):
        await remove_member_from_request(db, 999, alice.id)


async def test_list_requests_for_user(db, alice, bob, carol):
    group = await create_group(db, "Roommates", alice)
    r1 = await create_request(db, group.id, "Goa Trip", [bob.id], alice.id)
    r2 = await create_request(db, group.id, "Party", [carol.id], alice.id)
    r3 = await create_request(db, group.id, "Movie", [alice.id], carol.id)

    assert [r.id for r in await list_requests_for_user(db, bob.id)] == [r1.id]
    assert [r.id for r in await list_requests_for_user(db, carol.id)] == [r2.id, r3.id]


async def test_delete_request_cascades_and_fixes_total(db, alice, bob):
    group = await create_group(db, "Roommates", alice)
    await add_member(db, group.id, bob)
    trip = await create_request(db, group.id, "Goa Trip", [bob.id], alice.id)

    await add_expense(db, group.id, "Hotel", Decimal("200"), alice.id, [alice.id, bob.id], request_id=trip.id)
    await add_expense(db, group.id, "Taxi", Decimal("20"), bob.id, [alice.id, bob.id], request_id=trip.id)
    general = await add_expense(db, group.id, "Groceries", Decimal("15"), bob.id, [alice.id, bob.id])

    assert await delete_request(db, trip.id) is True

    res = await db.execute(select(Expense.id).where(Expense.group_id == group.id))
    assert res.scalars().all() == [general.id]
    assert (await get_group(db, group.id)).total_expenses == Decimal("15")

    with pytest.raises(NotFound):
        await get_request(db, trip.id)


async def test_delete_request_without_expenses(db, alice):
    group = await create_group(db, "Roommates", alice)
    request = await create_request(db, group.id, "Empty", [alice.id], alice.id)

    assert await delete_request(db, request.id) is True
    assert await delete_request(db, request.id) is False
