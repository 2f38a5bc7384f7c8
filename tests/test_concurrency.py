from decimal import Decimal
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from splitledger.db.base import Base
from splitledger.core.exceptions import StoreFailure
from splitledger.core.utils import run_with_retry
from splitledger.models.group import Group
from splitledger.services.aggregate_services import adjust_group_total, add_request_payer
from splitledger.services.group_services import create_group, get_group
from splitledger.services.request_services import create_request, get_request
from splitledger.services.user_service import create_user


@pytest_asyncio.fixture
async def sessions(tmp_path):
    # two real connections so each session has its own transaction
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as first, factory() as second:
        yield first, second

    await engine.dispose()


@pytest_asyncio.fixture
async def shared_group(sessions):
    first, _ = sessions
    owner = await create_user(first, "Alice", "alice@example.com")
    return await create_group(first, "Roommates", owner)


async def test_conflicting_write_is_retried(sessions, shared_group):
    first, second = sessions
    group_id = shared_group.id
    attempts = []

    async def mutate(group):
        attempts.append(group.total_expenses)
        if len(attempts) == 1:
            # someone else commits between our read and our write
            other = await second.get(Group, group_id, populate_existing=True)
            other.total_expenses = other.total_expenses + Decimal("5")
            await second.commit()
        group.total_expenses = group.total_expenses + Decimal("10")

    await run_with_retry(first, Group, group_id, mutate)

    assert attempts == [Decimal("0"), Decimal("5")]
    assert (await get_group(second, group_id)).total_expenses == Decimal("15")


async def test_gives_up_after_retries(sessions, shared_group):
    first, second = sessions
    # a failed run leaves every instance in `first` expired
    group_id = shared_group.id

    async def mutate(group):
        other = await second.get(Group, group_id, populate_existing=True)
        other.total_expenses = other.total_expenses + Decimal("1")
        await second.commit()
        group.total_expenses = Decimal("100")

    with pytest.raises(StoreFailure):
        await run_with_retry(first, Group, group_id, mutate, retries=2)

    assert (await get_group(second, group_id)).total_expenses == Decimal("2")


async def test_missing_row_is_not_retried(sessions):
    first, _ = sessions
    calls = []

    assert await run_with_retry(first, Group, 999, calls.append) is None
    assert calls == []


async def test_adjustments_from_two_sessions_both_land(sessions, shared_group):
    first, second = sessions

    # both sessions hold the group in their identity map
    await get_group(first, shared_group.id)
    await get_group(second, shared_group.id)

    assert await adjust_group_total(second, shared_group.id, Decimal("5")) is True
    assert await adjust_group_total(first, shared_group.id, Decimal("10")) is True

    assert (await get_group(second, shared_group.id)).total_expenses == Decimal("15")


async def test_payers_from_two_sessions_both_land(sessions, shared_group):
    first, second = sessions
    request = await create_request(first, shared_group.id, "Goa Trip", [7], shared_group.created_by)
    await get_request(second, request.id)

    await add_request_payer(second, request.id, 7)
    await add_request_payer(first, request.id, shared_group.created_by)

    assert (await get_request(second, request.id)).members_paid == [7, shared_group.created_by]


async def test_zero_retries_is_honoured(sessions, shared_group):
    first, _ = sessions
    group_id = shared_group.id
    calls = []

    with pytest.raises(StoreFailure):
        await run_with_retry(first, Group, group_id, calls.append, retries=0)

    assert calls == []
    assert (await get_group(first, group_id)).total_expenses == Decimal("0")
