import inspect
import logging
from decimal import Decimal, ROUND_HALF_UP, getcontext
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError
from splitledger.core.config import settings
from splitledger.core.exceptions import StoreFailure

logger = logging.getLogger(__name__)

getcontext().prec = 28
CENTS = Decimal("0.01")
ZERO = Decimal("0")

def qround(d: Decimal) -> Decimal:
    return d.quantize(CENTS, rounding=ROUND_HALF_UP)

def to_dec(x) -> Decimal:
    if isinstance(x, Decimal):
        return x
    return Decimal(str(x))

async def commit_or_fail(db: AsyncSession):
    try:
        await db.commit()
    except SQLAlchemyError as e:
        logger.error("Commit failed: %s", e)
        await db.rollback()
        raise StoreFailure(str(e)) from e

async def run_with_retry(db: AsyncSession, model, entity_id, mutate, retries: int | None = None):
    """
    Optimistic read-modify-write on a single versioned row.

    The row is re-read on every attempt, `mutate(entity)` (sync or async)
    edits it in place and the session commits. The mapper's version column
    turns a concurrent write into StaleDataError, in which case the session
    is rolled back and the whole read/mutate/write is repeated.

    Returns the committed entity, or None when the row does not exist.
    A StoreFailure leaves the session rolled back, so every instance it
    holds is expired and must be re-read before use.
    """
    if retries is None:
        retries = settings.CONFLICT_RETRIES

    for attempt in range(1, retries + 1):
        try:
            entity = await db.get(model, entity_id, populate_existing=True)
        except SQLAlchemyError as e:
            logger.error("Reading %s %s failed: %s", model.__name__, entity_id, e)
            await db.rollback()
            raise StoreFailure(str(e)) from e

        if entity is None:
            return None

        result = mutate(entity)
        if inspect.isawaitable(result):
            await result

        try:
            await db.commit()
            return entity
        except StaleDataError:
            await db.rollback()
            logger.warning(
                "Conflicting write on %s %s (attempt %d/%d), retrying",
                model.__name__, entity_id, attempt, retries
            )
        except SQLAlchemyError as e:
            logger.error("Writing %s %s failed: %s", model.__name__, entity_id, e)
            await db.rollback()
            raise StoreFailure(str(e)) from e

    raise StoreFailure(
        f"Gave up updating {model.__name__} {entity_id} after {retries} conflicting writes"
    )

async def flush_or_fail(db: AsyncSession):
    try:
        await db.flush()
    except SQLAlchemyError as e:
        logger.error("Flush failed: %s", e)
        await db.rollback()
        raise StoreFailure(str(e)) from e
