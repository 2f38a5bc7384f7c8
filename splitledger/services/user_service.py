import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from splitledger.models.user import User
from splitledger.core.exceptions import InvalidArgument, NotFound
from splitledger.core.utils import commit_or_fail, flush_or_fail

logger = logging.getLogger(__name__)

DEFAULT_AVATAR = "https://i.pravatar.cc/150?u={user_id}"

async def get_user_by_email(db: AsyncSession, email: str):
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()

async def get_user_by_id(db: AsyncSession, id: int):
    result = await db.execute(select(User).where(User.id == id))
    return result.scalar_one_or_none()

async def search_user(db: AsyncSession, email: str):
    return await get_user_by_email(db, email.strip())

async def create_user(db: AsyncSession, name: str, email: str, avatar_ref: str | None = None):
    if not name or not name.strip():
        raise InvalidArgument("Name is required")
    if not email or not email.strip():
        raise InvalidArgument("Email is required")

    existing = await get_user_by_email(db, email.strip())
    if existing:
        raise InvalidArgument("User already exists")

    user = User(name=name.strip(), email=email.strip(), avatar_ref=avatar_ref)
    db.add(user)
    await flush_or_fail(db)  # gives user.id

    if not user.avatar_ref:
        user.avatar_ref = DEFAULT_AVATAR.format(user_id=user.id)

    await commit_or_fail(db)
    logger.info("Created user %s", user.id)
    return user

async def update_user_profile(db: AsyncSession, user_id: int, name: str, avatar_ref: str | None = None):
    user = await get_user_by_id(db, user_id)

    if not user:
        raise NotFound("User", user_id)

    if not name or not name.strip():
        raise InvalidArgument("Name is required")

    user.name = name.strip()

    if avatar_ref:
        user.avatar_ref = avatar_ref

    await commit_or_fail(db)
    return user
