from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from splitledger.db.session import get_db
from splitledger.schemas.user import UserCreate, UserOut, UserUpdate
from splitledger.models.user import User
from splitledger.services.user_service import create_user, search_user, update_user_profile
from splitledger.core.dependencies import get_current_user

router = APIRouter()

@router.post("/", response_model=UserOut, description="register a user profile")
async def register_user(data: UserCreate, db: AsyncSession = Depends(get_db)):
    return await create_user(db, data.name, data.email, data.avatar_ref)

@router.get("/me", response_model=UserOut)
async def read_users_me(current_user: User = Depends(get_current_user)):
    return UserOut.model_validate(current_user)

@router.patch("/me", response_model=UserOut)
async def edit_me(
    data: UserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await update_user_profile(db, current_user.id, data.name, data.avatar_ref)

@router.get("/search", response_model=UserOut)
async def search(
    email: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    user = await search_user(db, email)

    if not user:
        raise HTTPException(status_code=404, detail="No user with that email")

    return user
