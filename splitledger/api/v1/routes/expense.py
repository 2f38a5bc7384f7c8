from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from splitledger.db.session import get_db
from splitledger.core.dependencies import get_current_user, check_group_membership
from splitledger.schemas.expense import ExpenseCreate, ExpenseOut
from splitledger.services.expense_services import add_expense, delete_expense, get_expense

router = APIRouter()

@router.post("/", response_model=ExpenseOut)
async def create_expense(data: ExpenseCreate, db: AsyncSession = Depends(get_db), current_user = Depends(get_current_user)):
    await check_group_membership(db, data.group_id, current_user.id)
    return await add_expense(
        db,
        group_id=data.group_id,
        title=data.title,
        amount=data.amount,
        paid_by=data.paid_by if data.paid_by is not None else current_user.id,
        split_with=data.split_with,
        type=data.type,
        request_id=data.request_id,
    )

@router.get("/{expense_id}", response_model=ExpenseOut)
async def fetch(expense_id: int, db: AsyncSession = Depends(get_db), current_user = Depends(get_current_user)):
    expense = await get_expense(db, expense_id)
    await check_group_membership(db, expense.group_id, current_user.id)
    return expense

@router.delete("/{expense_id}")
async def del_expense(expense_id: int, db: AsyncSession = Depends(get_db), current_user = Depends(get_current_user)):
    expense = await get_expense(db, expense_id)
    await check_group_membership(db, expense.group_id, current_user.id)

    if not await delete_expense(db, expense_id):
        raise HTTPException(404, "Expense not found")

    return {"status": "deleted"}
