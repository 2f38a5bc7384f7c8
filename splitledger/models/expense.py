import enum
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Numeric, CheckConstraint
from sqlalchemy.orm import relationship
from splitledger.db.session import Base


class ExpenseType(str, enum.Enum):
    EXPENSE = "expense"
    SETTLEMENT = "settlement"


def utcnow():
    return datetime.now(timezone.utc)


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    group_id = Column(Integer, ForeignKey("groups.id"), nullable=False, index=True)
    # weak reference used for filtering only
    request_id = Column(Integer, nullable=True, index=True)
    title = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    paid_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    # NULL is read as a plain expense (rows written before settlements existed)
    type = Column(String(20), nullable=True, default=ExpenseType.EXPENSE.value)
    date = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    splits = relationship(
        "ExpenseSplit",
        back_populates="expense",
        cascade="all, delete-orphan",
        order_by="ExpenseSplit.position",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("amount > 0", name="check_expense_amount_positive"),
    )

    @property
    def split_with(self):
        return [s.user_id for s in self.splits]

    @property
    def is_settlement(self) -> bool:
        return self.type == ExpenseType.SETTLEMENT.value

    def __repr__(self) -> str:
        return f"<Expense(id={self.id}, group_id={self.group_id}, amount={self.amount})>"
