from sqlalchemy import Column, Integer, ForeignKey
from sqlalchemy.orm import relationship
from splitledger.db.session import Base

class ExpenseSplit(Base):
    __tablename__ = "expense_splits"

    id = Column(Integer, primary_key=True, index=True)
    expense_id = Column(Integer, ForeignKey("expenses.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    position = Column(Integer, nullable=False)

    expense = relationship("Expense", back_populates="splits")
