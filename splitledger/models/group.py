from decimal import Decimal
from sqlalchemy import Column, Integer, String, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from splitledger.db.session import Base

class Group(Base):
    __tablename__ = "groups"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    image_ref = Column(String, nullable=True)
    # running sum of non-settlement expenses, never below zero
    total_expenses = Column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    version = Column(Integer, nullable=False)

    memberships = relationship(
        "GroupMember",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="GroupMember.id",
        lazy="selectin",
    )

    __mapper_args__ = {"version_id_col": version}

    @property
    def members(self):
        return [m.user for m in self.memberships]

    @property
    def member_ids(self):
        return [m.user_id for m in self.memberships]

    def __repr__(self) -> str:
        return f"<Group(id={self.id}, name={self.name})>"
