from decimal import Decimal
from sqlalchemy import Column, Integer, String, DateTime, Numeric, ForeignKey, JSON
from sqlalchemy.sql import func
from splitledger.db.session import Base

DEFAULT_ICON = "documents-outline"

class Request(Base):
    """
    A sub-ledger inside a group (a trip, an event).

    member_ids and members_paid are set-valued and stored as JSON lists.
    They are only ever replaced wholesale through run_with_retry so the
    version column can detect concurrent writers.
    """
    __tablename__ = "requests"

    id = Column(Integer, primary_key=True, index=True)
    group_id = Column(Integer, ForeignKey("groups.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    icon = Column(String, nullable=False, default=DEFAULT_ICON)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    member_ids = Column(JSON, nullable=False, default=list)
    members_paid = Column(JSON, nullable=False, default=list)
    total_amount = Column(Numeric(12, 2), nullable=True, default=Decimal("0"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<Request(id={self.id}, group_id={self.group_id}, title={self.title})>"
