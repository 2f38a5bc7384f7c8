# import ALL models here so string relationships resolve and
# Base.metadata is complete for create_all / alembic autogenerate
from splitledger.db.session import Base
from splitledger.models.user import User
from splitledger.models.group import Group
from splitledger.models.group_member import GroupMember
from splitledger.models.request import Request
from splitledger.models.expense import Expense
from splitledger.models.expense_split import ExpenseSplit

__all__ = ["Base", "User", "Group", "GroupMember", "Request", "Expense", "ExpenseSplit"]
