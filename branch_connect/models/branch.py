import enum
import uuid

from sqlalchemy import Column, DateTime, Enum, String, Uuid
from sqlalchemy.sql import func

from branch_connect.db.base import Base, enum_values


class BranchCategory(str, enum.Enum):
    PLATINUM = "platinum"
    DIAMOND = "diamond"
    GOLD = "gold"
    SILVER = "silver"
    BRONZE = "bronze"


# Display order for every per-category table
CATEGORY_ORDER = [
    BranchCategory.PLATINUM,
    BranchCategory.DIAMOND,
    BranchCategory.GOLD,
    BranchCategory.SILVER,
    BranchCategory.BRONZE,
]


class Branch(Base):
    __tablename__ = "branches"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    location = Column(String, nullable=False)
    category = Column(
        Enum(BranchCategory, name="branch_category", values_callable=enum_values),
        nullable=False,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )
