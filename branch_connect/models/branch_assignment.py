import uuid

from sqlalchemy import Column, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from branch_connect.db.base import Base


class BranchAssignment(Base):
    __tablename__ = "branch_assignments"
    __table_args__ = (
        UniqueConstraint("user_id", "branch_id", name="branch_assignments_user_id_branch_id_key"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    user_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False)
    branch_id = Column(Uuid, ForeignKey("branches.id"), nullable=False)

    assigned_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    profile = relationship("Profile")
    branch = relationship("Branch")
