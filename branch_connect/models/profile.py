import enum
import uuid

from sqlalchemy import Column, DateTime, Enum, String, Uuid
from sqlalchemy.sql import func

from branch_connect.db.base import Base, enum_values


# Python enums matching the Supabase enums (values, not names, are stored)
class UserRole(str, enum.Enum):
    BH = "BH"
    ZH = "ZH"
    CH = "CH"
    ADMIN = "admin"


class Gender(str, enum.Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


SUPERVISOR_ROLES = (UserRole.ZH, UserRole.CH, UserRole.ADMIN)


class Profile(Base):
    __tablename__ = "profiles"

    # Same id as the Supabase auth user
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    full_name = Column(String, nullable=False)
    e_code = Column(String, nullable=False)

    role = Column(
        Enum(UserRole, name="user_role", values_callable=enum_values),
        nullable=False,
    )
    location = Column(String, nullable=False, default="")
    gender = Column(
        Enum(Gender, name="gender", values_callable=enum_values),
        nullable=True,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )
