from sqlalchemy.orm import declarative_base

Base = declarative_base()


def enum_values(enum_cls):
    """Store enum values (the Supabase labels) instead of member names."""
    return [member.value for member in enum_cls]
