import logging
import uuid
from typing import Callable

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from branch_connect.core.config import DISABLE_AUTH, LOCAL_ADMIN_E_CODE
from branch_connect.db.session import get_db
from branch_connect.models.profile import Profile, UserRole

logger = logging.getLogger(__name__)

if DISABLE_AUTH:
    logger.warning("AUTH MODE: DISABLED (bypass mode, every request acts as the local admin)")
else:
    logger.info("AUTH MODE: ENABLED (Supabase authentication required)")


if DISABLE_AUTH:
    def get_current_user(db: Session = Depends(get_db)) -> Profile:
        """
        AUTH BYPASS MODE - Returns the local admin profile, creating it on first use.
        """
        profile = db.query(Profile).filter(Profile.e_code == LOCAL_ADMIN_E_CODE).first()

        if not profile:
            profile = Profile(
                id=uuid.uuid4(),
                full_name="Local Admin",
                e_code=LOCAL_ADMIN_E_CODE,
                role=UserRole.ADMIN,
                location="",
            )
            db.add(profile)
            db.commit()
            db.refresh(profile)

        return profile
else:
    # Hybrid Auth Mode - local JWT first, Supabase token second
    from branch_connect.core.security import decode_access_token
    from branch_connect.core.supabase_auth import get_user_from_token

    def _profile_for(db: Session, user_id) -> Profile:
        try:
            profile_id = uuid.UUID(str(user_id))
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or expired token",
            )
        profile = db.query(Profile).filter(Profile.id == profile_id).first()
        if not profile:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="No profile exists for this account",
            )
        return profile

    def get_current_user(
        authorization: str = Header(...),
        db: Session = Depends(get_db),
    ) -> Profile:
        """
        HYBRID AUTH MODE - Validates local JWT and Supabase tokens.
        Profiles are created at signup by the backend, never here.
        """
        if not authorization.startswith("Bearer "):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid Authorization header",
            )

        token = authorization.replace("Bearer ", "", 1)

        try:
            decoded = decode_access_token(token)
        except HTTPException:
            decoded = None

        if decoded and decoded.get("sub"):
            return _profile_for(db, decoded["sub"])

        supabase_user = get_user_from_token(token)
        return _profile_for(db, supabase_user.id)


def require_roles(*roles: UserRole) -> Callable[..., Profile]:
    """Dependency factory: only the given roles may call the route."""
    allowed = set(roles)

    def guard(current_user: Profile = Depends(get_current_user)) -> Profile:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access restricted. Your role does not have access to this resource.",
            )
        return current_user

    return guard
