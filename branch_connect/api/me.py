from fastapi import APIRouter, Depends

from branch_connect.core.dependencies import get_current_user
from branch_connect.models.profile import Profile
from branch_connect.schemas.profile import ProfileResponse

router = APIRouter(prefix="/me", tags=["Me"])


@router.get("", response_model=ProfileResponse)
def get_me(current_user: Profile = Depends(get_current_user)):
    """Get current user profile"""
    return current_user
