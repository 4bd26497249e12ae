import pytest
from fastapi import HTTPException

from branch_connect.core.config import LOCAL_ADMIN_E_CODE
from branch_connect.core.dependencies import get_current_user
from branch_connect.core.security import create_access_token, decode_access_token
from branch_connect.models import Profile, UserRole


def test_access_token_round_trip():
    token = create_access_token({"sub": "3f1c1f3e-2a43-4d55-9f55-2c8a4c1b9a10"})

    payload = decode_access_token(token)

    assert payload["sub"] == "3f1c1f3e-2a43-4d55-9f55-2c8a4c1b9a10"
    assert payload["type"] == "access"


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "someone"}, expires_minutes=-1)

    with pytest.raises(HTTPException) as exc:
        decode_access_token(token)
    assert exc.value.status_code == 401


def test_bypass_mode_provisions_local_admin_once(db):
    first = get_current_user(db)
    second = get_current_user(db)

    assert first.id == second.id
    assert first.role == UserRole.ADMIN
    assert db.query(Profile).filter(Profile.e_code == LOCAL_ADMIN_E_CODE).count() == 1
