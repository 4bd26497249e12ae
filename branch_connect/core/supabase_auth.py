import logging

from fastapi import HTTPException, status

from branch_connect.core.config import DISABLE_AUTH, SUPABASE_ANON_KEY, SUPABASE_URL

logger = logging.getLogger(__name__)

# Only initialize Supabase if auth is enabled
if not DISABLE_AUTH:
    from supabase import Client, create_client

    if not SUPABASE_URL or not SUPABASE_ANON_KEY:
        raise RuntimeError("SUPABASE_URL or SUPABASE_ANON_KEY not set")

    supabase: Client = create_client(SUPABASE_URL, SUPABASE_ANON_KEY)
else:
    supabase = None


def get_user_from_token(token: str):
    """
    Resolve a Supabase access token to the auth user.
    Only works when DISABLE_AUTH=false.
    """
    if DISABLE_AUTH:
        raise RuntimeError("Supabase auth is disabled. Set DISABLE_AUTH=false to enable.")

    if not supabase:
        raise RuntimeError("Supabase client not initialized")

    try:
        response = supabase.auth.get_user(token)
    except Exception as exc:
        logger.warning(f"[AUTH] Supabase rejected token: {exc}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Supabase token",
        )

    if not response or not response.user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Supabase token",
        )

    return response.user
