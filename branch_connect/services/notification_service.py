import logging
from typing import Optional
from uuid import UUID

import requests

from branch_connect.core.config import SUPABASE_SERVICE_ROLE_KEY, SUPABASE_URL

logger = logging.getLogger(__name__)


def lookup_user_email(user_id: UUID) -> Optional[str]:
    """Profiles carry no email; the Supabase auth user does."""
    from supabase import create_client

    try:
        admin = create_client(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY)
        response = admin.auth.admin.get_user_by_id(str(user_id))
    except Exception as exc:
        logger.warning(f"[EMAIL] Could not resolve email for {user_id}: {exc}")
        return None

    if not response or not response.user:
        return None
    return response.user.email


def send_visit_decision_email(
    *,
    user_id: UUID,
    user_name: str,
    decision: str,
    comment: Optional[str],
    branch_name: str,
    visit_date: str,
    reviewer_name: Optional[str] = None,
) -> None:
    """
    Tell a reporter that their visit report was approved or rejected.

    Uses the `send-approval-email` edge function. Skipped when Supabase is not
    configured; delivery failures are logged and never raised.
    """
    if not SUPABASE_URL or not SUPABASE_SERVICE_ROLE_KEY:
        logger.info(
            f"[EMAIL] Skipped - Missing env vars. SUPABASE_URL={bool(SUPABASE_URL)}, "
            f"SERVICE_ROLE_KEY={bool(SUPABASE_SERVICE_ROLE_KEY)}"
        )
        return

    user_email = lookup_user_email(user_id)
    if not user_email:
        logger.info(f"[EMAIL] Skipped - No email on record for {user_id}")
        return

    function_url = f"{SUPABASE_URL}/functions/v1/send-approval-email"
    payload = {
        "email": user_email,
        "name": user_name,
        "decision": decision,
        "comment": comment or "",
        "request_type": "branch_visit",
        "branch_name": branch_name,
        "visit_date": visit_date,
    }
    if reviewer_name:
        payload["reviewer_name"] = reviewer_name

    headers = {
        "Authorization": f"Bearer {SUPABASE_SERVICE_ROLE_KEY}",
        "Content-Type": "application/json",
    }

    logger.info(f"[EMAIL] Sending {decision} notification to {user_email} for visit on {visit_date}...")

    try:
        response = requests.post(function_url, json=payload, headers=headers, timeout=10)
        logger.info(
            f"[EMAIL] Response: status={response.status_code}, "
            f"body={response.text[:200] if response.text else 'empty'}"
        )
    except requests.RequestException as exc:
        logger.warning(f"[EMAIL] Failed to send email to {user_email}: {exc}")
