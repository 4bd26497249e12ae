import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root first, then fall back to the working directory
project_root_env = Path(__file__).resolve().parent.parent.parent / ".env"

if project_root_env.exists():
    load_dotenv(dotenv_path=project_root_env)
else:
    load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./branch_connect.db")

SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY")

# ============================================
# AUTH TOGGLE CONFIGURATION
# ============================================
# DISABLE_AUTH=true  -> every request acts as the local admin profile
# DISABLE_AUTH=false -> Bearer token required (local JWT or Supabase)
# ============================================
DISABLE_AUTH = os.getenv("DISABLE_AUTH", "true").lower() == "true"

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "CHANGE_THIS_TO_A_SECURE_RANDOM_STRING_IN_PRODUCTION")
JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("JWT_ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))  # 24 hours default

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

LOCAL_ADMIN_E_CODE = os.getenv("LOCAL_ADMIN_E_CODE", "ADMIN-LOCAL")
