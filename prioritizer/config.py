import os
from dotenv import load_dotenv

load_dotenv()

TIMEZONE = os.getenv("TIMEZONE", "Europe/Zurich")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# memory | supabase
STORE_BACKEND = os.getenv("PRIORITIZER_STORE", "memory").strip().lower()

SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY")


def require_supabase_env() -> tuple[str, str]:
    """Fail fast if the Supabase-backed stores are selected without credentials."""
    url = os.getenv("SUPABASE_URL") or SUPABASE_URL
    key = os.getenv("SUPABASE_SERVICE_ROLE_KEY") or SUPABASE_SERVICE_ROLE_KEY

    missing = []
    if not url:
        missing.append("SUPABASE_URL")
    if not key:
        missing.append("SUPABASE_SERVICE_ROLE_KEY")
    if missing:
        raise EnvironmentError(
            f"Missing required environment variables: {', '.join(missing)}. "
            "Copy .env.example to .env and fill in your Supabase credentials, "
            "or set PRIORITIZER_STORE=memory."
        )
    return url, key
