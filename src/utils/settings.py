"""Board configuration read from environment variables."""

import os
from typing import Optional


class BoardConfig:
    """Centralized board configuration."""

    SUPABASE_URL: Optional[str] = os.environ.get("SUPABASE_URL")
    SUPABASE_ANON_KEY: Optional[str] = os.environ.get("SUPABASE_ANON_KEY")
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = os.environ.get("SUPABASE_SERVICE_ROLE_KEY")

    # Upper bound on rows pulled into one snapshot
    TASKS_FETCH_LIMIT = int(os.environ.get("TASKS_FETCH_LIMIT", "1000"))
    DEFAULT_CUSTOMER = os.environ.get("DEFAULT_CUSTOMER", "社内標準（fleston）")
    AUTH_REDIRECT_URL: Optional[str] = os.environ.get("AUTH_REDIRECT_URL")

    @classmethod
    def supabase_key(cls) -> Optional[str]:
        """Anon key when present, service role key otherwise."""
        return os.environ.get("SUPABASE_ANON_KEY", cls.SUPABASE_ANON_KEY) or os.environ.get(
            "SUPABASE_SERVICE_ROLE_KEY", cls.SUPABASE_SERVICE_ROLE_KEY
        )

    @classmethod
    def supabase_url(cls) -> Optional[str]:
        return os.environ.get("SUPABASE_URL", cls.SUPABASE_URL)
