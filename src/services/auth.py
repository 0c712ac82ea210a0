"""Magic-link authentication through Supabase Auth."""

from typing import Any, Optional

from supabase import AuthError

from src.services.supabase_client import SupabaseClient
from src.utils.errors import AuthenticationError, SupabaseError
from src.utils.logging import get_structured_logger, mask_sensitive_data, mask_user_id
from src.utils.settings import BoardConfig

logger = get_structured_logger(__name__)


async def send_magic_link(email: str, redirect_to: Optional[str] = None) -> None:
    """Ask Supabase to email a one-time sign-in link."""
    email = (email or "").strip()
    if not email:
        raise AuthenticationError("Email is required to sign in")

    options = {}
    redirect_to = redirect_to or BoardConfig.AUTH_REDIRECT_URL
    if redirect_to:
        options["email_redirect_to"] = redirect_to

    async with SupabaseClient() as client:
        try:
            client.auth.sign_in_with_otp({"email": email, "options": options})
        except Exception as e:
            logger.warning("Magic link request failed", email=mask_sensitive_data(email), error=str(e))
            raise AuthenticationError(f"Failed to send magic link: {e}")

    logger.info("Magic link sent", email=mask_sensitive_data(email))


async def get_current_session() -> Optional[Any]:
    """Current auth session, or None when nobody is signed in."""
    async with SupabaseClient() as client:
        try:
            return client.auth.get_session()
        except Exception as e:
            raise SupabaseError(f"Failed to read auth session: {e}")


async def is_authenticated() -> bool:
    return await get_current_session() is not None


async def require_user(access_token: Optional[str]) -> Any:
    """
    User behind a request's access token.

    Raises AuthenticationError when the token is missing or Supabase Auth
    rejects it.
    """
    if not access_token:
        raise AuthenticationError("Sign-in required")

    async with SupabaseClient() as client:
        try:
            response = client.auth.get_user(access_token)
        except AuthError as e:
            logger.info("Access token rejected", error=mask_sensitive_data(str(e)))
            raise AuthenticationError("Sign-in required")
        except Exception as e:
            raise SupabaseError(f"Failed to verify access token: {e}")

    user = getattr(response, "user", None)
    if user is None:
        raise AuthenticationError("Sign-in required")

    logger.debug("Caller resolved", user_id=mask_user_id(getattr(user, "id", None)))
    return user


async def sign_out() -> None:
    async with SupabaseClient() as client:
        try:
            client.auth.sign_out()
        except Exception as e:
            raise SupabaseError(f"Failed to sign out: {e}")
    logger.info("Signed out")
