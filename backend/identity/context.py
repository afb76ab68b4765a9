"""
Identity context: bridges the auth provider to the `users` collection.

Holds `{user, loading, is_admin}` for one client session. `is_admin` is
always derived from the role stored in the user's document, never from
anything the client sends.
"""
import logging
from typing import Optional

from .provider import AuthError, AuthProvider, ProviderUser, Subscription, UnauthorizedError
from utils import spawn_background, utcnow

logger = logging.getLogger(__name__)

ROLE_ADMIN = "admin"
ROLE_USER = "user"


class IdentityContext:
    """Per-session identity state driven by auth-state notifications."""

    def __init__(self, provider: AuthProvider, users_collection=None):
        if users_collection is None:
            from database import users_collection as default_users
            users_collection = default_users
        self.provider = provider
        self.users = users_collection
        self.user: Optional[dict] = None
        self.loading = True
        self._subscription: Optional[Subscription] = None

    @property
    def is_admin(self) -> bool:
        return bool(self.user) and self.user.get("role") == ROLE_ADMIN

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(self):
        """Subscribe to auth-state changes and resolve the current identity."""
        if self._subscription is None or not self._subscription.active:
            self._subscription = self.provider.on_auth_state_changed(self._on_auth_state_changed)
        await self._on_auth_state_changed(self.provider.current_user)

    def close(self):
        """Stop reacting to auth-state changes (view teardown)."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.close()

    async def _on_auth_state_changed(self, provider_user: Optional[ProviderUser]):
        if provider_user is None:
            self.user = None
            self.loading = False
            return
        try:
            self.user = await self._load_or_create_user(provider_user)
        except Exception as e:
            logger.error(f"Error fetching user data for {provider_user.uid}: {e}")
            self.user = None
        finally:
            self.loading = False

    async def _load_or_create_user(self, provider_user: ProviderUser) -> dict:
        user = await self.users.find_one({"_id": provider_user.uid})
        if user:
            return user

        now = utcnow()
        user = {
            "_id": provider_user.uid,
            "email": provider_user.email,
            "displayName": provider_user.display_name or "",
            "role": ROLE_USER,
            "createdAt": now,
            "lastLogin": now,
        }
        await self.users.insert_one(user)
        logger.info(f"Created user document for {provider_user.uid}")
        return user

    # =========================================================================
    # Login / logout
    # =========================================================================

    async def login(self, email: str, password: str) -> dict:
        """
        Sign in and keep the session only for admins.

        The role is re-read from the stored user document after the
        credential check. Any other role signs the session out again and
        raises UnauthorizedError.

        Raises:
            AuthError: one of the provider's failure codes, or UNAUTHORIZED
        """
        self.loading = True
        try:
            provider_user = await self.provider.sign_in_with_email_and_password(email, password)

            try:
                stored = await self.users.find_one({"_id": provider_user.uid})
            except Exception as e:
                logger.error(f"Could not read role for {provider_user.uid}: {e}")
                stored = None

            if not stored or stored.get("role") != ROLE_ADMIN:
                await self.provider.sign_out()
                self.user = None
                raise UnauthorizedError()

            self.user = stored
            spawn_background(self._touch_last_login(provider_user.uid), name=f"last-login-{provider_user.uid}")
            return stored
        except AuthError:
            raise
        except Exception as e:
            logger.error(f"Login error: {e}")
            raise AuthError(AuthError.UNKNOWN, "Unexpected error during login")
        finally:
            self.loading = False

    async def _touch_last_login(self, uid: str):
        try:
            await self.users.update_one({"_id": uid}, {"$set": {"lastLogin": utcnow()}})
        except Exception as e:
            logger.warning(f"Failed to update lastLogin for {uid}: {e}")

    async def logout(self):
        """End the provider session and clear in-memory identity; idempotent."""
        await self.provider.sign_out()
        self.user = None
