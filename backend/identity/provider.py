"""
Email/password auth provider.

Owns the credential store (`accounts`) and the signed-in identity of one
client session. Callers observe identity changes through
`on_auth_state_changed`, which returns a cancellable subscription.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

from email_validator import validate_email, EmailNotValidError

from utils import utcnow

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Base exception for sign-in failures."""
    NOT_FOUND = "NOT_FOUND"
    INVALID_CREDENTIAL = "INVALID_CREDENTIAL"
    INVALID_INPUT_FORMAT = "INVALID_INPUT_FORMAT"
    RATE_LIMITED = "RATE_LIMITED"
    UNAUTHORIZED = "UNAUTHORIZED"
    UNKNOWN = "UNKNOWN"

    def __init__(self, code: str, message: str, details: dict = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class AccountNotFoundError(AuthError):
    def __init__(self):
        super().__init__(AuthError.NOT_FOUND, "No account for this email")


class InvalidCredentialError(AuthError):
    def __init__(self):
        super().__init__(AuthError.INVALID_CREDENTIAL, "Invalid email or password")


class InvalidInputFormatError(AuthError):
    def __init__(self, reason: str):
        super().__init__(AuthError.INVALID_INPUT_FORMAT, reason)


class RateLimitedError(AuthError):
    def __init__(self, reason: str):
        super().__init__(AuthError.RATE_LIMITED, reason)


class UnauthorizedError(AuthError):
    def __init__(self):
        super().__init__(AuthError.UNAUTHORIZED, "Not authorized")


class AccountExistsError(AuthError):
    def __init__(self):
        super().__init__("ACCOUNT_EXISTS", "An account with this email already exists")


@dataclass(frozen=True)
class ProviderUser:
    """Identity as the provider knows it: a stable uid and an email."""
    uid: str
    email: str
    display_name: Optional[str] = None


AuthStateListener = Callable[[Optional[ProviderUser]], Awaitable[None]]


class Subscription:
    """Handle returned by `on_auth_state_changed`; unsubscribe is idempotent."""

    def __init__(self, provider: "AuthProvider", listener: AuthStateListener):
        self._provider = provider
        self._listener = listener
        self.active = True

    def unsubscribe(self):
        if not self.active:
            return
        self.active = False
        self._provider._remove_listener(self._listener)


def normalize_email(email: str) -> str:
    """Validate email syntax and return its normalized form."""
    try:
        result = validate_email(email or "", check_deliverability=False)
    except EmailNotValidError as e:
        raise InvalidInputFormatError(str(e))
    return result.normalized.lower()


class AuthProvider:
    """Password sign-in against the accounts collection."""

    def __init__(self, accounts_collection=None, rate_limiter=None):
        if accounts_collection is None:
            from database import accounts_collection as default_accounts
            accounts_collection = default_accounts
        if rate_limiter is None:
            from .rate_limiter import default_rate_limiter
            rate_limiter = default_rate_limiter()
        self.accounts = accounts_collection
        self.rate_limiter = rate_limiter
        self.current_user: Optional[ProviderUser] = None
        self._listeners: List[AuthStateListener] = []

    # =========================================================================
    # Subscriptions
    # =========================================================================

    def on_auth_state_changed(self, listener: AuthStateListener) -> Subscription:
        """Register a listener called with the new identity (or None) on every change."""
        self._listeners.append(listener)
        return Subscription(self, listener)

    def _remove_listener(self, listener: AuthStateListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def _notify(self):
        for listener in list(self._listeners):
            try:
                await listener(self.current_user)
            except Exception as e:
                logger.error(f"Auth state listener failed: {e}")

    # =========================================================================
    # Sign in / out
    # =========================================================================

    async def sign_in_with_email_and_password(self, email: str, password: str) -> ProviderUser:
        """
        Authenticate and make the account the current identity.

        Raises:
            InvalidInputFormatError: malformed email or empty password
            RateLimitedError: too many failed attempts for this email
            AccountNotFoundError: no account for this email
            InvalidCredentialError: wrong password
            AuthError(UNKNOWN): the credential store could not be read
        """
        from auth import verify_password

        email = normalize_email(email)
        if not password:
            raise InvalidInputFormatError("Password is required")

        try:
            allowed, reason = await self.rate_limiter.check(email)
            account = await self.accounts.find_one({"email": email}) if allowed else None
        except Exception as e:
            logger.error(f"Credential store unavailable: {e}")
            raise AuthError(AuthError.UNKNOWN, "Authentication service unavailable")

        if not allowed:
            raise RateLimitedError(reason)

        if not account:
            await self.rate_limiter.record_failure(email)
            raise AccountNotFoundError()

        if not verify_password(password, account["password_hash"]):
            await self.rate_limiter.record_failure(email)
            raise InvalidCredentialError()

        await self.rate_limiter.reset(email)
        self.current_user = ProviderUser(
            uid=account["_id"],
            email=account["email"],
            display_name=account.get("display_name")
        )
        logger.info(f"Provider sign-in for {self.current_user.uid}")
        await self._notify()
        return self.current_user

    async def sign_out(self):
        """Drop the current identity; a no-op when nobody is signed in."""
        if self.current_user is None:
            return
        logger.info(f"Provider sign-out for {self.current_user.uid}")
        self.current_user = None
        await self._notify()

    # =========================================================================
    # Account management (operator side)
    # =========================================================================

    async def create_account(self, email: str, password: str, display_name: str = "") -> ProviderUser:
        from auth import MAX_PASSWORD_BYTES, hash_password

        email = normalize_email(email)
        if not password:
            raise InvalidInputFormatError("Password is required")
        if len(password.encode()) > MAX_PASSWORD_BYTES:
            raise InvalidInputFormatError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        if await self.accounts.find_one({"email": email}):
            raise AccountExistsError()

        uid = uuid.uuid4().hex
        await self.accounts.insert_one({
            "_id": uid,
            "email": email,
            "password_hash": hash_password(password),
            "display_name": display_name,
            "created_at": utcnow()
        })
        return ProviderUser(uid=uid, email=email, display_name=display_name)
