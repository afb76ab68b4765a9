"""
Authentication routes for the App Store site API
"""
from fastapi import APIRouter, Depends
from typing import AsyncIterator
import logging

from models import UserLogin, UserResponse, TokenResponse
from auth import create_access_token, get_current_user
from identity import AuthError, AuthProvider, IdentityContext, ROLE_ADMIN
from i18n import LocaleContext
from routers.locale import get_locale_context, localized_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

AUTH_ERROR_RESPONSES = {
    AuthError.NOT_FOUND: (404, "login.userNotFound"),
    AuthError.INVALID_CREDENTIAL: (401, "login.wrongPassword"),
    AuthError.INVALID_INPUT_FORMAT: (400, "login.invalidEmail"),
    AuthError.RATE_LIMITED: (429, "login.tooManyRequests"),
    AuthError.UNAUTHORIZED: (403, "login.notAuthorized"),
    AuthError.UNKNOWN: (500, "login.error"),
}


def get_auth_provider() -> AuthProvider:
    return AuthProvider()


async def get_identity_context(
    provider: AuthProvider = Depends(get_auth_provider)
) -> AsyncIterator[IdentityContext]:
    """Identity context for one request; unsubscribed when the request ends."""
    async with IdentityContext(provider) as identity:
        yield identity


def _iso(value):
    return value.isoformat() if value is not None else None


def build_user_response(user: dict) -> UserResponse:
    """Build a UserResponse from a user document."""
    role = user.get("role", "user")
    return UserResponse(
        uid=str(user["_id"]),
        email=user["email"],
        display_name=user.get("displayName"),
        role=role,
        is_admin=role == ROLE_ADMIN,
        created_at=_iso(user.get("createdAt")),
        last_login=_iso(user.get("lastLogin")),
    )


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    identity: IdentityContext = Depends(get_identity_context),
    locale: LocaleContext = Depends(get_locale_context)
):
    try:
        user = await identity.login(credentials.email, credentials.password)
    except AuthError as e:
        status_code, message_key = AUTH_ERROR_RESPONSES.get(e.code, (500, "login.error"))
        logger.info(f"Login rejected ({e.code}) for {credentials.email}")
        raise localized_error(status_code, e.code, message_key, locale)

    access_token = create_access_token(data={"sub": str(user["_id"])})
    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        user=build_user_response(user),
        message=locale.t("login.success"),
    )


@router.post("/logout")
async def logout(
    identity: IdentityContext = Depends(get_identity_context),
    locale: LocaleContext = Depends(get_locale_context)
):
    # Tokens are stateless; the client discards its copy
    await identity.logout()
    return {"success": True, "message": locale.t("logout.success")}


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(user: dict = Depends(get_current_user)):
    return build_user_response(user)
