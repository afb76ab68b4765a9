"""
Identity package: auth provider, per-session identity context and sign-in
rate limiting.
"""
from .provider import AuthError, AuthProvider, ProviderUser, Subscription
from .context import IdentityContext, ROLE_ADMIN, ROLE_USER

__all__ = [
    "AuthError",
    "AuthProvider",
    "ProviderUser",
    "Subscription",
    "IdentityContext",
    "ROLE_ADMIN",
    "ROLE_USER",
]
