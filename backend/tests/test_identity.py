"""
Tests for the auth provider, identity context and sign-in rate limiting
"""
from unittest.mock import AsyncMock, MagicMock

import pytest

from identity import AuthError, AuthProvider, IdentityContext, ROLE_ADMIN
from identity.rate_limiter import LoginRateLimiter
from migrations.admin_role import create_account, grant_admin_role


@pytest.fixture
def provider(mongo_db):
    limiter = LoginRateLimiter(mongo_db["loginAttempts"], per_minute=3, per_hour=10)
    return AuthProvider(accounts_collection=mongo_db["accounts"], rate_limiter=limiter)


@pytest.fixture
async def identity(provider, mongo_db):
    ctx = IdentityContext(provider, users_collection=mongo_db["users"])
    await ctx.start()
    yield ctx
    ctx.close()


async def register(mongo_db, email, password="s3cret-pass", admin=False):
    return await create_account(
        email, password, "Test", admin=admin,
        accounts_collection=mongo_db["accounts"],
        users_collection=mongo_db["users"]
    )


class TestAuthProvider:
    async def test_listener_notified_on_sign_in_and_out(self, provider, mongo_db):
        await register(mongo_db, "user@example.com")
        seen = []

        async def listener(user):
            seen.append(user.email if user else None)

        subscription = provider.on_auth_state_changed(listener)
        await provider.sign_in_with_email_and_password("user@example.com", "s3cret-pass")
        await provider.sign_out()
        await provider.sign_out()
        subscription.unsubscribe()
        subscription.unsubscribe()
        await provider.sign_in_with_email_and_password("user@example.com", "s3cret-pass")

        assert seen == ["user@example.com", None]

    async def test_unknown_account(self, provider):
        with pytest.raises(AuthError) as exc:
            await provider.sign_in_with_email_and_password("nobody@example.com", "pw")
        assert exc.value.code == AuthError.NOT_FOUND

    async def test_wrong_password(self, provider, mongo_db):
        await register(mongo_db, "user@example.com")
        with pytest.raises(AuthError) as exc:
            await provider.sign_in_with_email_and_password("user@example.com", "wrong")
        assert exc.value.code == AuthError.INVALID_CREDENTIAL

    @pytest.mark.parametrize("email,password", [("not-an-email", "pw"), ("user@example.com", "")])
    async def test_invalid_input(self, provider, email, password):
        with pytest.raises(AuthError) as exc:
            await provider.sign_in_with_email_and_password(email, password)
        assert exc.value.code == AuthError.INVALID_INPUT_FORMAT

    async def test_over_long_password_is_a_wrong_password(self, provider, mongo_db):
        await register(mongo_db, "user@example.com")

        with pytest.raises(AuthError) as exc:
            await provider.sign_in_with_email_and_password("user@example.com", "x" * 100)

        assert exc.value.code == AuthError.INVALID_CREDENTIAL
        attempts = await mongo_db["loginAttempts"].find_one({"key": "user@example.com"})
        assert len(attempts["failed_at"]) == 1

    async def test_over_long_password_cannot_be_registered(self, provider):
        with pytest.raises(AuthError) as exc:
            await provider.create_account("user@example.com", "x" * 73)
        assert exc.value.code == AuthError.INVALID_INPUT_FORMAT

    async def test_rate_limited_after_repeated_failures(self, provider, mongo_db):
        await register(mongo_db, "user@example.com")
        for _ in range(3):
            with pytest.raises(AuthError):
                await provider.sign_in_with_email_and_password("user@example.com", "wrong")

        with pytest.raises(AuthError) as exc:
            await provider.sign_in_with_email_and_password("user@example.com", "s3cret-pass")
        assert exc.value.code == AuthError.RATE_LIMITED

    async def test_success_resets_failures(self, provider, mongo_db):
        await register(mongo_db, "user@example.com")
        with pytest.raises(AuthError):
            await provider.sign_in_with_email_and_password("user@example.com", "wrong")

        await provider.sign_in_with_email_and_password("user@example.com", "s3cret-pass")
        assert await mongo_db["loginAttempts"].find_one({"key": "user@example.com"}) is None


class TestIdentityContext:
    async def test_starts_signed_out(self, identity):
        assert identity.user is None
        assert identity.loading is False
        assert identity.is_admin is False

    async def test_non_admin_login_is_rejected_and_cleared(self, identity, provider, mongo_db):
        await register(mongo_db, "user@example.com")

        with pytest.raises(AuthError) as exc:
            await identity.login("user@example.com", "s3cret-pass")

        assert exc.value.code == AuthError.UNAUTHORIZED
        assert identity.is_admin is False
        assert identity.user is None
        assert provider.current_user is None

    async def test_admin_login_keeps_session(self, identity, provider, mongo_db, drain_background):
        await register(mongo_db, "boss@example.com", admin=True)

        user = await identity.login("boss@example.com", "s3cret-pass")
        await drain_background()

        assert user["role"] == ROLE_ADMIN
        assert identity.is_admin is True
        assert provider.current_user.email == "boss@example.com"
        stored = await mongo_db["users"].find_one({"_id": user["_id"]})
        assert stored["lastLogin"] is not None

    async def test_last_login_failure_does_not_fail_login(self, provider, admin_user, drain_background):
        await provider.create_account("admin@example.com", "s3cret-pass")
        users = MagicMock()
        users.find_one = AsyncMock(return_value=admin_user)
        users.update_one = AsyncMock(side_effect=RuntimeError("store down"))

        async with IdentityContext(provider, users_collection=users) as identity:
            user = await identity.login("admin@example.com", "s3cret-pass")
            await drain_background()

            assert user is admin_user
            assert identity.is_admin is True
        users.update_one.assert_awaited_once()

    async def test_first_notification_creates_user_document(self, identity, provider, mongo_db):
        await provider.create_account("new@example.com", "s3cret-pass")
        await provider.sign_in_with_email_and_password("new@example.com", "s3cret-pass")

        assert identity.user["role"] == "user"
        assert await mongo_db["users"].count_documents({"email": "new@example.com"}) == 1

    async def test_grant_admin_role_promotes_existing_account(self, identity, mongo_db):
        await register(mongo_db, "later@example.com")
        await grant_admin_role(
            "later@example.com",
            accounts_collection=mongo_db["accounts"],
            users_collection=mongo_db["users"]
        )

        user = await identity.login("later@example.com", "s3cret-pass")
        assert user["role"] == ROLE_ADMIN

    async def test_logout_is_idempotent(self, identity, mongo_db):
        await register(mongo_db, "boss@example.com", admin=True)
        await identity.login("boss@example.com", "s3cret-pass")

        await identity.logout()
        await identity.logout()

        assert identity.user is None
        assert identity.is_admin is False

    async def test_close_stops_listening(self, identity, provider, mongo_db):
        await register(mongo_db, "user@example.com")
        identity.close()

        await provider.sign_in_with_email_and_password("user@example.com", "s3cret-pass")
        assert identity.user is None
