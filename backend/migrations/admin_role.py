"""
Operator command to register accounts and grant the admin role.

The API never lets a client change a role, so the first administrator is
created out of band.

Usage:
    python -m migrations.admin_role create <email> <password> [display name] [--admin]
    python -m migrations.admin_role grant <email>
    python -m migrations.admin_role revoke <email>
"""
import asyncio
import logging
import sys

from identity import AuthProvider, ROLE_ADMIN, ROLE_USER
from identity.provider import AccountNotFoundError, normalize_email
from utils import utcnow

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def set_role(email: str, role: str, accounts_collection=None, users_collection=None) -> dict:
    """
    Set the stored role of the account registered under `email`.

    Creates the user document when the account never signed in.

    Raises:
        AccountNotFoundError: no account for this email
    """
    if accounts_collection is None:
        from database import accounts_collection
    if users_collection is None:
        from database import users_collection

    email = normalize_email(email)
    account = await accounts_collection.find_one({"email": email})
    if not account:
        raise AccountNotFoundError()

    await users_collection.update_one(
        {"_id": account["_id"]},
        {
            "$set": {"role": role},
            "$setOnInsert": {
                "email": account["email"],
                "displayName": account.get("display_name") or "",
                "createdAt": utcnow(),
            },
        },
        upsert=True
    )
    user = await users_collection.find_one({"_id": account["_id"]})
    logger.info(f"Set role of {email} ({account['_id']}) to {role}")
    return user


async def grant_admin_role(email: str, accounts_collection=None, users_collection=None) -> dict:
    return await set_role(email, ROLE_ADMIN, accounts_collection, users_collection)


async def create_account(
    email: str,
    password: str,
    display_name: str = "",
    admin: bool = False,
    accounts_collection=None,
    users_collection=None
) -> dict:
    """Register provider credentials and the matching user document."""
    provider = AuthProvider(accounts_collection=accounts_collection)
    provider_user = await provider.create_account(email, password, display_name)
    logger.info(f"Created account {provider_user.email} ({provider_user.uid})")
    return await set_role(
        provider_user.email,
        ROLE_ADMIN if admin else ROLE_USER,
        provider.accounts,
        users_collection
    )


async def main():
    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    if len(args) < 2 or args[0] not in ("create", "grant", "revoke"):
        print(__doc__)
        sys.exit(1)

    command, email = args[0], args[1]
    if command == "create":
        if len(args) < 3:
            print(__doc__)
            sys.exit(1)
        display_name = args[3] if len(args) > 3 else ""
        await create_account(email, args[2], display_name, admin="--admin" in sys.argv)
    elif command == "grant":
        await grant_admin_role(email)
    else:
        await set_role(email, ROLE_USER)


if __name__ == "__main__":
    asyncio.run(main())
