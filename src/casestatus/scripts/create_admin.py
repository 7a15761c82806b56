# File: src/casestatus/scripts/create_admin.py
"""Interactive command to provision an administrator.

Creates the login identity if needed, then adds it to the administrator
registry. This is the only way admin_users rows are created.
"""

import asyncio
import sys
from getpass import getpass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from casestatus.core.db import get_sessionmaker
from casestatus.core.logging import get_logger
from casestatus.core.security import hash_password
from casestatus.core.validators import validate_email
from casestatus.models.admin_user import AdminUser
from casestatus.models.enums import AdminRole
from casestatus.models.user import User

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 8


def prompt_for_email() -> str:
    """Prompt for email with validation."""
    while True:
        try:
            return validate_email(input("Email address: "))
        except ValueError as exc:
            print(f"❌ {exc}")


def prompt_for_password() -> str:
    """Prompt for password with confirmation."""
    while True:
        password = getpass("Password: ")

        if len(password) < MIN_PASSWORD_LENGTH:
            print(f"❌ Password must be at least {MIN_PASSWORD_LENGTH} characters")
            continue

        if password != getpass("Password (confirm): "):
            print("❌ Passwords don't match")
            continue

        return password


def prompt_for_role() -> AdminRole:
    raw = input(f"Role [{AdminRole.ADMIN.value}/{AdminRole.SUPER_ADMIN.value}] (default admin): ").strip()
    try:
        return AdminRole(raw or AdminRole.ADMIN.value)
    except ValueError:
        print("ℹ️  Unknown role, using admin")
        return AdminRole.ADMIN


async def provision_admin(
    db: AsyncSession,
    email: str,
    full_name: str,
    role: AdminRole = AdminRole.ADMIN,
    password: str | None = None,
) -> tuple[AdminUser, bool]:
    """Create (or reuse) the user and register it as administrator.

    Returns:
        (admin record, whether a new registry row was created)
    """
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if user is None:
        if not password:
            raise ValueError(f"User '{email}' does not exist and no password was given")
        user = User(email=email, hashed_password=hash_password(password), is_active=True)
        db.add(user)
        await db.flush()

    result = await db.execute(select(AdminUser).where(AdminUser.id == user.id))
    admin = result.scalar_one_or_none()
    if admin is not None:
        return admin, False

    admin = AdminUser(id=user.id, email=user.email, full_name=full_name, role=role.value)
    db.add(admin)
    await db.flush()
    return admin, True


async def create_admin() -> None:
    """Interactive administrator creation."""
    print("\n" + "=" * 50)
    print("Case Status - Create administrator")
    print("=" * 50 + "\n")

    async with get_sessionmaker()() as db:
        email = prompt_for_email()

        result = await db.execute(select(User).where(User.email == email))
        password = None if result.scalar_one_or_none() else prompt_for_password()

        full_name = input("Full name: ").strip()
        role = prompt_for_role()

        admin, created = await provision_admin(db, email, full_name, role, password)
        await db.commit()

    if not created:
        print(f"ℹ️  '{email}' is already an administrator\n")
        return

    logger.info("admin.provisioned", admin_id=str(admin.id), role=admin.role)
    print("\n✅ Administrator created successfully!")
    print(f"   Email: {email}")
    print(f"   ID: {admin.id}\n")


if __name__ == "__main__":
    try:
        asyncio.run(create_admin())
    except KeyboardInterrupt:
        print("\n\n❌ Cancelled\n")
        sys.exit(1)
    except Exception as e:
        logger.error("create_admin_error", error=str(e))
        print(f"\n❌ Error: {e}\n")
        sys.exit(1)
