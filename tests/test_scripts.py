"""Tests for the administrator provisioning and seed commands."""

import pytest
from sqlalchemy import func, select

from casestatus.core.security import verify_password
from casestatus.models.admin_user import AdminUser
from casestatus.models.enums import AdminRole
from casestatus.models.immigration_case import ImmigrationCase
from casestatus.models.user import User
from casestatus.scripts.create_admin import provision_admin
from casestatus.scripts.seed import DEMO_CASES, upsert_case
from tests.factories import UserFactory


class TestProvisionAdmin:
    @pytest.mark.asyncio
    async def test_creates_user_and_admin_record(self, db_session):
        admin, created = await provision_admin(
            db_session, "new@example.com", "New Admin", AdminRole.SUPER_ADMIN, "newpass123"
        )

        assert created is True
        assert admin.role == "super_admin"

        user = (await db_session.execute(select(User).where(User.id == admin.id))).scalar_one()
        assert user.email == "new@example.com"
        assert verify_password("newpass123", user.hashed_password)

    @pytest.mark.asyncio
    async def test_promotes_existing_user(self, db_session):
        user = await UserFactory.create(db_session, email="exists@example.com")

        admin, created = await provision_admin(db_session, "exists@example.com", "Existing")

        assert created is True
        assert admin.id == user.id

    @pytest.mark.asyncio
    async def test_existing_admin_is_left_alone(self, db_session):
        await provision_admin(db_session, "twice@example.com", "Twice", password="twicepass1")

        _, created = await provision_admin(db_session, "twice@example.com", "Twice")

        assert created is False
        count = await db_session.execute(select(func.count(AdminUser.id)))
        assert count.scalar() == 1

    @pytest.mark.asyncio
    async def test_unknown_user_needs_password(self, db_session):
        with pytest.raises(ValueError):
            await provision_admin(db_session, "nopass@example.com", "No Pass")


class TestSeed:
    @pytest.mark.asyncio
    async def test_upsert_inserts_then_updates(self, db_session):
        values = dict(DEMO_CASES[0])

        case, created = await upsert_case(db_session, values)
        assert created is True

        values["appeal_status"] = "approved"
        updated, created_again = await upsert_case(db_session, values)

        assert created_again is False
        assert updated.id == case.id
        assert updated.appeal_status == "approved"

        count = await db_session.execute(select(func.count(ImmigrationCase.id)))
        assert count.scalar() == 1
