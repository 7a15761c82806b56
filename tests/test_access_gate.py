"""Tests for the administrator access gate."""

import uuid

import pytest
from sqlalchemy.exc import OperationalError
from structlog.testing import capture_logs

from casestatus.core.access_gate import DenialReason, Denied, Granted, check_admin_access
from casestatus.core.collaborators import SqlAdminRegistry
from casestatus.core.errors import CollaboratorError, NotFoundError
from casestatus.models.admin_schemas import AdminUserRead, IdentitySession
from tests.factories import AdminUserFactory, UserFactory
from tests.fakes import FakeAdminRegistry, FakeIdentityProvider, unavailable

ADMIN_ID = "6f1c2a8e-0d3b-4a57-9a7e-2f1d0c9b8e11"


def _admin(user_id: str = ADMIN_ID) -> AdminUserRead:
    return AdminUserRead(id=user_id, email="ana@example.com", full_name="Ana Admin", role="admin")


class TestGateDecisions:
    """The three paths through the gate."""

    @pytest.mark.asyncio
    async def test_valid_session_with_admin_record_is_granted(self):
        """Session for an administrator -> Granted with that record."""
        identity = FakeIdentityProvider(session=IdentitySession(user_id=ADMIN_ID))
        registry = FakeAdminRegistry(admins={ADMIN_ID: _admin()})

        decision = await check_admin_access(identity, registry)

        assert isinstance(decision, Granted)
        assert decision.kind == "granted"
        assert decision.admin.id == ADMIN_ID
        assert decision.admin.full_name == "Ana Admin"

    @pytest.mark.asyncio
    async def test_no_session_is_denied_without_consulting_registry(self):
        """No session -> Denied; the registry is never asked."""
        identity = FakeIdentityProvider(session=None)
        registry = FakeAdminRegistry(admins={ADMIN_ID: _admin()})

        decision = await check_admin_access(identity, registry)

        assert isinstance(decision, Denied)
        assert decision.reason == DenialReason.UNAUTHENTICATED
        assert identity.calls == 1
        assert registry.calls == 0

    @pytest.mark.asyncio
    async def test_session_without_admin_record_is_denied(self):
        """Valid session, no registry row -> Denied(FORBIDDEN)."""
        other_id = str(uuid.uuid4())
        identity = FakeIdentityProvider(session=IdentitySession(user_id=other_id))
        registry = FakeAdminRegistry(admins={ADMIN_ID: _admin()})

        decision = await check_admin_access(identity, registry)

        assert isinstance(decision, Denied)
        assert decision.reason == DenialReason.FORBIDDEN

    @pytest.mark.asyncio
    async def test_registry_is_queried_with_session_user_id(self):
        identity = FakeIdentityProvider(session=IdentitySession(user_id=ADMIN_ID))
        registry = FakeAdminRegistry(admins={ADMIN_ID: _admin()})

        await check_admin_access(identity, registry)

        assert registry.keys == [ADMIN_ID]

    @pytest.mark.asyncio
    async def test_uuid_user_id_is_passed_as_string(self):
        """IdentitySession normalizes UUID ids so registry keys are strings."""
        user_uuid = uuid.UUID(ADMIN_ID)
        identity = FakeIdentityProvider(session=IdentitySession(user_id=user_uuid))
        registry = FakeAdminRegistry(admins={ADMIN_ID: _admin()})

        decision = await check_admin_access(identity, registry)

        assert isinstance(decision, Granted)
        assert registry.keys == [ADMIN_ID]

    @pytest.mark.asyncio
    async def test_same_inputs_give_same_decision(self):
        identity = FakeIdentityProvider(session=IdentitySession(user_id=ADMIN_ID))
        registry = FakeAdminRegistry(admins={ADMIN_ID: _admin()})

        first = await check_admin_access(identity, registry)
        second = await check_admin_access(identity, registry)

        assert first == second


class TestGateBackendFailures:
    """Backend failures are denials, never exceptions, and are logged distinctly."""

    @pytest.mark.asyncio
    async def test_identity_failure_is_denied(self):
        identity = FakeIdentityProvider(error=unavailable("identity"))
        registry = FakeAdminRegistry(admins={ADMIN_ID: _admin()})

        with capture_logs() as logs:
            decision = await check_admin_access(identity, registry)

        assert isinstance(decision, Denied)
        assert decision.reason == DenialReason.UNAUTHENTICATED
        assert registry.calls == 0

        events = [entry["event"] for entry in logs]
        assert "access_gate.identity_unavailable" in events
        failure = next(e for e in logs if e["event"] == "access_gate.identity_unavailable")
        assert failure["log_level"] == "error"
        assert failure["collaborator"] == "identity"

    @pytest.mark.asyncio
    async def test_registry_failure_is_denied(self):
        identity = FakeIdentityProvider(session=IdentitySession(user_id=ADMIN_ID))
        registry = FakeAdminRegistry(error=unavailable("admin_registry"))

        with capture_logs() as logs:
            decision = await check_admin_access(identity, registry)

        assert isinstance(decision, Denied)
        assert decision.reason == DenialReason.FORBIDDEN

        failure = next(e for e in logs if e["event"] == "access_gate.registry_unavailable")
        assert failure["log_level"] == "error"
        assert failure["user_id"] == ADMIN_ID

    @pytest.mark.asyncio
    async def test_genuine_denial_is_not_logged_as_error(self):
        identity = FakeIdentityProvider(session=None)
        registry = FakeAdminRegistry()

        with capture_logs() as logs:
            await check_admin_access(identity, registry)

        assert all(entry["log_level"] != "error" for entry in logs)
        denial = next(e for e in logs if e["event"] == "access_gate.denied")
        assert denial["reason"] == "UNAUTHENTICATED"


class TestSqlAdminRegistry:
    """Database-backed registry lookups."""

    @pytest.mark.asyncio
    async def test_finds_registered_admin(self, db_session):
        user = await UserFactory.create(db_session, email="reg@example.com")
        await AdminUserFactory.create(db_session, user=user, full_name="Reg Admin")

        admin = await SqlAdminRegistry(db_session).find_admin_by_key(str(user.id))

        assert admin.id == str(user.id)
        assert admin.email == "reg@example.com"
        assert admin.display_name == "Reg Admin"

    @pytest.mark.asyncio
    async def test_plain_user_is_not_found(self, db_session):
        user = await UserFactory.create(db_session, email="plain@example.com")

        with pytest.raises(NotFoundError):
            await SqlAdminRegistry(db_session).find_admin_by_key(str(user.id))

    @pytest.mark.asyncio
    async def test_malformed_key_is_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            await SqlAdminRegistry(db_session).find_admin_by_key("not-a-uuid")

    @pytest.mark.asyncio
    async def test_database_failure_becomes_collaborator_error(self, db_session, monkeypatch):
        async def broken_execute(*args, **kwargs):
            raise OperationalError("SELECT", {}, ConnectionError("db down"))

        monkeypatch.setattr(db_session, "execute", broken_execute)

        with pytest.raises(CollaboratorError) as exc_info:
            await SqlAdminRegistry(db_session).find_admin_by_key(ADMIN_ID)

        assert exc_info.value.collaborator == "admin_registry"
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_gate_with_real_registry_grants_admin(self, db_session):
        user = await UserFactory.create(db_session, email="gate@example.com")
        await AdminUserFactory.create(db_session, user=user)
        identity = FakeIdentityProvider(session=IdentitySession(user_id=user.id))

        decision = await check_admin_access(identity, SqlAdminRegistry(db_session))

        assert isinstance(decision, Granted)
        assert decision.admin.email == "gate@example.com"

    @pytest.mark.asyncio
    async def test_gate_with_real_registry_denies_plain_user(self, db_session):
        user = await UserFactory.create(db_session, email="nogate@example.com")
        identity = FakeIdentityProvider(session=IdentitySession(user_id=user.id))

        decision = await check_admin_access(identity, SqlAdminRegistry(db_session))

        assert decision == Denied(reason=DenialReason.FORBIDDEN)


class TestNamedScenarios:
    """Literal walk-throughs with a user keyed "u1"."""

    @pytest.mark.asyncio
    async def test_absent_session(self):
        registry = FakeAdminRegistry(admins={"u1": _admin("u1")})

        decision = await check_admin_access(FakeIdentityProvider(session=None), registry)

        assert isinstance(decision, Denied)
        assert registry.calls == 0

    @pytest.mark.asyncio
    async def test_valid_session_without_registry_row(self):
        identity = FakeIdentityProvider(session=IdentitySession(user_id="u1"))

        decision = await check_admin_access(identity, FakeAdminRegistry())

        assert isinstance(decision, Denied)

    @pytest.mark.asyncio
    async def test_valid_session_with_registry_row(self):
        identity = FakeIdentityProvider(session=IdentitySession(user_id="u1"))
        registry = FakeAdminRegistry(admins={"u1": _admin("u1")})

        decision = await check_admin_access(identity, registry)

        assert isinstance(decision, Granted)
        assert decision.admin.id == "u1"
