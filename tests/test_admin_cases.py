"""Tests for the administrator case management API and status editor page."""

import uuid
from datetime import date, datetime

import pytest
from sqlalchemy import select

from casestatus.models.admin_audit_log import AdminAuditLog
from casestatus.models.case_note import CaseNote
from casestatus.models.enums import AuditAction
from casestatus.models.immigration_case import ImmigrationCase
from tests.factories import CaseFactory, CaseNoteFactory

API = "/admin/api/cases"


async def _audit_entries(db_session, action: AuditAction) -> list[AdminAuditLog]:
    result = await db_session.execute(
        select(AdminAuditLog).where(AdminAuditLog.action == action.value)
    )
    return list(result.scalars().all())


class TestListAndRead:
    """GET endpoints."""

    @pytest.mark.asyncio
    async def test_list_cases(self, admin_client, db_session):
        await CaseFactory.create(db_session, registration_number="100", full_name="Ana Pérez")
        await CaseFactory.create(db_session, registration_number="200", full_name="Luis Díaz")

        response = await admin_client.get(API)

        assert response.status_code == 200
        numbers = {case["registration_number"] for case in response.json()}
        assert numbers == {"100", "200"}

    @pytest.mark.asyncio
    async def test_search_by_name_or_number(self, admin_client, db_session):
        await CaseFactory.create(db_session, registration_number="100", full_name="Ana Pérez")
        await CaseFactory.create(db_session, registration_number="200", full_name="Luis Díaz")

        by_name = await admin_client.get(API, params={"search": "luis"})
        by_number = await admin_client.get(API, params={"search": "10"})

        assert [c["full_name"] for c in by_name.json()] == ["Luis Díaz"]
        assert [c["registration_number"] for c in by_number.json()] == ["100"]

    @pytest.mark.asyncio
    async def test_get_case(self, admin_client, db_session):
        case = await CaseFactory.create(db_session)

        response = await admin_client.get(f"{API}/{case.id}")

        assert response.status_code == 200
        assert response.json()["registration_number"] == "20544377"

    @pytest.mark.asyncio
    async def test_unknown_case_is_404(self, admin_client):
        response = await admin_client.get(f"{API}/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_non_admin_is_redirected(self, client, db_session):
        case = await CaseFactory.create(db_session)

        response = await client.get(f"{API}/{case.id}")

        assert response.status_code == 303
        assert response.headers["location"] == "/admin/login"


class TestCreateCase:
    """POST /admin/api/cases"""

    @pytest.mark.asyncio
    async def test_create_case(self, admin_client, db_session):
        response = await admin_client.post(
            API,
            json={
                "registration_number": "a-123-456",
                "nationality": "gt",
                "full_name": "María <b>López</b>",
                "court_phone": "(703) 756-6226",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["registration_number"] == "A-123-456"
        assert data["nationality"] == "GT"
        assert data["full_name"] == "María López"
        assert data["appeal_status"] == "pending"

        entries = await _audit_entries(db_session, AuditAction.CREATE_CASE)
        assert len(entries) == 1
        assert entries[0].resource_id == data["id"]
        assert entries[0].admin_id == admin_client.test_user.id

    @pytest.mark.asyncio
    async def test_duplicate_registration_is_conflict(self, admin_client, db_session):
        await CaseFactory.create(db_session, registration_number="20544377")

        response = await admin_client.post(
            API,
            json={"registration_number": "20544377", "nationality": "MX", "full_name": "Dup"},
        )

        assert response.status_code == 409
        assert response.json()["code"] == "CONFLICT"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"registration_number": "ABC", "nationality": "MX", "full_name": "X"},
            {"registration_number": "123", "nationality": "MEX", "full_name": "X"},
            {"registration_number": "123", "nationality": "MX", "full_name": "<p></p>"},
            {"registration_number": "123", "nationality": "MX", "full_name": "X", "court_phone": "12"},
        ],
    )
    async def test_invalid_payload_is_rejected(self, admin_client, payload):
        response = await admin_client.post(API, json=payload)

        assert response.status_code == 422


class TestUpdateCase:
    """PATCH endpoints."""

    @pytest.mark.asyncio
    async def test_update_records_changes(self, admin_client, db_session):
        case = await CaseFactory.create(db_session, full_name="Old Name")

        response = await admin_client.patch(
            f"{API}/{case.id}", json={"full_name": "New Name", "court_phone": "555-123-4567"}
        )

        assert response.status_code == 200
        assert response.json()["full_name"] == "New Name"

        entries = await _audit_entries(db_session, AuditAction.UPDATE_CASE)
        assert len(entries) == 1
        changes = entries[0].details["changes"]
        assert changes["full_name"] == {"old": "Old Name", "new": "New Name"}
        assert changes["court_phone"] == {"old": None, "new": "555-123-4567"}

    @pytest.mark.asyncio
    async def test_update_rejects_name_that_is_only_markup(self, admin_client, db_session):
        case = await CaseFactory.create(db_session, full_name="Kept Name")

        response = await admin_client.patch(f"{API}/{case.id}", json={"full_name": "<b>  </b>"})

        assert response.status_code == 422
        await db_session.refresh(case)
        assert case.full_name == "Kept Name"

    @pytest.mark.asyncio
    async def test_update_strips_markup_from_name(self, admin_client, db_session):
        case = await CaseFactory.create(db_session, full_name="Kept Name")

        response = await admin_client.patch(
            f"{API}/{case.id}", json={"full_name": "<i>Maria</i> Lopez"}
        )

        assert response.status_code == 200
        assert response.json()["full_name"] == "Maria Lopez"

    @pytest.mark.asyncio
    async def test_update_to_taken_registration_is_conflict(self, admin_client, db_session):
        await CaseFactory.create(db_session, registration_number="111")
        other = await CaseFactory.create(db_session, registration_number="222")

        response = await admin_client.patch(f"{API}/{other.id}", json={"registration_number": "111"})

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_keeping_own_registration_is_allowed(self, admin_client, db_session):
        case = await CaseFactory.create(db_session, registration_number="111")

        response = await admin_client.patch(
            f"{API}/{case.id}", json={"registration_number": "111", "full_name": "Same Number"}
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_status_editor_update(self, admin_client, db_session):
        case = await CaseFactory.create(db_session, appeal_status="pending")

        response = await admin_client.patch(
            f"{API}/{case.id}/status",
            json={
                "appeal_status": "approved",
                "decision_date": "2024-07-01",
                "judicial_decision": "<em>Appeal</em> sustained",
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["appeal_status"] == "approved"
        assert data["decision_date"] == "2024-07-01"
        assert data["judicial_decision"] == "Appeal sustained"

        entries = await _audit_entries(db_session, AuditAction.UPDATE_CASE_STATUS)
        assert len(entries) == 1
        assert entries[0].resource_id == str(case.id)
        assert entries[0].details["registration_number"] == "20544377"
        assert entries[0].details["appeal_status"] == "approved"
        assert entries[0].details["changes"]["appeal_status"] == {"old": "pending", "new": "approved"}

    @pytest.mark.asyncio
    async def test_status_update_changes_public_view(self, admin_client, db_session):
        case = await CaseFactory.create(db_session, appeal_status="pending")

        await admin_client.patch(f"{API}/{case.id}/status", json={"appeal_status": "in_review"})
        public = await admin_client.get(
            "/case-information", params={"registration": "20544377", "nationality": "MX"}
        )

        assert "in_review" in public.text


class TestDeleteCase:
    @pytest.mark.asyncio
    async def test_delete_case(self, admin_client, db_session):
        case = await CaseFactory.create(db_session)
        case_id = case.id

        response = await admin_client.delete(f"{API}/{case_id}")

        assert response.status_code == 204
        result = await db_session.execute(
            select(ImmigrationCase).where(ImmigrationCase.id == case_id)
        )
        assert result.scalar_one_or_none() is None

        entries = await _audit_entries(db_session, AuditAction.DELETE_CASE)
        assert entries[0].details["deleted_case_id"] == str(case_id)

    @pytest.mark.asyncio
    async def test_delete_unknown_case_is_404(self, admin_client):
        response = await admin_client.delete(f"{API}/{uuid.uuid4()}")

        assert response.status_code == 404


class TestCaseNotes:
    @pytest.mark.asyncio
    async def test_add_and_list_notes(self, admin_client, db_session):
        case = await CaseFactory.create(db_session)

        created = await admin_client.post(
            f"{API}/{case.id}/notes", json={"note": "Respondent <i>called</i>"}
        )
        listed = await admin_client.get(f"{API}/{case.id}/notes")

        assert created.status_code == 201
        assert created.json()["note"] == "Respondent called"
        assert created.json()["admin_id"] == str(admin_client.test_user.id)
        assert [n["note"] for n in listed.json()] == ["Respondent called"]

        entries = await _audit_entries(db_session, AuditAction.ADD_NOTE)
        assert entries[0].details["note_id"] == created.json()["id"]

    @pytest.mark.asyncio
    async def test_empty_note_is_rejected(self, admin_client, db_session):
        case = await CaseFactory.create(db_session)

        response = await admin_client.post(f"{API}/{case.id}/notes", json={"note": "<br>"})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_note_on_unknown_case_is_404(self, admin_client):
        response = await admin_client.post(f"{API}/{uuid.uuid4()}/notes", json={"note": "hi"})

        assert response.status_code == 404


class TestCaseStatusPage:
    """GET /admin/case-status/{case_id}"""

    @pytest.mark.asyncio
    async def test_page_shows_case_and_notes(self, admin_client, db_session):
        case = await CaseFactory.create(db_session, next_hearing_date=date(2031, 1, 5))
        await CaseNoteFactory.create(
            db_session, case=case, admin_id=admin_client.test_user.id, note="Filed brief"
        )

        response = await admin_client.get(f"/admin/case-status/{case.id}")

        assert response.status_code == 200
        assert "José González" in response.text
        assert "Filed brief" in response.text
        assert "2031-01-05" in response.text

    @pytest.mark.asyncio
    async def test_page_requires_admin(self, client, db_session):
        case = await CaseFactory.create(db_session)

        response = await client.get(f"/admin/case-status/{case.id}")

        assert response.status_code == 303

    @pytest.mark.asyncio
    async def test_notes_are_removed_with_case(self, admin_client, db_session):
        case = await CaseFactory.create(db_session)
        await CaseNoteFactory.create(db_session, case=case, admin_id=admin_client.test_user.id)

        await admin_client.delete(f"{API}/{case.id}")

        result = await db_session.execute(select(CaseNote))
        assert result.scalars().all() == []


class TestCaseHistory:
    """GET /admin/api/cases/{case_id}/history"""

    @pytest.mark.asyncio
    async def test_history_lists_each_change(self, admin_client):
        created = await admin_client.post(
            API, json={"registration_number": "555", "nationality": "MX", "full_name": "Old Name"}
        )
        case_id = created.json()["id"]
        await admin_client.patch(f"{API}/{case_id}", json={"full_name": "New Name"})
        await admin_client.patch(f"{API}/{case_id}/status", json={"appeal_status": "approved"})

        response = await admin_client.get(f"{API}/{case_id}/history")

        assert response.status_code == 200
        entries = response.json()
        summary = {
            (e["action_type"], e["field_changed"], e["old_value"], e["new_value"]) for e in entries
        }
        assert summary == {
            ("CREATE_CASE", None, None, None),
            ("UPDATE_CASE", "full_name", "Old Name", "New Name"),
            ("UPDATE_CASE_STATUS", "appeal_status", "pending", "approved"),
        }
        assert {e["admin_name"] for e in entries} == {"Ana Admin"}

    @pytest.mark.asyncio
    async def test_history_is_newest_first(self, admin_client, db_session):
        case = await CaseFactory.create(db_session)
        for day, action in ((1, AuditAction.CREATE_CASE), (3, AuditAction.DELETE_CASE), (2, AuditAction.ADD_NOTE)):
            db_session.add(
                AdminAuditLog(
                    admin_id=admin_client.test_user.id,
                    action=action.value,
                    resource_type="IMMIGRATION_CASE",
                    resource_id=str(case.id),
                    details={},
                    created_at=datetime(2024, 1, day),
                )
            )
        await db_session.commit()

        response = await admin_client.get(f"{API}/{case.id}/history")

        assert [e["action_type"] for e in response.json()] == ["DELETE_CASE", "ADD_NOTE", "CREATE_CASE"]

    @pytest.mark.asyncio
    async def test_note_entry_carries_note_text(self, admin_client, db_session):
        case = await CaseFactory.create(db_session)
        await admin_client.post(f"{API}/{case.id}/notes", json={"note": "Hearing moved"})

        response = await admin_client.get(f"{API}/{case.id}/history")

        [entry] = response.json()
        assert entry["action_type"] == "ADD_NOTE"
        assert entry["notes"] == "Hearing moved"

    @pytest.mark.asyncio
    async def test_other_cases_are_not_included(self, admin_client, db_session):
        case = await CaseFactory.create(db_session, registration_number="1")
        other = await CaseFactory.create(db_session, registration_number="2")
        await admin_client.patch(f"{API}/{other.id}", json={"full_name": "Changed"})

        response = await admin_client.get(f"{API}/{case.id}/history")

        assert response.json() == []

    @pytest.mark.asyncio
    async def test_history_of_unknown_case_is_404(self, admin_client):
        response = await admin_client.get(f"{API}/{uuid.uuid4()}/history")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_history_is_read_only(self, admin_client, db_session):
        case = await CaseFactory.create(db_session)

        response = await admin_client.post(f"{API}/{case.id}/history", json={})

        assert response.status_code == 405

    @pytest.mark.asyncio
    async def test_status_page_shows_history(self, admin_client, db_session):
        case = await CaseFactory.create(db_session, appeal_status="pending")
        await admin_client.patch(f"{API}/{case.id}/status", json={"appeal_status": "in_review"})

        response = await admin_client.get(f"/admin/case-status/{case.id}")

        assert 'id="history"' in response.text
        assert "UPDATE_CASE_STATUS" in response.text
        assert "in_review" in response.text
