# File: src/casestatus/models/case_schemas.py
"""Pydantic schemas for case lookup and the case management API."""

from datetime import date, datetime
from typing import Annotated, Literal, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from casestatus.core.validators import (
    strip_html,
    validate_nationality,
    validate_phone,
    validate_registration_number,
)
from casestatus.models.enums import DEFAULT_APPEAL_STATUS


class CaseQuery(BaseModel):
    """Public lookup key. Values are kept exactly as the caller typed them."""

    model_config = ConfigDict(frozen=True)

    registration_number: str
    nationality: str


class CaseRead(BaseModel):
    """Case record as returned to the detail view and the admin API."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    registration_number: str
    full_name: str
    nationality: str
    cause_list_date: date | None = None
    appeal_received_date: date | None = None
    appeal_status: str
    brief_status_respondent: str | None = None
    brief_status_dhs: str | None = None
    court_address: str | None = None
    court_phone: str | None = None
    next_hearing_date: date | None = None
    next_hearing_info: str | None = None
    judicial_decision: str | None = None
    decision_date: date | None = None
    decision_court_address: str | None = None
    created_at: datetime
    updated_at: datetime


class Found(BaseModel):
    kind: Literal["found"] = "found"
    record: CaseRead


class NotFound(BaseModel):
    kind: Literal["not_found"] = "not_found"
    query: CaseQuery


LookupResult = Annotated[Union[Found, NotFound], Field(discriminator="kind")]


def clean_full_name(v: str | None) -> str | None:
    """Respondent name without markup; blank after stripping is rejected."""
    if v is None:
        return None
    cleaned = strip_html(v)
    if not cleaned:
        raise ValueError("full_name cannot be empty")
    return cleaned


class _CaseTextFields(BaseModel):
    """Free-text and date fields shared by create and update payloads."""

    cause_list_date: date | None = None
    appeal_received_date: date | None = None
    brief_status_respondent: str | None = Field(None, max_length=2000)
    brief_status_dhs: str | None = Field(None, max_length=2000)
    court_address: str | None = Field(None, max_length=1000)
    court_phone: str | None = Field(None, max_length=50)
    next_hearing_date: date | None = None
    next_hearing_info: str | None = Field(None, max_length=2000)
    judicial_decision: str | None = Field(None, max_length=5000)
    decision_date: date | None = None
    decision_court_address: str | None = Field(None, max_length=1000)

    @field_validator(
        "brief_status_respondent",
        "brief_status_dhs",
        "court_address",
        "next_hearing_info",
        "judicial_decision",
        "decision_court_address",
    )
    @classmethod
    def clean_text(cls, v: str | None) -> str | None:
        """Strip markup from free text."""
        return strip_html(v)

    @field_validator("court_phone")
    @classmethod
    def validate_phone_number(cls, v: str | None) -> str | None:
        """Validate phone format."""
        return validate_phone(v)


class CaseCreate(_CaseTextFields):
    """Schema for creating a new case."""

    registration_number: str = Field(..., min_length=1, max_length=20)
    full_name: str = Field(..., min_length=1, max_length=200)
    nationality: str = Field(..., min_length=2, max_length=2)
    appeal_status: str = Field(DEFAULT_APPEAL_STATUS, min_length=1, max_length=50)

    @field_validator("registration_number")
    @classmethod
    def validate_registration(cls, v: str) -> str:
        return validate_registration_number(v)

    @field_validator("nationality")
    @classmethod
    def validate_country(cls, v: str) -> str:
        return validate_nationality(v)

    normalize_full_name = field_validator("full_name")(clean_full_name)


class CaseUpdate(_CaseTextFields):
    """Partial update of any case field (case management screen)."""

    registration_number: str | None = Field(None, min_length=1, max_length=20)
    full_name: str | None = Field(None, min_length=1, max_length=200)
    nationality: str | None = Field(None, min_length=2, max_length=2)
    appeal_status: str | None = Field(None, min_length=1, max_length=50)

    @field_validator("registration_number")
    @classmethod
    def validate_registration(cls, v: str | None) -> str | None:
        return validate_registration_number(v) if v is not None else None

    @field_validator("nationality")
    @classmethod
    def validate_country(cls, v: str | None) -> str | None:
        return validate_nationality(v) if v is not None else None

    normalize_full_name = field_validator("full_name")(clean_full_name)


class CaseStatusUpdate(BaseModel):
    """Fields the case status editor is allowed to change."""

    appeal_status: str | None = Field(None, min_length=1, max_length=50)
    appeal_received_date: date | None = None
    brief_status_respondent: str | None = Field(None, max_length=2000)
    brief_status_dhs: str | None = Field(None, max_length=2000)
    next_hearing_date: date | None = None
    next_hearing_info: str | None = Field(None, max_length=2000)
    judicial_decision: str | None = Field(None, max_length=5000)
    decision_date: date | None = None
    decision_court_address: str | None = Field(None, max_length=1000)

    @field_validator(
        "brief_status_respondent",
        "brief_status_dhs",
        "next_hearing_info",
        "judicial_decision",
        "decision_court_address",
    )
    @classmethod
    def clean_text(cls, v: str | None) -> str | None:
        return strip_html(v)


class CaseNoteCreate(BaseModel):
    note: str = Field(..., min_length=1, max_length=5000)

    @field_validator("note")
    @classmethod
    def clean_note(cls, v: str) -> str:
        cleaned = strip_html(v)
        if not cleaned:
            raise ValueError("note cannot be empty")
        return cleaned


class CaseNoteRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    case_id: UUID
    admin_id: UUID
    note: str
    created_at: datetime
