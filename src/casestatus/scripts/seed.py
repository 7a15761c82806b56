"""Seed script: upsert demo cases keyed on registration number."""

import asyncio
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from casestatus.core.db import Base, get_engine, get_sessionmaker
from casestatus.core.logging import get_logger
from casestatus.models import ImmigrationCase

logger = get_logger(__name__)

BIA_ADDRESS = (
    "Executive Office for Immigration Review\n"
    "Board of Immigration Appeals\n"
    "5107 Leesburg Pike, Suite 2000\n"
    "Falls Church, Virginia 20530"
)

DEMO_CASES = [
    {
        "registration_number": "20544377",
        "nationality": "MX",
        "full_name": "José González",
        "appeal_status": "pending",
        "appeal_received_date": date(2024, 6, 15),
        "brief_status_respondent": "Pending",
        "brief_status_dhs": "Pending",
        "next_hearing_info": None,
        "judicial_decision": (
            "*Motion to terminate proceedings* denied on grounds that respondent "
            "failed to establish eligibility for relief."
        ),
        "decision_date": date(2024, 6, 15),
        "decision_court_address": BIA_ADDRESS,
        "court_address": (
            "Executive Office for Immigration Review\n"
            "Falls Church Immigration Court\n"
            "5107 Leesburg Pike, Suite 2500\n"
            "Falls Church, VA 20530"
        ),
        "court_phone": "(703) 756-6226",
    },
]


async def upsert_case(db: AsyncSession, values: dict) -> tuple[ImmigrationCase, bool]:
    """Insert or update a case by registration number. Returns (case, created)."""
    result = await db.execute(
        select(ImmigrationCase).where(
            ImmigrationCase.registration_number == values["registration_number"]
        )
    )
    case = result.scalar_one_or_none()

    if case is None:
        case = ImmigrationCase(**values)
        db.add(case)
        await db.flush()
        return case, True

    for field, value in values.items():
        setattr(case, field, value)
    await db.flush()
    return case, False


async def seed(create_tables: bool = False) -> None:
    if create_tables:
        async with get_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async with get_sessionmaker()() as db:
        for values in DEMO_CASES:
            case, created = await upsert_case(db, values)
            logger.info(
                "seed.case_upserted",
                registration_number=case.registration_number,
                created=created,
            )
            print(f"{'✅ Created' if created else '🔄 Updated'} case {case.registration_number}")
        await db.commit()


if __name__ == "__main__":
    import sys

    asyncio.run(seed(create_tables="--create-tables" in sys.argv))
