"""Public case lookup.

Registration number and nationality form one compound key. A miss, a partial
match and a backend failure all produce the same NotFound carrying the
caller's query, so the public page never reveals which field was wrong or
that anything failed.
"""

from typing import Protocol

from casestatus.core.errors import CollaboratorError, NotFoundError
from casestatus.core.logging import get_logger
from casestatus.core.sentry import capture_collaborator_error
from casestatus.models.case_schemas import CaseQuery, CaseRead, Found, NotFound

logger = get_logger(__name__)


class CaseRepository(Protocol):
    async def find_case(self, registration_number: str, nationality: str) -> CaseRead: ...


async def resolve_case(query: CaseQuery, cases: CaseRepository) -> Found | NotFound:
    """Resolve a lookup to Found(record) or NotFound(query). Never raises for a miss."""
    try:
        record = await cases.find_case(query.registration_number, query.nationality)
    except NotFoundError:
        logger.info("case_resolver.not_found")
        return NotFound(query=query)
    except CollaboratorError as exc:
        logger.error(
            "case_resolver.lookup_unavailable",
            collaborator=exc.collaborator,
            error=str(exc.__cause__ or exc),
        )
        capture_collaborator_error(exc, lookup="case")
        return NotFound(query=query)

    logger.info("case_resolver.found", case_id=str(record.id))
    return Found(record=record)
