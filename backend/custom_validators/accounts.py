"""Account predicates backed by the database."""
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.logging import validation_logger
from core.validation import ValidationContext, predicate
from models.user import User

log = validation_logger()


@predicate("unique_email")
async def unique_email(value: str | None, context: ValidationContext) -> bool:
    """No registered user owns the address (case-insensitive).

    Reads the request's session from the ``db`` context attribute.
    """
    if value is None:
        return True
    session: AsyncSession = context.attributes["db"]
    result = await session.execute(
        select(func.count(User.id)).where(func.lower(User.email) == value.strip().lower())
    )
    taken = result.scalar_one() > 0
    if taken:
        log.debug("email_taken", correlation_id=context.correlation_id)
    return not taken
