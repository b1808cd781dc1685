"""User search: username fragment OR age window, minus the caller and the users they block."""
import logging
from datetime import UTC, date, datetime
from uuid import UUID

from sqlalchemy import ColumnElement, and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.user import User
from services.block_service import get_blocked_user_ids

logger = logging.getLogger(__name__)


def years_ago(today: date, years: int) -> date:
    """
    Return the calendar date ``years`` years before ``today``.

    Feb 29 maps to Feb 28 when the target year is not a leap year. Targets
    before year 1 clamp to ``date.min``.
    """
    year = today.year - years
    if year < date.min.year:
        return date.min
    try:
        return today.replace(year=year)
    except ValueError:
        # Feb 29 in a non-leap target year
        return today.replace(year=year, day=28)


def build_age_condition(
    min_age: int | None,
    max_age: int | None,
    today: date,
) -> ColumnElement[bool] | None:
    """
    Translate an age range into a birthdate predicate.

    - both bounds, min <= max: birthdate in [today - max years, today - min years]
    - both bounds, min > max: no predicate (the inverted window is ignored)
    - only min_age: born on or before today - min_age years ("at least this old")
    - only max_age: born on or after today - max_age years ("at most this old")
    - neither: no predicate

    Returns:
        The predicate, or None when no age filtering applies.
    """
    if min_age is not None and max_age is not None:
        if min_age > max_age:
            return None
        return User.birthdate.between(years_ago(today, max_age), years_ago(today, min_age))
    if min_age is not None:
        return User.birthdate <= years_ago(today, min_age)
    if max_age is not None:
        return User.birthdate >= years_ago(today, max_age)
    return None


async def search_users(
    db: AsyncSession,
    user_id: UUID,
    username: str | None = None,
    min_age: int | None = None,
    max_age: int | None = None,
    today: date | None = None,
) -> list[User]:
    """
    Search the directory on behalf of ``user_id``.

    A user matches when it is neither the caller nor blocked by the caller,
    AND (its username contains ``username`` case-insensitively OR it falls in
    the age window). Criteria that are not supplied add nothing to the OR; with
    neither supplied every non-excluded user matches.

    Args:
        db: Database session.
        user_id: The caller.
        username: Literal substring to look for in usernames.
        min_age: Minimum age in whole years.
        max_age: Maximum age in whole years.
        today: Reference date for age computation (defaults to the current UTC date).

    Returns:
        Matching users in store order.
    """
    today = today or datetime.now(UTC).date()
    blocked_ids = await get_blocked_user_ids(db, user_id)

    exclusion = [User.id != user_id]
    if blocked_ids:
        exclusion.append(User.id.not_in(blocked_ids))

    criteria: list[ColumnElement[bool]] = []
    if username is not None:
        criteria.append(User.username.icontains(username, autoescape=True))
    age_condition = build_age_condition(min_age, max_age, today)
    if age_condition is not None:
        criteria.append(age_condition)

    stmt = select(User).where(and_(*exclusion))
    if criteria:
        stmt = stmt.where(or_(*criteria))

    result = await db.execute(stmt)
    users = list(result.scalars().all())
    logger.debug(
        "user_search user_id=%s username=%r min_age=%s max_age=%s excluded=%s results=%s",
        user_id, username, min_age, max_age, len(blocked_ids), len(users),
    )
    return users
