import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone

from algorithms.exceptions import InvalidInput

# Constants
MIN_DONATION_INTERVAL_DAYS = 56  # 8 weeks (WHO recommendation)

# Logger
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Eligibility:
    eligible: bool
    days_until_eligible: int
    next_eligible_date: datetime
    days_since_last_donation: int


def _to_datetime(value, tzinfo):
    """Promote a date to midnight and align naive datetimes with tzinfo"""
    if isinstance(value, datetime):
        if value.tzinfo is None and tzinfo is not None:
            return value.replace(tzinfo=tzinfo)
        if value.tzinfo is not None and tzinfo is None:
            # Naive reference times are local time
            return value.astimezone().replace(tzinfo=None)
        return value
    return datetime.combine(value, time.min, tzinfo=tzinfo)


def days_since_last_donation(last_donation_date, now):
    """
    Whole days elapsed between the last donation and now.

    A last donation date in the future counts as 0 days.
    """
    elapsed = now - last_donation_date
    if elapsed < timedelta(0):
        logger.warning(f"Last donation date {last_donation_date.isoformat()} is in the future; treating as today")
        return 0
    return elapsed // timedelta(days=1)


def check_eligibility(last_donation_date=None, now=None) -> Eligibility:
    """
    Check whether a donor can give blood again.

    Donors must wait MIN_DONATION_INTERVAL_DAYS between donations. Donors with
    no recorded donation are immediately eligible.

    Args:
        last_donation_date (datetime | date | None): Last donation timestamp
        now (datetime | None): Reference time, defaults to the current UTC time

    Returns:
        Eligibility: eligible flag, days left, next eligible date and days since
        the last donation
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif not isinstance(now, datetime):
        raise InvalidInput(f"now must be a datetime, got {type(now).__name__}")

    if last_donation_date is None:
        return Eligibility(
            eligible=True,
            days_until_eligible=0,
            next_eligible_date=now,
            days_since_last_donation=0,
        )

    if not isinstance(last_donation_date, date):
        raise InvalidInput(
            f"last_donation_date must be a date or datetime, got {type(last_donation_date).__name__}"
        )

    last = _to_datetime(last_donation_date, now.tzinfo)
    days_since = days_since_last_donation(last, now)
    eligible = days_since >= MIN_DONATION_INTERVAL_DAYS

    return Eligibility(
        eligible=eligible,
        days_until_eligible=0 if eligible else MIN_DONATION_INTERVAL_DAYS - days_since,
        next_eligible_date=last + timedelta(days=MIN_DONATION_INTERVAL_DAYS),
        days_since_last_donation=days_since,
    )
