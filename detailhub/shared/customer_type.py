"""New vs returning customer classification from service history"""

from collections.abc import Iterable
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union

from dateutil.parser import isoparse

DateInput = Union[str, datetime, None]


class CustomerType(str, Enum):
    NEW = "new"
    RETURNING = "returning"


def parse_datetime(value: DateInput) -> Optional[datetime]:
    """
    Parse a datetime or ISO-8601 string into an aware UTC datetime.

    Naive values are assumed to be UTC. Returns None for missing or unparseable input.
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("z"):
            text = text[:-1] + "Z"
        try:
            parsed = isoparse(text)
        except (ValueError, OverflowError):
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def classify_customer(
    completed_service_count: Optional[int] = None,
    last_completed_service_at: DateInput = None,
    reference_date: DateInput = None,
) -> CustomerType:
    """
    Classify a customer as new or returning.

    Args:
        completed_service_count: Number of completed services (None means 0)
        last_completed_service_at: When the most recent service was completed
        reference_date: Point in time to classify at (defaults to now)

    Returns:
        CustomerType.RETURNING when there is completed history strictly before
        the reference date, CustomerType.NEW otherwise
    """
    count = completed_service_count or 0
    last = parse_datetime(last_completed_service_at)
    reference = parse_datetime(reference_date) or datetime.now(timezone.utc)

    if count <= 0:
        return CustomerType.NEW

    # More than one completed service is repeat business even without a usable timestamp
    if count > 1:
        return CustomerType.RETURNING

    if last is None:
        return CustomerType.NEW

    # A single service at the reference instant is the reference event itself
    return CustomerType.RETURNING if last < reference else CustomerType.NEW


def classify_from_history(
    completed_at_values: Iterable[DateInput],
    reference_date: DateInput = None,
) -> CustomerType:
    """Classify from a list of completion timestamps (None entries are ignored)"""
    completed = [parsed for parsed in map(parse_datetime, completed_at_values) if parsed]
    if not completed:
        return CustomerType.NEW
    return classify_customer(len(completed), max(completed), reference_date)
