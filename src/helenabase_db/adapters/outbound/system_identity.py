"""Identity generator backed by uuid4 and the system clock."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone


def iso_timestamp(moment: datetime) -> str:
    """Format a datetime as ISO-8601 UTC with milliseconds and a Z suffix.

    Example:
        >>> iso_timestamp(datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc))
        '2024-01-02T03:04:05.678Z'
    """
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


class SystemIdentityGenerator:
    """IdentityGenerator using random UUIDs and the wall clock."""

    def new_id(self) -> str:
        return str(uuid.uuid4())

    def now(self) -> str:
        return iso_timestamp(datetime.now(timezone.utc))
