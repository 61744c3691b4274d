"""
Wall-clock helpers.

Session dates and times are stored as naive values in the club timezone;
every service takes a ``clock`` callable so tests can pin "now".
"""

import datetime
from typing import Callable
from zoneinfo import ZoneInfo

from app.core.config import settings

Clock = Callable[[], datetime.datetime]


def now() -> datetime.datetime:
    """Current naive datetime in the configured club timezone."""
    return datetime.datetime.now(ZoneInfo(settings.TIMEZONE)).replace(tzinfo=None)


def fixed(moment: datetime.datetime) -> Clock:
    """Clock that always returns ``moment``."""
    return lambda: moment


def utcnow() -> datetime.datetime:
    """Naive UTC timestamp for ``created_at``/``updated_at`` columns."""
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)
