"""
Local clock helpers
"""
from datetime import date, datetime, timezone

from walletbook.config import get_settings


def local_now() -> datetime:
    """Aware "now" in the configured TIMEZONE"""
    return datetime.now(get_settings().get_timezone())


def local_today() -> date:
    return local_now().date()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
