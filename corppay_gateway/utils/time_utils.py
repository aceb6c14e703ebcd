"""India Standard Time helpers for cutoff checks and transaction timestamps"""

from datetime import datetime, time, timedelta, timezone

# IST has no daylight saving, a fixed offset is exact
IST = timezone(timedelta(hours=5, minutes=30), "IST")


def now_ist() -> datetime:
    """Current wall-clock time in IST"""
    return datetime.now(IST)


def to_ist(moment: datetime) -> datetime:
    """Convert to IST; naive datetimes are taken to be UTC"""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(IST)


def is_at_or_after(moment: datetime, cutoff: time) -> bool:
    """True when moment's IST wall-clock time has reached cutoff"""
    return to_ist(moment).time() >= cutoff


def format_txn_time(moment: datetime) -> str:
    """ISO-8601 timestamp with the +05:30 offset, second precision"""
    return to_ist(moment).isoformat(timespec="seconds")
