"""
Historical total-balance reconstruction.

Turns stored balance snapshots (or, when there are none, the transaction log
replayed backwards from the current total) into a fixed-length series of
points for a chart. Everything here is pure: callers pass `now` and the rows.

Periods are ordered oldest first; the last period is the one containing `now`.
All comparisons happen in `now`'s timezone. Naive stored timestamps are
treated as UTC.
"""
from bisect import bisect_right
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Callable, Iterable, Sequence

from walletbook.domain.transaction import reverse_from_balance

CADENCE_HOUR = "hour"
CADENCE_DAY = "day"
CADENCE_MONTH = "month"


def _floor_hour(value: datetime) -> datetime:
    return value.replace(minute=0, second=0, microsecond=0)


def _floor_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def _floor_month(value: datetime) -> datetime:
    return _floor_day(value).replace(day=1)


def _shift_hours(value: datetime, count: int) -> datetime:
    return value + timedelta(hours=count)


def _shift_days(value: datetime, count: int) -> datetime:
    return value + timedelta(days=count)


def _shift_months(value: datetime, count: int) -> datetime:
    """Move a first-of-month datetime by whole months"""
    month_index = value.month - 1 + count
    return value.replace(year=value.year + month_index // 12, month=month_index % 12 + 1)


@dataclass(frozen=True)
class Cadence:
    """Chart resolution: how long a period is and how many of them to show"""
    name: str
    periods: int
    label_format: str
    floor: Callable[[datetime], datetime]
    shift: Callable[[datetime, int], datetime]


CADENCES: dict[str, Cadence] = {
    CADENCE_HOUR: Cadence(CADENCE_HOUR, 24, "%H:%M", _floor_hour, _shift_hours),
    CADENCE_DAY: Cadence(CADENCE_DAY, 30, "%d %b", _floor_day, _shift_days),
    CADENCE_MONTH: Cadence(CADENCE_MONTH, 12, "%b %Y", _floor_month, _shift_months),
}


def get_cadence(name: str) -> Cadence:
    """
    Look up a cadence by name

    Raises:
        ValueError: unknown cadence
    """
    try:
        return CADENCES[name]
    except KeyError:
        raise ValueError(
            f"Unknown cadence {name!r}, expected one of: {', '.join(CADENCES)}"
        ) from None


@dataclass(frozen=True)
class Period:
    start: datetime
    end: datetime  # inclusive, last microsecond of the period
    label: str


@dataclass(frozen=True)
class BalancePoint:
    period_start: datetime
    label: str
    balance: Decimal


def build_periods(cadence: Cadence, now: datetime) -> list[Period]:
    """
    Fixed list of periods ending with the one that contains `now`

    Example (day cadence, now = 2024-03-30 15:00):
        30 periods, 2024-03-01 00:00 ... 2024-03-30 00:00
    """
    current = cadence.floor(now)
    periods = []
    for offset in range(cadence.periods - 1, -1, -1):
        start = cadence.shift(current, -offset)
        end = cadence.shift(start, 1) - timedelta(microseconds=1)
        periods.append(Period(start=start, end=end, label=start.strftime(cadence.label_format)))
    return periods


def _align(value: datetime, reference: datetime) -> datetime:
    """Bring a stored timestamp into the reference timezone"""
    tz = reference.tzinfo
    if tz is None:
        return value.replace(tzinfo=None) if value.tzinfo is not None else value
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(tz)


def reconstruct_from_snapshots(periods: Sequence[Period], history: Iterable) -> list[BalancePoint]:
    """
    Balance at the end of each period from stored snapshots.

    Each period takes the latest snapshot taken at or before its end. A period
    with no such snapshot repeats the previous period's value (0 before the
    first snapshot).

    Args:
        periods: Output of build_periods
        history: Rows with `timestamp` and `total_balance` attributes, any order

    Returns:
        One point per period
    """
    if not periods:
        return []
    reference = periods[0].start

    snapshots = sorted(
        ((_align(row.timestamp, reference), Decimal(row.total_balance)) for row in history),
        key=lambda item: item[0],
    )
    timestamps = [ts for ts, _ in snapshots]

    points = []
    previous = Decimal("0")
    for period in periods:
        index = bisect_right(timestamps, period.end) - 1
        balance = snapshots[index][1] if index >= 0 else previous
        points.append(BalancePoint(period_start=period.start, label=period.label, balance=balance))
        previous = balance
    return points


def reconstruct_from_transactions(
    periods: Sequence[Period],
    transactions: Iterable,
    current_balance: Decimal,
) -> list[BalancePoint]:
    """
    Balance per period by replaying transactions backwards from the current total.

    Walking from the newest period to the oldest, every not yet processed
    transaction dated after the period start is undone (income subtracted,
    expense added back). Transaction dates count as local midnight.

    Args:
        periods: Output of build_periods
        transactions: Rows with `date`, `type` and `amount` attributes
        current_balance: Sum of all wallet balances right now

    Returns:
        One point per period, oldest first
    """
    if not periods:
        return []
    tz = periods[0].start.tzinfo

    pending = sorted(transactions, key=lambda tx: tx.date, reverse=True)
    running = Decimal(current_balance)

    points = []
    for period in reversed(periods):
        remaining = []
        for tx in pending:
            if datetime.combine(tx.date, time.min, tzinfo=tz) > period.start:
                running = reverse_from_balance(running, tx.type, tx.amount)
            else:
                remaining.append(tx)
        pending = remaining
        points.append(BalancePoint(period_start=period.start, label=period.label, balance=running))

    points.reverse()
    return points


def reconstruct_balance_series(
    cadence: Cadence,
    now: datetime,
    history: Sequence,
    transactions: Iterable,
    current_balance: Decimal,
) -> list[BalancePoint]:
    """
    Chart series for a cadence.

    Uses snapshot mode when any snapshot exists, replay mode otherwise. Empty
    inputs yield zero-balance points rather than an error.
    """
    periods = build_periods(cadence, now)
    if history:
        return reconstruct_from_snapshots(periods, history)
    return reconstruct_from_transactions(periods, transactions, current_balance)
