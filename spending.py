from datetime import datetime, timezone
from decimal import Decimal

from split_logic import find_split, involves


def _to_ms(dt):
    return int(dt.timestamp() * 1000)


def start_of_year_ms(year):
    return _to_ms(datetime(year, 1, 1, tzinfo=timezone.utc))


def month_start_ms(date_ms):
    d = datetime.fromtimestamp(date_ms / 1000, tz=timezone.utc)
    return _to_ms(datetime(d.year, d.month, 1, tzinfo=timezone.utc))


def total_spent(subject_id, expenses):
    """Sum of the subject's own share across every expense they are part of."""
    total = Decimal(0)
    for e in expenses:
        if not involves(e, subject_id):
            continue
        split = find_split(e, subject_id)
        if split:
            total += Decimal(str(split.get("amount", 0)))
    return float(total)


def monthly_spending(subject_id, expenses, year):
    # Twelve zero-filled UTC month buckets
    totals = {
        _to_ms(datetime(year, month, 1, tzinfo=timezone.utc)): Decimal(0)
        for month in range(1, 13)
    }

    for e in expenses:
        if not involves(e, subject_id) or e.get("date") is None:
            continue
        bucket = month_start_ms(e["date"])
        if bucket not in totals:
            continue
        split = find_split(e, subject_id)
        if split:
            totals[bucket] += Decimal(str(split.get("amount", 0)))

    return [{"month": month, "total": float(total)} for month, total in sorted(totals.items())]
