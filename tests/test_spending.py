from datetime import datetime, timezone

from conftest import expense, split
from spending import month_start_ms, monthly_spending, start_of_year_ms, total_spent


def ms(*args):
    return int(datetime(*args, tzinfo=timezone.utc).timestamp() * 1000)


def test_year_and_month_starts():
    assert start_of_year_ms(2024) == ms(2024, 1, 1)
    assert month_start_ms(ms(2024, 3, 15, 18, 30)) == ms(2024, 3, 1)


def test_total_spent_counts_own_share_paid_or_not():
    expenses = [
        expense("e1", "bob", [split("me", 12.5), split("bob", 12.5)]),
        expense("e2", "me", [split("me", 40, paid=True), split("bob", 40)]),
        expense("e3", "bob", [split("carol", 99)]),
    ]
    assert total_spent("me", expenses) == 52.5


def test_monthly_spending_buckets():
    expenses = [
        expense("jan", "me", [split("me", 10)], date=ms(2024, 1, 3)),
        expense("mar1", "bob", [split("me", 5), split("bob", 5)], date=ms(2024, 3, 15)),
        expense("mar2", "me", [split("me", 2.5), split("bob", 2.5)], date=ms(2024, 3, 31, 23)),
        expense("old", "me", [split("me", 1000)], date=ms(2023, 12, 31)),
    ]
    months = monthly_spending("me", expenses, 2024)

    assert len(months) == 12
    assert [m["month"] for m in months] == [ms(2024, n, 1) for n in range(1, 13)]
    assert months[0]["total"] == 10
    assert months[1]["total"] == 0
    assert months[2]["total"] == 7.5
    assert sum(m["total"] for m in months) == 17.5
