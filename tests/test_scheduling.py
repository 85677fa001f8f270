from datetime import date

from core.scheduling import build_event_batch, current_month, today_in, upcoming_window, weekly_dates


def test_today_in_timezone():
    assert isinstance(today_in("America/Los_Angeles"), date)


def test_upcoming_window():
    assert upcoming_window(date(2025, 1, 15)) == (date(2025, 1, 15), date(2025, 2, 14))
    assert upcoming_window(date(2025, 1, 15), days=7)[1] == date(2025, 1, 22)


def test_current_month():
    assert current_month(date(2025, 3, 9)) == "2025-03"


def test_weekly_dates_cross_month():
    assert weekly_dates(date(2025, 1, 24), 3) == [date(2025, 1, 24), date(2025, 1, 31), date(2025, 2, 7)]


def test_weekly_dates_at_least_one():
    assert weekly_dates(date(2025, 1, 1), 0) == [date(2025, 1, 1)]


def test_single_event_batch():
    rows = build_event_batch({"title": "Pop-up"}, date(2025, 5, 1))
    assert rows == [{"title": "Pop-up", "date": "2025-05-01"}]


def test_recurring_batch_differs_only_by_date():
    fields = {"title": "Market", "type": "market", "status": "booked"}
    rows = build_event_batch(fields, date(2025, 5, 3), recurring=True, weeks=4)
    assert [r["date"] for r in rows] == ["2025-05-03", "2025-05-10", "2025-05-17", "2025-05-24"]
    for row in rows:
        assert {k: v for k, v in row.items() if k != "date"} == fields
    assert "date" not in fields
