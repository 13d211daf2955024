"""Unit tests for the April to March academic session."""

from datetime import date, datetime

from app.core.fee_engine import SessionMonth, session_months, session_start_year


def test_session_starts_in_april_of_current_year() -> None:
    months = session_months(datetime(2024, 5, 20))
    assert len(months) == 12
    assert months[0] == SessionMonth(2024, 3)
    assert months[-1] == SessionMonth(2025, 2)


def test_january_to_march_belong_to_previous_session() -> None:
    assert session_start_year(datetime(2025, 3, 31, 23, 59)) == 2024
    assert session_start_year(datetime(2025, 4, 1)) == 2025
    months = session_months(datetime(2025, 2, 10))
    assert months[0] == SessionMonth(2024, 3)
    assert SessionMonth(2025, 1) in months


def test_months_are_ordered_and_unique() -> None:
    months = session_months(datetime(2024, 8, 1))
    assert months == sorted(months)
    assert len({m.key for m in months}) == 12


def test_session_month_properties() -> None:
    april = SessionMonth(2024, 3)
    assert april.key == "2024-3"
    assert april.calendar_month == 4
    assert april.name == "April"
    assert april.first_day == datetime(2024, 4, 1)
    assert april.last_day == date(2024, 4, 30)
    assert SessionMonth(2024, 1).days_in_month == 29


def test_month_has_started_on_its_first_day() -> None:
    may = SessionMonth(2024, 4)
    assert may.has_started(datetime(2024, 5, 1))
    assert not may.has_started(datetime(2024, 4, 30, 23, 59))
