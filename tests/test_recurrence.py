"""Tests for recurring due-date arithmetic."""

from datetime import date

from household_finance.engine.recurrence import advance_due_date, next_due_date, step
from household_finance.models import Frequency


TODAY = date(2024, 3, 15)


class TestStep:
    """One interval forward."""

    def test_units(self):
        start = date(2024, 1, 10)
        assert step(start, Frequency.DAILY, 3) == date(2024, 1, 13)
        assert step(start, Frequency.WEEKLY, 2) == date(2024, 1, 24)
        assert step(start, Frequency.MONTHLY, 1) == date(2024, 2, 10)
        assert step(start, Frequency.YEARLY, 1) == date(2025, 1, 10)

    def test_month_end_is_clamped(self):
        """Jan 31 plus one month lands on the last day of February."""
        assert step(date(2024, 1, 31), Frequency.MONTHLY, 1) == date(2024, 2, 29)
        assert step(date(2023, 1, 31), Frequency.MONTHLY, 1) == date(2023, 2, 28)


class TestNextDueDate:
    """First occurrence on or after today."""

    def test_monthly_rule_started_last_year(self):
        due = next_due_date(date(2023, 1, 1), Frequency.MONTHLY, 1, today=TODAY)
        assert due == date(2024, 4, 1)

    def test_future_start_is_the_first_occurrence(self):
        due = next_due_date(date(2024, 6, 1), Frequency.MONTHLY, 1, today=TODAY)
        assert due == date(2024, 6, 1)

    def test_occurrence_today_is_due_today(self):
        due = next_due_date(date(2024, 3, 1), Frequency.WEEKLY, 1, today=TODAY)
        assert due == TODAY

    def test_interval_greater_than_one(self):
        due = next_due_date(date(2024, 1, 10), Frequency.MONTHLY, 2, today=TODAY)
        assert due == date(2024, 5, 10)

    def test_daily_interval(self):
        due = next_due_date(date(2024, 3, 10), Frequency.DAILY, 3, today=TODAY)
        assert due == date(2024, 3, 16)

    def test_month_end_start(self):
        due = next_due_date(date(2024, 1, 31), Frequency.MONTHLY, 1, today=date(2024, 2, 15))
        assert due == date(2024, 2, 29)

    def test_series_past_end_date_is_over(self):
        due = next_due_date(
            date(2023, 1, 1), Frequency.MONTHLY, 1,
            end_date=date(2024, 3, 31), today=TODAY,
        )
        assert due is None

    def test_occurrence_on_end_date_still_counts(self):
        due = next_due_date(
            date(2023, 1, 1), Frequency.MONTHLY, 1,
            end_date=date(2024, 4, 1), today=TODAY,
        )
        assert due == date(2024, 4, 1)

    def test_result_is_stable(self):
        """Recomputing from the result gives the result back."""
        due = next_due_date(date(2022, 7, 19), Frequency.WEEKLY, 3, today=TODAY)
        assert due >= TODAY
        assert next_due_date(due, Frequency.WEEKLY, 3, today=TODAY) == due


class TestAdvanceDueDate:
    """Moving a rule on after paying it."""

    def test_always_steps_at_least_once(self):
        """A bill paid before it is due moves to the following occurrence."""
        due = advance_due_date(date(2024, 3, 20), Frequency.MONTHLY, 1, today=TODAY)
        assert due == date(2024, 4, 20)

    def test_overdue_bill_catches_up_past_today(self):
        due = advance_due_date(date(2024, 1, 1), Frequency.MONTHLY, 1, today=TODAY)
        assert due == date(2024, 4, 1)

    def test_lands_on_today(self):
        due = advance_due_date(date(2024, 3, 8), Frequency.WEEKLY, 1, today=TODAY)
        assert due == TODAY

    def test_end_date_stops_the_series(self):
        due = advance_due_date(
            date(2024, 3, 10), Frequency.MONTHLY, 1,
            end_date=date(2024, 4, 5), today=TODAY,
        )
        assert due is None
