# /// script
# requires-python = ">=3.12"
# dependencies = ["pytest>=7.0", "pydantic>=2.0"]
# ///
"""Tests for the rest-day calculator.

Validates:
  1. Required rest days per age group and pitch-count tier
  2. Next eligible date = game date + rest days + 1
  3. No applicable rule returns None, not an error
  4. Calendar arithmetic across month/year/leap boundaries
  5. Results do not depend on the local timezone
"""

import os
import sys
import time
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from compliance.rest_days import (
    calculate_next_eligible_date,
    get_required_rest_days,
    next_eligible_date_iso,
)


class TestRequiredRestDays:
    @pytest.mark.parametrize("count,expected", [
        (1, 0), (20, 0), (21, 1), (35, 1), (36, 2), (50, 2),
    ])
    def test_ages_7_8(self, count, expected):
        assert get_required_rest_days(7, count) == expected

    @pytest.mark.parametrize("count,expected", [
        (1, 0), (20, 0), (21, 1), (35, 1), (36, 2), (50, 2),
        (51, 3), (65, 3), (66, 4), (75, 4), (120, 4),
    ])
    def test_ages_9_10(self, count, expected):
        assert get_required_rest_days(10, count) == expected

    def test_ages_11_12(self):
        assert get_required_rest_days(12, 21) == 1
        assert get_required_rest_days(11, 85) == 4

    def test_six_year_olds_use_training_division(self):
        assert get_required_rest_days(6, 40) == 2

    def test_no_rule_for_age(self):
        assert get_required_rest_days(13, 40) is None
        assert get_required_rest_days(None, 40) is None

    def test_no_tier_for_pitch_count(self):
        assert get_required_rest_days(10, 0) is None
        assert get_required_rest_days(8, 60) is None


class TestNextEligibleDate:
    def test_documented_example(self):
        # age 10, 55 official pitches -> 3 rest days -> May 10 + 4
        assert calculate_next_eligible_date("2025-05-10", 10, 55) == date(2025, 5, 14)

    @pytest.mark.parametrize("count,expected", [
        (15, "2025-05-11"),
        (30, "2025-05-12"),
        (40, "2025-05-13"),
        (55, "2025-05-14"),
        (70, "2025-05-15"),
    ])
    def test_each_tier(self, count, expected):
        assert next_eligible_date_iso("2025-05-10", 10, count) == expected

    def test_accepts_date_object(self):
        assert calculate_next_eligible_date(date(2025, 5, 10), 8, 25) == date(2025, 5, 12)

    def test_month_boundary(self):
        assert next_eligible_date_iso("2025-05-30", 12, 70) == "2025-06-04"

    def test_year_boundary(self):
        assert next_eligible_date_iso("2025-12-30", 12, 70) == "2026-01-04"

    def test_leap_day(self):
        assert next_eligible_date_iso("2024-02-27", 10, 40) == "2024-03-01"

    def test_no_rule_returns_none(self):
        assert calculate_next_eligible_date("2025-05-10", 14, 40) is None
        assert next_eligible_date_iso("2025-05-10", 10, 0) is None


@pytest.mark.skipif(not hasattr(time, "tzset"), reason="tzset not available")
class TestTimezoneIndependence:
    @pytest.mark.parametrize("tz", ["UTC", "America/Los_Angeles", "Pacific/Kiritimati", "Pacific/Pago_Pago"])
    def test_same_date_in_every_timezone(self, tz, monkeypatch):
        monkeypatch.setenv("TZ", tz)
        time.tzset()
        try:
            assert next_eligible_date_iso("2025-05-10", 10, 55) == "2025-05-14"
            assert next_eligible_date_iso("2025-03-08", 10, 55) == "2025-03-12"
        finally:
            monkeypatch.undo()
            time.tzset()
