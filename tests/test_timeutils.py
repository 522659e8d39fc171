import re
from datetime import datetime, timedelta, timezone

import pytest

from keydelivery.timeutils import default_name, expiration_instant, to_iso_timestamp


class TestDefaultName:
    def test_applies_default_offset(self):
        now = datetime(2026, 1, 11, 6, 30, 5, tzinfo=timezone.utc)
        assert default_name(now=now) == "20刀体验_20260111_143005"

    def test_offset_rolls_over_date(self):
        now = datetime(2026, 1, 11, 20, 0, 0, tzinfo=timezone.utc)
        assert default_name(8, now=now) == "20刀体验_20260112_040000"

    def test_zero_offset_uses_utc_fields(self):
        now = datetime(2026, 12, 31, 23, 59, 59, tzinfo=timezone.utc)
        assert default_name(0, now=now) == "20刀体验_20261231_235959"

    def test_negative_offset(self):
        now = datetime(2026, 3, 1, 2, 0, 0, tzinfo=timezone.utc)
        assert default_name(-5, now=now) == "20刀体验_20260228_210000"

    @pytest.mark.parametrize("offset", [-12, 0, 5, 8, 14])
    def test_fields_match_shifted_utc(self, offset):
        now = datetime(2026, 7, 4, 17, 45, 12, 987000, tzinfo=timezone.utc)
        shifted = now + timedelta(hours=offset)
        name = default_name(offset, now=now)
        assert re.fullmatch(r"20刀体验_\d{8}_\d{6}", name)
        assert name == f"20刀体验_{shifted:%Y%m%d}_{shifted:%H%M%S}"

    def test_uses_current_time_by_default(self):
        assert re.fullmatch(r"20刀体验_\d{8}_\d{6}", default_name())


class TestExpirationInstant:
    @pytest.mark.parametrize("days", [0, 1, 7, 30, 365])
    @pytest.mark.parametrize("hour", [0, 5, 6, 13, 23])
    def test_always_lands_on_anchor(self, days, hour):
        now = datetime(2026, 1, 11, hour, 17, 42, 123456, tzinfo=timezone.utc)
        expires_at = expiration_instant(days, now=now)
        assert (expires_at.hour, expires_at.minute, expires_at.second) == (5, 59, 8)
        assert expires_at.microsecond == 330_000
        assert expires_at.date() == (now + timedelta(days=days)).date()

    def test_anchor_can_be_earlier_than_now(self):
        now = datetime(2026, 1, 11, 20, 0, 0, tzinfo=timezone.utc)
        assert expiration_instant(0, now=now) == datetime(2026, 1, 11, 5, 59, 8, 330000, tzinfo=timezone.utc)

    def test_weekly_pass(self):
        now = datetime(2026, 1, 11, 6, 30, 0, tzinfo=timezone.utc)
        assert expiration_instant(7, now=now) == datetime(2026, 1, 18, 5, 59, 8, 330000, tzinfo=timezone.utc)

    def test_non_utc_input_is_normalised(self):
        beijing = timezone(timedelta(hours=8))
        now = datetime(2026, 1, 12, 2, 0, 0, tzinfo=beijing)  # 2026-01-11 18:00 UTC
        assert expiration_instant(1, now=now) == datetime(2026, 1, 12, 5, 59, 8, 330000, tzinfo=timezone.utc)


class TestToIsoTimestamp:
    def test_millisecond_precision_with_z(self):
        value = datetime(2026, 1, 18, 5, 59, 8, 330000, tzinfo=timezone.utc)
        assert to_iso_timestamp(value) == "2026-01-18T05:59:08.330Z"

    def test_truncates_microseconds(self):
        value = datetime(2026, 1, 18, 0, 0, 0, 999999, tzinfo=timezone.utc)
        assert to_iso_timestamp(value) == "2026-01-18T00:00:00.999Z"

    def test_converts_to_utc(self):
        value = datetime(2026, 1, 18, 13, 59, 8, 330000, tzinfo=timezone(timedelta(hours=8)))
        assert to_iso_timestamp(value) == "2026-01-18T05:59:08.330Z"
