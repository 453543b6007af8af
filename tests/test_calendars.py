from datetime import date, datetime, timedelta, timezone

import jdatetime
import pytest

from hijritimes.calendars import (
    LunarHijriDate,
    SolarHijriDate,
    check_lunar_offset,
    gregorian_to_jdn,
    gregorian_to_lunar_hijri,
    gregorian_to_solar_hijri,
    is_lunar_hijri_leap_year,
    is_solar_hijri_leap_year,
    jdn_to_gregorian,
    jdn_to_lunar_hijri,
    jdn_to_solar_hijri,
    lunar_hijri_month_length,
    lunar_hijri_to_gregorian,
    solar_hijri_month_length,
    solar_hijri_to_gregorian,
)
from hijritimes.errors import ValidationError


def _days(start, end):
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def test_jdn_known_values():
    assert gregorian_to_jdn(2000, 1, 1) == 2451545
    assert gregorian_to_jdn(2022, 4, 6) == 2459676
    assert gregorian_to_jdn(1858, 11, 17) == 2400001
    assert jdn_to_gregorian(2451545) == date(2000, 1, 1)


def test_jdn_round_trip_every_day():
    for day in _days(date(1900, 1, 1), date(2100, 12, 31)):
        jdn = gregorian_to_jdn(day.year, day.month, day.day)
        assert jdn_to_gregorian(jdn) == day


def test_jdn_is_continuous():
    assert gregorian_to_jdn(2024, 3, 1) - gregorian_to_jdn(2024, 2, 28) == 2
    assert gregorian_to_jdn(2023, 3, 1) - gregorian_to_jdn(2023, 2, 28) == 1
    assert gregorian_to_jdn(1900, 3, 1) - gregorian_to_jdn(1900, 2, 28) == 1


def test_solar_hijri_known_dates():
    assert gregorian_to_solar_hijri(date(2022, 4, 6)) == SolarHijriDate(1401, 1, 17)
    assert gregorian_to_solar_hijri(date(2022, 3, 21)) == SolarHijriDate(1401, 1, 1)
    assert gregorian_to_solar_hijri(date(2022, 3, 20)) == SolarHijriDate(1400, 12, 29)
    assert gregorian_to_solar_hijri(date(2024, 3, 20)) == SolarHijriDate(1403, 1, 1)
    assert gregorian_to_solar_hijri(date(2025, 3, 20)) == SolarHijriDate(1403, 12, 30)
    assert gregorian_to_solar_hijri(date(2025, 3, 21)) == SolarHijriDate(1404, 1, 1)


def test_solar_hijri_accepts_datetime():
    when = datetime(2022, 4, 6, 21, 2, 28, tzinfo=timezone.utc)
    assert gregorian_to_solar_hijri(when) == SolarHijriDate(1401, 1, 17)


def test_solar_hijri_leap_years():
    assert is_solar_hijri_leap_year(1399)
    assert is_solar_hijri_leap_year(1403)
    assert is_solar_hijri_leap_year(1408)
    assert not is_solar_hijri_leap_year(1400)
    assert not is_solar_hijri_leap_year(1401)
    assert not is_solar_hijri_leap_year(1402)
    assert solar_hijri_month_length(1403, 12) == 30
    assert solar_hijri_month_length(1402, 12) == 29
    assert solar_hijri_month_length(1402, 1) == 31
    assert solar_hijri_month_length(1402, 7) == 30


def test_solar_hijri_round_trip_every_day():
    previous = None
    for day in _days(date(1900, 1, 1), date(2100, 12, 31)):
        solar = gregorian_to_solar_hijri(day)
        assert solar_hijri_to_gregorian(solar) == day
        if previous is not None:
            assert solar.jdn == previous.jdn + 1
        previous = solar


def test_solar_hijri_agrees_with_jdatetime():
    for day in _days(date(1900, 1, 1), date(2100, 12, 31)):
        expected = jdatetime.date.fromgregorian(date=day)
        solar = gregorian_to_solar_hijri(day)
        assert (solar.year, solar.month, solar.day) == (expected.year, expected.month, expected.day), day


def test_solar_hijri_rejects_invalid_triples():
    with pytest.raises(ValidationError):
        SolarHijriDate(1402, 12, 30)
    with pytest.raises(ValidationError):
        SolarHijriDate(1401, 13, 1)
    with pytest.raises(ValidationError):
        SolarHijriDate(1401, 7, 31)
    with pytest.raises(ValidationError):
        SolarHijriDate(0, 1, 1)


def test_solar_hijri_before_epoch():
    with pytest.raises(ValidationError):
        jdn_to_solar_hijri(gregorian_to_jdn(600, 1, 1))


def test_lunar_hijri_known_dates():
    assert gregorian_to_lunar_hijri(date(2022, 4, 6)) == LunarHijriDate(1443, 9, 4)
    assert gregorian_to_lunar_hijri(date(2022, 4, 3)) == LunarHijriDate(1443, 9, 1)
    assert gregorian_to_lunar_hijri(date(2022, 6, 1)) == LunarHijriDate(1443, 11, 1)
    assert jdn_to_lunar_hijri(1948440) == LunarHijriDate(1, 1, 1)


def test_lunar_hijri_offset_is_applied_before_conversion():
    assert gregorian_to_lunar_hijri(date(2022, 4, 6), 1) == LunarHijriDate(1443, 9, 5)
    assert gregorian_to_lunar_hijri(date(2022, 4, 6), 5) == LunarHijriDate(1443, 9, 9)
    assert gregorian_to_lunar_hijri(date(2022, 4, 6), -5) == LunarHijriDate(1443, 8, 28)


@pytest.mark.parametrize("offset", [-6, 6, 100])
def test_lunar_hijri_offset_out_of_bounds(offset):
    with pytest.raises(ValidationError):
        gregorian_to_lunar_hijri(date(2022, 4, 6), offset)


@pytest.mark.parametrize("offset", [1.0, "1", True, None])
def test_lunar_hijri_offset_must_be_int(offset):
    with pytest.raises(ValidationError):
        check_lunar_offset(offset)


def test_lunar_hijri_leap_years():
    leaps = [y for y in range(1, 31) if is_lunar_hijri_leap_year(y)]
    assert leaps == [2, 5, 7, 10, 13, 16, 18, 21, 24, 26, 29]
    assert lunar_hijri_month_length(1443, 12) == 29
    assert lunar_hijri_month_length(1445, 12) == 30
    assert lunar_hijri_month_length(1443, 9) == 30
    assert lunar_hijri_month_length(1443, 10) == 29


def test_lunar_year_lengths_match_leap_rule():
    for year in range(1380, 1520):
        start = LunarHijriDate(year, 1, 1).jdn
        end = LunarHijriDate(year + 1, 1, 1).jdn
        assert end - start == (355 if is_lunar_hijri_leap_year(year) else 354)


def test_lunar_hijri_round_trip_every_day():
    previous = None
    for day in _days(date(1900, 1, 1), date(2100, 12, 31)):
        lunar = gregorian_to_lunar_hijri(day, 0)
        assert lunar_hijri_to_gregorian(lunar) == day
        if previous is not None:
            assert lunar.jdn == previous.jdn + 1
        previous = lunar


def test_lunar_hijri_rejects_invalid_triples():
    with pytest.raises(ValidationError):
        LunarHijriDate(1443, 10, 30)
    with pytest.raises(ValidationError):
        LunarHijriDate(1443, 0, 1)


def test_rendering():
    solar = SolarHijriDate(1401, 1, 17)
    assert solar.triple == (17, 1, 1401)
    assert solar.short_form() == "17/01/1401"
    assert solar.long_form() == "17 Farvardin 1401"
    assert solar.long_form("fa") == "17 فروردین 1401"
    assert solar.weekday_name() == "Wednesday"
    assert str(solar) == "17/01/1401"

    lunar = LunarHijriDate(1443, 9, 4)
    assert lunar.triple == (4, 9, 1443)
    assert lunar.short_form() == "04/09/1443"
    assert lunar.long_form() == "4 Ramadan 1443"
    assert lunar.month_name("ar") == "رمضان"
    assert lunar.weekday_name("ar") == "الأربعاء"


def test_rendering_does_not_change_value():
    lunar = LunarHijriDate(1443, 9, 4)
    lunar.long_form("ar")
    lunar.short_form()
    assert (lunar.year, lunar.month, lunar.day) == (1443, 9, 4)


def test_rendering_unknown_locale():
    with pytest.raises(ValidationError):
        SolarHijriDate(1401, 1, 17).month_name("ar")
    with pytest.raises(ValidationError):
        LunarHijriDate(1443, 9, 4).long_form("de")


def test_hijri_dates_are_immutable():
    solar = SolarHijriDate(1401, 1, 17)
    with pytest.raises(AttributeError):
        solar.day = 18
