"""Gregorian, Solar Hijri and Lunar Hijri conversion over Julian Day Numbers.

Every conversion goes through the integer Julian Day Number (JDN) of the civil
day, so the two Hijri calendars share one Gregorian implementation.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from .errors import ValidationError

SOLAR_HIJRI_EPOCH = 1948320
LUNAR_HIJRI_EPOCH = 1948440

SOLAR_CYCLE_YEARS = 33
SOLAR_CYCLE_DAYS = 12053
SOLAR_LEAP_POSITIONS = (1, 5, 9, 13, 17, 22, 26, 30)

LUNAR_CYCLE_YEARS = 30
LUNAR_CYCLE_DAYS = 10631

MAX_LUNAR_OFFSET = 5

WEEKDAYS = {
    "en": ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"],
    "fa": ["یکشنبه", "دوشنبه", "سه‌شنبه", "چهارشنبه", "پنجشنبه", "جمعه", "شنبه"],
    "ar": ["الأحد", "الاثنين", "الثلاثاء", "الأربعاء", "الخميس", "الجمعة", "السبت"],
}

SOLAR_MONTHS = {
    "en": [
        "Farvardin", "Ordibehesht", "Khordad", "Tir", "Mordad", "Shahrivar",
        "Mehr", "Aban", "Azar", "Dey", "Bahman", "Esfand"
    ],
    "fa": [
        "فروردین", "اردیبهشت", "خرداد", "تیر", "مرداد", "شهریور",
        "مهر", "آبان", "آذر", "دی", "بهمن", "اسفند"
    ],
}

LUNAR_MONTHS = {
    "en": [
        "Muharram", "Safar", "Rabi al-Awwal", "Rabi al-Thani", "Jumada al-Ula", "Jumada al-Akhirah",
        "Rajab", "Shaban", "Ramadan", "Shawwal", "Dhu al-Qadah", "Dhu al-Hijjah"
    ],
    "ar": [
        "محرم", "صفر", "ربيع الأول", "ربيع الآخر", "جمادى الأولى", "جمادى الآخرة",
        "رجب", "شعبان", "رمضان", "شوال", "ذو القعدة", "ذو الحجة"
    ],
}


def _civil_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise ValidationError(f"Expected a date or datetime, got {type(value).__name__}")


def gregorian_to_jdn(year, month, day):
    a = (14 - month) // 12
    y = year + 4800 - a
    m = month + 12 * a - 3
    return day + (153 * m + 2) // 5 + 365 * y + y // 4 - y // 100 + y // 400 - 32045


def jdn_to_gregorian(jdn):
    a = jdn + 32044
    b = (4 * a + 3) // 146097
    c = a - 146097 * b // 4
    d = (4 * c + 3) // 1461
    e = c - 1461 * d // 4
    m = (5 * e + 2) // 153
    day = e - (153 * m + 2) // 5 + 1
    month = m + 3 - 12 * (m // 10)
    year = 100 * b + d - 4800 + m // 10
    return date(year, month, day)


def date_to_jdn(value):
    day = _civil_date(value)
    return gregorian_to_jdn(day.year, day.month, day.day)


def weekday_of_jdn(jdn):
    """0 is Sunday."""
    return (jdn + 1) % 7


@dataclass(frozen=True)
class _HijriDate:
    year: int
    month: int
    day: int

    MONTHS = {}

    @property
    def triple(self):
        return (self.day, self.month, self.year)

    @property
    def jdn(self):
        raise NotImplementedError

    @property
    def weekday(self):
        return weekday_of_jdn(self.jdn)

    def to_gregorian(self):
        return jdn_to_gregorian(self.jdn)

    def month_name(self, locale="en"):
        return _labels(self.MONTHS, locale)[self.month - 1]

    def weekday_name(self, locale="en"):
        return _labels(WEEKDAYS, locale)[self.weekday]

    def short_form(self):
        return f"{self.day:02d}/{self.month:02d}/{self.year:04d}"

    def long_form(self, locale="en"):
        return f"{self.day} {self.month_name(locale)} {self.year}"

    def __str__(self):
        return self.short_form()


def _labels(table, locale):
    labels = table.get(locale)
    if labels is None:
        raise ValidationError(f"Unsupported locale: {locale} (available: {', '.join(table)})")
    return labels


# Solar Hijri


def is_solar_hijri_leap_year(year):
    return (25 * year + 11) % SOLAR_CYCLE_YEARS < 8


def solar_hijri_month_length(year, month):
    if month <= 6:
        return 31
    if month <= 11:
        return 30
    return 30 if is_solar_hijri_leap_year(year) else 29


def _solar_leaps_through(year):
    cycles, position = divmod(year, SOLAR_CYCLE_YEARS)
    return cycles * len(SOLAR_LEAP_POSITIONS) + sum(1 for p in SOLAR_LEAP_POSITIONS if p <= position)


def _solar_days_before_year(year):
    return 365 * (year - 1) + _solar_leaps_through(year - 1)


def _check_solar(year, month, day):
    if year < 1:
        raise ValidationError(f"Solar Hijri year must be >= 1, got {year}")
    if not 1 <= month <= 12:
        raise ValidationError(f"Solar Hijri month must be 1-12, got {month}")
    length = solar_hijri_month_length(year, month)
    if not 1 <= day <= length:
        raise ValidationError(f"Solar Hijri day must be 1-{length} for {year}/{month}, got {day}")


def solar_hijri_to_jdn(year, month, day):
    _check_solar(year, month, day)
    if month <= 7:
        before_month = 31 * (month - 1)
    else:
        before_month = 186 + 30 * (month - 7)
    return SOLAR_HIJRI_EPOCH + _solar_days_before_year(year) + before_month + day - 1


def jdn_to_solar_hijri(jdn):
    days = jdn - SOLAR_HIJRI_EPOCH
    if days < 0:
        raise ValidationError("Date is before the Solar Hijri epoch")
    year = days * SOLAR_CYCLE_YEARS // SOLAR_CYCLE_DAYS + 1
    while _solar_days_before_year(year + 1) <= days:
        year += 1
    while _solar_days_before_year(year) > days:
        year -= 1
    day_of_year = days - _solar_days_before_year(year)
    if day_of_year < 186:
        month, day = divmod(day_of_year, 31)
        return SolarHijriDate(year, month + 1, day + 1)
    month, day = divmod(day_of_year - 186, 30)
    return SolarHijriDate(year, month + 7, day + 1)


@dataclass(frozen=True)
class SolarHijriDate(_HijriDate):
    MONTHS = SOLAR_MONTHS

    def __post_init__(self):
        _check_solar(self.year, self.month, self.day)

    @property
    def jdn(self):
        return solar_hijri_to_jdn(self.year, self.month, self.day)

    @property
    def is_leap_year(self):
        return is_solar_hijri_leap_year(self.year)


def gregorian_to_solar_hijri(value):
    return jdn_to_solar_hijri(date_to_jdn(value))


def solar_hijri_to_gregorian(value):
    return jdn_to_gregorian(value.jdn)


# Lunar Hijri (tabular)


def is_lunar_hijri_leap_year(year):
    return (14 + 11 * year) % LUNAR_CYCLE_YEARS < 11


def lunar_hijri_month_length(year, month):
    if month % 2 == 1 or (month == 12 and is_lunar_hijri_leap_year(year)):
        return 30
    return 29


def _lunar_days_before_month(month):
    # ceil(29.5 * (month - 1))
    return (59 * (month - 1) + 1) // 2


def _lunar_year_start(year):
    return LUNAR_HIJRI_EPOCH + (year - 1) * 354 + (3 + 11 * year) // LUNAR_CYCLE_YEARS


def _check_lunar(year, month, day):
    if year < 1:
        raise ValidationError(f"Lunar Hijri year must be >= 1, got {year}")
    if not 1 <= month <= 12:
        raise ValidationError(f"Lunar Hijri month must be 1-12, got {month}")
    length = lunar_hijri_month_length(year, month)
    if not 1 <= day <= length:
        raise ValidationError(f"Lunar Hijri day must be 1-{length} for {year}/{month}, got {day}")


def lunar_hijri_to_jdn(year, month, day):
    _check_lunar(year, month, day)
    return _lunar_year_start(year) + _lunar_days_before_month(month) + day - 1


def jdn_to_lunar_hijri(jdn):
    if jdn < LUNAR_HIJRI_EPOCH:
        raise ValidationError("Date is before the Lunar Hijri epoch")
    year = (LUNAR_CYCLE_YEARS * (jdn - LUNAR_HIJRI_EPOCH) + 10646) // LUNAR_CYCLE_DAYS
    while _lunar_year_start(year + 1) <= jdn:
        year += 1
    while _lunar_year_start(year) > jdn:
        year -= 1
    day_of_year = jdn - _lunar_year_start(year)
    month = 12
    while _lunar_days_before_month(month) > day_of_year:
        month -= 1
    return LunarHijriDate(year, month, day_of_year - _lunar_days_before_month(month) + 1)


@dataclass(frozen=True)
class LunarHijriDate(_HijriDate):
    MONTHS = LUNAR_MONTHS

    def __post_init__(self):
        _check_lunar(self.year, self.month, self.day)

    @property
    def jdn(self):
        return lunar_hijri_to_jdn(self.year, self.month, self.day)

    @property
    def is_leap_year(self):
        return is_lunar_hijri_leap_year(self.year)


def check_lunar_offset(day_offset):
    if isinstance(day_offset, bool) or not isinstance(day_offset, int):
        raise ValidationError(f"Lunar Hijri offset must be an integer, got {day_offset!r}")
    if not -MAX_LUNAR_OFFSET <= day_offset <= MAX_LUNAR_OFFSET:
        raise ValidationError(
            f"Lunar Hijri offset {day_offset} is out of bounds "
            f"(-{MAX_LUNAR_OFFSET} to {MAX_LUNAR_OFFSET})"
        )
    return day_offset


def gregorian_to_lunar_hijri(value, day_offset=0):
    check_lunar_offset(day_offset)
    day = _civil_date(value)
    try:
        shifted = day + timedelta(days=day_offset)
    except OverflowError as exc:
        raise ValidationError(f"Date {day} cannot be shifted by {day_offset} days") from exc
    return jdn_to_lunar_hijri(date_to_jdn(shifted))


def lunar_hijri_to_gregorian(value):
    return jdn_to_gregorian(value.jdn)
