"""Engine entry points.

Caller errors (ValidationError) and unreachable sun angles
(AstronomicalUndefined) come back as ``Outcome`` values. InvariantViolation is
never caught here: it means the engine itself is broken.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from .calc import compute
from .calendars import check_lunar_offset, gregorian_to_lunar_hijri, gregorian_to_solar_hijri
from .errors import AstronomicalUndefined, ValidationError
from .methods import CalculationMethod
from .models import Geocoordinate, PrayerCalculationSettings

MIN_OFFSET_HOURS = -12.0
MAX_OFFSET_HOURS = 14.0


@dataclass(frozen=True)
class Outcome:
    value: object = None
    error: Optional[Exception] = None

    @property
    def ok(self):
        return self.error is None

    def unwrap(self):
        if self.error is not None:
            raise self.error
        return self.value


def parse_instant(text):
    """Parse an ISO 8601 timestamp such as ``2022-04-06T21:02:28Z`` into UTC."""
    if not isinstance(text, str) or not text.strip():
        raise ValidationError(f"Invalid date: {text!r}")
    value = text.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid date: {text}") from exc
    return to_utc(parsed)


def to_utc(when):
    if isinstance(when, str):
        return parse_instant(when)
    if isinstance(when, datetime):
        if when.tzinfo is None:
            return when.replace(tzinfo=timezone.utc)
        return when.astimezone(timezone.utc)
    if isinstance(when, date):
        return datetime(when.year, when.month, when.day, tzinfo=timezone.utc)
    raise ValidationError(f"Expected a datetime, date or ISO 8601 string, got {type(when).__name__}")


def effective_offset(timezone_offset_hours, daylight_saving=False):
    try:
        offset = float(timezone_offset_hours)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid timezone offset: {timezone_offset_hours!r}") from exc
    if daylight_saving:
        offset += 1.0
    if not math.isfinite(offset) or not MIN_OFFSET_HOURS <= offset <= MAX_OFFSET_HOURS:
        raise ValidationError(
            f"Timezone offset must be within [{MIN_OFFSET_HOURS:g}, {MAX_OFFSET_HOURS:g}] hours, got {offset}"
        )
    return offset


def local_date(when, offset_hours):
    try:
        return (to_utc(when) + timedelta(hours=offset_hours)).date()
    except OverflowError as exc:
        raise ValidationError(f"Date out of range: {when}") from exc


def as_geocoordinate(geo):
    """Accept a Geocoordinate, a (lat, lng[, alt]) sequence or a mapping of its fields."""
    if isinstance(geo, Geocoordinate):
        return geo
    try:
        if isinstance(geo, Mapping):
            return Geocoordinate(**geo)
        return Geocoordinate(*geo)
    except TypeError as exc:
        raise ValidationError(f"Expected latitude, longitude and optional altitude, got {geo!r}") from exc


def compute_prayer_times(when, geo, method, timezone_offset_hours, daylight_saving=False,
                         asr_juristic=None, imsak_minutes=10, high_latitude_rule=None):
    try:
        offset = effective_offset(timezone_offset_hours, daylight_saving)
        day = local_date(when, offset)
        geo = as_geocoordinate(geo)
        if not isinstance(method, CalculationMethod):
            method = CalculationMethod.lookup(method)
        settings = PrayerCalculationSettings(
            method=method,
            date=day,
            asr_juristic=asr_juristic,
            imsak_minutes=imsak_minutes,
            high_latitude_rule=high_latitude_rule,
        )
        return Outcome(value=compute(day, settings, geo, offset))
    except (ValidationError, AstronomicalUndefined) as exc:
        return Outcome(error=exc)


def convert_gregorian_to_solar_hijri(when):
    try:
        return Outcome(value=gregorian_to_solar_hijri(to_utc(when)))
    except ValidationError as exc:
        return Outcome(error=exc)


def convert_gregorian_to_lunar_hijri(when, day_offset=0):
    try:
        check_lunar_offset(day_offset)
        return Outcome(value=gregorian_to_lunar_hijri(to_utc(when), day_offset))
    except ValidationError as exc:
        return Outcome(error=exc)
