import math
from datetime import datetime, timedelta, timezone

from .calendars import date_to_jdn
from .errors import AstronomicalUndefined

RISE_SET_ANGLE = 0.833
DIP_FACTOR = 0.0347


def _dtr(d):
    return (d * math.pi) / 180.0


def _rtd(r):
    return (r * 180.0) / math.pi


def _fix_angle(a):
    return a - 360.0 * math.floor(a / 360.0)


def _fix_hour(h):
    return h - 24.0 * math.floor(h / 24.0)


def julian_date(day, hours=0.0):
    """Julian Date of `hours` UTC on the civil `day`."""
    return date_to_jdn(day) - 0.5 + hours / 24.0


def sun_position(jd):
    """Declination (degrees) and equation of time (hours) at Julian Date `jd`."""
    d = jd - 2451545.0
    g = _fix_angle(357.529 + 0.98560028 * d)
    q = _fix_angle(280.459 + 0.98564736 * d)
    L = _fix_angle(q + 1.915 * math.sin(_dtr(g)) + 0.020 * math.sin(_dtr(2 * g)))
    e = 23.439 - 0.00000036 * d
    ra = _rtd(math.atan2(math.cos(_dtr(e)) * math.sin(_dtr(L)), math.cos(_dtr(L)))) / 15.0
    ra = _fix_hour(ra)
    eqt = _fix_hour(q / 15.0 - ra + 12.0) - 12.0
    decl = _rtd(math.asin(math.sin(_dtr(e)) * math.sin(_dtr(L))))
    return decl, eqt


def horizon_angle(altitude):
    """Sun altitude at apparent sunrise/sunset for an observer `altitude` metres up."""
    if altitude and altitude > 0:
        return -(RISE_SET_ANGLE + DIP_FACTOR * math.sqrt(altitude))
    return -RISE_SET_ANGLE


def to_instant(day, hours):
    midnight = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    return midnight + timedelta(seconds=round(hours * 3600.0))


def _noon_hours(day, longitude, hours):
    _, eqt = sun_position(julian_date(day, hours))
    return 12.0 - eqt - longitude / 15.0


def solar_noon_hours(day, longitude):
    first = _noon_hours(day, longitude, 12.0 - longitude / 15.0)
    return _noon_hours(day, longitude, first)


def solar_noon(day, longitude):
    return to_instant(day, solar_noon_hours(day, longitude))


def _hour_angle_hours(day, geo, angle, before_noon, hours, event):
    decl, _ = sun_position(julian_date(day, hours))
    noon = _noon_hours(day, geo.longitude, hours)
    numerator = math.sin(_dtr(angle)) - math.sin(_dtr(geo.latitude)) * math.sin(_dtr(decl))
    denominator = math.cos(_dtr(geo.latitude)) * math.cos(_dtr(decl))
    if denominator == 0.0 or abs(numerator / denominator) > 1.0:
        raise AstronomicalUndefined(event, angle, geo.latitude)
    t = _rtd(math.acos(numerator / denominator)) / 15.0
    return noon - t if before_noon else noon + t


def solve_hour_angle_hours(day, geo, angle, before_noon, guess=None, event="sun angle"):
    """UTC hours on `day` at which the sun sits at `angle` degrees of altitude.

    `guess` is the local solar hour used for the first pass; the second pass
    re-evaluates the sun's position at the first result. Raises
    AstronomicalUndefined when the sun never reaches `angle` that day.
    """
    if guess is None:
        guess = 6.0 if before_noon else 18.0
    first = _hour_angle_hours(day, geo, angle, before_noon, guess - geo.longitude / 15.0, event)
    return _hour_angle_hours(day, geo, angle, before_noon, first, event)


def solve_hour_angle_time(day, geo, angle, before_noon, guess=None, event="sun angle"):
    return to_instant(day, solve_hour_angle_hours(day, geo, angle, before_noon, guess, event))


def asr_altitude(day, geo, factor, hours):
    """Sun altitude at which a shadow is `factor` object-lengths plus the noon shadow.

    Raises AstronomicalUndefined when the sun stays below the horizon at noon,
    since no shadow is cast. Refraction can still produce a sunrise that day.
    """
    decl, _ = sun_position(julian_date(day, hours))
    zenith = abs(geo.latitude - decl)
    if zenith >= 90.0:
        raise AstronomicalUndefined("asr", 90.0 - zenith, geo.latitude)
    return _rtd(math.atan(1.0 / (factor + math.tan(_dtr(zenith)))))
