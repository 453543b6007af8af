from datetime import timedelta

from .astro import (
    asr_altitude,
    horizon_angle,
    solar_noon_hours,
    solve_hour_angle_hours,
    to_instant,
)
from .errors import AstronomicalUndefined, InvariantViolation
from .methods import Angle, HighLatitudeRule
from .models import PrayerTimesResult

# Local solar hours used as the first-pass estimate for each event.
DEFAULT_HOURS = {
    "fajr": 5,
    "sunrise": 6,
    "asr": 13,
    "sunset": 18,
    "maghrib": 18,
    "isha": 18,
}

ORDER = [
    ("imsak", "fajr"),
    ("fajr", "sunrise"),
    ("sunrise", "dhuhr"),
    ("dhuhr", "asr"),
    ("asr", "sunset"),
    ("maghrib", "isha"),
    ("sunset", "midnight"),
    ("midnight", "next_fajr"),
]


class PrayerTimeScheduler:
    def __init__(self, settings, geo):
        self.settings = settings
        self.geo = geo
        self.params = settings.parameters
        self.rule = self.params.high_latitude_rule

    def compute(self, day, timezone_offset_hours=0.0):
        times, fallbacks = self._compute_times(day)
        next_times, next_fallbacks = self._compute_night_edges(day + timedelta(days=1))
        times["next_fajr"] = next_times["fajr"] + 24.0
        if "fajr" in next_fallbacks:
            fallbacks.add("next_fajr")
        times["midnight"] = times["sunset"] + (times["next_fajr"] - times["sunset"]) / 2.0

        instants = {key: to_instant(day, value) for key, value in times.items()}
        result = PrayerTimesResult(
            date=day,
            location=self.geo,
            timezone_offset_hours=timezone_offset_hours,
            fallbacks=frozenset(fallbacks),
            **instants,
        )
        check_order(result)
        return result

    def _sun_angle_time(self, day, angle, event, before_noon):
        return solve_hour_angle_hours(
            day, self.geo, angle, before_noon, guess=DEFAULT_HOURS[event], event=event
        )

    def _compute_night_edges(self, day):
        times = {}
        rise_set = horizon_angle(self.geo.altitude)
        times["sunrise"] = self._sun_angle_time(day, rise_set, "sunrise", True)
        times["sunset"] = self._sun_angle_time(day, rise_set, "sunset", False)
        fallbacks = set()
        times["fajr"] = self._twilight(day, self.params.fajr, "fajr", times, fallbacks)
        return times, fallbacks

    def _compute_times(self, day):
        times, fallbacks = self._compute_night_edges(day)
        times["dhuhr"] = solar_noon_hours(day, self.geo.longitude)
        times["maghrib"] = self._twilight(day, self.params.maghrib, "maghrib", times, fallbacks)
        times["isha"] = self._twilight(day, self.params.isha, "isha", times, fallbacks)
        times["imsak"] = times["fajr"] - self.settings.imsak_minutes / 60.0
        times["asr"] = self._asr_time(day, times, fallbacks)
        return times, fallbacks

    def _asr_time(self, day, times, fallbacks):
        guess = DEFAULT_HOURS["asr"]
        factor = self.settings.asr_factor
        try:
            angle = asr_altitude(day, self.geo, factor, guess - self.geo.longitude / 15.0)
            return solve_hour_angle_hours(day, self.geo, angle, False, guess=guess, event="asr")
        except AstronomicalUndefined:
            if self.rule is HighLatitudeRule.NONE:
                raise
            fallbacks.add("asr")
            # factor/(factor + 1) of the afternoon: half for Standard, two thirds for Hanafi
            return times["dhuhr"] + (times["sunset"] - times["dhuhr"]) * factor / (factor + 1.0)

    def _twilight(self, day, param, event, times, fallbacks):
        before_noon = event == "fajr"
        base = times["sunrise"] if before_noon else times["sunset"]
        if not isinstance(param, Angle):
            return base + param.minutes / 60.0
        try:
            return self._sun_angle_time(day, -param.degrees, event, before_noon)
        except AstronomicalUndefined:
            night = 24.0 - (times["sunset"] - times["sunrise"])
            portion = self.rule.night_portion(param.degrees, night)
            if portion is None:
                raise
            fallbacks.add(event)
            if before_noon:
                return base - portion
            if event == "isha":
                return max(base + portion, times["maghrib"])
            return base + portion


def check_order(result):
    """Raise InvariantViolation unless the instants are in prayer order.

    Sunset and Maghrib may coincide, as may any pair where one side came from
    the high-latitude fallback.
    """
    for earlier, later in ORDER + [("sunset", "maghrib")]:
        a = getattr(result, earlier)
        b = getattr(result, later)
        lenient = (earlier, later) == ("sunset", "maghrib") or {earlier, later} & result.fallbacks
        if a > b or (a == b and not lenient):
            raise InvariantViolation(
                f"{earlier} ({a.isoformat()}) is not before {later} ({b.isoformat()}) on {result.date}"
            )


def compute(day, settings, geo, timezone_offset_hours=0.0):
    return PrayerTimeScheduler(settings, geo).compute(day, timezone_offset_hours)
