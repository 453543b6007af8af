"""Value types shared by the scheduler, the api and the CLI."""

import math
from dataclasses import dataclass, field, replace
from datetime import date, timedelta, timezone
from typing import Optional

from .errors import ValidationError
from .methods import CalculationMethod, HighLatitudeRule, resolve

PRAYER_NAMES = (
    "imsak",
    "fajr",
    "sunrise",
    "dhuhr",
    "asr",
    "sunset",
    "maghrib",
    "isha",
    "midnight",
)

PRAYER_LABELS = {
    "imsak": "Imsak",
    "fajr": "Fajr",
    "sunrise": "Sunrise",
    "dhuhr": "Dhuhr",
    "asr": "Asr",
    "sunset": "Sunset",
    "maghrib": "Maghrib",
    "isha": "Isha",
    "midnight": "Midnight",
}

ASR_FACTORS = {"standard": 1, "shafi": 1, "maliki": 1, "hanbali": 1, "hanafi": 2}


def _finite(name, value):
    try:
        value = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be finite, got {value}")
    return value


@dataclass(frozen=True)
class Geocoordinate:
    latitude: float
    longitude: float
    altitude: float = 0.0

    def __post_init__(self):
        lat = _finite("latitude", self.latitude)
        lng = _finite("longitude", self.longitude)
        alt = _finite("altitude", self.altitude)
        if not -90.0 <= lat <= 90.0:
            raise ValidationError(f"latitude must be within [-90, 90], got {lat}")
        if not -180.0 <= lng <= 180.0:
            raise ValidationError(f"longitude must be within [-180, 180], got {lng}")
        object.__setattr__(self, "latitude", lat)
        object.__setattr__(self, "longitude", lng)
        object.__setattr__(self, "altitude", alt)


def asr_factor_for(juristic):
    key = str(juristic).strip().lower()
    if key not in ASR_FACTORS:
        raise ValidationError(f"Unknown Asr juristic method: {juristic}")
    return ASR_FACTORS[key]


@dataclass(frozen=True)
class PrayerCalculationSettings:
    method: CalculationMethod
    date: date
    asr_juristic: Optional[str] = None
    imsak_minutes: float = 10
    high_latitude_rule: Optional[HighLatitudeRule] = None

    def __post_init__(self):
        if not isinstance(self.method, CalculationMethod):
            object.__setattr__(self, "method", CalculationMethod.lookup(self.method))
        minutes = _finite("imsak_minutes", self.imsak_minutes)
        if not 0 < minutes <= 60:
            raise ValidationError(f"imsak_minutes must be within (0, 60], got {minutes}")
        object.__setattr__(self, "imsak_minutes", minutes)
        if self.asr_juristic is not None:
            asr_factor_for(self.asr_juristic)
        if self.high_latitude_rule is not None:
            object.__setattr__(self, "high_latitude_rule", HighLatitudeRule.lookup(self.high_latitude_rule))

    @property
    def parameters(self):
        params = resolve(self.method, self.date)
        if self.high_latitude_rule is not None:
            return replace(params, high_latitude_rule=self.high_latitude_rule)
        return params

    @property
    def asr_factor(self):
        if self.asr_juristic is None:
            return self.parameters.asr_factor
        return asr_factor_for(self.asr_juristic)


@dataclass(frozen=True)
class PrayerTimesResult:
    """Nine UTC instants for one calculation date and location, in prayer order."""

    date: date
    location: Geocoordinate
    timezone_offset_hours: float
    imsak: object
    fajr: object
    sunrise: object
    dhuhr: object
    asr: object
    sunset: object
    maghrib: object
    isha: object
    midnight: object
    next_fajr: object = None
    fallbacks: frozenset = field(default_factory=frozenset)

    @property
    def tzinfo(self):
        return timezone(timedelta(hours=self.timezone_offset_hours))

    def items(self):
        return [(name, getattr(self, name)) for name in PRAYER_NAMES]

    def local(self, name):
        return getattr(self, name).astimezone(self.tzinfo)

    def format(self, name):
        return self.local(name).strftime("%H:%M")

    def as_strings(self):
        return {name: self.format(name) for name in PRAYER_NAMES}
