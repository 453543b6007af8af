from .api import (
    Outcome,
    compute_prayer_times,
    convert_gregorian_to_lunar_hijri,
    convert_gregorian_to_solar_hijri,
    parse_instant,
)
from .calendars import LunarHijriDate, SolarHijriDate
from .errors import AstronomicalUndefined, DomainError, InvariantViolation, ValidationError
from .methods import CalculationMethod, HighLatitudeRule
from .models import Geocoordinate, PrayerCalculationSettings, PrayerTimesResult

__version__ = "1.0.0"
