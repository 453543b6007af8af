import logging
from datetime import timedelta

from .api import (
    compute_prayer_times,
    convert_gregorian_to_lunar_hijri,
    convert_gregorian_to_solar_hijri,
    to_utc,
)
from .config import active_location
from .methods import CalculationMethod
from .models import Geocoordinate, PRAYER_LABELS, PRAYER_NAMES

logger = logging.getLogger(__name__)

PRAYER_ORDER = ["fajr", "dhuhr", "asr", "maghrib", "isha"]
TOOLTIP_ORDER = ["fajr", "sunrise", "dhuhr", "asr", "maghrib", "isha"]


def format_time(dt, format_24h):
    if format_24h:
        return dt.strftime("%H:%M")
    return dt.strftime("%I:%M %p").lstrip("0")


def format_countdown(delta):
    total_minutes = int(delta.total_seconds() // 60)
    if total_minutes < 0:
        total_minutes = 0
    hours, minutes = divmod(total_minutes, 60)
    if hours > 0:
        return f"{hours}h{minutes:02d}"
    return f"{minutes}m"


def apply_adjustments(result, adjustments):
    """Local datetimes for each prayer, shifted by the per-prayer display minutes."""
    adjusted = {}
    for key in PRAYER_NAMES:
        minutes = (adjustments or {}).get(key, 0)
        adjusted[key] = result.local(key) + timedelta(minutes=minutes)
    return adjusted


def location_settings(config):
    location_key, loc = active_location(config)
    geo = Geocoordinate(loc["lat"], loc["lng"], loc.get("alt", 0.0))
    return location_key, loc, geo


def compute_for_config(config, when):
    _, loc, geo = location_settings(config)
    outcome = compute_prayer_times(
        when,
        geo,
        config.get("method", "MWL"),
        loc.get("tz_hours", 0.0),
        daylight_saving=loc.get("dst", False),
        asr_juristic=config.get("asr_method", "Standard"),
        imsak_minutes=config.get("imsak_minutes", 10),
    )
    return outcome.unwrap()


def build_times_table(result, adjustments, format_24h):
    times = apply_adjustments(result, adjustments)
    lines = []
    for key in PRAYER_NAMES:
        marker = " *" if key in result.fallbacks else ""
        lines.append(f"{PRAYER_LABELS[key]:<9} {format_time(times[key], format_24h)}{marker}")
    return lines


def build_tooltip(times, method_name, asr_method, location_label, format_24h):
    lines = [f"{location_label} ({method_name}, Asr: {asr_method})"]
    for key in TOOLTIP_ORDER:
        lines.append(f"{PRAYER_LABELS[key]} {format_time(times[key], format_24h)}")
    return "\n".join(lines)


def next_prayer(now, today_times, tomorrow_times):
    for key in PRAYER_ORDER:
        dt = today_times[key]
        if now < dt:
            return PRAYER_LABELS[key], dt
    return PRAYER_LABELS["fajr"], tomorrow_times["fajr"]


def render_times(config, when):
    result = compute_for_config(config, when)
    location_key, loc = active_location(config)
    format_24h = config.get("time_format", "24h") == "24h"
    method = CalculationMethod.lookup(config.get("method", "MWL"))
    header = f"{loc.get('label') or location_key} - {result.date.isoformat()} ({method.parameters.name})"
    lines = [header] + build_times_table(result, config.get("adjustments", {}), format_24h)
    if result.fallbacks:
        lines.append("* estimated with the high-latitude rule")
    return "\n".join(lines)


def render_waybar(config, now):
    location_key, loc, _geo = location_settings(config)
    adjustments = config.get("adjustments", {})

    today_result = compute_for_config(config, now)
    tomorrow_result = compute_for_config(config, now + timedelta(days=1))
    today_times = apply_adjustments(today_result, adjustments)
    tomorrow_times = apply_adjustments(tomorrow_result, adjustments)

    local_now = to_utc(now).astimezone(today_result.tzinfo)
    next_name, next_dt = next_prayer(local_now, today_times, tomorrow_times)
    countdown = format_countdown(next_dt - local_now)
    logger.debug("Next prayer %s at %s", next_name, next_dt.isoformat())

    format_24h = config.get("time_format", "24h") == "24h"
    next_time = format_time(next_dt, format_24h)

    display_format = config.get("display", {}).get("format", "{next_name} {next_time} - {countdown}")
    text = display_format.format(next_name=next_name, next_time=next_time, countdown=countdown)

    method = CalculationMethod.lookup(config.get("method", "MWL"))
    tooltip = build_tooltip(
        today_times,
        method.parameters.name,
        config.get("asr_method", "Standard"),
        loc.get("label") or location_key,
        format_24h,
    )

    return {
        "text": text,
        "tooltip": tooltip,
        "class": "hijritimes"
    }


def render_solar_hijri(when, short=False, locale="en"):
    solar = convert_gregorian_to_solar_hijri(when).unwrap()
    return solar.short_form() if short else solar.long_form(locale)


def render_lunar_hijri(when, lunar_offset=0, short=False, locale="en"):
    lunar = convert_gregorian_to_lunar_hijri(when, lunar_offset).unwrap()
    return lunar.short_form() if short else lunar.long_form(locale)
