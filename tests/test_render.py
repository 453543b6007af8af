from datetime import datetime, timedelta, timezone

import pytest

from hijritimes.config import DEFAULT_CONFIG
from hijritimes.errors import ValidationError
from hijritimes.render import (
    apply_adjustments,
    build_times_table,
    build_tooltip,
    compute_for_config,
    format_countdown,
    format_time,
    next_prayer,
    render_lunar_hijri,
    render_solar_hijri,
    render_times,
    render_waybar,
)

WHEN = datetime(2022, 4, 6, 21, 2, 28, tzinfo=timezone.utc)
BST = timezone(timedelta(hours=1))


def _config(**overrides):
    config = dict(DEFAULT_CONFIG)
    config.update({
        "location": "london",
        "locations": {
            "london": {
                "lat": 51.52914341845893,
                "lng": -0.18896143561607293,
                "alt": 27.23452345,
                "tz_hours": 0.0,
                "dst": True,
                "label": "London",
            }
        },
    })
    config.update(overrides)
    return config


def test_format_time():
    dt = datetime(2022, 4, 6, 13, 5)
    assert format_time(dt, True) == "13:05"
    assert format_time(dt, False) == "1:05 PM"
    assert format_time(datetime(2022, 4, 6, 4, 45), False) == "4:45 AM"


def test_format_countdown():
    assert format_countdown(timedelta(hours=2, minutes=5, seconds=59)) == "2h05"
    assert format_countdown(timedelta(minutes=7)) == "7m"
    assert format_countdown(timedelta(seconds=-30)) == "0m"


def test_next_prayer_today_and_tomorrow():
    today = {key: datetime(2022, 4, 6, hour, tzinfo=BST)
             for key, hour in [("fajr", 5), ("dhuhr", 13), ("asr", 16), ("maghrib", 19), ("isha", 21)]}
    tomorrow = {"fajr": datetime(2022, 4, 7, 5, tzinfo=BST)}
    assert next_prayer(datetime(2022, 4, 6, 14, tzinfo=BST), today, tomorrow) == ("Asr", today["asr"])
    assert next_prayer(datetime(2022, 4, 6, 22, tzinfo=BST), today, tomorrow) == ("Fajr", tomorrow["fajr"])


def test_compute_for_config_uses_location_offset():
    result = compute_for_config(_config(), WHEN)
    assert result.timezone_offset_hours == 1.0
    assert result.format("dhuhr").startswith("13:0")


def test_adjustments_shift_display_only():
    result = compute_for_config(_config(), WHEN)
    adjusted = apply_adjustments(result, {"isha": 5, "fajr": -2})
    assert adjusted["isha"] - result.local("isha") == timedelta(minutes=5)
    assert adjusted["fajr"] - result.local("fajr") == timedelta(minutes=-2)
    assert adjusted["dhuhr"] == result.local("dhuhr")
    assert adjusted["dhuhr"].utcoffset() == timedelta(hours=1)


def test_times_table_marks_fallbacks():
    config = _config(locations={"north": {"lat": 78.0, "lng": 15.0, "tz_hours": 2.0}}, location="north")
    result = compute_for_config(config, "2022-04-10T12:00:00Z")
    lines = build_times_table(result, {}, True)
    assert len(lines) == 9
    assert lines[1].startswith("Fajr") and lines[1].endswith(" *")
    assert not lines[3].endswith(" *")


def test_render_times():
    text = render_times(_config(), WHEN)
    lines = text.splitlines()
    assert lines[0] == "London - 2022-04-06 (Muslim World League)"
    assert lines[4].startswith("Dhuhr")
    assert "13:0" in lines[4]
    assert "high-latitude" not in text


def test_build_tooltip():
    times = {key: datetime(2022, 4, 6, 12, tzinfo=BST) for key in
             ["fajr", "sunrise", "dhuhr", "asr", "maghrib", "isha"]}
    tooltip = build_tooltip(times, "Muslim World League", "Standard", "London", True)
    lines = tooltip.split("\n")
    assert lines[0] == "London (Muslim World League, Asr: Standard)"
    assert lines[1:] == [f"{name} 12:00" for name in ["Fajr", "Sunrise", "Dhuhr", "Asr", "Maghrib", "Isha"]]


def test_render_waybar_next_prayer_today():
    payload = render_waybar(_config(), datetime(2022, 4, 6, 12, 0, tzinfo=timezone.utc))
    assert payload["class"] == "hijritimes"
    assert payload["text"].startswith("Dhuhr 13:0")
    assert payload["tooltip"].startswith("London (Muslim World League, Asr: Standard)")


def test_render_waybar_rolls_over_to_tomorrow():
    payload = render_waybar(_config(), datetime(2022, 4, 6, 22, 30, tzinfo=timezone.utc))
    assert payload["text"].startswith("Fajr 0")
    assert "h" in payload["text"].split(" - ")[1]


def test_render_waybar_custom_format():
    config = _config(display={"format": "{next_name}|{countdown}"}, time_format="12h")
    payload = render_waybar(config, datetime(2022, 4, 6, 12, 0, tzinfo=timezone.utc))
    assert payload["text"].startswith("Dhuhr|")
    assert "PM" in payload["tooltip"]


def test_render_solar_hijri():
    assert render_solar_hijri(WHEN) == "17 Farvardin 1401"
    assert render_solar_hijri(WHEN, short=True) == "17/01/1401"
    assert render_solar_hijri(WHEN, locale="fa") == "17 فروردین 1401"


def test_render_lunar_hijri():
    assert render_lunar_hijri(WHEN) == "4 Ramadan 1443"
    assert render_lunar_hijri(WHEN, 1, short=True) == "05/09/1443"
    assert render_lunar_hijri(WHEN, locale="ar") == "4 رمضان 1443"
    with pytest.raises(ValidationError):
        render_lunar_hijri(WHEN, 6)
