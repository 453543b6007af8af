import argparse
import json
import logging
import sys
from datetime import datetime, timezone

from .api import parse_instant
from .calendars import check_lunar_offset
from .config import CONFIG_PATH, load_config, save_config
from .errors import HijriTimesError, InvariantViolation
from .logging_config import setup_logging
from .methods import CalculationMethod
from .models import Geocoordinate, asr_factor_for
from .render import render_lunar_hijri, render_solar_hijri, render_times, render_waybar

logger = logging.getLogger(__name__)

ADJUSTABLE = ["imsak", "fajr", "sunrise", "dhuhr", "asr", "sunset", "maghrib", "isha", "midnight"]


def _when(args):
    if args.date:
        return parse_instant(args.date)
    return datetime.now(timezone.utc)


def handle_cli(args, now=None):
    config_path = args.config or CONFIG_PATH
    config = load_config(config_path)

    if args.list_methods:
        for member in CalculationMethod:
            params = member.parameters
            print(f"{member.name}: {params.name} (Fajr {params.fajr}, Isha {params.isha}, "
                  f"Maghrib {params.maghrib}, high latitudes: {params.high_latitude_rule.value})")
        return 0

    if args.list_locations:
        for name, loc in config.get("locations", {}).items():
            label = loc.get("label") or name
            tz = loc.get("tz_hours", 0.0)
            dst = " +DST" if loc.get("dst") else ""
            marker = " (active)" if name == config.get("location") else ""
            print(f"{name}: {label} ({loc.get('lat')}, {loc.get('lng')}, {loc.get('alt', 0.0)}m) "
                  f"[UTC{tz:+g}{dst}]{marker}")
        return 0

    if args.use_location:
        if args.use_location not in config.get("locations", {}):
            raise ValueError(f"Unknown location: {args.use_location}")
        config["location"] = args.use_location
        save_config(config, config_path)
        logger.info("Active location is now %s", args.use_location)
        return 0

    if args.set_location:
        if args.lat is None or args.lng is None:
            raise ValueError("--set-location needs --lat and --lng")
        Geocoordinate(args.lat, args.lng, args.alt)
        config.setdefault("locations", {})[args.set_location] = {
            "lat": args.lat,
            "lng": args.lng,
            "alt": args.alt,
            "tz_hours": args.tz,
            "dst": args.dst,
            "label": args.set_location
        }
        config["location"] = args.set_location
        save_config(config, config_path)
        logger.info("Saved location %s", args.set_location)
        return 0

    if args.set_method:
        config["method"] = CalculationMethod.lookup(args.set_method).name
        save_config(config, config_path)
        return 0

    if args.set_asr:
        asr_factor_for(args.set_asr)
        config["asr_method"] = args.set_asr
        save_config(config, config_path)
        return 0

    if args.set_offset:
        prayer, minutes = args.set_offset
        prayer_key = prayer.lower()
        if prayer_key not in ADJUSTABLE:
            raise ValueError(f"Unknown prayer for offset: {prayer}")
        config.setdefault("adjustments", {})[prayer_key] = int(minutes)
        save_config(config, config_path)
        return 0

    if args.set_lunar_offset is not None:
        config["lunar_offset"] = check_lunar_offset(args.set_lunar_offset)
        save_config(config, config_path)
        return 0

    if args.waybar:
        payload = render_waybar(config, now or datetime.now(timezone.utc))
        print(json.dumps(payload, ensure_ascii=True))
        return 0

    if args.solar_hijri:
        print(render_solar_hijri(_when(args), short=args.short, locale=args.locale or "en"))
        return 0

    if args.lunar_hijri:
        offset = args.offset if args.offset is not None else config.get("lunar_offset", 0)
        print(render_lunar_hijri(_when(args), offset, short=args.short, locale=args.locale or "en"))
        return 0

    print(render_times(config, _when(args)))
    return 0


def build_arg_parser():
    parser = argparse.ArgumentParser(description="Prayer times and Hijri calendar dates")
    parser.add_argument("--times", action="store_true", help="Print prayer times for the active location (default)")
    parser.add_argument("--date", help="ISO 8601 date or instant, e.g. 2022-04-06T21:02:28Z (default: now)")
    parser.add_argument("--solar-hijri", action="store_true", help="Convert the date to Solar Hijri")
    parser.add_argument("--lunar-hijri", action="store_true", help="Convert the date to Lunar Hijri")
    parser.add_argument("--offset", type=int, help="Lunar Hijri day offset (-5 to 5)")
    parser.add_argument("--short", action="store_true", help="Short date form (dd/mm/yyyy)")
    parser.add_argument("--locale", help="Month name locale: en, fa (Solar) or ar (Lunar)")
    parser.add_argument("--waybar", action="store_true", help="Output Waybar JSON payload")
    parser.add_argument("--list-methods", action="store_true", help="List calculation methods")
    parser.add_argument("--list-locations", action="store_true", help="List locations from config")
    parser.add_argument("--use-location", help="Switch current location")
    parser.add_argument("--set-location", help="Add or update a location and set it active")
    parser.add_argument("--lat", type=float, help="Latitude for --set-location")
    parser.add_argument("--lng", type=float, help="Longitude for --set-location")
    parser.add_argument("--alt", type=float, default=0.0, help="Altitude in metres for --set-location")
    parser.add_argument("--tz", type=float, default=0.0, help="UTC offset in hours for --set-location")
    parser.add_argument("--dst", action="store_true", help="Daylight saving in effect for --set-location")
    parser.add_argument("--set-method", help="Set calculation method")
    parser.add_argument("--set-asr", help="Set Asr juristic method (Standard or Hanafi)")
    parser.add_argument("--set-offset", nargs=2, metavar=("PRAYER", "MIN"), help="Set prayer offset in minutes")
    parser.add_argument("--set-lunar-offset", type=int, help="Set the default Lunar Hijri day offset")
    parser.add_argument("--config", help="Config file path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    return parser


def main(argv=None):
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        return handle_cli(args)
    except InvariantViolation:
        raise
    except (HijriTimesError, ValueError) as exc:
        logger.debug("Command failed", exc_info=True)
        if args.waybar:
            payload = {
                "text": "Prayer?",
                "tooltip": str(exc),
                "class": "hijritimes-error"
            }
            print(json.dumps(payload, ensure_ascii=True))
            return 0
        print(f"Error: {exc}", file=sys.stderr)
        return 1
