import copy
import json
import logging
import os

logger = logging.getLogger(__name__)

CONFIG_DIR = os.path.join(os.path.expanduser("~"), ".config", "hijritimes")
CONFIG_PATH = os.path.join(CONFIG_DIR, "config.json")

DEFAULT_CONFIG = {
    "location": None,
    "locations": {},
    "method": "MWL",
    "asr_method": "Standard",
    "imsak_minutes": 10,
    "lunar_offset": 0,
    "adjustments": {
        "fajr": 0,
        "sunrise": 0,
        "dhuhr": 0,
        "asr": 0,
        "maghrib": 0,
        "isha": 0
    },
    "time_format": "24h",
    "display": {
        "format": "{next_name} {next_time} - {countdown}"
    }
}


def _with_defaults(config):
    merged = copy.deepcopy(DEFAULT_CONFIG)
    for key, value in config.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key].update(value)
        else:
            merged[key] = value
    return merged


def load_config(path=CONFIG_PATH):
    if not os.path.exists(path):
        logger.info("Creating default config at %s", path)
        save_config(DEFAULT_CONFIG, path)
        return copy.deepcopy(DEFAULT_CONFIG)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Config file {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")
    return _with_defaults(data)


def save_config(config, path=CONFIG_PATH):
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=2, ensure_ascii=False)
    logger.debug("Saved config to %s", path)


def active_location(config):
    location_key = config.get("location")
    locations = config.get("locations", {})
    if not location_key:
        raise ValueError("No location set (use --set-location NAME --lat LAT --lng LNG)")
    if location_key not in locations:
        raise ValueError(f"Unknown location: {location_key}")
    loc = locations[location_key]
    if loc.get("lat") is None or loc.get("lng") is None:
        raise ValueError(f"Location {location_key} has no coordinates")
    return location_key, loc
