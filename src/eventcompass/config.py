import copy
import json
import logging
import os


DEFAULT_CONFIG = {
    # Obergrenze je Serie und Abfrage
    'max_instances': 365,
    # Zeitraum für die Listen "Upcoming"/"Past", relativ zu jetzt
    'list_window': {
        'months_before': 1,
        'months_after': 6,
    },
    'events_per_page': 5,
    'category_colors': {
        'meeting': '#3b82f6',
        'health': '#22c55e',
        'sports': '#a855f7',
        'holiday': '#ef4444',
        'education': '#eab308',
        'social': '#ec4899',
    },
}


def _config_path():
    base = os.path.join(os.path.expanduser('~'), '.eventcompass')
    os.makedirs(base, exist_ok=True)
    return os.path.join(base, 'eventcompass_config.json')


def _merge(defaults: dict, overrides: dict) -> dict:
    merged = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: str = None):
    path = path or _config_path()
    if not os.path.exists(path):
        # sensible defaults
        return copy.deepcopy(DEFAULT_CONFIG)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            user_cfg = json.load(f)
    except (OSError, ValueError) as e:
        logging.warning(f"Config file {path} unreadable, using defaults: {e}")
        return copy.deepcopy(DEFAULT_CONFIG)
    if not isinstance(user_cfg, dict):
        logging.warning(f"Config file {path} does not contain an object, using defaults")
        return copy.deepcopy(DEFAULT_CONFIG)
    return _merge(DEFAULT_CONFIG, user_cfg)


def save_config(cfg: dict, path: str = None):
    path = path or _config_path()
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(cfg, f, ensure_ascii=False, indent=2)
