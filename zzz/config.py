import json
import os
import platform
from pathlib import Path
from typing import Any, Dict

DEFAULT_FREQ = 1
DEFAULT_BARLEN = 40
DEFAULT_SKEW_CHECK = 900


def get_config_path() -> Path:
    system = platform.system().lower()
    if system == "darwin":
        base = Path.home() / "Library" / "Application Support"
    elif system == "windows":
        appdata = os.environ.get("APPDATA")
        if appdata:
            base = Path(appdata)
        else:
            base = Path.home() / "AppData" / "Roaming"
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return base / "zzz" / "config.json"


def load_config() -> Dict[str, Any]:
    path = get_config_path()
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
            if isinstance(data, dict):
                return data
    except FileNotFoundError:
        return {}
    except json.JSONDecodeError:
        return {}
    return {}


def _positive_int(config: Dict[str, Any], key: str, default: int) -> int:
    value = config.get(key)
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    if value < 1:
        return default
    return value


def get_freq(config: Dict[str, Any]) -> int:
    return _positive_int(config, "freq", DEFAULT_FREQ)


def get_barlen(config: Dict[str, Any]) -> int:
    return _positive_int(config, "barlen", DEFAULT_BARLEN)


def get_skew_check(config: Dict[str, Any]) -> int:
    return _positive_int(config, "skew_check", DEFAULT_SKEW_CHECK)


def get_debug(config: Dict[str, Any]) -> bool:
    if os.environ.get("ZZZ_DEBUG") == "1":
        return True
    debug = config.get("debug")
    return debug if isinstance(debug, bool) else False
