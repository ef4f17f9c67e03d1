"""
Runtime configuration for a resolver run.

Settings are resolved once at startup from the environment (optionally
seeded from a .env file) and passed explicitly to every component.
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Sequence, Tuple

DEFAULT_LOOKUP_URL = "http://radarr:7878/api/v3/movie/lookup"
DEFAULT_TRANSLATE_URL = "http://libretranslate:5000"
DEFAULT_RADARR_CONFIG_PATHS = (
    Path("/data/radarr/config/config.xml"),
    Path("../data/radarr/config/config.xml"),
)
DEFAULT_INPUT_NAME = "filmaffinity_list.html"

API_KEY_PATTERN = re.compile(r"<ApiKey>([^<]+)</ApiKey>")
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class Settings:
    lookup_url: str = DEFAULT_LOOKUP_URL
    translate_url: str = DEFAULT_TRANSLATE_URL
    api_key: str = ""
    # env, a config.xml path, or empty when no key was found
    api_key_source: str = ""
    input_dir: Path = Path("/input")
    output_dir: Path = Path("/output")
    concurrency: int = 5
    lookup_timeout: float = 30.0
    translate_timeout: float = 30.0
    translate_attempts: int = 3
    translate_base_delay: float = 1.0
    log_level: str = "INFO"
    log_dir: Optional[Path] = None
    warnings: Tuple[str, ...] = field(default=(), compare=False)


def read_radarr_api_key(paths: Sequence[Path]) -> Tuple[str, Optional[Path]]:
    """
    Read the API key from the first existing Radarr config.xml.

    Args:
        paths: Candidate config.xml locations, checked in order

    Returns:
        (api_key, path) where api_key is empty if no file or tag was found.
        path is the file that was read, or the last candidate checked.
    """
    checked: Optional[Path] = None
    for path in paths:
        checked = path
        if not path.exists():
            continue
        content = path.read_text(encoding="utf-8", errors="replace")
        match = API_KEY_PATTERN.search(content)
        if match:
            return match.group(1).strip(), path
        return "", path
    return "", checked


def _int_setting(env: Mapping[str, str], name: str, default: int, warnings: list) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        warnings.append(f"Invalid {name}={raw!r}, using {default}")
        return default
    if value < 1:
        warnings.append(f"{name} must be >= 1, using {default}")
        return default
    return value


def _float_setting(env: Mapping[str, str], name: str, default: float, warnings: list) -> float:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        warnings.append(f"Invalid {name}={raw!r}, using {default}")
        return default
    if value <= 0:
        warnings.append(f"{name} must be > 0, using {default}")
        return default
    return value


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables.

    Nothing is logged here; problems are collected in Settings.warnings
    so the caller can report them once logging is configured.
    """
    if env is None:
        env = os.environ
    warnings: list = []

    api_key = env.get("RADARR_API_KEY", "").strip()
    api_key_source = "env" if api_key else ""
    if not api_key:
        paths = list(DEFAULT_RADARR_CONFIG_PATHS)
        if env.get("RADARR_CONFIG_PATH"):
            paths.insert(0, Path(env["RADARR_CONFIG_PATH"]))
        try:
            api_key, path = read_radarr_api_key(paths)
        except OSError as e:
            api_key, path = "", None
            warnings.append(f"Error reading Radarr config: {e}")
        if api_key:
            api_key_source = str(path)
        else:
            warnings.append(f"Could not find API key in config file at: {path}")

    log_level = (env.get("FILMLIST_LOG_LEVEL") or "INFO").upper()
    if log_level not in LOG_LEVELS:
        warnings.append(f"Invalid FILMLIST_LOG_LEVEL={log_level!r}, using INFO")
        log_level = "INFO"
    log_dir = env.get("FILMLIST_LOG_DIR")

    return Settings(
        lookup_url=env.get("FILMLIST_LOOKUP_URL") or DEFAULT_LOOKUP_URL,
        translate_url=(env.get("FILMLIST_TRANSLATE_URL") or DEFAULT_TRANSLATE_URL).rstrip("/"),
        api_key=api_key,
        api_key_source=api_key_source,
        input_dir=Path(env.get("FILMLIST_INPUT_DIR") or "/input"),
        output_dir=Path(env.get("FILMLIST_OUTPUT_DIR") or "/output"),
        concurrency=_int_setting(env, "FILMLIST_CONCURRENCY", 5, warnings),
        lookup_timeout=_float_setting(env, "FILMLIST_LOOKUP_TIMEOUT", 30.0, warnings),
        translate_timeout=_float_setting(env, "FILMLIST_TRANSLATE_TIMEOUT", 30.0, warnings),
        log_level=log_level,
        log_dir=Path(log_dir) if log_dir else None,
        warnings=tuple(warnings),
    )
