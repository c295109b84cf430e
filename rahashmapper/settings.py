"""Configuration file handling and the built-in platform mapping table."""
from __future__ import annotations

import json
import os
from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .exceptions import ConfigError
from .models import PlatformDefinition
from .shared_config import (
    DEFAULT_CONFIG_PATH, RA_API_BASE, REPORT_FORMATS, default_hash_tool_url,
)

# Canonical names are the console names published by API_GetConsoleIDs.
# Aliases are lower-case by convention.
DEFAULT_PLATFORMS: List[Dict[str, Any]] = [
    {"name": "Genesis/Mega Drive", "aliases": ["genesis", "megadrive", "md", "gen"], "override": None},
    {"name": "Nintendo 64", "aliases": ["n64"], "override": None},
    {"name": "SNES/Super Famicom", "aliases": ["snes", "sfc", "superfamicom", "super nintendo"], "override": None},
    {"name": "Game Boy", "aliases": ["gb", "gameboy"], "override": None},
    {"name": "Game Boy Advance", "aliases": ["gba", "gameboyadvance"], "override": None},
    {"name": "Game Boy Color", "aliases": ["gbc", "gameboycolor"], "override": None},
    {"name": "NES/Famicom", "aliases": ["nes", "famicom", "fc"], "override": None},
    {"name": "PC Engine/TurboGrafx-16", "aliases": ["pce", "pcengine", "tg16", "turbografx16"], "override": None},
    {"name": "Sega CD", "aliases": ["segacd", "megacd"], "override": None},
    {"name": "32X", "aliases": ["sega32x"], "override": "32X"},
    {"name": "Master System", "aliases": ["sms", "mastersystem"], "override": None},
    {"name": "PlayStation", "aliases": ["psx", "ps1"], "override": None},
    {"name": "Atari Lynx", "aliases": ["lynx"], "override": None},
    {"name": "Neo Geo Pocket", "aliases": ["ngp", "ngpc"], "override": None},
    {"name": "Game Gear", "aliases": ["gg", "gamegear"], "override": None},
    {"name": "GameCube", "aliases": ["gc", "ngc"], "override": None},
    {"name": "Atari Jaguar", "aliases": ["jaguar"], "override": None},
    {"name": "Nintendo DS", "aliases": ["nds"], "override": None},
    {"name": "PlayStation 2", "aliases": ["ps2"], "override": None},
    {"name": "Magnavox Odyssey 2", "aliases": ["odyssey2", "videopac"], "override": None},
    {"name": "Pokemon Mini", "aliases": ["pokemini"], "override": None},
    {"name": "Atari 2600", "aliases": ["atari2600", "a2600"], "override": None},
    {"name": "Arcade", "aliases": ["mame", "fbneo", "fba"], "override": None},
    {"name": "Virtual Boy", "aliases": ["vb", "virtualboy"], "override": None},
    {"name": "MSX", "aliases": ["msx1", "msx2"], "override": None},
    {"name": "SG-1000", "aliases": ["sg1000"], "override": None},
    {"name": "Amstrad CPC", "aliases": ["cpc", "amstradcpc"], "override": None},
    {"name": "Apple II", "aliases": ["apple2"], "override": None},
    {"name": "Saturn", "aliases": ["ss", "segasaturn"], "override": None},
    {"name": "Dreamcast", "aliases": ["dc"], "override": None},
    {"name": "PlayStation Portable", "aliases": ["psp"], "override": None},
    {"name": "3DO Interactive Multiplayer", "aliases": ["3do"], "override": None},
    {"name": "ColecoVision", "aliases": ["coleco"], "override": None},
    {"name": "Intellivision", "aliases": ["intv"], "override": None},
    {"name": "Vectrex", "aliases": [], "override": None},
    {"name": "PC-FX", "aliases": ["pcfx"], "override": None},
    {"name": "Atari 7800", "aliases": ["atari7800", "a7800"], "override": None},
    {"name": "WonderSwan", "aliases": ["ws", "wsc", "wonderswancolor"], "override": None},
    {"name": "Neo Geo CD", "aliases": ["neogeocd", "ngcd"], "override": None},
    {"name": "Nintendo DSi", "aliases": ["dsi"], "override": None},
]

DEFAULT_SETTINGS: Dict[str, Any] = {
    "library_path": "",
    "output_path": "",
    "missing_only": False,
    "api_key": "",
    "hash_tool_path": "",
    "hash_tool_url": default_hash_tool_url(),
    "api_base_url": RA_API_BASE,
    "request_timeout": 30,
    "hash_timeout": 300,
    "case_insensitive_aliases": False,
    "report_format": "csv",
    "platforms": deepcopy(DEFAULT_PLATFORMS),
}

_REQUIRED = ("library_path", "output_path", "api_key", "hash_tool_path")


@dataclass(frozen=True)
class AppConfig:
    """Validated run configuration, passed explicitly to every component."""
    library_path: str
    output_path: str
    api_key: str
    hash_tool_path: str
    platforms: Tuple[PlatformDefinition, ...]
    missing_only: bool = False
    hash_tool_url: Optional[str] = None
    api_base_url: str = RA_API_BASE
    request_timeout: float = 30
    hash_timeout: float = 300
    case_insensitive_aliases: bool = False
    report_format: str = "csv"


def _deep_merge(base: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    out = deepcopy(base)
    for k, v in (updates or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = deepcopy(v)
    return out


def load_settings(path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """Read a JSON config file and merge it over DEFAULT_SETTINGS."""
    if not os.path.isfile(path):
        raise ConfigError(f"Configuration file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigError(f"Could not read configuration file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain a JSON object")
    return _deep_merge(DEFAULT_SETTINGS, data)


def save_settings(settings: Dict[str, Any], path: str = DEFAULT_CONFIG_PATH) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(settings, f, ensure_ascii=False, indent=2)


def parse_platforms(rows: Any) -> Tuple[PlatformDefinition, ...]:
    """Build the platform table, rejecting malformed rows and duplicate names."""
    if not isinstance(rows, list):
        raise ConfigError("'platforms' must be a list")
    seen = set()
    platforms = []
    for i, row in enumerate(rows):
        if not isinstance(row, dict) or not isinstance(row.get("name"), str) or not row["name"]:
            raise ConfigError(f"platforms[{i}] needs a non-empty 'name'")
        aliases = row.get("aliases") or []
        if not isinstance(aliases, list) or not all(isinstance(a, str) for a in aliases):
            raise ConfigError(f"platforms[{i}] ({row['name']}): 'aliases' must be a list of strings")
        override = row.get("override")
        if override is not None and not isinstance(override, str):
            raise ConfigError(f"platforms[{i}] ({row['name']}): 'override' must be a string")
        if row["name"] in seen:
            raise ConfigError(f"Duplicate platform name in configuration: {row['name']}")
        seen.add(row["name"])
        platforms.append(PlatformDefinition.from_dict(row))
    return tuple(platforms)


def build_config(settings: Dict[str, Any],
                 overrides: Optional[Dict[str, Any]] = None) -> AppConfig:
    """
    Validate merged settings and return an AppConfig.

    Args:
        settings: Output of load_settings (or DEFAULT_SETTINGS in tests)
        overrides: Values from the command line; None entries are ignored

    Raises:
        ConfigError: on a missing required value or a value of the wrong type
    """
    merged = dict(settings)
    for k, v in (overrides or {}).items():
        if v is not None:
            merged[k] = v

    for key in _REQUIRED:
        value = merged.get(key)
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(f"Missing required setting: {key}")

    if not isinstance(merged.get("missing_only", False), bool):
        raise ConfigError("'missing_only' must be true or false")
    if not isinstance(merged.get("case_insensitive_aliases", False), bool):
        raise ConfigError("'case_insensitive_aliases' must be true or false")

    report_format = merged.get("report_format", "csv")
    if report_format not in REPORT_FORMATS:
        raise ConfigError(
            f"Unknown report_format '{report_format}' (expected one of: {', '.join(REPORT_FORMATS)})"
        )

    try:
        request_timeout = float(merged.get("request_timeout", 30))
        hash_timeout = float(merged.get("hash_timeout", 300))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Timeouts must be numbers: {e}") from e

    return AppConfig(
        library_path=os.path.abspath(os.path.expanduser(merged["library_path"])),
        output_path=os.path.abspath(os.path.expanduser(merged["output_path"])),
        api_key=merged["api_key"].strip(),
        hash_tool_path=os.path.abspath(os.path.expanduser(merged["hash_tool_path"])),
        platforms=parse_platforms(merged.get("platforms", [])),
        missing_only=merged.get("missing_only", False),
        hash_tool_url=merged.get("hash_tool_url") or None,
        api_base_url=merged.get("api_base_url") or RA_API_BASE,
        request_timeout=request_timeout,
        hash_timeout=hash_timeout,
        case_insensitive_aliases=merged.get("case_insensitive_aliases", False),
        report_format=report_format,
    )
