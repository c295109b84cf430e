"""
RetroAchievements catalog client - console list, game lists with hashes,
and API key validation.

Every call is a single blocking GET authenticated with the web API key in the
query string. The session has no retry adapter; a failed catalog fetch
aborts the run.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from .exceptions import CatalogError
from .models import CatalogEntry, RemotePlatform
from .monitor import log_event
from .shared_config import (
    ENDPOINT_ACHIEVEMENT_OF_THE_WEEK, ENDPOINT_CONSOLE_IDS, ENDPOINT_GAME_LIST,
    RA_API_BASE,
)

_EMPTY_BODIES = ('', '[]', '{}', 'null')


def _redact(error: Exception, api_key: Optional[str]) -> str:
    # requests errors embed the full URL, key included
    text = str(error)
    return text.replace(api_key, '***') if api_key else text


def _flag(value: Any) -> bool:
    # Older API responses omit Active/IsGameSystem entirely
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip().lower() not in ('', '0', 'false')
    return bool(value)


def _hash_list(raw: Any) -> tuple:
    if raw is None:
        return ()
    if isinstance(raw, dict):
        raw = raw.values()
    elif isinstance(raw, str):
        raw = [raw]
    return tuple(str(h) for h in raw if h)


def parse_platform(row: Dict) -> RemotePlatform:
    """Build a RemotePlatform from one API_GetConsoleIDs row."""
    return RemotePlatform(
        id=int(row['ID']),
        name=str(row['Name']),
        active=_flag(row.get('Active')),
        is_game_system=_flag(row.get('IsGameSystem')),
    )


def parse_game(row: Dict) -> CatalogEntry:
    """Build a CatalogEntry from one API_GetGameList row (h=1)."""
    return CatalogEntry(
        id=int(row['ID']),
        title=str(row.get('Title') or ''),
        console_id=int(row.get('ConsoleID') or 0),
        console_name=str(row.get('ConsoleName') or ''),
        num_achievements=int(row.get('NumAchievements') or 0),
        hashes=_hash_list(row.get('Hashes')),
    )


class RetroAchievementsClient:
    """Thin wrapper over the three RetroAchievements endpoints we need."""

    def __init__(self, base_url: str = RA_API_BASE, timeout: float = 30,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url if base_url.endswith('/') else base_url + '/'
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': 'rahashmapper/1.0 (library hash report)'
        })

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}{endpoint}"

    def _get_json(self, endpoint: str, params: Dict[str, Any]) -> Any:
        url = self._url(endpoint)
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            reason = _redact(e, params.get('y'))
            log_event('catalog.request.error', f'{endpoint} failed: {reason}', logging.ERROR)
            raise CatalogError(f"Request to {endpoint} failed: {reason}", url=url) from e
        try:
            return resp.json()
        except ValueError as e:
            log_event('catalog.parse.error', f'{endpoint} returned invalid JSON: {e}', logging.ERROR)
            raise CatalogError(f"{endpoint} returned invalid JSON", url=url) from e

    def validate_credential(self, api_key: str) -> bool:
        """
        Check an API key with a cheap authenticated request.

        Returns False on an empty key, an HTTP error, a transport error or an
        empty body. A bad key and a network outage are not told apart.
        """
        if not api_key:
            return False
        try:
            resp = self.session.get(
                self._url(ENDPOINT_ACHIEVEMENT_OF_THE_WEEK),
                params={'y': api_key},
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            log_event('catalog.auth.error', f'Credential check failed: {_redact(e, api_key)}', logging.ERROR)
            return False

        if (resp.text or '').strip() in _EMPTY_BODIES:
            log_event('catalog.auth.empty', 'Credential check returned an empty response', logging.ERROR)
            return False
        log_event('catalog.auth.ok', 'API key accepted')
        return True

    def list_active_platforms(self, api_key: str) -> List[RemotePlatform]:
        """Active consoles that are real game systems (hubs and events excluded)."""
        data = self._get_json(ENDPOINT_CONSOLE_IDS, {'y': api_key})
        if not isinstance(data, list):
            raise CatalogError(f"{ENDPOINT_CONSOLE_IDS} did not return a list",
                               url=self._url(ENDPOINT_CONSOLE_IDS))
        try:
            platforms = [parse_platform(row) for row in data]
        except (KeyError, TypeError, ValueError) as e:
            raise CatalogError(f"Malformed console entry in {ENDPOINT_CONSOLE_IDS}: {e}",
                               url=self._url(ENDPOINT_CONSOLE_IDS)) from e
        active = [p for p in platforms if p.active and p.is_game_system]
        log_event('catalog.platforms.done',
                  f'{len(active)} active game systems ({len(platforms)} listed)')
        return active

    def list_catalog(self, api_key: str, platform_id: int) -> List[CatalogEntry]:
        """Every game for one console, each with all of its accepted hashes."""
        data = self._get_json(ENDPOINT_GAME_LIST, {'y': api_key, 'i': platform_id, 'h': 1})
        if not isinstance(data, list):
            raise CatalogError(f"{ENDPOINT_GAME_LIST} did not return a list for console {platform_id}",
                               url=self._url(ENDPOINT_GAME_LIST))
        try:
            entries = [parse_game(row) for row in data]
        except (KeyError, TypeError, ValueError) as e:
            raise CatalogError(f"Malformed game entry for console {platform_id}: {e}",
                               url=self._url(ENDPOINT_GAME_LIST)) from e
        log_event('catalog.fetch.done', f'Console {platform_id}: {len(entries)} games')
        return entries
