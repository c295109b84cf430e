"""
Run orchestration: validate, resolve folders, fetch catalogs, hash and match,
filter, write the report.

The run is a single sequential pass. Fatal problems raise a RAHashMapperError
subclass before anything is written; per-file hashing problems end up as
unmatched rows.
"""

import logging
import os
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from .catalog import RetroAchievementsClient
from .exceptions import (
    CredentialError, LibraryNotFoundError, NoPlatformsError, OutputPathError,
)
from .hasher import HashTool, ensure_hash_tool
from .matcher import CatalogIndex, HashMatcher
from .models import MatchResult, PlatformStats, RemotePlatform, RunSummary
from .monitor import log_event
from .reporter import HashMapReporter
from .resolver import PlatformResolver
from .scanner import LibraryScanner
from .settings import AppConfig

ProgressCallback = Callable[[int, int, str], None]


class RunState(Enum):
    INIT = 'init'
    VALIDATE_CONFIG = 'validate_config'
    RESOLVE_PLATFORMS = 'resolve_platforms'
    FETCH_REMOTE_SYSTEMS = 'fetch_remote_systems'
    FETCH_CATALOG = 'fetch_catalog'
    HASH_AND_MATCH = 'hash_and_match'
    FILTER = 'filter'
    EMIT = 'emit'
    DONE = 'done'


def filter_missing(results: List[MatchResult]) -> List[MatchResult]:
    """Keep only rows without a catalog match, in their original order."""
    return [r for r in results if not r.match_found]


class HashMapPipeline:
    """Drives one reconciliation run from an AppConfig."""

    def __init__(self, config: AppConfig,
                 client: Optional[RetroAchievementsClient] = None,
                 hasher: Optional[HashTool] = None,
                 reporter: Optional[HashMapReporter] = None,
                 progress_callback: Optional[ProgressCallback] = None):
        self.config = config
        self.client = client or RetroAchievementsClient(
            base_url=config.api_base_url, timeout=config.request_timeout,
        )
        self.hasher = hasher or HashTool(config.hash_tool_path, timeout=config.hash_timeout)
        self.matcher = HashMatcher(self.hasher)
        self.reporter = reporter or HashMapReporter(config.output_path, config.report_format)
        self.resolver = PlatformResolver(config.platforms, config.case_insensitive_aliases)
        self.progress_callback = progress_callback
        self.state = RunState.INIT
        self.summary = RunSummary()

    def _enter(self, state: RunState) -> None:
        self.state = state
        log_event('run.state', state.value, logging.DEBUG)

    # ── VALIDATE_CONFIG ─────────────────────────────────────────

    def validate(self) -> None:
        """Check library, output directory, hashing tool and API key."""
        self._enter(RunState.VALIDATE_CONFIG)
        config = self.config

        if not os.path.isdir(config.library_path):
            raise LibraryNotFoundError(f"ROM library folder not found: {config.library_path}")

        try:
            os.makedirs(config.output_path, exist_ok=True)
        except OSError as e:
            raise OutputPathError(f"Cannot create output folder {config.output_path}: {e}") from e

        ensure_hash_tool(
            config.hash_tool_path,
            config.hash_tool_url,
            session=self.client.session,
            timeout=config.request_timeout,
        )

        if not self.client.validate_credential(config.api_key):
            raise CredentialError(
                "RetroAchievements rejected the API key (or the service is unreachable)"
            )
        log_event('run.validate.done', 'Configuration validated')

    # ── RESOLVE_PLATFORMS ───────────────────────────────────────

    def resolve_platforms(self) -> List[Tuple[str, str]]:
        """
        Map library folders to platforms.

        Returns:
            Ordered (canonical platform name, folder path) pairs

        Raises:
            NoPlatformsError: if no folder resolves
        """
        self._enter(RunState.RESOLVE_PLATFORMS)
        resolved = []
        self.summary.skipped_folders = []
        for folder_name, folder_path in LibraryScanner.list_platform_folders(self.config.library_path):
            system = self.resolver.resolve(folder_name)
            if system is None:
                log_event('resolve.skip', f'No platform for folder "{folder_name}"')
                self.summary.skipped_folders.append(folder_name)
                continue
            log_event('resolve.ok', f'"{folder_name}" -> {system}')
            resolved.append((system, folder_path))

        if not resolved:
            raise NoPlatformsError(
                f"No folder in {self.config.library_path} matches a configured platform"
            )
        return resolved

    # ── FETCH_REMOTE_SYSTEMS ────────────────────────────────────

    def fetch_remote_platforms(self) -> Dict[str, RemotePlatform]:
        self._enter(RunState.FETCH_REMOTE_SYSTEMS)
        return {p.name: p for p in self.client.list_active_platforms(self.config.api_key)}

    # ── per platform ────────────────────────────────────────────

    def process_platform(self, system: str, folder: str,
                         remote_by_name: Dict[str, RemotePlatform]) -> List[MatchResult]:
        """Hash and match every file in one platform folder."""
        roms = LibraryScanner.list_roms(folder)
        if not roms:
            log_event('platform.empty', f'{system}: no files in {folder}, skipped')
            return []

        stats = PlatformStats(system=system, files=len(roms))
        self.summary.platforms.append(stats)

        remote = remote_by_name.get(system)
        if remote is None:
            log_event('platform.unknown',
                      f'{system} is not an active RetroAchievements system; '
                      f'{len(roms)} files reported unmatched',
                      logging.WARNING)
            return [MatchResult.no_match(system, rom) for rom in roms]

        self._enter(RunState.FETCH_CATALOG)
        catalog = CatalogIndex(self.client.list_catalog(self.config.api_key, remote.id))

        self._enter(RunState.HASH_AND_MATCH)
        results = []
        total = len(roms)
        for idx, rom in enumerate(roms, start=1):
            result = self.matcher.match_one(remote.id, system, rom, catalog)
            results.append(result)
            if result.match_found:
                stats.matched += 1
            elif not result.hash:
                stats.hash_failures += 1
            if self.progress_callback:
                self.progress_callback(idx, total, system)

        log_event('platform.done',
                  f'{system}: {stats.matched}/{stats.files} matched, '
                  f'{stats.hash_failures} hash failures')
        return results

    def collect(self) -> List[MatchResult]:
        """Run everything up to FILTER and return the unfiltered rows."""
        self.summary = RunSummary()
        self.validate()
        platforms = self.resolve_platforms()
        remote_by_name = self.fetch_remote_platforms()

        results: List[MatchResult] = []
        for system, folder in platforms:
            results.extend(self.process_platform(system, folder, remote_by_name))
        return results

    def run(self) -> RunSummary:
        """Full run, including writing the report."""
        log_event('run.start', f'Library: {self.config.library_path}')
        results = self.collect()

        self._enter(RunState.FILTER)
        if self.config.missing_only:
            results = filter_missing(results)

        self._enter(RunState.EMIT)
        self.summary.report_path = self.reporter.write(results)
        self.summary.reported_rows = len(results)
        log_event('run.report', f'{len(results)} rows written to {self.summary.report_path}')

        self._enter(RunState.DONE)
        return self.summary
