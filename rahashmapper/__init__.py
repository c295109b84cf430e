"""
RA Hash Mapper - check which ROMs in a local library carry a hash that
RetroAchievements recognizes.
"""

__version__ = '1.0.0'

from .models import (
    PlatformDefinition, RemotePlatform, CatalogEntry, LocalRom, MatchResult,
    PlatformStats, RunSummary,
)
from .exceptions import (
    RAHashMapperError, ConfigError, LibraryNotFoundError, OutputPathError,
    HashToolError, CredentialError, NoPlatformsError, CatalogError,
)
from .resolver import PlatformResolver, resolve
from .catalog import RetroAchievementsClient
from .hasher import HashTool, ensure_hash_tool
from .matcher import CatalogIndex, HashMatcher
from .scanner import LibraryScanner
from .reporter import HashMapReporter
from .settings import AppConfig, build_config, load_settings
from .pipeline import HashMapPipeline, filter_missing


__all__ = [
    'PlatformDefinition',
    'RemotePlatform',
    'CatalogEntry',
    'LocalRom',
    'MatchResult',
    'PlatformStats',
    'RunSummary',
    'RAHashMapperError',
    'ConfigError',
    'LibraryNotFoundError',
    'OutputPathError',
    'HashToolError',
    'CredentialError',
    'NoPlatformsError',
    'CatalogError',
    'PlatformResolver',
    'resolve',
    'RetroAchievementsClient',
    'HashTool',
    'ensure_hash_tool',
    'CatalogIndex',
    'HashMatcher',
    'LibraryScanner',
    'HashMapReporter',
    'AppConfig',
    'build_config',
    'load_settings',
    'HashMapPipeline',
    'filter_missing',
]
