"""
Shared constants: app directories, report layout and API endpoints.
"""

import os

# Report layout. Column order is part of the output contract.
REPORT_BASENAME = 'RA_HashMapReport'
REPORT_COLUMNS = [
    'MatchFound',
    'System',
    'RomName',
    'Hash',
    'Path',
    'RATitle',
    'RAID',
    'CheevoCount',
]
REPORT_FORMATS = ('csv', 'json')

# RetroAchievements web API
RA_API_BASE = 'https://retroachievements.org/API/'
ENDPOINT_CONSOLE_IDS = 'API_GetConsoleIDs.php'
ENDPOINT_GAME_LIST = 'API_GetGameList.php'
ENDPOINT_ACHIEVEMENT_OF_THE_WEEK = 'API_GetAchievementOfTheWeek.php'

# RAHasher prints an MD5 digest as 32 hex characters
HASH_LENGTH = 32

RAHASHER_DOWNLOAD_URL = (
    'https://github.com/RetroAchievements/RALibretro/releases/download/'
    '1.8.0/RAHasher-x64-Windows-1.8.0.zip'
)

APP_DATA_DIR = os.path.expanduser('~/.rahashmapper')
LOGS_DIR = os.path.join(APP_DATA_DIR, 'logs')
DEFAULT_CONFIG_PATH = os.path.join(APP_DATA_DIR, 'config.json')


def default_hash_tool_url(os_name: str = os.name):
    """Download URL for the hashing tool. Only a Windows build is published."""
    return RAHASHER_DOWNLOAD_URL if os_name == 'nt' else None


def report_path(output_dir: str, fmt: str = 'csv') -> str:
    """Fixed report location inside the output directory."""
    return os.path.join(output_dir, f"{REPORT_BASENAME}.{fmt}")


def remove_partial(path: str) -> None:
    """Drop a leftover .part file after a failed write."""
    if os.path.isfile(path):
        os.remove(path)
