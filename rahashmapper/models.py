"""
Data models for RA Hash Mapper
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class PlatformDefinition:
    """A platform entry from the mapping table in the configuration"""
    name: str
    aliases: Tuple[str, ...] = ()
    override: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Dict) -> 'PlatformDefinition':
        return cls(
            name=d['name'],
            aliases=tuple(d.get('aliases') or ()),
            override=d.get('override') or None,
        )


@dataclass(frozen=True)
class RemotePlatform:
    """A console as published by the RetroAchievements API"""
    id: int
    name: str
    active: bool = True
    is_game_system: bool = True


@dataclass(frozen=True)
class CatalogEntry:
    """A game in a platform catalog, with every hash RA accepts for it"""
    id: int
    title: str
    console_id: int = 0
    console_name: str = ""
    num_achievements: int = 0
    hashes: Tuple[str, ...] = ()


@dataclass(frozen=True)
class LocalRom:
    """A file found in a platform folder of the library"""
    filename: str
    path: str
    platform_folder: str


@dataclass(frozen=True)
class MatchResult:
    """One report row. Built once per LocalRom, never modified afterwards."""
    match_found: bool
    system: str
    rom_name: str
    hash: str
    path: str
    ra_title: str = ""
    ra_id: Optional[int] = None
    cheevo_count: Optional[int] = None

    @classmethod
    def no_match(cls, system: str, rom: LocalRom, rom_hash: str = "") -> 'MatchResult':
        return cls(
            match_found=False,
            system=system,
            rom_name=rom.filename,
            hash=rom_hash,
            path=rom.path,
        )

    @classmethod
    def matched(cls, system: str, rom: LocalRom, rom_hash: str,
                entry: CatalogEntry) -> 'MatchResult':
        return cls(
            match_found=True,
            system=system,
            rom_name=rom.filename,
            hash=rom_hash,
            path=rom.path,
            ra_title=entry.title,
            ra_id=entry.id,
            cheevo_count=entry.num_achievements,
        )

    def to_row(self) -> List[str]:
        """Render as a report row, in REPORT_COLUMNS order."""
        return [
            str(self.match_found),
            self.system,
            self.rom_name,
            self.hash,
            self.path,
            self.ra_title,
            '' if self.ra_id is None else str(self.ra_id),
            '' if self.cheevo_count is None else str(self.cheevo_count),
        ]

    def to_dict(self) -> Dict:
        return {
            'MatchFound': self.match_found,
            'System': self.system,
            'RomName': self.rom_name,
            'Hash': self.hash,
            'Path': self.path,
            'RATitle': self.ra_title,
            'RAID': self.ra_id,
            'CheevoCount': self.cheevo_count,
        }


@dataclass
class PlatformStats:
    """Per-platform counters for the run summary"""
    system: str
    files: int = 0
    matched: int = 0
    hash_failures: int = 0

    @property
    def unmatched(self) -> int:
        return self.files - self.matched

    @property
    def percentage(self) -> float:
        return (self.matched / self.files * 100) if self.files > 0 else 0


@dataclass
class RunSummary:
    """Totals for a completed run"""
    platforms: List[PlatformStats] = field(default_factory=list)
    skipped_folders: List[str] = field(default_factory=list)
    report_path: str = ""
    reported_rows: int = 0

    @property
    def total_files(self) -> int:
        return sum(p.files for p in self.platforms)

    @property
    def total_matched(self) -> int:
        return sum(p.matched for p in self.platforms)

    @property
    def total_unmatched(self) -> int:
        return sum(p.unmatched for p in self.platforms)

    @property
    def total_hash_failures(self) -> int:
        return sum(p.hash_failures for p in self.platforms)
