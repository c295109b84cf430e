"""
Hash matcher - hashes local ROMs and looks them up in a platform catalog
"""

import logging
from typing import Dict, Iterable, List, Optional, Union

from .hasher import HashTool, is_valid_hash
from .models import CatalogEntry, LocalRom, MatchResult
from .monitor import log_event


class CatalogIndex:
    """
    Hash -> game index over one platform catalog.

    A hash listed under more than one game resolves to the first game in
    catalog order; later claimants are counted in `collisions`.
    """

    def __init__(self, entries: Iterable[CatalogEntry]):
        self.entries: List[CatalogEntry] = list(entries)
        self.by_hash: Dict[str, CatalogEntry] = {}
        self.collisions: Dict[str, List[CatalogEntry]] = {}

        for entry in self.entries:
            for h in entry.hashes:
                first = self.by_hash.get(h)
                if first is None:
                    self.by_hash[h] = entry
                elif first.id != entry.id:
                    self.collisions.setdefault(h, []).append(entry)

    def __len__(self) -> int:
        return len(self.entries)

    def lookup(self, rom_hash: str) -> Optional[CatalogEntry]:
        """Exact membership lookup."""
        if not rom_hash:
            return None
        return self.by_hash.get(rom_hash)


class HashMatcher:
    """Produces exactly one MatchResult per ROM."""

    def __init__(self, hasher: HashTool):
        self.hasher = hasher

    def match_one(self, platform_id: int, system: str, rom: LocalRom,
                  catalog: Union[CatalogIndex, Iterable[CatalogEntry]]) -> MatchResult:
        """
        Hash a ROM and find the game it belongs to.

        Args:
            platform_id: RetroAchievements console id, passed to the hash tool
            system: Canonical platform name written to the result
            rom: The file to check
            catalog: The platform's games, indexed or as a plain sequence
        """
        if not isinstance(catalog, CatalogIndex):
            catalog = CatalogIndex(catalog)

        rom_hash = self.hasher.hash(platform_id, rom.path)
        if not is_valid_hash(rom_hash):
            return MatchResult.no_match(system, rom)

        entry = catalog.lookup(rom_hash)
        if entry is None:
            return MatchResult.no_match(system, rom, rom_hash)

        if rom_hash in catalog.collisions:
            others = ', '.join(str(e.id) for e in catalog.collisions[rom_hash])
            log_event('match.ambiguous',
                      f'{rom.filename}: hash {rom_hash} is listed under game {entry.id} '
                      f'and also {others}; using {entry.id}',
                      logging.WARNING)
        return MatchResult.matched(system, rom, rom_hash, entry)
