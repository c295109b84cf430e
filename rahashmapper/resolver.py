"""
Platform resolver - maps library folder names to canonical platform names
"""

import re
from typing import Iterable, Optional

from .models import PlatformDefinition

_WHITESPACE = re.compile(r'\s+')


def folder_slug(folder_name: str) -> str:
    """Lower-case and drop all whitespace: 'Mega Drive' -> 'megadrive'."""
    return _WHITESPACE.sub('', folder_name.lower())


def platform_slug(platform_name: str) -> str:
    """Lower-case and hyphenate spaces: 'Game Boy' -> 'game-boy'."""
    return platform_name.lower().replace(' ', '-')


class PlatformResolver:
    """
    Resolves a folder name against the configured platform table.

    Rules are tried in order, across the whole table, first hit wins:

    1. override token equal to the folder name verbatim
    2. case-insensitive equality with the canonical name
    3. folder slug equal to the canonical name slug (slashes are kept)
    4. lower-cased folder name equal to one of the aliases

    Aliases are compared as configured unless case_insensitive_aliases is
    set, in which case they are lower-cased too.
    """

    def __init__(self, platforms: Iterable[PlatformDefinition],
                 case_insensitive_aliases: bool = False):
        self.platforms = tuple(platforms)
        self.case_insensitive_aliases = case_insensitive_aliases

    def resolve(self, folder_name: str) -> Optional[str]:
        """Return the canonical platform name, or None if nothing matches."""
        for platform in self.platforms:
            if platform.override is not None and platform.override == folder_name:
                return platform.name

        lowered = folder_name.lower()
        for platform in self.platforms:
            if lowered == platform.name.lower():
                return platform.name

        slug = folder_slug(folder_name)
        for platform in self.platforms:
            if slug == platform_slug(platform.name):
                return platform.name

        for platform in self.platforms:
            for alias in platform.aliases:
                candidate = alias.lower() if self.case_insensitive_aliases else alias
                if lowered == candidate:
                    return platform.name

        return None


def resolve(folder_name: str, platforms: Iterable[PlatformDefinition],
            case_insensitive_aliases: bool = False) -> Optional[str]:
    """Functional shortcut for a one-off resolution."""
    return PlatformResolver(platforms, case_insensitive_aliases).resolve(folder_name)
