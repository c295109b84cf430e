"""
Library scanner - lists platform folders and the ROM files inside them
"""

import os
from typing import List, Tuple

from .exceptions import LibraryNotFoundError
from .models import LocalRom


def _list_dir(path: str, what: str) -> List[str]:
    try:
        return sorted(os.listdir(path))
    except OSError as e:
        raise LibraryNotFoundError(f"Cannot read {what} {path}: {e}") from e


class LibraryScanner:
    """
    Walks a library laid out as <root>/<platform folder>/<rom files>.

    Only one level is read at each step and entries are sorted by name, so
    two scans of an unchanged library return the same order.

    An unreadable folder raises LibraryNotFoundError naming the folder.
    """

    @staticmethod
    def list_platform_folders(root: str) -> List[Tuple[str, str]]:
        """
        Immediate subdirectories of the library root.

        Returns:
            List of (folder name, absolute folder path)
        """
        folders = []
        for name in _list_dir(root, 'ROM library folder'):
            path = os.path.join(root, name)
            if os.path.isdir(path):
                folders.append((name, os.path.abspath(path)))
        return folders

    @staticmethod
    def list_roms(folder: str) -> List[LocalRom]:
        """Every regular file directly inside a platform folder."""
        folder = os.path.abspath(folder)
        platform_folder = os.path.basename(folder)
        roms = []
        for filename in _list_dir(folder, 'platform folder'):
            filepath = os.path.join(folder, filename)
            if os.path.isfile(filepath):
                roms.append(LocalRom(
                    filename=filename,
                    path=filepath,
                    platform_folder=platform_folder,
                ))
        return roms
