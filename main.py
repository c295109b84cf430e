#!/usr/bin/env python3
"""
RA Hash Mapper
Checks a per-platform ROM library against the RetroAchievements hash catalog.

Usage:
    python main.py                         (uses ~/.rahashmapper/config.json)
    python main.py --config ra.json --missing-only
    python main.py --write-config ra.json

For CLI help: python main.py --help
"""

import sys
import os

# Add package to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from rahashmapper.cli import run_cli


def main():
    """Main entry point"""
    sys.exit(run_cli())


if __name__ == '__main__':
    main()
