"""
Entry point for running as module: python -m rahashmapper
"""

from .cli import main

if __name__ == '__main__':
    main()
