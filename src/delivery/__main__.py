"""
Entry point for running HTML Quest as a module.

Usage:
    python -m src.delivery map
    python -m src.delivery play 1
    python -m src.delivery --help
"""
from .quest_cli import main

if __name__ == "__main__":
    main()
