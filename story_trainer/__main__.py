"""
Entry point for running story trainer as a module.

Usage:
    python -m story_trainer play
    python -m story_trainer pool
    python -m story_trainer --help
"""
from .cli.main import main

if __name__ == "__main__":
    main()
