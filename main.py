"""
Entry point for story-trainer.

Run with:
    python main.py play
    python main.py pool
"""
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from story_trainer.cli.main import main

if __name__ == "__main__":
    main()
