#!/usr/bin/env python3
"""
Serve the game center site locally and check that it loads and can find all games.

Exits 0 when every check passes, 1 otherwise.

Usage:
    python scripts/validate_website.py
"""

import sys
from pathlib import Path

# Add repository root to path for imports
repo_dir = Path(__file__).parent.parent
sys.path.insert(0, str(repo_dir))

from gamecenter.smoke import main


if __name__ == "__main__":
    sys.exit(main())
