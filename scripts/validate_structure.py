#!/usr/bin/env python3
"""
Validate the game center repository structure.

Exits 0 when every check passes, 1 otherwise.

Usage:
    python scripts/validate_structure.py
"""

import sys
from pathlib import Path

# Add repository root to path for imports
repo_dir = Path(__file__).parent.parent
sys.path.insert(0, str(repo_dir))

from gamecenter.validator import main


if __name__ == "__main__":
    sys.exit(main())
