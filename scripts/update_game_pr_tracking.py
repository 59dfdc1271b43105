#!/usr/bin/env python3
"""
Record a merged pull request in the game-info.yaml of every game it touched.

Reads PR_NUMBER, PR_TITLE, PR_URL, PR_MERGED_AT, PR_AUTHOR and PR_BODY from
the environment and diffs HEAD~1..HEAD to find the affected games.

Usage:
    python scripts/update_game_pr_tracking.py
"""

import sys
from pathlib import Path

# Add repository root to path for imports
repo_dir = Path(__file__).parent.parent
sys.path.insert(0, str(repo_dir))

from gamecenter.tracker import main


if __name__ == "__main__":
    sys.exit(main())
